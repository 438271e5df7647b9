# qifutil/__init__.py
"""
qifutil: convert Quicken Interchange Format (QIF) exports into budgeting-tool
friendly CSV/JSON/XML files and daily balance histories.
"""

__version__ = "0.10.0"

__all__ = ["__version__"]
