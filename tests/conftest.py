# tests/conftest.py
"""
Shared QIF fixtures.

SAMPLE_QIF has a category list, a tag list, one Bank account (three
transactions, one of them with a leading-space day and a thousands separator)
and one CCard account (a tagged transaction and a zero-amount one without a
payee).
"""
from __future__ import annotations

import logging
import logging.handlers
from pathlib import Path

import pytest

SAMPLE_QIF = """!Type:Cat
NFood
DFood expenses
E
^
NFood:Groceries
E
^
NSalary
I
^
!Type:Tag
NVacation
DTrips
^
NBusiness
^
!Account
NChecking Account
TBank
^
!Type:Bank
D1/15'23
U-45.23
T-45.23
CX
PGrocery Store
LFood:Groceries
^
D1/20'23
U-35.50
T-35.50
CX
N1001
PCoffee "Bar"
MMorning coffee
LFood:Dining/Business
^
D2/ 1'23
U1,250.00
T1,250.00
C*
PEmployer Inc
LSalary
^
!Account
NVisa Card
TCCard
^
!Type:CCard
D12/31'22
U-100.00
T-100.00
C
PAirline
MFlight
LTravel:Air/Vacation/2023
^
D1/5'23
U0.00
T0.00
C
LFees
^
"""

# The Grocery Store scenario on its own.
SCENARIO_QIF = """!Account
NChecking Account
TBank
^
!Type:Bank
D1/15'23
U-45.23
T-45.23
CX
PGrocery Store
LFood:Groceries
^
"""


@pytest.fixture
def sample_text() -> str:
    return SAMPLE_QIF


@pytest.fixture
def scenario_text() -> str:
    return SCENARIO_QIF


@pytest.fixture
def sample_qif(tmp_path: Path) -> Path:
    p = tmp_path / "sample.qif"
    p.write_text(SAMPLE_QIF, encoding="utf-8")
    return p


@pytest.fixture
def sample_qif_crlf(tmp_path: Path) -> Path:
    p = tmp_path / "sample_crlf.qif"
    p.write_bytes(SAMPLE_QIF.replace("\n", "\r\n").encode("utf-8"))
    return p


@pytest.fixture
def out_dir(tmp_path: Path) -> Path:
    return tmp_path / "out"


@pytest.fixture(autouse=True)
def _reset_logging():
    """Keep handlers installed by the CLI from leaking between tests."""
    yield
    root = logging.getLogger()
    for h in list(root.handlers):
        if type(h) in (logging.StreamHandler, logging.handlers.RotatingFileHandler):
            root.removeHandler(h)
            h.close()
