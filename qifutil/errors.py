# qifutil/errors.py
"""
Exception types raised by qifutil.

Fatal problems (bad configuration, unreadable input, unwritable output) derive
from `QifUtilError` and propagate to the command line, which prints
`friendly_error` and exits non-zero. `RecordRejected` is the only per-record
error; the pipelines catch it and count it.
"""

from __future__ import annotations


class QifUtilError(Exception):
    """Base class for every error raised on purpose by qifutil."""


class ConfigurationError(QifUtilError, ValueError):
    """Options are missing, contradictory or malformed."""


class InputFileError(QifUtilError, OSError):
    """The QIF input (or a mapping/profile file) cannot be read."""


class OutputPathError(QifUtilError, OSError):
    """The output directory or an output file cannot be created."""


class AccountNotFoundError(QifUtilError, LookupError):
    """A requested account has no Bank/CCard block in the input."""


class RecordRejected(QifUtilError, ValueError):
    """A single transaction failed normalization and must be skipped."""

    INVALID_AMOUNT = "invalid_amount"
    INVALID_DATE = "invalid_date"

    def __init__(self, reason: str, detail: str = ""):
        self.reason = reason
        self.detail = detail
        super().__init__(f"{reason}: {detail}" if detail else reason)


def friendly_error(err: BaseException) -> str:
    """Return an actionable, user-facing message for ``err``."""
    msg = str(err)
    lowered = msg.lower()

    if isinstance(err, AccountNotFoundError):
        return (
            f"Error: {msg}\n\n"
            "Account names are case-sensitive. Run 'qifutil list-accounts -i <file>' "
            "to see the exact names."
        )

    if isinstance(err, FileNotFoundError) or "no such file" in lowered:
        return (
            f"{msg}\n\n"
            "Could not find the file. Make sure:\n"
            "1. The file path is correct\n"
            "2. You included the full path (e.g., C:\\Users\\Name\\Downloads\\file.qif)\n"
            "3. The file exists in that location"
        )

    if isinstance(err, PermissionError) or "permission denied" in lowered:
        return (
            f"{msg}\n\n"
            "Cannot access the file or folder. Make sure:\n"
            "1. You have permission to access the file\n"
            "2. The file isn't open in another program\n"
            "3. You have permission to create files in the output folder"
        )

    if "date" in lowered and isinstance(err, ValueError):
        return (
            f"{msg}\n\n"
            "Dates must use YYYY-MM-DD format (for example: 2025-09-12), "
            "including leading zeros."
        )

    if isinstance(err, QifUtilError):
        return f"Error: {msg}"

    return (
        f"An error occurred: {msg}\n\n"
        "Need help? Run 'qifutil --help' or 'qifutil <command> --help'."
    )
