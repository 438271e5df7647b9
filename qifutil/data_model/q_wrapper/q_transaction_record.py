from __future__ import annotations

from dataclasses import dataclass, fields
from typing import TYPE_CHECKING, Dict, Tuple

from ..interfaces import IToDict, RecursiveDictStr

# Default columns for Monarch Money format
DEFAULT_MONARCH_COLUMNS: Tuple[str, ...] = (
    "Date",
    "Merchant",
    "Category",
    "Account",
    "Original Statement",
    "Notes",
    "Amount",
    "Tags",
)

# CSV column name -> TransactionRecord attribute
CSV_COLUMN_FIELDS: Dict[str, str] = {
    "Date": "date",
    "Merchant": "merchant",
    "Category": "category",
    "Account": "account",
    "Original Statement": "original_statement",
    "Notes": "notes",
    "Amount": "amount",
    "Tags": "tags",
}


@dataclass(frozen=True)
class TransactionRecord:
    """
    A normalized transaction, ready for export.

    ``date`` is ``YYYY-MM-DD`` and ``amount`` always carries two decimals.
    """

    date: str
    merchant: str
    category: str
    account: str
    original_statement: str
    notes: str
    amount: str
    tags: str

    def value_for_column(self, column: str) -> str:
        """Value of a CSV column by its display name; unknown columns are empty."""
        attr = CSV_COLUMN_FIELDS.get(column.strip())
        return getattr(self, attr) if attr else ""

    def to_dict(self) -> dict[str, RecursiveDictStr]:
        """Field name -> value, in declaration order (the JSON/XML layout)."""
        return {f.name: getattr(self, f.name) for f in fields(self)}


if TYPE_CHECKING:
    _is_IToDict: type[IToDict] = TransactionRecord
