# qifutil/data_model/q_wrapper/__init__.py

from .q_account_block import AccountBlock
from .q_account_stats import AccountStats
from .q_balance import BalanceAnchor, BalanceRecord
from .q_raw_transaction import RawTransactionMatch
from .q_transaction_record import (
    CSV_COLUMN_FIELDS,
    DEFAULT_MONARCH_COLUMNS,
    TransactionRecord,
)

__all__ = [
    "AccountBlock",
    "AccountStats",
    "BalanceAnchor",
    "BalanceRecord",
    "RawTransactionMatch",
    "TransactionRecord",
    "CSV_COLUMN_FIELDS",
    "DEFAULT_MONARCH_COLUMNS",
]
