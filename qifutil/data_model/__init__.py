# qifutil/data_model/__init__.py
from .interfaces import (
    AccountKind, OutputFormat, IRecordEmitter, IToDict, RecursiveDictStr,
    ITransactionObserver, NullObserver)
from .q_wrapper import (
    AccountBlock, AccountStats, BalanceAnchor, BalanceRecord,
    RawTransactionMatch, TransactionRecord, CSV_COLUMN_FIELDS,
    DEFAULT_MONARCH_COLUMNS)
__all__ = [
    "AccountKind", "OutputFormat", "IRecordEmitter", "IToDict",
    "RecursiveDictStr", "ITransactionObserver", "NullObserver",
    "AccountBlock", "AccountStats", "BalanceAnchor", "BalanceRecord",
    "RawTransactionMatch", "TransactionRecord", "CSV_COLUMN_FIELDS",
    "DEFAULT_MONARCH_COLUMNS"]
