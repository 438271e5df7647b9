"""
Interfaces and Enums for the qifutil data model.
"""

from .enum_account_kind import AccountKind
from .enum_output_format import OutputFormat
from .i_record_emitter import IRecordEmitter
from .i_to_dict import IToDict, RecursiveDictStr
from .i_transaction_observer import ITransactionObserver, NullObserver

__all__ = [
    "AccountKind",
    "OutputFormat",
    "IRecordEmitter",
    "IToDict",
    "RecursiveDictStr",
    "ITransactionObserver",
    "NullObserver",
]
