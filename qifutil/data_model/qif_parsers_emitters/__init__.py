# qifutil/data_model/qif_parsers_emitters/__init__.py
from .qif_block_locator import (
    ACCOUNT_HEADER_PATTERN,
    CATEGORY_SECTION_HEADER,
    SECTION_BOUNDARY_PATTERN,
    TAG_SECTION_HEADER,
    AccountBlocks,
    QifBlockLocator,
)
from .qif_transaction_parser import (
    QifTransactionParser,
    iter_category_names,
    iter_tag_names,
    iter_transaction_dates,
)
from .record_emitters import (
    BalanceCsvEmitter,
    CsvRecordEmitter,
    JsonRecordEmitter,
    XmlRecordEmitter,
    emitter_for,
)

__all__ = [
    "ACCOUNT_HEADER_PATTERN",
    "SECTION_BOUNDARY_PATTERN",
    "CATEGORY_SECTION_HEADER",
    "TAG_SECTION_HEADER",
    "AccountBlocks",
    "QifBlockLocator",
    "QifTransactionParser",
    "iter_category_names",
    "iter_tag_names",
    "iter_transaction_dates",
    "BalanceCsvEmitter",
    "CsvRecordEmitter",
    "JsonRecordEmitter",
    "XmlRecordEmitter",
    "emitter_for",
]
