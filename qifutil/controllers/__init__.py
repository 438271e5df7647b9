# qifutil/controllers/__init__.py
from .balance_history import DailyDeltas, reconstruct
from .date_filter import DateRange
from .field_normalizer import IMPORT_TAG, normalize, split_category_and_tag
from .list_extractors import (
    account_stats,
    extract_accounts,
    extract_categories,
    extract_payees,
    extract_tags,
    list_accounts,
    write_payees,
    write_quoted_list,
)
from .mapping_engine import MappingEngine, apply_mapping, load_mapping
from .output_batcher import OutputBatcher
from .run_config import BalanceHistoryConfig, ExportConfig, RunProfile, load_profile, save_profile
from .transaction_pipeline import ExportResult, export_balance_history, export_transactions
from .validation_tracker import ValidationTracker

__all__ = [
    "DailyDeltas",
    "reconstruct",
    "DateRange",
    "IMPORT_TAG",
    "normalize",
    "split_category_and_tag",
    "account_stats",
    "extract_accounts",
    "extract_categories",
    "extract_payees",
    "extract_tags",
    "list_accounts",
    "write_payees",
    "write_quoted_list",
    "MappingEngine",
    "apply_mapping",
    "load_mapping",
    "OutputBatcher",
    "BalanceHistoryConfig",
    "ExportConfig",
    "RunProfile",
    "load_profile",
    "save_profile",
    "ExportResult",
    "export_balance_history",
    "export_transactions",
    "ValidationTracker",
]
