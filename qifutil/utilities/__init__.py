from .config_logging import LOGGING, configure_logging
from .converters_scalar import format_amount, to_date, to_decimal, to_optional_date
from .core_util import (
    clean_path,
    convert_value,
    from_dict,
    is_null_or_whitespace,
    normalize_line_endings,
    open_for_read,
    quote,
    read_qif_text,
    sort_and_dedup,
)

__all__ = [
    "is_null_or_whitespace",
    "to_date",
    "to_optional_date",
    "to_decimal",
    "format_amount",
    "convert_value",
    "from_dict",
    "open_for_read",
    "normalize_line_endings",
    "read_qif_text",
    "clean_path",
    "sort_and_dedup",
    "quote",
    "LOGGING",
    "configure_logging",
]
