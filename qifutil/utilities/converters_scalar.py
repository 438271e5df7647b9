# qifutil/utilities/converters_scalar.py
from __future__ import annotations

import re
from datetime import date, datetime
from decimal import ROUND_HALF_EVEN, Decimal, InvalidOperation
from pathlib import Path
from typing import Any, Callable, Dict, Final, Optional

_ISO_DATE: Final = re.compile(r"^\d{4}-\d{2}-\d{2}$")
_CENTS: Final = Decimal("0.01")


def _bad(value: Any, target: str) -> ValueError:
    return ValueError(f"Cannot convert {type(value).__name__} to {target}")


def to_decimal(value: Any) -> Decimal:
    """
    Convert an amount-like input to a finite Decimal.

    Strings are trimmed and every thousands-separator comma is removed before
    parsing, so ``"1,234.56"`` becomes ``Decimal('1234.56')``. Nothing else is
    guessed: currency symbols, parentheses or European separators are rejected.

    Raises:
        ValueError: if the value is empty, not numeric, not finite (NaN/Infinity),
            or too large to carry cents.

    Examples:
        to_decimal("-3,188.32")  -> Decimal('-3188.32')
        to_decimal("45")         -> Decimal('45')
        to_decimal("12abc")      -> ValueError
    """
    if isinstance(value, bool):
        raise _bad(value, "Decimal")
    if isinstance(value, Decimal):
        result = value
    elif isinstance(value, int):
        result = Decimal(value)
    elif isinstance(value, float):
        # Avoid binary float artifacts
        result = Decimal(str(value))
    elif isinstance(value, str):
        cleaned = value.strip().replace(",", "")
        if not cleaned:
            raise ValueError("Empty string cannot be converted to Decimal")
        try:
            result = Decimal(cleaned)
        except InvalidOperation as e:
            raise ValueError(
                f"Could not parse Decimal from {value!r} (normalized to {cleaned!r})"
            ) from e
    else:
        raise _bad(value, "Decimal")

    if not result.is_finite():
        raise ValueError(f"Amount must be a finite number, got {value!r}")
    format_amount(result)
    return result


def format_amount(value: Decimal) -> str:
    """
    Render ``value`` with exactly two decimal digits.

    Raises:
        ValueError: if the value has too many digits to carry cents.
    """
    try:
        return f"{value.quantize(_CENTS, rounding=ROUND_HALF_EVEN)}"
    except InvalidOperation as e:
        raise ValueError(f"Amount {value} is too large to represent with two decimals") from e


def to_date(value: Any) -> date:
    """
    Convert a date-like input into a `date`.

    Accepts:
      • date / datetime → the calendar date
      • str in canonical ``YYYY-MM-DD`` form (zero padded)

    Raises
    ------
    ValueError
        If the value is not a canonical ISO date or is not a real calendar day.
    """
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        s = value.strip()
        if not _ISO_DATE.match(s):
            raise ValueError(f"Invalid date {value!r}: expected YYYY-MM-DD")
        try:
            return date.fromisoformat(s)
        except ValueError as e:
            raise ValueError(f"Invalid date {value!r}: {e}") from e
    raise _bad(value, "date")


def to_optional_date(value: Any) -> Optional[date]:
    """Like `to_date`, but ``None`` and blank strings map to ``None``."""
    if value is None or (isinstance(value, str) and not value.strip()):
        return None
    return to_date(value)


def _to_bool(v: Any) -> bool:
    if isinstance(v, bool):
        return v
    if isinstance(v, str):
        s = v.strip().lower()
        if s in ("true", "yes", "1", "y", "on"):
            return True
        if s in ("false", "no", "0", "n", "off", ""):
            return False
    if isinstance(v, int):
        return v != 0
    raise _bad(v, "bool")


def _to_int(v: Any) -> int:
    # bool is a subclass of int; refuse it explicitly
    if isinstance(v, bool):
        raise _bad(v, "int")
    if isinstance(v, int):
        return v
    if isinstance(v, str) and v.strip().lstrip("-").isdigit():
        return int(v.strip())
    raise _bad(v, "int")


def _to_str(v: Any) -> str:
    if v is None:
        return ""
    return str(v)


SCALAR_CONVERTERS: Dict[type, Callable[[Any], Any]] = {
    bool: _to_bool,
    int: _to_int,
    str: _to_str,
    Decimal: to_decimal,
    date: to_date,
    Path: lambda v: v if isinstance(v, Path) else Path(str(v)),
}
