from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import TYPE_CHECKING, Optional

from qifutil.errors import ConfigurationError
from qifutil.utilities.converters_scalar import to_decimal
from qifutil.utilities.core_util import is_null_or_whitespace

from ..interfaces import IToDict, RecursiveDictStr


@dataclass(frozen=True)
class BalanceAnchor:
    """
    The one known balance that seeds balance reconstruction.

    Exactly one of ``opening_balance`` (balance before the first transaction
    date) and ``current_balance`` (balance after the last one) is set.
    """

    opening_balance: Optional[Decimal] = None
    current_balance: Optional[Decimal] = None

    def __post_init__(self) -> None:
        has_opening = self.opening_balance is not None
        has_current = self.current_balance is not None
        if has_opening == has_current:
            raise ValueError(
                "Exactly one of opening balance or current balance must be given"
                f" (got opening={self.opening_balance}, current={self.current_balance})"
            )

    @classmethod
    def opening(cls, value: Decimal) -> "BalanceAnchor":
        return cls(opening_balance=value)

    @classmethod
    def current(cls, value: Decimal) -> "BalanceAnchor":
        return cls(current_balance=value)

    @classmethod
    def from_strings(cls, opening: Optional[str], current: Optional[str]) -> "BalanceAnchor":
        """
        Build an anchor from the two command-line values.

        Raises:
            ConfigurationError: if both or neither are given, or the value is not a number.
        """
        has_opening = not is_null_or_whitespace(opening)
        has_current = not is_null_or_whitespace(current)
        if not has_opening and not has_current:
            raise ConfigurationError("Either a current balance or an opening balance must be specified")
        if has_opening and has_current:
            raise ConfigurationError(
                "Current balance and opening balance are mutually exclusive. Use only one."
            )
        text = opening if has_opening else current
        try:
            value = to_decimal(text)
        except ValueError as e:
            raise ConfigurationError(f"Invalid balance value {text!r}: must be a valid number") from e
        return cls.opening(value) if has_opening else cls.current(value)

    @property
    def is_forward(self) -> bool:
        """True when the series is built forward from an opening balance."""
        return self.opening_balance is not None

    @property
    def value(self) -> Decimal:
        if self.opening_balance is not None:
            return self.opening_balance
        assert self.current_balance is not None
        return self.current_balance


@dataclass(frozen=True)
class BalanceRecord:
    """End-of-day balance for a date that had at least one transaction."""

    date: str
    balance: str

    def to_dict(self) -> dict[str, RecursiveDictStr]:
        return {"date": self.date, "balance": self.balance}


if TYPE_CHECKING:
    _is_IToDict: type[IToDict] = BalanceRecord
