from __future__ import annotations

from enum import Enum


class AccountKind(Enum):
    """
    Account types whose transaction sections are exported.

    The value is the token that follows ``!Type:`` in the QIF header.
    """

    BANK = "Bank"
    CREDIT_CARD = "CCard"

    @classmethod
    def from_qif_type(cls, token: str) -> "AccountKind":
        """
        Convert a ``!Type:`` token (``Bank``, ``CCard``) to an AccountKind.

        Raises ValueError for any other account type (investment, cash,
        asset/liability); those sections are not exported.
        """
        t = token.strip()
        for kind in cls:
            if kind.value.lower() == t.lower():
                return kind
        raise ValueError(f"Unsupported account type: {token!r}")

    @property
    def label(self) -> str:
        return "Credit Card" if self is AccountKind.CREDIT_CARD else "Bank"
