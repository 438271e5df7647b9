from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Optional

from ..interfaces import AccountKind


@dataclass(frozen=True)
class AccountStats:
    """Transaction count and date range of one account block."""

    name: str
    kind: AccountKind
    transaction_count: int = 0
    earliest: Optional[date] = None
    latest: Optional[date] = None

    def describe(self) -> str:
        lines = [f"Account: {self.name} (Type: {self.kind.value})"]
        if self.transaction_count and self.earliest and self.latest:
            lines.append(f"  Transactions: {self.transaction_count}")
            lines.append(
                f"  Date Range: {self.earliest.isoformat()} to {self.latest.isoformat()}"
            )
        else:
            lines.append("  No transactions found")
        return "\n".join(lines)
