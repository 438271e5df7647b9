# qifutil/controllers/balance_history.py
"""
Daily balance reconstruction.

Given the signed amounts of every admitted transaction and a single known
balance, rebuild the end-of-day balance for each date that had activity.

- Forward mode (opening balance): ``running = opening``; for each date in
  ascending order ``running += delta[date]`` and emit.
- Backward mode (current balance): ``base = current - sum(deltas)``, then the
  same forward walk. The last emitted balance equals ``current``.
"""
from __future__ import annotations

from decimal import Decimal
from typing import Dict, Iterable, Iterator, List, Tuple

from qifutil.data_model.q_wrapper import BalanceAnchor, BalanceRecord
from qifutil.utilities.converters_scalar import format_amount


class DailyDeltas:
    """``date -> sum of signed amounts`` for one account."""

    def __init__(self, items: Iterable[Tuple[str, Decimal]] = ()):
        self._by_date: Dict[str, Decimal] = {}
        for d, amount in items:
            self.add(d, amount)

    def add(self, iso_date: str, amount: Decimal) -> None:
        self._by_date[iso_date] = self._by_date.get(iso_date, Decimal("0")) + amount

    def __len__(self) -> int:
        return len(self._by_date)

    def __getitem__(self, iso_date: str) -> Decimal:
        return self._by_date[iso_date]

    def dates(self) -> List[str]:
        # zero-padded ISO dates sort lexicographically
        return sorted(self._by_date)

    def items(self) -> Iterator[Tuple[str, Decimal]]:
        for d in self.dates():
            yield d, self._by_date[d]

    @property
    def total(self) -> Decimal:
        return sum(self._by_date.values(), Decimal("0"))


def starting_balance(deltas: DailyDeltas, anchor: BalanceAnchor) -> Decimal:
    """Balance immediately before the first date in ``deltas``."""
    if anchor.is_forward:
        return anchor.value
    return anchor.value - deltas.total


def running_balances(deltas: DailyDeltas, anchor: BalanceAnchor) -> Iterator[Tuple[str, Decimal]]:
    running = starting_balance(deltas, anchor)
    for d, delta in deltas.items():
        running += delta
        yield d, running


def reconstruct(deltas: DailyDeltas, anchor: BalanceAnchor) -> List[BalanceRecord]:
    """Ascending end-of-day balances, one per date with at least one transaction."""
    return [
        BalanceRecord(date=d, balance=format_amount(balance))
        for d, balance in running_balances(deltas, anchor)
    ]
