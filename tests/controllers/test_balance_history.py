# tests/controllers/test_balance_history.py
from __future__ import annotations

from decimal import Decimal

import pytest

from qifutil.controllers.balance_history import (
    DailyDeltas,
    reconstruct,
    running_balances,
    starting_balance,
)
from qifutil.data_model.q_wrapper import BalanceAnchor, BalanceRecord


def _deltas() -> DailyDeltas:
    # added out of order on purpose; two entries share a date
    return DailyDeltas(
        [
            ("2023-01-20", Decimal("-35.50")),
            ("2023-01-15", Decimal("-45.23")),
            ("2023-01-15", Decimal("10.00")),
            ("2023-02-01", Decimal("1250.00")),
        ]
    )


def test_daily_deltas_aggregate_by_date():
    deltas = _deltas()
    assert len(deltas) == 3
    assert deltas["2023-01-15"] == Decimal("-35.23")
    assert deltas.dates() == ["2023-01-15", "2023-01-20", "2023-02-01"]
    assert deltas.total == Decimal("1179.27")


def test_forward_reconstruction():
    records = reconstruct(_deltas(), BalanceAnchor.opening(Decimal("100.00")))
    assert records == [
        BalanceRecord("2023-01-15", "64.77"),
        BalanceRecord("2023-01-20", "29.27"),
        BalanceRecord("2023-02-01", "1279.27"),
    ]


def test_backward_reconstruction_ends_at_current_balance():
    # Arrange
    deltas = DailyDeltas([("2023-01-15", Decimal("-45.23")), ("2023-01-20", Decimal("-35.50"))])

    # Act
    records = reconstruct(deltas, BalanceAnchor.current(Decimal("2500.00")))

    # Assert
    assert records == [
        BalanceRecord("2023-01-15", "2535.50"),
        BalanceRecord("2023-01-20", "2500.00"),
    ]


@pytest.mark.parametrize("current", ["2500.00", "0", "-123.45"])
def test_backward_equals_forward_from_derived_opening(current):
    deltas = _deltas()
    backward = BalanceAnchor.current(Decimal(current))
    opening = starting_balance(deltas, backward)

    assert reconstruct(deltas, backward) == reconstruct(deltas, BalanceAnchor.opening(opening))
    assert reconstruct(deltas, backward)[-1].balance == f"{Decimal(current):.2f}"


def test_no_deltas_gives_no_records():
    assert reconstruct(DailyDeltas(), BalanceAnchor.current(Decimal("5"))) == []


def test_unrounded_values_accumulate():
    deltas = DailyDeltas([("2023-01-01", Decimal("0.005")), ("2023-01-02", Decimal("0.005"))])
    balances = [b for _, b in running_balances(deltas, BalanceAnchor.opening(Decimal("0")))]
    assert balances == [Decimal("0.005"), Decimal("0.010")]
    assert [r.balance for r in reconstruct(deltas, BalanceAnchor.opening(Decimal("0")))] == ["0.00", "0.01"]
