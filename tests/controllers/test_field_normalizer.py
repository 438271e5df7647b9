# tests/controllers/test_field_normalizer.py
"""
Unit tests for the field normalizer: date/amount canonicalization, payee
cleanup, category/tag split and the import tag. Pure functions; no I/O.
"""
from __future__ import annotations

import pytest

from qifutil.controllers.field_normalizer import (
    IMPORT_TAG,
    normalize,
    normalize_amount,
    normalize_date,
    split_category_and_tag,
)
from qifutil.controllers.mapping_engine import MappingEngine
from qifutil.data_model.q_wrapper import RawTransactionMatch
from qifutil.errors import RecordRejected


def _raw(**overrides) -> RawTransactionMatch:
    values = dict(
        month="1",
        day="15",
        year="23",
        user_amount="-45.23",
        txn_amount="-45.23",
        cleared="X",
        category_raw="Food:Groceries",
        payee="Grocery Store",
    )
    values.update(overrides)
    return RawTransactionMatch(**values)


# ---------- category / tag ----------
@pytest.mark.parametrize(
    "raw,category,tag",
    [
        ("Food:Groceries", "Food:Groceries", ""),
        ("Food:Dining/Business", "Food:Dining", "Business"),
        ("Travel:Air/Vacation/2023", "Travel:Air", "Vacation/2023"),
        ("/OnlyTag", "", "OnlyTag"),
        ("Trailing/", "Trailing", ""),
        ("", "", ""),
    ],
)
def test_split_category_and_tag(raw, category, tag):
    c, t = split_category_and_tag(raw)
    assert (c, t) == (category, tag)
    if "/" in raw:
        assert c + "/" + t == raw


# ---------- date ----------
@pytest.mark.parametrize(
    "m,d,y,expected",
    [
        ("1", "15", "23", "2023-01-15"),
        ("12", "1", "99", "2099-12-01"),
        ("01", "05", "00", "2000-01-05"),
        ("2", " 9", "24", "2024-02-09"),
    ],
)
def test_normalize_date(m, d, y, expected):
    assert normalize_date(m, d, y) == expected


@pytest.mark.parametrize("m,d,y", [("2", "30", "23"), ("13", "1", "23"), ("0", "10", "23")])
def test_invalid_calendar_date_is_rejected(m, d, y):
    with pytest.raises(RecordRejected) as excinfo:
        normalize_date(m, d, y)
    assert excinfo.value.reason == RecordRejected.INVALID_DATE


# ---------- amount ----------
@pytest.mark.parametrize(
    "raw,expected",
    [
        ("-45.23", "-45.23"),
        ("1,250", "1250.00"),
        ("1,234,567.891", "1234567.89"),
        (" 7 ", "7.00"),
        ("0.125", "0.12"),
        ("0.135", "0.14"),
    ],
)
def test_normalize_amount(raw, expected):
    assert normalize_amount(raw) == expected


@pytest.mark.parametrize("raw", ["", "abc", "NaN", "Infinity", "12-3", "1E+30"])
def test_invalid_amount_is_rejected(raw):
    with pytest.raises(RecordRejected) as excinfo:
        normalize_amount(raw)
    assert excinfo.value.reason == RecordRejected.INVALID_AMOUNT


# ---------- whole record ----------
def test_grocery_store_scenario():
    rec = normalize(_raw(), "Checking Account", add_tag_for_import=False)

    assert rec.date == "2023-01-15"
    assert rec.merchant == "Grocery Store"
    assert rec.original_statement == "Grocery Store"
    assert rec.category == "Food:Groceries"
    assert rec.account == "Checking Account"
    assert rec.amount == "-45.23"
    assert rec.tags == ""
    assert rec.notes == ""


def test_missing_payee_and_memo_are_empty():
    rec = normalize(_raw(payee="", memo=""), "Visa Card", add_tag_for_import=False)
    assert rec.merchant == "" and rec.notes == ""


def test_payee_is_trimmed_and_unquoted():
    rec = normalize(_raw(payee='  Coffee "Bar" '), "A")
    assert rec.merchant == "Coffee Bar"


@pytest.mark.parametrize(
    "category_raw,expected",
    [("Food", IMPORT_TAG), ("Food/Business", f"{IMPORT_TAG},Business")],
)
def test_import_tag_is_prepended(category_raw, expected):
    assert normalize(_raw(category_raw=category_raw), "A").tags == expected


def test_mapping_applies_to_each_field():
    # Arrange
    engine = MappingEngine(
        {
            "payee": {"Grocery Store": "Safeway"},
            "category": {"Food": "Groceries"},
            "tag": {"Biz": "Business"},
            "account": {"Checking Account": "Everyday Checking"},
        }
    )

    # Act
    rec = normalize(_raw(category_raw=" Food / Biz "), "Checking Account", engine.apply, False)

    # Assert
    assert rec.merchant == rec.original_statement == "Safeway"
    assert rec.category == "Groceries"
    assert rec.tags == "Business"
    assert rec.account == "Everyday Checking"


def test_payee_is_unquoted_before_mapping():
    engine = MappingEngine({"payee": {"Coffee Bar": "Cafe"}})
    rec = normalize(_raw(payee='Coffee "Bar"'), "A", engine.apply)
    assert rec.merchant == "Cafe"


def test_rejected_record_never_reaches_mapper():
    seen = []

    def mapper(kind, value):
        seen.append(kind)
        return value

    with pytest.raises(RecordRejected):
        normalize(_raw(user_amount="oops"), "A", mapper)
    assert seen == []
