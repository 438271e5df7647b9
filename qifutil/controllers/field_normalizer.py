# qifutil/controllers/field_normalizer.py
"""
Turn a RawTransactionMatch into a TransactionRecord.

Every function here is a pure transformation; value substitution is delegated
to the ``mapper`` callable (``MappingEngine.apply`` in production), which is
the only place bookkeeping happens.
"""
from __future__ import annotations

from datetime import date
from decimal import Decimal
from typing import Callable, Tuple

from qifutil.controllers.mapping_engine import ACCOUNT, CATEGORY, PAYEE, TAG
from qifutil.data_model.q_wrapper import RawTransactionMatch, TransactionRecord
from qifutil.errors import RecordRejected
from qifutil.utilities.converters_scalar import format_amount, to_decimal

IMPORT_TAG = "QIFIMPORT"

ValueMapper = Callable[[str, str], str]


def identity_mapper(kind: str, value: str) -> str:
    return value


def split_category_and_tag(category_raw: str) -> Tuple[str, str]:
    """
    Split on the first ``/`` only.

    >>> split_category_and_tag("Travel:Air/Vacation/2023")
    ('Travel:Air', 'Vacation/2023')
    >>> split_category_and_tag("Food:Groceries")
    ('Food:Groceries', '')
    """
    category, sep, tag = category_raw.partition("/")
    return category, (tag if sep else "")


def _pad2(part: str) -> str:
    return ("0" + part.strip())[-2:]


def normalize_date(month: str, day: str, year: str) -> str:
    """
    Build ``20YY-MM-DD`` from the raw date parts.

    Raises:
        RecordRejected: (``invalid_date``) if the result is not a calendar date.
    """
    iso = f"20{year.strip()}-{_pad2(month)}-{_pad2(day)}"
    try:
        date.fromisoformat(iso)
    except ValueError as e:
        raise RecordRejected(RecordRejected.INVALID_DATE, iso) from e
    return iso


def parse_amount(text: str) -> Decimal:
    """
    Strip thousands separators and parse.

    Raises:
        RecordRejected: (``invalid_amount``) if the text is not a finite number.
    """
    try:
        return to_decimal(text)
    except ValueError as e:
        raise RecordRejected(RecordRejected.INVALID_AMOUNT, text.strip()) from e


def normalize_amount(text: str) -> str:
    """`parse_amount`, rendered with two decimals."""
    return format_amount(parse_amount(text))


def normalize_payee(payee: str) -> str:
    return payee.strip().replace('"', "")


def with_import_tag(tag: str) -> str:
    return f"{IMPORT_TAG},{tag}" if tag else IMPORT_TAG


def normalize(
    raw: RawTransactionMatch,
    account_name: str,
    mapper: ValueMapper = identity_mapper,
    add_tag_for_import: bool = True,
) -> TransactionRecord:
    """
    Normalize one raw transaction.

    Date and amount are checked before any value is mapped, so a rejected
    transaction never reaches the mapper.
    """
    iso_date = normalize_date(raw.month, raw.day, raw.year)
    amount = normalize_amount(raw.user_amount)

    payee = mapper(PAYEE, normalize_payee(raw.payee))
    category, tag = split_category_and_tag(raw.category_raw.strip())
    category = mapper(CATEGORY, category.strip())
    tag = mapper(TAG, tag.strip())
    if add_tag_for_import:
        tag = with_import_tag(tag)

    return TransactionRecord(
        date=iso_date,
        merchant=payee,
        category=category,
        account=mapper(ACCOUNT, account_name),
        original_statement=payee,
        notes=raw.memo.strip(),
        amount=amount,
        tags=tag,
    )
