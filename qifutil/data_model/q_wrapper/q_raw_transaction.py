from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class RawTransactionMatch:
    """
    Text captured for one transaction entry, before any normalization.

    Optional markers that were absent in the source are empty strings.
    """

    month: str
    day: str
    year: str
    user_amount: str
    txn_amount: str
    cleared: str
    category_raw: str
    number: str = ""
    payee: str = ""
    memo: str = ""
