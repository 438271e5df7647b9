# qifutil/data_model/qif_parsers_emitters/qif_transaction_parser.py
from __future__ import annotations

import logging
import re
from typing import Iterator, List, Tuple

from qifutil.data_model.q_wrapper import RawTransactionMatch

log = logging.getLogger(__name__)

# D<m>/<d>'<yy>, U, T, C, [N], [P], [M], L. Each marker ends at a line break.
TRANSACTION_PATTERN = re.compile(
    r"D(?P<month>\d{1,2})/(\s?(?P<day>\d{1,2}))'(?P<year>\d{2})[\r\n]+"
    r"(U(?P<user_amount>.*?)[\r\n]+)"
    r"(T(?P<txn_amount>.*?)[\r\n]+)"
    r"(C(?P<cleared>.*?)[\r\n]+)"
    r"(N(?P<number>.*?)[\r\n]+)?"
    r"(P(?P<payee>.*?)[\r\n]+)?"
    r"(M(?P<memo>.*?)[\r\n]+)?"
    r"(L(?P<category>.*?)[\r\n]+)"
)

# Date line only, used for per-account statistics.
TRANSACTION_DATE_PATTERN = re.compile(r"D(\d{1,2})/\s?(\d{1,2})'(\d{2})")

# !Type:Cat records: N, then optional D/T/R/E/I lines, then ^
CATEGORY_RECORD_PATTERN = re.compile(
    r"^N(?P<name>.*)\n"
    r"(?:^D(?P<description>.*)\n)?"
    r"(?:^T(?P<tax>.*)\n)?"
    r"(?:^R(?P<schedule>.*)\n)?"
    r"(?:^E(?P<expense>.*)\n)?"
    r"(?:^I(?P<income>.*)\n)?"
    r"^\^\n",
    re.MULTILINE,
)

# !Type:Tag records: N, optional D, then ^
TAG_RECORD_PATTERN = re.compile(
    r"^N(?P<name>.*)\n(?:^D(?P<description>.*)\n)?^\^\n",
    re.MULTILINE,
)


class QifTransactionParser:
    """Extract transaction entries from the body of one account block."""

    def __init__(self, pattern: re.Pattern[str] = TRANSACTION_PATTERN):
        self._pattern = pattern

    def parse(self, body: str) -> Iterator[RawTransactionMatch]:
        """
        Yield one RawTransactionMatch per transaction entry in ``body``.

        Entries without an ``L`` line do not match and are skipped. Absent
        optional markers (number, payee, memo) come back as ``""``.
        """
        for m in self._pattern.finditer(body):
            yield RawTransactionMatch(
                month=m.group("month"),
                day=m.group("day"),
                year=m.group("year"),
                user_amount=m.group("user_amount"),
                txn_amount=m.group("txn_amount"),
                cleared=m.group("cleared"),
                category_raw=m.group("category"),
                number=m.group("number") or "",
                payee=m.group("payee") or "",
                memo=m.group("memo") or "",
            )

    def parse_all(self, body: str) -> List[RawTransactionMatch]:
        return list(self.parse(body))


def iter_transaction_dates(body: str) -> Iterator[Tuple[str, str, str]]:
    """Yield the raw ``(month, day, yy)`` of every date line in ``body``."""
    for m in TRANSACTION_DATE_PATTERN.finditer(body):
        yield m.group(1), m.group(2), m.group(3)


def iter_category_names(section: str) -> Iterator[str]:
    for m in CATEGORY_RECORD_PATTERN.finditer(section):
        yield m.group("name").strip()


def iter_tag_names(section: str) -> Iterator[str]:
    for m in TAG_RECORD_PATTERN.finditer(section):
        yield m.group("name").strip()
