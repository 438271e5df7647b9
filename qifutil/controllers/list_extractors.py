# qifutil/controllers/list_extractors.py
from __future__ import annotations

import json
import logging
import xml.etree.ElementTree as ET
from datetime import date
from pathlib import Path
from typing import Iterable, Iterator, List, Optional, Sequence, Tuple

from qifutil.controllers.field_normalizer import normalize_date, normalize_payee, split_category_and_tag
from qifutil.data_model.interfaces import AccountKind, OutputFormat
from qifutil.data_model.q_wrapper import AccountStats, RawTransactionMatch
from qifutil.data_model.qif_parsers_emitters import (
    CATEGORY_SECTION_HEADER,
    TAG_SECTION_HEADER,
    QifBlockLocator,
    QifTransactionParser,
    iter_category_names,
    iter_tag_names,
    iter_transaction_dates,
)
from qifutil.data_model.qif_parsers_emitters.record_emitters import XML_PROLOGUE
from qifutil.errors import OutputPathError, RecordRejected
from qifutil.utilities.core_util import quote, sort_and_dedup

log = logging.getLogger(__name__)


def _strip_quotes(value: str) -> str:
    return value.strip().replace('"', "")


def _iter_raw(text: str, locator: QifBlockLocator) -> Iterator[RawTransactionMatch]:
    parser = QifTransactionParser()
    for block in locator.account_blocks(text):
        yield from parser.parse(block.body(text))


# region extraction


def list_accounts(text: str, locator: Optional[QifBlockLocator] = None) -> List[Tuple[str, AccountKind]]:
    """Bank/CCard accounts in file order, duplicates kept."""
    locator = locator or QifBlockLocator()
    return [(b.name, b.kind) for b in locator.account_blocks(text)]


def extract_accounts(text: str, locator: Optional[QifBlockLocator] = None) -> List[str]:
    locator = locator or QifBlockLocator()
    return sort_and_dedup(_strip_quotes(b.name) for b in locator.account_blocks(text))


def extract_categories(text: str, locator: Optional[QifBlockLocator] = None) -> List[str]:
    """Names from the ``!Type:Cat`` list plus every category used by a transaction."""
    locator = locator or QifBlockLocator()
    names = list(iter_category_names(locator.section_text(text, CATEGORY_SECTION_HEADER)))
    for raw in _iter_raw(text, locator):
        category, _ = split_category_and_tag(raw.category_raw.strip())
        names.append(_strip_quotes(category))
    return sort_and_dedup(names)


def extract_tags(text: str, locator: Optional[QifBlockLocator] = None) -> List[str]:
    """Names from the ``!Type:Tag`` list plus every tag used by a transaction."""
    locator = locator or QifBlockLocator()
    names = list(iter_tag_names(locator.section_text(text, TAG_SECTION_HEADER)))
    for raw in _iter_raw(text, locator):
        _, tag = split_category_and_tag(raw.category_raw.strip())
        names.append(_strip_quotes(tag))
    return sort_and_dedup(names)


def extract_payees(text: str, locator: Optional[QifBlockLocator] = None) -> List[str]:
    locator = locator or QifBlockLocator()
    return sort_and_dedup(normalize_payee(raw.payee) for raw in _iter_raw(text, locator))


def account_stats(
    text: str,
    accounts: Sequence[str] = (),
    locator: Optional[QifBlockLocator] = None,
) -> List[AccountStats]:
    """
    Transaction count and date range per account.

    Every date line in the block counts, whether or not the rest of the
    transaction parses; date lines that are not calendar dates are ignored.
    """
    locator = locator or QifBlockLocator()
    stats: List[AccountStats] = []
    for block in locator.account_blocks(text).select(tuple(accounts)):
        dates: List[date] = []
        count = 0
        for month, day, year in iter_transaction_dates(block.body(text)):
            count += 1
            try:
                dates.append(date.fromisoformat(normalize_date(month, day, year)))
            except RecordRejected:
                log.debug("Ignoring invalid date %s/%s'%s in %s", month, day, year, block.name)
        stats.append(
            AccountStats(
                name=block.name,
                kind=block.kind,
                transaction_count=count,
                earliest=min(dates) if dates else None,
                latest=max(dates) if dates else None,
            )
        )
    return stats


# endregion extraction

# region writers


def _write_text(path: Path, content: str) -> Path:
    path = Path(path)
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "w", encoding="utf-8", newline="") as f:
            f.write(content)
    except OSError as e:
        raise OutputPathError(f"Cannot create output file {path}: {e}") from e
    return path


def write_quoted_list(values: Iterable[str], path: Path) -> Path:
    """One ``"value"`` per line."""
    return _write_text(path, "".join(quote(v) + "\n" for v in values))


def write_payees(values: Sequence[str], path: Path, output_format: OutputFormat = OutputFormat.CSV) -> Path:
    """Payees as quoted lines (CSV/MONARCH), a JSON array, or ``<payees><payee>`` XML."""
    if output_format is OutputFormat.JSON:
        return _write_text(path, json.dumps(list(values), indent=2, ensure_ascii=False) + "\n")
    if output_format is OutputFormat.XML:
        root = ET.Element("payees")
        for v in values:
            ET.SubElement(root, "payee").text = v
        ET.indent(root, space="  ")
        return _write_text(path, f"{XML_PROLOGUE}\n{ET.tostring(root, encoding='unicode')}\n")
    return write_quoted_list(values, path)


# endregion writers
