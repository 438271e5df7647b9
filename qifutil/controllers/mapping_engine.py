# qifutil/controllers/mapping_engine.py
from __future__ import annotations

import csv
import logging
from pathlib import Path
from typing import Dict, Mapping, Optional, Set

from qifutil.data_model.interfaces import ITransactionObserver, NullObserver
from qifutil.errors import InputFileError
from qifutil.utilities.core_util import open_for_read

log = logging.getLogger(__name__)

CATEGORY = "category"
PAYEE = "payee"
ACCOUNT = "account"
TAG = "tag"

MAPPING_KINDS = (CATEGORY, PAYEE, ACCOUNT, TAG)

MappingTable = Dict[str, str]


def load_mapping(path: Path, encoding: str = "utf-8-sig") -> MappingTable:
    """
    Read a two-column ``source,target`` CSV into a MappingTable.

    One-column rows are skipped, rows with more than two columns are logged and
    skipped, and rows with an empty target are dropped. Later rows win.

    Raises:
        InputFileError: if the file cannot be opened or is not valid CSV.
    """
    table: MappingTable = {}
    try:
        with open_for_read(Path(path), binary=False, encoding=encoding, newline="") as f:
            for lineno, row in enumerate(csv.reader(f), start=1):
                if len(row) < 2:
                    continue
                if len(row) > 2:
                    log.warning("%s:%d: expected 2 columns, got %d; row skipped", path, lineno, len(row))
                    continue
                source, target = row
                if target == "":
                    continue
                table[source] = target
    except (OSError, csv.Error, UnicodeDecodeError) as e:
        raise InputFileError(f"Cannot read mapping file {path}: {e}") from e
    log.info("Loaded %d mappings from %s", len(table), path)
    return table


def apply_mapping(value: str, table: Mapping[str, str]) -> str:
    """Exact, case-sensitive lookup; no match returns ``value`` unchanged."""
    return table.get(value, value)


class MappingEngine:
    """
    Mapping tables by kind, with usage bookkeeping.

    ``apply`` is a drop-in ``mapper(kind, value)`` for the field normalizer.
    Misses are reported to the observer only for kinds that have a loaded,
    non-empty table and only for non-empty values.
    """

    def __init__(
        self,
        tables: Optional[Mapping[str, MappingTable]] = None,
        observer: Optional[ITransactionObserver] = None,
    ):
        self._tables: Dict[str, MappingTable] = {k: dict(v) for k, v in (tables or {}).items()}
        self._used: Dict[str, Set[str]] = {k: set() for k in self._tables}
        self._observer = observer or NullObserver()

    @classmethod
    def from_files(
        cls,
        files: Mapping[str, Optional[Path]],
        observer: Optional[ITransactionObserver] = None,
    ) -> "MappingEngine":
        """Load one table per kind; kinds mapped to ``None`` have no table."""
        tables = {kind: load_mapping(path) for kind, path in files.items() if path}
        return cls(tables, observer)

    def table(self, kind: str) -> MappingTable:
        return dict(self._tables.get(kind, {}))

    def apply(self, kind: str, value: str) -> str:
        table = self._tables.get(kind)
        if not table:
            return value
        if value in table:
            self._used[kind].add(value)
            return table[value]
        if value:
            self._observer.on_unmatched(kind, value)
        return value

    def unused(self, kind: str) -> list[str]:
        table = self._tables.get(kind, {})
        return sorted(k for k in table if k not in self._used.get(kind, set()))

    def report_unused(self) -> None:
        """Send never-used entries of every loaded table to the observer."""
        for kind in self._tables:
            sources = self.unused(kind)
            if sources:
                self._observer.on_unused_mappings(kind, sources)
