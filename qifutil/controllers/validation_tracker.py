# qifutil/controllers/validation_tracker.py
from __future__ import annotations

import json
import logging
import threading
from collections import Counter
from dataclasses import asdict, dataclass
from decimal import Decimal, InvalidOperation
from pathlib import Path
from typing import TYPE_CHECKING, Any, Dict, List, Optional, Sequence

from qifutil.data_model.interfaces import ITransactionObserver
from qifutil.data_model.q_wrapper import TransactionRecord

log = logging.getLogger(__name__)

TRANSACTIONS_LOG_NAME = "transactions_validation.log"
BALANCE_HISTORY_LOG_NAME = "balance_history_validation.log"

_SHOW_DUPLICATES = 5
_SHOW_UNUSED = 3


@dataclass(frozen=True)
class DuplicateWarning:
    date: str
    payee: str
    amount: str
    count: int


@dataclass(frozen=True)
class TransactionIssue:
    date: str
    payee: str
    amount: str
    category: str
    issue: str


def _is_zero(amount: str) -> bool:
    try:
        return Decimal(amount) == 0
    except InvalidOperation:
        return False


class ValidationTracker:
    """
    Thread-safe data-quality counters for one pipeline run.

    Every mutation and every read that looks at more than one counter holds
    ``self._lock``. ``summary_lines`` and ``write_log`` render a consistent
    snapshot.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self.total_transactions = 0
        self.missing_payees = 0
        self.missing_categories = 0
        self.zero_amounts = 0
        self.rejected: Counter[str] = Counter()
        self.duplicates: List[DuplicateWarning] = []
        self.unused_mappings: Dict[str, List[str]] = {}
        self.unmatched_data: Counter[str] = Counter()
        self.issues: List[TransactionIssue] = []

    # region ITransactionObserver
    def on_transaction(self, record: TransactionRecord) -> None:
        with self._lock:
            self.total_transactions += 1
            if not record.merchant:
                self.missing_payees += 1
                self.issues.append(
                    TransactionIssue(record.date, record.merchant, record.amount, record.category, "MissingPayee")
                )
            if not record.category:
                self.missing_categories += 1
                self.issues.append(
                    TransactionIssue(record.date, record.merchant, record.amount, record.category, "MissingCategory")
                )
            if _is_zero(record.amount):
                self.zero_amounts += 1
                self.issues.append(
                    TransactionIssue(record.date, record.merchant, record.amount, record.category, "ZeroAmount")
                )

    def on_amount(self, date: str, amount: str) -> None:
        with self._lock:
            self.total_transactions += 1
            if _is_zero(amount):
                self.zero_amounts += 1
                self.issues.append(TransactionIssue(date, "", amount, "", "ZeroAmount"))

    def on_rejected(self, reason: str, detail: str = "") -> None:
        log.debug("Rejected transaction (%s): %s", reason, detail)
        with self._lock:
            self.rejected[reason] += 1

    def on_duplicate(self, date: str, payee: str, amount: str, count: int) -> None:
        if count <= 1:
            return
        with self._lock:
            self.duplicates.append(DuplicateWarning(date, payee, amount, count))

    def on_unmatched(self, kind: str, value: str) -> None:
        with self._lock:
            self.unmatched_data[f"{kind}:{value}"] += 1

    def on_unused_mappings(self, kind: str, sources: Sequence[str]) -> None:
        if not sources:
            return
        with self._lock:
            self.unused_mappings[kind] = list(sources)

    # endregion ITransactionObserver

    def _has_warnings_unlocked(self) -> bool:
        return bool(
            self.missing_payees
            or self.missing_categories
            or self.zero_amounts
            or self.rejected
            or self.duplicates
            or self.unused_mappings
            or self.unmatched_data
        )

    def has_warnings(self) -> bool:
        with self._lock:
            return self._has_warnings_unlocked()

    def summary_lines(self) -> List[str]:
        """Human-readable end-of-run summary."""
        with self._lock:
            if not self._has_warnings_unlocked():
                return [f"Data validation: No issues found ({self.total_transactions} transactions)"]

            lines = ["Data Validation Summary:", "============================="]
            lines.append(f"  * Transactions processed: {self.total_transactions}")
            if self.missing_payees:
                lines.append(f"  * Missing payees: {self.missing_payees} transactions")
            if self.missing_categories:
                lines.append(f"  * Missing categories: {self.missing_categories} transactions")
            if self.zero_amounts:
                lines.append(f"  * Zero amounts: {self.zero_amounts} transactions")
            for reason in sorted(self.rejected):
                lines.append(f"  * Rejected ({reason}): {self.rejected[reason]} transactions")
            if self.duplicates:
                lines.append(f"  * Potential duplicates: {len(self.duplicates)} groups detected")
                for dup in self.duplicates[:_SHOW_DUPLICATES]:
                    lines.append(f"    - {dup.date} | {dup.payee} | {dup.amount} ({dup.count} times)")
                if len(self.duplicates) > _SHOW_DUPLICATES:
                    lines.append(f"    ... and {len(self.duplicates) - _SHOW_DUPLICATES} more")
            for kind in sorted(self.unused_mappings):
                values = self.unused_mappings[kind]
                lines.append(f"  * {kind} mapping: {len(values)} rules never used")
                for val in values[:_SHOW_UNUSED]:
                    lines.append(f'    - "{val}"')
                if len(values) > _SHOW_UNUSED:
                    lines.append(f"    ... and {len(values) - _SHOW_UNUSED} more")
            if self.unmatched_data:
                lines.append(
                    f"  * Unmapped values: {len(self.unmatched_data)} different values not in mapping files"
                )
            lines.append("=============================")
            lines.append("Note: Review the validation log for full details")
            return lines

    def to_dict(self) -> Dict[str, Any]:
        with self._lock:
            return {
                "total_transactions": self.total_transactions,
                "missing_payees": self.missing_payees,
                "missing_categories": self.missing_categories,
                "zero_amounts": self.zero_amounts,
                "rejected": dict(sorted(self.rejected.items())),
                "duplicates": [asdict(d) for d in self.duplicates],
                "unused_mappings": {k: list(v) for k, v in sorted(self.unused_mappings.items())},
                "unmatched_data": dict(sorted(self.unmatched_data.items())),
                "issues": [asdict(i) for i in self.issues],
            }

    def write_log(self, output_dir: Path, name: str = TRANSACTIONS_LOG_NAME) -> Optional[Path]:
        """Write the structured JSON log; returns ``None`` (with a warning) if it cannot be written."""
        path = Path(output_dir) / name
        try:
            path.write_text(json.dumps(self.to_dict(), indent=2, ensure_ascii=False) + "\n", encoding="utf-8")
        except OSError as e:
            log.warning("Could not write validation log %s: %s", path, e)
            return None
        return path


if TYPE_CHECKING:
    _is_observer: type[ITransactionObserver] = ValidationTracker
