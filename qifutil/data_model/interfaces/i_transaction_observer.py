# qifutil/data_model/interfaces/i_transaction_observer.py
from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, Sequence, runtime_checkable

if TYPE_CHECKING:
    from ..q_wrapper.q_transaction_record import TransactionRecord


@runtime_checkable
class ITransactionObserver(Protocol):
    """
    Receives data-quality events while the pipelines run.

    The parsing, normalizing and mapping stages never log or count on their
    own; the pipeline calls the observer next to them. Implementations must be
    safe to call from several producer threads.
    """

    def on_transaction(self, record: "TransactionRecord") -> None:
        """An admitted record (after mapping and date filtering)."""

    def on_amount(self, date: str, amount: str) -> None:
        """An admitted amount in a pipeline that does not build full records."""

    def on_rejected(self, reason: str, detail: str = "") -> None:
        """A transaction was skipped; ``reason`` is a RecordRejected reason."""

    def on_duplicate(self, date: str, payee: str, amount: str, count: int) -> None:
        """``count`` admitted records share the same date, payee and amount."""

    def on_unmatched(self, kind: str, value: str) -> None:
        """``value`` had no entry in the loaded ``kind`` mapping table."""

    def on_unused_mappings(self, kind: str, sources: Sequence[str]) -> None:
        """Entries of the ``kind`` table that never matched during the run."""


class NullObserver:
    """Observer that ignores every event."""

    def on_transaction(self, record: "TransactionRecord") -> None:
        pass

    def on_amount(self, date: str, amount: str) -> None:
        pass

    def on_rejected(self, reason: str, detail: str = "") -> None:
        pass

    def on_duplicate(self, date: str, payee: str, amount: str, count: int) -> None:
        pass

    def on_unmatched(self, kind: str, value: str) -> None:
        pass

    def on_unused_mappings(self, kind: str, sources: Sequence[str]) -> None:
        pass


if TYPE_CHECKING:
    _is_observer: type[ITransactionObserver] = NullObserver
