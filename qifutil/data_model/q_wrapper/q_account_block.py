from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Tuple

from ..interfaces import AccountKind, IToDict, RecursiveDictStr


@dataclass(frozen=True)
class AccountBlock:
    """
    One ``!Account`` header followed by its Bank/CCard transaction section.

    ``body_span`` holds the ``(start, end)`` offsets of the transaction text in
    the normalized source: ``start`` is just after the ``!Type:`` line, ``end``
    is the next ``!Type:`` line or end of text.
    """

    name: str
    kind: AccountKind
    body_span: Tuple[int, int]

    def body(self, text: str) -> str:
        """Return the transaction text of this block from ``text``."""
        start, end = self.body_span
        return text[start:end]

    def to_dict(self) -> dict[str, RecursiveDictStr]:
        return {
            "name": self.name,
            "kind": self.kind.value,
            "start": str(self.body_span[0]),
            "end": str(self.body_span[1]),
        }


if TYPE_CHECKING:
    _is_IToDict: type[IToDict] = AccountBlock
