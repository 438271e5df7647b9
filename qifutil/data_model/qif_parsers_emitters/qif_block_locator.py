# qifutil/data_model/qif_parsers_emitters/qif_block_locator.py
from __future__ import annotations

import logging
import re
from typing import Iterator, List, Optional, Pattern, Tuple, Union

from qifutil.data_model.interfaces import AccountKind
from qifutil.data_model.q_wrapper import AccountBlock
from qifutil.errors import AccountNotFoundError, ConfigurationError

log = logging.getLogger(__name__)

# !Account / N<name> / T<type> / ^ / !Type:Bank|CCard
ACCOUNT_HEADER_PATTERN = (
    r"^!Account[^\n]*\n"
    r"^N(?P<name>.*?)\n"
    r"^T(?P<account_type>.*?)\n"
    r"^\^\n"
    r"^!Type:(?P<kind>Bank|CCard)\s*\n"
)

# Any section declaration ends the transaction text of the previous block.
SECTION_BOUNDARY_PATTERN = r"^\s*!Type:.*$"

CATEGORY_SECTION_HEADER = "!Type:Cat"
TAG_SECTION_HEADER = "!Type:Tag"


def compile_pattern(pattern: Union[str, Pattern[str]], flags: int = re.MULTILINE) -> Pattern[str]:
    """Compile ``pattern``; a pattern that does not compile is a configuration error."""
    if isinstance(pattern, re.Pattern):
        return pattern
    try:
        return re.compile(pattern, flags)
    except re.error as e:
        raise ConfigurationError(f"Structural pattern does not compile: {pattern!r} ({e})") from e


class AccountBlocks:
    """
    Lazy, restartable sequence of the Bank/CCard account blocks in a QIF text.

    Every iteration re-scans the text, so the sequence can be walked more than
    once (list the names, then export) without holding offsets anywhere else.
    An input without any matching header simply yields nothing.
    """

    def __init__(self, text: str, header_re: Pattern[str], boundary_re: Pattern[str]):
        self._text = text
        self._header_re = header_re
        self._boundary_re = boundary_re

    @property
    def text(self) -> str:
        return self._text

    def __iter__(self) -> Iterator[AccountBlock]:
        for m in self._header_re.finditer(self._text):
            try:
                kind = AccountKind.from_qif_type(m.group("kind"))
            except ValueError:
                log.debug("Skipping account block with type %r", m.group("kind"))
                continue
            start = m.end()
            nxt = self._boundary_re.search(self._text, start)
            end = nxt.start() if nxt else len(self._text)
            yield AccountBlock(name=m.group("name").strip(), kind=kind, body_span=(start, end))

    def names(self) -> List[str]:
        return [b.name for b in self]

    def find(self, name: str) -> AccountBlock:
        """Return the first block called ``name`` or raise AccountNotFoundError."""
        for block in self:
            if block.name == name:
                return block
        raise AccountNotFoundError(f"Account {name!r} not found in file")

    def select(self, names: Tuple[str, ...]) -> Iterator[AccountBlock]:
        """Blocks whose name is in ``names``; every block when ``names`` is empty."""
        wanted = set(names)
        return (b for b in self if not wanted or b.name in wanted)


class QifBlockLocator:
    """Locate account blocks and list sections in normalized QIF text."""

    def __init__(
        self,
        header_pattern: Union[str, Pattern[str]] = ACCOUNT_HEADER_PATTERN,
        boundary_pattern: Union[str, Pattern[str]] = SECTION_BOUNDARY_PATTERN,
    ):
        self._header_re = compile_pattern(header_pattern)
        self._boundary_re = compile_pattern(boundary_pattern, re.MULTILINE | re.IGNORECASE)
        missing = {"name", "kind"} - set(self._header_re.groupindex)
        if missing:
            raise ConfigurationError(
                f"Account header pattern must define the named groups {sorted(missing)}"
            )

    def account_blocks(self, text: str) -> AccountBlocks:
        return AccountBlocks(text, self._header_re, self._boundary_re)

    def section_span(self, text: str, header: str) -> Optional[Tuple[int, int]]:
        """
        Return the ``(start, end)`` span of the body of the first ``header`` section.

        ``start`` is just past the header line, ``end`` is the next ``!Type:`` line
        or end of text. ``None`` when the section is absent.
        """
        header_re = re.compile(rf"^{re.escape(header)}[ \t]*\n", re.MULTILINE)
        m = header_re.search(text)
        if m is None:
            return None
        nxt = self._boundary_re.search(text, m.end())
        return m.end(), (nxt.start() if nxt else len(text))

    def section_text(self, text: str, header: str) -> str:
        span = self.section_span(text, header)
        if span is None:
            return ""
        return text[span[0] : span[1]]
