# qifutil/data_model/interfaces/i_record_emitter.py
"""
Runtime-checkable protocol for streaming record serializers.

An emitter owns the *framing* of one output format (CSV header row, XML
prologue and wrapper element, JSON array brackets) and the serialization of a
single record. It never opens or names files: the output batcher decides when
a file starts and ends and hands the emitter an open text stream.

### Expectations for implementers

- **Framing per file:** ``begin_file`` and ``end_file`` are called exactly once
  for every file, so each file is a complete document on its own.
- **Determinism:** the same records in the same order must produce the same
  bytes.
- **Buffering:** formats that cannot be appended incrementally (JSON) may buffer
  records between ``begin_file`` and ``end_file``; the buffer must be reset in
  ``begin_file``.
- **Line endings:** emitters write ``\\n``; streams should be opened with
  ``newline=""`` so the platform does not translate them.
"""

from __future__ import annotations

from typing import Protocol, TextIO, TypeVar, runtime_checkable

T = TypeVar("T", contravariant=True)


@runtime_checkable
class IRecordEmitter(Protocol[T]):
    """
    Streaming serializer for one output format.

    Attributes
    ----------
    extension : str
        File extension including the dot (``".csv"``), used by the batcher to
        name files.
    """

    extension: str

    def begin_file(self, fp: TextIO) -> None:
        """Write the leading framing (header row, prologue) of a new file."""

    def write_record(self, fp: TextIO, record: T) -> None:
        """Serialize one record into the current file (or its buffer)."""

    def end_file(self, fp: TextIO) -> None:
        """Flush buffered records and write the trailing framing."""
