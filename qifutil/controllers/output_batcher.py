# qifutil/controllers/output_batcher.py
from __future__ import annotations

import logging
from pathlib import Path
from types import TracebackType
from typing import Generic, Iterable, List, Optional, TextIO, Type, TypeVar

from qifutil.data_model.interfaces import IRecordEmitter
from qifutil.errors import OutputPathError

log = logging.getLogger(__name__)

T = TypeVar("T")


def ensure_output_dir(path: Path) -> Path:
    """Create ``path`` (and parents) if needed."""
    try:
        path.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise OutputPathError(f"Cannot create output directory {path}: {e}") from e
    return path


def safe_file_stem(name: str) -> str:
    """Replace path separators so an account name stays a single file name."""
    return name.replace("/", "_").replace("\\", "_")


class OutputBatcher(Generic[T]):
    """
    Write one account's records to ``{base_name}_{n}{ext}`` files.

    Path separators in ``base_name`` become ``_``, so every file lands
    directly in ``output_dir``.

    A new file is started only when a record arrives and the current file
    already holds ``records_per_file`` records (0 never splits), so N records
    give exactly ``ceil(N / records_per_file)`` files. The first file is opened
    on entry, so an empty stream still produces one framed file.

    Usage::

        with OutputBatcher(out_dir, "Checking", CsvRecordEmitter(), 5000) as batch:
            batch.write_all(records)
        batch.files_written
    """

    def __init__(
        self,
        output_dir: Path,
        base_name: str,
        emitter: IRecordEmitter[T],
        records_per_file: int = 0,
        encoding: str = "utf-8",
    ):
        if records_per_file < 0:
            raise ValueError(f"records_per_file must be >= 0, got {records_per_file}")
        self.output_dir = Path(output_dir)
        self.base_name = safe_file_stem(base_name)
        self.emitter = emitter
        self.records_per_file = records_per_file
        self.encoding = encoding
        self.files_written: List[Path] = []
        self.records_written = 0
        self._fp: Optional[TextIO] = None
        self._in_file = 0

    # region context manager
    def __enter__(self) -> "OutputBatcher[T]":
        self._open_next()
        return self

    def __exit__(
        self,
        exc_type: Optional[Type[BaseException]],
        exc: Optional[BaseException],
        tb: Optional[TracebackType],
    ) -> None:
        self.close()

    # endregion context manager

    def path_for(self, index: int) -> Path:
        return self.output_dir / f"{self.base_name}_{index}{self.emitter.extension}"

    def write(self, record: T) -> None:
        if self._fp is None:
            self._open_next()
        elif self.records_per_file and self._in_file >= self.records_per_file:
            self._close_current()
            self._open_next()
        assert self._fp is not None
        self.emitter.write_record(self._fp, record)
        self._in_file += 1
        self.records_written += 1

    def write_all(self, records: Iterable[T]) -> int:
        n = 0
        for record in records:
            self.write(record)
            n += 1
        return n

    def close(self) -> None:
        self._close_current()

    def _open_next(self) -> None:
        path = self.path_for(len(self.files_written) + 1)
        if path.exists():
            log.warning("Overwriting existing file: %s", path.name)
        try:
            self._fp = open(path, "w", encoding=self.encoding, newline="")
        except OSError as e:
            raise OutputPathError(f"Cannot create output file {path}: {e}") from e
        self.files_written.append(path)
        self._in_file = 0
        log.debug("Started %s", path)
        self.emitter.begin_file(self._fp)

    def _close_current(self) -> None:
        if self._fp is None:
            return
        fp, self._fp = self._fp, None
        try:
            self.emitter.end_file(fp)
        finally:
            fp.close()
        log.debug("Closed %s (%d records)", self.files_written[-1].name, self._in_file)
