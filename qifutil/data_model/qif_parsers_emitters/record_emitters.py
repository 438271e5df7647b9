# qifutil/data_model/qif_parsers_emitters/record_emitters.py
"""
Record emitters for the supported output formats.

Each emitter writes the framing of one file and serializes records into it;
see :mod:`qifutil.data_model.interfaces.i_record_emitter` for the contract.
"""
from __future__ import annotations

import csv
import json
import logging
import xml.etree.ElementTree as ET
from typing import TYPE_CHECKING, Iterable, List, Optional, Set, TextIO, Tuple

from qifutil.data_model.interfaces import IRecordEmitter, OutputFormat
from qifutil.data_model.q_wrapper import (
    CSV_COLUMN_FIELDS,
    DEFAULT_MONARCH_COLUMNS,
    BalanceRecord,
    TransactionRecord,
)

log = logging.getLogger(__name__)

XML_PROLOGUE = '<?xml version="1.0" encoding="UTF-8"?>'
XML_ROOT = "transactions"
XML_ITEM = "transaction"
BALANCE_HEADER = "Date,Balance"


class CsvRecordEmitter:
    """
    CSV rows with every value quoted and embedded quotes doubled.

    The header row is the column names joined by ``,`` without quoting. Values
    starting with ``=``, ``+``, ``-`` or ``@`` are written as-is.
    """

    extension = ".csv"

    def __init__(self, columns: Iterable[str] = DEFAULT_MONARCH_COLUMNS):
        self.columns: Tuple[str, ...] = tuple(columns)
        self._warned: Set[str] = set()

    def begin_file(self, fp: TextIO) -> None:
        fp.write(",".join(self.columns) + "\n")

    def write_record(self, fp: TextIO, record: TransactionRecord) -> None:
        writer = csv.writer(fp, quoting=csv.QUOTE_ALL, lineterminator="\n")
        writer.writerow([self._value(record, c) for c in self.columns])

    def end_file(self, fp: TextIO) -> None:
        pass

    def _value(self, record: TransactionRecord, column: str) -> str:
        if column.strip() not in CSV_COLUMN_FIELDS and column not in self._warned:
            self._warned.add(column)
            log.warning("Unknown CSV column %r; its values will be empty", column)
        return record.value_for_column(column)


class JsonRecordEmitter:
    """Buffers the current file's records and writes one indented array at close."""

    extension = ".json"

    def __init__(self, indent: int = 2):
        self.indent = indent
        self._buffer: List[dict] = []

    def begin_file(self, fp: TextIO) -> None:
        self._buffer = []

    def write_record(self, fp: TextIO, record: TransactionRecord) -> None:
        self._buffer.append(record.to_dict())

    def end_file(self, fp: TextIO) -> None:
        fp.write(json.dumps(self._buffer, indent=self.indent, ensure_ascii=False))
        fp.write("\n")
        self._buffer = []


class XmlRecordEmitter:
    """``<transactions>`` document with one ``<transaction>`` child per record."""

    extension = ".xml"

    def begin_file(self, fp: TextIO) -> None:
        fp.write(f"{XML_PROLOGUE}\n<{XML_ROOT}>\n")

    def write_record(self, fp: TextIO, record: TransactionRecord) -> None:
        elem = ET.Element(XML_ITEM)
        for key, value in record.to_dict().items():
            ET.SubElement(elem, key).text = str(value)
        ET.indent(elem, space="  ", level=1)
        fp.write("  " + ET.tostring(elem, encoding="unicode") + "\n")

    def end_file(self, fp: TextIO) -> None:
        fp.write(f"</{XML_ROOT}>\n")


class BalanceCsvEmitter:
    """Two-column ``Date,Balance`` CSV; values are never quoted."""

    extension = ".csv"

    def begin_file(self, fp: TextIO) -> None:
        fp.write(BALANCE_HEADER + "\n")

    def write_record(self, fp: TextIO, record: BalanceRecord) -> None:
        fp.write(f"{record.date},{record.balance}\n")

    def end_file(self, fp: TextIO) -> None:
        pass


def emitter_for(
    output_format: OutputFormat, columns: Optional[Iterable[str]] = None
) -> IRecordEmitter[TransactionRecord]:
    """Return the transaction emitter for ``output_format``. MONARCH ignores ``columns``."""
    if output_format is OutputFormat.JSON:
        return JsonRecordEmitter()
    if output_format is OutputFormat.XML:
        return XmlRecordEmitter()
    if output_format is OutputFormat.MONARCH or columns is None:
        return CsvRecordEmitter(DEFAULT_MONARCH_COLUMNS)
    return CsvRecordEmitter(columns)


if TYPE_CHECKING:
    _is_csv: type[IRecordEmitter[TransactionRecord]] = CsvRecordEmitter
    _is_json: type[IRecordEmitter[TransactionRecord]] = JsonRecordEmitter
    _is_xml: type[IRecordEmitter[TransactionRecord]] = XmlRecordEmitter
    _is_balance: type[IRecordEmitter[BalanceRecord]] = BalanceCsvEmitter
