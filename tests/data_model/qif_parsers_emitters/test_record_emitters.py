# tests/data_model/qif_parsers_emitters/test_record_emitters.py
from __future__ import annotations

import io
import json
import xml.etree.ElementTree as ET

import pytest

from qifutil.data_model.interfaces import IRecordEmitter, OutputFormat
from qifutil.data_model.q_wrapper import BalanceRecord, TransactionRecord
from qifutil.data_model.qif_parsers_emitters import (
    BalanceCsvEmitter,
    CsvRecordEmitter,
    JsonRecordEmitter,
    XmlRecordEmitter,
    emitter_for,
)

RECORD = TransactionRecord(
    date="2023-01-20",
    merchant='Coffee "Bar"',
    category="Food:Dining",
    account="Checking Account",
    original_statement='Coffee "Bar"',
    notes="Morning coffee",
    amount="-35.50",
    tags="QIFIMPORT,Business",
)


def _emit(emitter, records):
    buf = io.StringIO()
    emitter.begin_file(buf)
    for r in records:
        emitter.write_record(buf, r)
    emitter.end_file(buf)
    return buf.getvalue()


def test_csv_quotes_every_value_and_doubles_quotes():
    out = _emit(CsvRecordEmitter(("Date", "Merchant", "Amount")), [RECORD])
    assert out == 'Date,Merchant,Amount\n"2023-01-20","Coffee ""Bar""","-35.50"\n'


def test_csv_unknown_column_is_empty_and_warned_once(caplog):
    emitter = CsvRecordEmitter(("Date", "Bogus"))
    out = _emit(emitter, [RECORD, RECORD])
    assert out.splitlines()[1] == '"2023-01-20",""'
    assert sum("Bogus" in r.getMessage() for r in caplog.records) == 1


def test_csv_header_only_for_empty_file():
    assert _emit(CsvRecordEmitter(("Date", "Amount")), []) == "Date,Amount\n"


def test_json_writes_indented_array():
    out = _emit(JsonRecordEmitter(), [RECORD])
    data = json.loads(out)
    assert data == [RECORD.to_dict()]
    assert list(data[0]) == [
        "date", "merchant", "category", "account", "original_statement", "notes", "amount", "tags",
    ]
    assert '\n  {\n    "date"' in out


def test_json_empty_file_is_empty_array():
    assert json.loads(_emit(JsonRecordEmitter(), [])) == []


def test_json_buffer_resets_per_file():
    emitter = JsonRecordEmitter()
    _emit(emitter, [RECORD, RECORD])
    assert len(json.loads(_emit(emitter, [RECORD]))) == 1


def test_xml_document_shape():
    out = _emit(XmlRecordEmitter(), [RECORD, RECORD])
    assert out.startswith('<?xml version="1.0" encoding="UTF-8"?>\n<transactions>\n')
    root = ET.fromstring(out.split("\n", 1)[1])
    assert root.tag == "transactions"
    items = root.findall("transaction")
    assert len(items) == 2
    assert items[0].findtext("merchant") == 'Coffee "Bar"'
    assert items[0].findtext("amount") == "-35.50"


def test_xml_empty_file_keeps_wrapper():
    out = _emit(XmlRecordEmitter(), [])
    assert out == '<?xml version="1.0" encoding="UTF-8"?>\n<transactions>\n</transactions>\n'


def test_balance_csv_is_unquoted():
    out = _emit(BalanceCsvEmitter(), [BalanceRecord("2023-01-15", "2535.50")])
    assert out == "Date,Balance\n2023-01-15,2535.50\n"


@pytest.mark.parametrize(
    "fmt,cls,ext",
    [
        (OutputFormat.CSV, CsvRecordEmitter, ".csv"),
        (OutputFormat.MONARCH, CsvRecordEmitter, ".csv"),
        (OutputFormat.JSON, JsonRecordEmitter, ".json"),
        (OutputFormat.XML, XmlRecordEmitter, ".xml"),
    ],
)
def test_emitter_for(fmt, cls, ext):
    emitter = emitter_for(fmt, ("Date",))
    assert isinstance(emitter, cls)
    assert isinstance(emitter, IRecordEmitter)
    assert emitter.extension == ext == fmt.extension


def test_monarch_ignores_custom_columns():
    emitter = emitter_for(OutputFormat.MONARCH, ("Date",))
    assert emitter.columns[0] == "Date" and len(emitter.columns) == 8
