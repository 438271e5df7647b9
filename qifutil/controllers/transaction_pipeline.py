# qifutil/controllers/transaction_pipeline.py
"""
Pipeline entry points.

Block Locator -> Transaction Parser -> Field Normalizer (with Mapping Engine)
-> Date-Range Filter -> Output Batcher | Balance Reconstruction.

Both entry points take an immutable config value and an observer; they never
print. Fatal problems raise `QifUtilError` subclasses, per-record problems are
reported to the observer and the record is skipped.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from decimal import Decimal
from pathlib import Path
from typing import Iterator, List, Optional, Sequence, Tuple

import pandas as pd

from qifutil.controllers.balance_history import DailyDeltas, reconstruct
from qifutil.controllers.date_filter import DateRange
from qifutil.controllers.field_normalizer import ValueMapper, normalize, normalize_date, parse_amount
from qifutil.controllers.mapping_engine import MappingEngine
from qifutil.controllers.output_batcher import OutputBatcher, ensure_output_dir
from qifutil.controllers.run_config import BalanceHistoryConfig, ExportConfig
from qifutil.data_model.interfaces import ITransactionObserver, NullObserver
from qifutil.data_model.q_wrapper import BalanceRecord, TransactionRecord
from qifutil.data_model.qif_parsers_emitters import (
    BalanceCsvEmitter,
    QifBlockLocator,
    QifTransactionParser,
    emitter_for,
)
from qifutil.errors import ConfigurationError, InputFileError, RecordRejected
from qifutil.utilities.converters_scalar import format_amount
from qifutil.utilities.core_util import read_qif_text

log = logging.getLogger(__name__)

DUPLICATE_KEY = ["date", "merchant", "amount"]


@dataclass
class ExportResult:
    """What a pipeline run produced."""

    accounts: List[str] = field(default_factory=list)
    files: List[Path] = field(default_factory=list)
    records_written: int = 0
    skipped_zero_amounts: int = 0


def load_source(path: Path) -> str:
    """Read the QIF input with normalized line endings; unreadable input is fatal."""
    try:
        return read_qif_text(Path(path))
    except OSError as e:
        raise InputFileError(f"Cannot read input file {path}: {e}") from e


# region transactions


def iter_account_records(
    body: str,
    account_name: str,
    window: DateRange,
    mapper: ValueMapper,
    add_tag_for_import: bool,
    observer: ITransactionObserver,
    parser: Optional[QifTransactionParser] = None,
) -> Iterator[TransactionRecord]:
    """
    Yield the admitted records of one account block, in source order.

    Rejected transactions go to ``observer.on_rejected``; admitted ones to
    ``observer.on_transaction``.
    """
    parser = parser or QifTransactionParser()
    for raw in parser.parse(body):
        try:
            record = normalize(raw, account_name, mapper, add_tag_for_import)
        except RecordRejected as e:
            observer.on_rejected(e.reason, e.detail)
            continue
        if not window.admits(record.date):
            continue
        observer.on_transaction(record)
        yield record


def find_duplicates(records: Sequence[TransactionRecord]) -> List[Tuple[str, str, str, int]]:
    """
    Group records by date, payee and amount.

    Returns
    -------
    List[Tuple[str, str, str, int]]
        ``(date, payee, amount, count)`` for every group with more than one
        record, sorted by the group key.
    """
    if not records:
        return []
    df = pd.DataFrame([r.to_dict() for r in records], columns=DUPLICATE_KEY)
    sizes = df.groupby(DUPLICATE_KEY, sort=True).size()
    dups = sizes[sizes > 1]
    return [(d, p, a, int(n)) for (d, p, a), n in dups.items()]


def export_transactions(
    config: ExportConfig,
    observer: Optional[ITransactionObserver] = None,
    locator: Optional[QifBlockLocator] = None,
) -> ExportResult:
    """
    Export every selected Bank/CCard account to ``{account}_{n}.{ext}`` files.

    Parameters
    ----------
    config : ExportConfig
        Validated before anything is read or written.
    observer : ITransactionObserver, optional
        Receives data-quality events; defaults to `NullObserver`.
    locator : QifBlockLocator, optional
        Override of the structural patterns.

    Raises
    ------
    ConfigurationError, InputFileError, OutputPathError
    """
    config.validate()
    observer = observer or NullObserver()
    text = load_source(config.input_file)
    out_dir = ensure_output_dir(Path(config.output_path))
    engine = MappingEngine.from_files(config.mapping_files, observer)
    parser = QifTransactionParser()
    blocks = (locator or QifBlockLocator()).account_blocks(text)
    window = config.date_range
    result = ExportResult()

    for block in blocks.select(config.accounts):
        log.info("Processing %s", block.name)
        records = list(
            iter_account_records(
                block.body(text),
                block.name,
                window,
                engine.apply,
                config.add_tag_for_import,
                observer,
                parser,
            )
        )
        for d, p, a, n in find_duplicates(records):
            observer.on_duplicate(d, p, a, n)

        with OutputBatcher(
            out_dir, block.name, emitter_for(config.output_format, config.columns), config.records_per_file
        ) as batch:
            for record in records:
                if config.skip_zero_amounts and Decimal(record.amount) == 0:
                    result.skipped_zero_amounts += 1
                    continue
                batch.write(record)
        log.info("%s: %d records in %d file(s)", block.name, batch.records_written, len(batch.files_written))
        result.accounts.append(block.name)
        result.files.extend(batch.files_written)
        result.records_written += batch.records_written

    if not result.accounts:
        log.warning("No matching Bank/CCard accounts found in %s", config.input_file)
    missing = [a for a in config.accounts if a not in result.accounts]
    if missing:
        log.warning("Selected accounts not found: %s", ", ".join(missing))

    engine.report_unused()
    return result


# endregion transactions

# region balance history


def collect_daily_deltas(
    body: str,
    window: DateRange,
    observer: ITransactionObserver,
    parser: Optional[QifTransactionParser] = None,
) -> DailyDeltas:
    """Sum the signed amounts of the admitted transactions of one block by date."""
    parser = parser or QifTransactionParser()
    deltas = DailyDeltas()
    for raw in parser.parse(body):
        try:
            iso = normalize_date(raw.month, raw.day, raw.year)
            amount = parse_amount(raw.user_amount)
        except RecordRejected as e:
            observer.on_rejected(e.reason, e.detail)
            continue
        if not window.admits(iso):
            continue
        observer.on_amount(iso, format_amount(amount))
        deltas.add(iso, amount)
    return deltas


def export_balance_history(
    config: BalanceHistoryConfig,
    observer: Optional[ITransactionObserver] = None,
    locator: Optional[QifBlockLocator] = None,
) -> ExportResult:
    """
    Write ``{account}_balance_history_{n}.csv`` for one account.

    An account without admitted transactions writes nothing and logs a warning.

    Raises
    ------
    ConfigurationError, InputFileError, OutputPathError
    AccountNotFoundError
        If the account has no Bank/CCard block in the input.
    """
    config.validate()
    observer = observer or NullObserver()
    text = load_source(config.input_file)
    out_dir = ensure_output_dir(Path(config.output_path))
    block = (locator or QifBlockLocator()).account_blocks(text).find(config.account.strip())

    deltas = collect_daily_deltas(block.body(text), config.date_range, observer)
    result = ExportResult(accounts=[block.name])
    if not len(deltas):
        log.warning("No transactions found for balance history of %s", block.name)
        return result

    try:
        records: List[BalanceRecord] = reconstruct(deltas, config.anchor)
    except ValueError as e:
        raise ConfigurationError(f"Balance history of {block.name} is out of range: {e}") from e
    with OutputBatcher(
        out_dir, f"{block.name}_balance_history", BalanceCsvEmitter(), config.records_per_file
    ) as batch:
        batch.write_all(records)
    result.files.extend(batch.files_written)
    result.records_written = batch.records_written
    return result


# endregion balance history
