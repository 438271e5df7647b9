#!/usr/bin/env python3
# qifutil/cli.py
"""
qifutil command line.

Commands:
- export transactions      QIF accounts -> CSV / JSON / XML / MONARCH CSV
- export balance-history   daily balances of one account
- export accounts|categories|payees|tags   list files
- list-accounts            account names (and types)
- account-stats            transaction counts and date ranges
- profile show|run         saved option sets

Fatal errors are printed with a hint and exit with status 1.
"""
from __future__ import annotations

import argparse
import errno
import logging
from pathlib import Path
from typing import Callable, List, Optional, Sequence

from qifutil import __version__
from qifutil.controllers.list_extractors import (
    account_stats,
    extract_accounts,
    extract_categories,
    extract_payees,
    extract_tags,
    list_accounts,
    write_payees,
    write_quoted_list,
)
from qifutil.controllers.run_config import (
    DEFAULT_RECORDS_PER_FILE,
    BalanceHistoryConfig,
    ExportConfig,
    load_profile,
    parse_date_option,
    split_list,
)
from qifutil.controllers.transaction_pipeline import (
    ExportResult,
    export_balance_history,
    export_transactions,
    load_source,
)
from qifutil.controllers.validation_tracker import (
    BALANCE_HISTORY_LOG_NAME,
    TRANSACTIONS_LOG_NAME,
    ValidationTracker,
)
from qifutil.data_model.interfaces import OutputFormat
from qifutil.data_model.q_wrapper import DEFAULT_MONARCH_COLUMNS, BalanceAnchor
from qifutil.errors import ConfigurationError, QifUtilError, friendly_error
from qifutil.utilities.config_logging import configure_logging
from qifutil.utilities.core_util import clean_path

log = logging.getLogger(__name__)


# ------------------------ helpers ------------------------


def _require_input(path: Path) -> Path:
    if not path.exists():
        raise FileNotFoundError(errno.ENOENT, "No such file", str(path))
    if not path.is_file():
        raise ConfigurationError(f"Input path is not a file: {path}")
    return path


def _output_format(value: str) -> OutputFormat:
    try:
        return OutputFormat.from_string(value)
    except ValueError as e:
        raise ConfigurationError(str(e)) from e


def _list_target(args: argparse.Namespace) -> Path:
    out = Path(args.output_file)
    return Path(args.output_path) / out if args.output_path else out


def _print_validation(tracker: ValidationTracker, output_dir: Path, log_name: str) -> None:
    print()
    print("\n".join(tracker.summary_lines()))
    written = tracker.write_log(output_dir, log_name)
    if written:
        print(f"Validation log: {written}")


def _print_range(start: Optional[object], end: Optional[object]) -> None:
    if start or end:
        print(f"Date range: {start or 'earliest'} to {end or 'latest'}")


# ------------------------ export ------------------------


def run_transactions(config: ExportConfig) -> ExportResult:
    """Run a transactions export and print its summary."""
    tracker = ValidationTracker()
    result = export_transactions(config, tracker)

    print("Export Summary:")
    print(f"Input file: {config.input_file}")
    _print_range(config.start_date, config.end_date)
    if config.accounts:
        print(f"Processed accounts: {', '.join(config.accounts)}")
    else:
        print("Processed all accounts")
    print(f"Output directory: {config.output_path}")
    if config.records_per_file > 0:
        print(f"Split files: {config.records_per_file} records per file")
    print(f"Records written: {result.records_written} in {len(result.files)} file(s)")
    if result.skipped_zero_amounts:
        print(f"Zero-amount transactions skipped: {result.skipped_zero_amounts}")
    print("\nExport completed successfully!")
    _print_validation(tracker, Path(config.output_path), TRANSACTIONS_LOG_NAME)
    return result


def run_balance_history(config: BalanceHistoryConfig) -> ExportResult:
    """Run a balance-history export and print its summary."""
    tracker = ValidationTracker()
    result = export_balance_history(config, tracker)

    print("Balance History Summary:")
    print(f"Input file: {config.input_file}")
    print(f"Account: {config.account}")
    if config.anchor.is_forward:
        print(f"Opening balance: {config.anchor.value}")
    else:
        print(f"Current balance (as of last transaction): {config.anchor.value}")
    _print_range(config.start_date, config.end_date)
    print(f"Balance records generated: {result.records_written}")
    print(f"Output directory: {config.output_path}")
    print("\nBalance history generation completed successfully!")
    _print_validation(tracker, Path(config.output_path), BALANCE_HISTORY_LOG_NAME)
    return result


def cmd_export_transactions(args: argparse.Namespace) -> None:
    config = ExportConfig(
        input_file=_require_input(args.input_file),
        output_path=args.output_path,
        accounts=split_list(args.accounts),
        start_date=parse_date_option(args.start_date, "start"),
        end_date=parse_date_option(args.end_date, "end"),
        output_format=_output_format(args.output_format),
        csv_columns=tuple(c.strip() for c in args.csv_columns.split(",")),
        category_map_file=args.category_map_file,
        payee_map_file=args.payee_map_file,
        account_map_file=args.account_map_file,
        tag_map_file=args.tag_map_file,
        records_per_file=args.records_per_file,
        add_tag_for_import=args.add_tag_for_import,
        skip_zero_amounts=args.skip_zero_amounts,
    )
    run_transactions(config)


def cmd_export_balance_history(args: argparse.Namespace) -> None:
    config = BalanceHistoryConfig(
        input_file=_require_input(args.input_file),
        output_path=args.output_path,
        account=(args.accounts or "").strip(),
        anchor=BalanceAnchor.from_strings(args.opening_balance, args.current_balance),
        start_date=parse_date_option(args.start_date, "start"),
        end_date=parse_date_option(args.end_date, "end"),
        records_per_file=args.records_per_file,
    )
    run_balance_history(config)


def _cmd_list(extract: Callable[[str], List[str]], label: str) -> Callable[[argparse.Namespace], None]:
    def _run(args: argparse.Namespace) -> None:
        values = extract(load_source(_require_input(args.input_file)))
        path = write_quoted_list(values, _list_target(args))
        print(f"Unique extracted {label}: {len(values)}")
        print(f"Written to {path}")

    return _run


def cmd_export_payees(args: argparse.Namespace) -> None:
    values = extract_payees(load_source(_require_input(args.input_file)))
    path = write_payees(values, _list_target(args), _output_format(args.output_format))
    print(f"Unique extracted payees: {len(values)}")
    print(f"Written to {path}")


# ------------------------ inspection ------------------------


def cmd_list_accounts(args: argparse.Namespace) -> None:
    accounts = list_accounts(load_source(_require_input(args.input_file)))
    if not accounts:
        print("No accounts found in the file.")
        return
    print(f"Found {len(accounts)} accounts in {args.input_file}:\n")
    for i, (name, kind) in enumerate(accounts, start=1):
        if args.show_types:
            print(f"{i}. {name} (Type: {kind.value})")
        else:
            print(f"{i}. {name}")


def cmd_account_stats(args: argparse.Namespace) -> None:
    stats = account_stats(load_source(_require_input(args.input_file)), split_list(args.accounts))
    if not stats:
        print("No accounts found in the file.")
        return
    print(f"Account Statistics from {args.input_file}:\n")
    for s in stats:
        print(s.describe())
        print()


# ------------------------ profiles ------------------------


def cmd_profile_show(args: argparse.Namespace) -> None:
    print(load_profile(args.profile).describe())


def cmd_profile_run(args: argparse.Namespace) -> None:
    profile = load_profile(args.profile)
    if not (profile.export_transactions or profile.export_balance_history):
        raise ConfigurationError(f"Profile {args.profile} selects no export")
    print(profile.describe())
    print()
    if profile.export_transactions:
        config = profile.to_export_config(args.records_per_file)
        _require_input(Path(config.input_file))
        run_transactions(config)
    if profile.export_balance_history:
        bconfig = profile.to_balance_config(args.records_per_file)
        _require_input(Path(bconfig.input_file))
        run_balance_history(bconfig)


# ------------------------ parser ------------------------


def _add_input(p: argparse.ArgumentParser) -> None:
    p.add_argument("-i", "--input-file", type=clean_path, required=True, help="Input QIF file")


def _add_dates(p: argparse.ArgumentParser) -> None:
    p.add_argument("--start-date", help="Earliest date to include (YYYY-MM-DD)")
    p.add_argument("--end-date", help="Latest date to include (YYYY-MM-DD)")


def _add_records(p: argparse.ArgumentParser) -> None:
    p.add_argument("-r", "--records-per-file", type=int, default=DEFAULT_RECORDS_PER_FILE,
                   help=f"Maximum records per output file (default: {DEFAULT_RECORDS_PER_FILE}; 0 = never split)")


def _add_list_command(sub: argparse._SubParsersAction, name: str, default_file: str,
                      handler: Callable[[argparse.Namespace], None], with_format: bool = False) -> None:
    p = sub.add_parser(name, help=f"Extract {name} from a QIF file")
    _add_input(p)
    p.add_argument("-o", "--output-file", default=default_file, help=f"Output file (default: {default_file})")
    p.add_argument("--output-path", type=clean_path, help="Directory for the output file")
    if with_format:
        p.add_argument("-f", "--output-format", default="CSV", help="Output format: CSV, JSON or XML")
    p.set_defaults(handler=handler)


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(
        prog="qifutil",
        description="Convert QIF (Quicken Interchange Format) exports for budgeting tools.",
    )
    ap.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    ap.add_argument("-v", "--verbose", action="store_true", help="Show debug logging on the console")
    ap.add_argument("--log-dir", type=clean_path, help="Directory for the rotating debug log file")
    sub = ap.add_subparsers(dest="command")

    # export ...
    export = sub.add_parser("export", help="Export transactions, balances or lists")
    export_sub = export.add_subparsers(dest="export_command")

    tx = export_sub.add_parser("transactions", help="Export transactions per account")
    _add_input(tx)
    tx.add_argument("-o", "--output-path", type=clean_path, required=True, help="Output directory")
    tx.add_argument("-f", "--output-format", default="CSV", help="CSV (default), JSON, XML or MONARCH")
    tx.add_argument("--csv-columns", default=",".join(DEFAULT_MONARCH_COLUMNS),
                    help="Comma-separated CSV columns (CSV format only; default: Monarch Money columns)")
    tx.add_argument("-a", "--accounts", default="", help="Comma-separated account names (default: all)")
    _add_dates(tx)
    tx.add_argument("-c", "--category-map-file", type=clean_path, help="Category mapping CSV (source,target)")
    tx.add_argument("-p", "--payee-map-file", type=clean_path, help="Payee mapping CSV (source,target)")
    tx.add_argument("-t", "--tag-map-file", type=clean_path, help="Tag mapping CSV (source,target)")
    tx.add_argument("--account-map-file", type=clean_path, help="Account mapping CSV (source,target)")
    _add_records(tx)
    tx.add_argument("--add-tag-for-import", action=argparse.BooleanOptionalAction, default=True,
                    help="Prepend the QIFIMPORT tag to every transaction (default: on)")
    tx.add_argument("--skip-zero-amounts", action="store_true", help="Leave zero-amount transactions out")
    tx.set_defaults(handler=cmd_export_transactions)

    bh = export_sub.add_parser("balance-history", help="Export daily balances of one account")
    _add_input(bh)
    bh.add_argument("-o", "--output-path", type=clean_path, required=True, help="Output directory")
    bh.add_argument("-a", "--accounts", required=True, help="Exactly one account name")
    anchor = bh.add_mutually_exclusive_group()
    anchor.add_argument("--current-balance", help="Balance after the last transaction (works backward)")
    anchor.add_argument("--opening-balance", help="Balance before the first transaction (works forward)")
    _add_dates(bh)
    _add_records(bh)
    bh.set_defaults(handler=cmd_export_balance_history)

    _add_list_command(export_sub, "accounts", "accounts.csv", _cmd_list(extract_accounts, "accounts"))
    _add_list_command(export_sub, "categories", "categories.csv", _cmd_list(extract_categories, "categories"))
    _add_list_command(export_sub, "tags", "tags.csv", _cmd_list(extract_tags, "tags"))
    _add_list_command(export_sub, "payees", "payees.csv", cmd_export_payees, with_format=True)

    la = sub.add_parser("list-accounts", help="List Bank/CCard accounts in a QIF file")
    _add_input(la)
    la.add_argument("--show-types", action="store_true", help="Show the account type")
    la.set_defaults(handler=cmd_list_accounts)

    st = sub.add_parser("account-stats", help="Transaction counts and date ranges per account")
    _add_input(st)
    st.add_argument("-a", "--accounts", default="", help="Comma-separated account names (default: all)")
    st.set_defaults(handler=cmd_account_stats)

    prof = sub.add_parser("profile", help="Show or run a saved profile")
    prof_sub = prof.add_subparsers(dest="profile_command")
    show = prof_sub.add_parser("show", help="Print a saved profile")
    show.add_argument("profile", type=clean_path)
    show.set_defaults(handler=cmd_profile_show)
    run = prof_sub.add_parser("run", help="Run the exports selected in a saved profile")
    run.add_argument("profile", type=clean_path)
    _add_records(run)
    run.set_defaults(handler=cmd_profile_run)

    return ap


def main(argv: Optional[Sequence[str]] = None) -> None:
    ap = build_parser()
    args = ap.parse_args(argv)
    configure_logging(args.log_dir, args.verbose)

    handler = getattr(args, "handler", None)
    if handler is None:
        ap.print_help()
        raise SystemExit(2)
    try:
        handler(args)
    except (QifUtilError, OSError) as e:
        log.debug("Fatal error", exc_info=True)
        raise SystemExit(friendly_error(e)) from e


if __name__ == "__main__":
    main()
