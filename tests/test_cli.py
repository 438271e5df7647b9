# tests/test_cli.py
"""
Command-line tests. Each test drives ``main(argv)`` in-process and checks the
printed summary and the files written.
"""
from __future__ import annotations

import json

import pytest

from qifutil import __version__
from qifutil.cli import build_parser, main
from qifutil.controllers.run_config import RunProfile, save_profile
from qifutil.controllers.validation_tracker import BALANCE_HISTORY_LOG_NAME, TRANSACTIONS_LOG_NAME


def _run(argv, capsys) -> str:
    main([str(a) for a in argv])
    return capsys.readouterr().out


def test_version(capsys):
    with pytest.raises(SystemExit) as excinfo:
        main(["--version"])
    assert excinfo.value.code == 0
    assert __version__ in capsys.readouterr().out


def test_no_command_prints_help(capsys):
    with pytest.raises(SystemExit) as excinfo:
        main([])
    assert excinfo.value.code == 2
    assert "usage:" in capsys.readouterr().out


def test_parser_defaults():
    args = build_parser().parse_args(["export", "transactions", "-i", "a.qif", "-o", "out"])
    assert args.output_format == "CSV"
    assert args.records_per_file == 5000
    assert args.add_tag_for_import is True
    assert args.skip_zero_amounts is False


def test_balance_anchor_options_are_mutually_exclusive(sample_qif, out_dir, capsys):
    with pytest.raises(SystemExit) as excinfo:
        main([
            "export", "balance-history", "-i", str(sample_qif), "-o", str(out_dir),
            "-a", "Checking Account", "--current-balance", "1", "--opening-balance", "2",
        ])
    assert excinfo.value.code == 2
    assert "not allowed with argument" in capsys.readouterr().err


# ---------- export transactions ----------
def test_export_transactions(sample_qif, out_dir, capsys):
    # Act
    out = _run(["export", "transactions", "-i", sample_qif, "-o", out_dir, "--no-add-tag-for-import"], capsys)

    # Assert
    assert "Export Summary:" in out
    assert "Processed all accounts" in out
    assert "Records written: 5 in 2 file(s)" in out
    assert "Export completed successfully!" in out
    assert "Missing payees: 1 transactions" in out
    assert (out_dir / "Checking Account_1.csv").exists()
    assert (out_dir / "Visa Card_1.csv").exists()
    assert json.loads((out_dir / TRANSACTIONS_LOG_NAME).read_text(encoding="utf-8"))["total_transactions"] == 5
    first = (out_dir / "Checking Account_1.csv").read_text(encoding="utf-8").splitlines()[1]
    assert first.endswith('"-45.23",""'), "tags stay empty without the import tag"


def test_export_transactions_with_options(sample_qif, out_dir, capsys):
    out = _run(
        [
            "export", "transactions", "-i", sample_qif, "-o", out_dir,
            "-f", "json", "-a", "Checking Account", "--start-date", "2023-01-16", "-r", "1",
        ],
        capsys,
    )

    assert "Date range: 2023-01-16 to latest" in out
    assert "Processed accounts: Checking Account" in out
    assert "Split files: 1 records per file" in out
    assert sorted(p.name for p in out_dir.glob("*.json")) == [
        "Checking Account_1.json",
        "Checking Account_2.json",
    ]


def test_export_transactions_bad_format(sample_qif, out_dir):
    with pytest.raises(SystemExit) as excinfo:
        main(["export", "transactions", "-i", str(sample_qif), "-o", str(out_dir), "-f", "yaml"])
    assert "expected one of" in str(excinfo.value.code)


def test_export_transactions_bad_date(sample_qif, out_dir):
    with pytest.raises(SystemExit) as excinfo:
        main(["export", "transactions", "-i", str(sample_qif), "-o", str(out_dir), "--start-date", "1/1/2023"])
    assert "YYYY-MM-DD" in str(excinfo.value.code)
    assert not out_dir.exists()


def test_missing_input_file(tmp_path, out_dir):
    with pytest.raises(SystemExit) as excinfo:
        main(["export", "transactions", "-i", str(tmp_path / "nope.qif"), "-o", str(out_dir)])
    assert "Could not find the file" in str(excinfo.value.code)


# ---------- export balance-history ----------
def test_export_balance_history(sample_qif, out_dir, capsys):
    # Act
    out = _run(
        [
            "export", "balance-history", "-i", sample_qif, "-o", out_dir,
            "-a", "Checking Account", "--current-balance", "2500", "--end-date", "2023-01-31",
        ],
        capsys,
    )

    # Assert
    assert "Balance History Summary:" in out
    assert "Current balance (as of last transaction): 2500" in out
    assert "Balance records generated: 2" in out
    assert (out_dir / "Checking Account_balance_history_1.csv").read_text(encoding="utf-8") == (
        "Date,Balance\n2023-01-15,2535.50\n2023-01-20,2500.00\n"
    )
    assert (out_dir / BALANCE_HISTORY_LOG_NAME).exists()


def test_balance_history_requires_anchor(sample_qif, out_dir):
    with pytest.raises(SystemExit) as excinfo:
        main(["export", "balance-history", "-i", str(sample_qif), "-o", str(out_dir), "-a", "Checking Account"])
    assert "must be specified" in str(excinfo.value.code)


def test_balance_history_unknown_account(sample_qif, out_dir):
    with pytest.raises(SystemExit) as excinfo:
        main([
            "export", "balance-history", "-i", str(sample_qif), "-o", str(out_dir),
            "-a", "Savings", "--opening-balance", "0",
        ])
    assert "case-sensitive" in str(excinfo.value.code)


def test_balance_history_rejects_multiple_accounts(sample_qif, out_dir):
    with pytest.raises(SystemExit) as excinfo:
        main([
            "export", "balance-history", "-i", str(sample_qif), "-o", str(out_dir),
            "-a", "Checking Account,Visa Card", "--opening-balance", "0",
        ])
    assert "exactly one account" in str(excinfo.value.code)


# ---------- list commands ----------
@pytest.mark.parametrize(
    "command,expected",
    [
        ("accounts", '"Checking Account"\n"Visa Card"\n'),
        ("tags", '"Business"\n"Vacation"\n"Vacation/2023"\n'),
        ("payees", '"Airline"\n"Coffee Bar"\n"Employer Inc"\n"Grocery Store"\n'),
    ],
)
def test_list_exports(sample_qif, tmp_path, capsys, command, expected):
    target = tmp_path / f"{command}.csv"

    out = _run(["export", command, "-i", sample_qif, "-o", target], capsys)

    assert f"Unique extracted {command}:" in out
    assert target.read_text(encoding="utf-8") == expected


def test_export_categories_to_output_path(sample_qif, tmp_path, capsys):
    out = _run(["export", "categories", "-i", sample_qif, "--output-path", tmp_path / "lists"], capsys)

    assert "Unique extracted categories: 6" in out
    assert (tmp_path / "lists" / "categories.csv").read_text(encoding="utf-8").startswith('"Fees"\n"Food"\n')


def test_export_payees_as_json(sample_qif, tmp_path, capsys):
    target = tmp_path / "payees.json"
    _run(["export", "payees", "-i", sample_qif, "-o", target, "-f", "JSON"], capsys)
    assert json.loads(target.read_text(encoding="utf-8"))[0] == "Airline"


# ---------- inspection ----------
def test_list_accounts(sample_qif, capsys):
    out = _run(["list-accounts", "-i", sample_qif, "--show-types"], capsys)
    assert f"Found 2 accounts in {sample_qif}:" in out
    assert "1. Checking Account (Type: Bank)" in out
    assert "2. Visa Card (Type: CCard)" in out


def test_list_accounts_empty_file(tmp_path, capsys):
    src = tmp_path / "empty.qif"
    src.write_text("!Type:Cat\nNFood\nE\n^\n", encoding="utf-8")
    assert "No accounts found in the file." in _run(["list-accounts", "-i", src], capsys)


def test_account_stats(sample_qif, capsys):
    out = _run(["account-stats", "-i", sample_qif, "-a", "Checking Account"], capsys)
    assert "Account: Checking Account (Type: Bank)" in out
    assert "  Transactions: 3" in out
    assert "  Date Range: 2023-01-15 to 2023-02-01" in out
    assert "Visa Card" not in out


# ---------- profiles ----------
def test_profile_show_and_run(sample_qif, tmp_path, out_dir, capsys):
    # Arrange
    profile_path = save_profile(
        RunProfile(
            input_file=str(sample_qif),
            output_path=str(out_dir),
            export_transactions=True,
            export_balance_history=True,
            selected_accounts="Visa Card",
            balance_history_account="Checking Account",
            balance_history_value="2500",
        ),
        tmp_path / "profile.json",
    )

    # Act
    shown = _run(["profile", "show", profile_path], capsys)
    ran = _run(["profile", "run", profile_path], capsys)

    # Assert
    assert shown.startswith("Configuration Summary:")
    assert "Export Type: Both transactions and balance history" in shown
    assert "Export completed successfully!" in ran
    assert "Balance history generation completed successfully!" in ran
    assert (out_dir / "Visa Card_1.csv").exists()
    assert not (out_dir / "Checking Account_1.csv").exists()
    assert (out_dir / "Checking Account_balance_history_1.csv").exists()


def test_profile_without_export_is_an_error(sample_qif, tmp_path):
    profile_path = save_profile(RunProfile(input_file=str(sample_qif), output_path="out"), tmp_path / "p.json")
    with pytest.raises(SystemExit) as excinfo:
        main(["profile", "run", str(profile_path)])
    assert "selects no export" in str(excinfo.value.code)
