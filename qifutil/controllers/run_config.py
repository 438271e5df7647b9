# qifutil/controllers/run_config.py
"""
Immutable run configuration for the two pipelines, and saved run profiles.

``ExportConfig`` and ``BalanceHistoryConfig`` are built once (by the CLI or
from a ``RunProfile``), validated, and passed to the pipeline entry points.
Nothing in the pipelines reads module-level option state.
"""
from __future__ import annotations

import json
import logging
from dataclasses import asdict, dataclass, field
from datetime import date
from pathlib import Path
from typing import Any, Dict, Optional, Tuple

from qifutil.controllers.date_filter import DateRange
from qifutil.controllers.mapping_engine import ACCOUNT, CATEGORY, PAYEE, TAG
from qifutil.data_model.interfaces import OutputFormat
from qifutil.data_model.q_wrapper import DEFAULT_MONARCH_COLUMNS, BalanceAnchor
from qifutil.errors import ConfigurationError
from qifutil.utilities.converters_scalar import to_date
from qifutil.utilities.core_util import from_dict, is_null_or_whitespace

log = logging.getLogger(__name__)

DEFAULT_RECORDS_PER_FILE = 5000


def split_list(value: Optional[str]) -> Tuple[str, ...]:
    """``"A, B,,C"`` -> ``("A", "B", "C")``."""
    if not value:
        return ()
    return tuple(p.strip() for p in value.split(",") if p.strip())


def parse_date_option(value: Optional[str], label: str) -> Optional[date]:
    if is_null_or_whitespace(value):
        return None
    try:
        return to_date(value.strip())  # type: ignore[union-attr]
    except ValueError as e:
        raise ConfigurationError(f"Invalid {label} date {value!r}. Use YYYY-MM-DD") from e


def _check_common(records_per_file: int, start: Optional[date], end: Optional[date]) -> None:
    if records_per_file < 0:
        raise ConfigurationError(f"Records per file must be 0 or more, got {records_per_file}")
    if start and end and end < start:
        raise ConfigurationError("End date cannot be before start date")


# region ExportConfig


@dataclass(frozen=True)
class ExportConfig:
    """Options of one ``export transactions`` run."""

    input_file: Path
    output_path: Path
    accounts: Tuple[str, ...] = ()
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    output_format: OutputFormat = OutputFormat.CSV
    csv_columns: Tuple[str, ...] = DEFAULT_MONARCH_COLUMNS
    category_map_file: Optional[Path] = None
    payee_map_file: Optional[Path] = None
    account_map_file: Optional[Path] = None
    tag_map_file: Optional[Path] = None
    records_per_file: int = DEFAULT_RECORDS_PER_FILE
    add_tag_for_import: bool = True
    skip_zero_amounts: bool = False

    def validate(self) -> "ExportConfig":
        if any(is_null_or_whitespace(a) for a in self.accounts):
            raise ConfigurationError("Account names cannot be blank")
        _check_common(self.records_per_file, self.start_date, self.end_date)
        if self.output_format is OutputFormat.CSV and not self.columns:
            raise ConfigurationError("At least one CSV column is required")
        return self

    @property
    def columns(self) -> Tuple[str, ...]:
        """Effective CSV columns; MONARCH always uses the default set."""
        if self.output_format is OutputFormat.MONARCH:
            return DEFAULT_MONARCH_COLUMNS
        return tuple(c.strip() for c in self.csv_columns if c.strip())

    @property
    def date_range(self) -> DateRange:
        return DateRange(self.start_date, self.end_date)

    @property
    def mapping_files(self) -> Dict[str, Optional[Path]]:
        return {
            CATEGORY: self.category_map_file,
            PAYEE: self.payee_map_file,
            ACCOUNT: self.account_map_file,
            TAG: self.tag_map_file,
        }


# endregion ExportConfig

# region BalanceHistoryConfig


@dataclass(frozen=True)
class BalanceHistoryConfig:
    """Options of one ``export balance-history`` run."""

    input_file: Path
    output_path: Path
    account: str
    anchor: BalanceAnchor
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    records_per_file: int = DEFAULT_RECORDS_PER_FILE

    def validate(self) -> "BalanceHistoryConfig":
        if is_null_or_whitespace(self.account):
            raise ConfigurationError("Account name cannot be empty")
        if len(split_list(self.account)) > 1:
            raise ConfigurationError(
                "Balance history requires exactly one account. Multiple accounts specified."
            )
        _check_common(self.records_per_file, self.start_date, self.end_date)
        return self

    @property
    def date_range(self) -> DateRange:
        return DateRange(self.start_date, self.end_date)


# endregion BalanceHistoryConfig

# region RunProfile

# JSON key -> RunProfile field
_PROFILE_KEYS: Dict[str, str] = {
    "inputFile": "input_file",
    "outputPath": "output_path",
    "exportTransactions": "export_transactions",
    "exportBalanceHistory": "export_balance_history",
    "balanceHistoryAccount": "balance_history_account",
    "balanceHistoryOpening": "balance_history_opening",
    "balanceHistoryValue": "balance_history_value",
    "selectedAccounts": "selected_accounts",
    "startDate": "start_date",
    "endDate": "end_date",
    "outputFormat": "output_format",
    "categoryMapFile": "category_map_file",
    "payeeMapFile": "payee_map_file",
    "accountMapFile": "account_map_file",
    "tagMapFile": "tag_map_file",
    "addTagForImport": "add_tag_for_import",
    "skipZeroAmounts": "skip_zero_amounts",
}
_PROFILE_FIELDS = {v: k for k, v in _PROFILE_KEYS.items()}


@dataclass
class RunProfile:
    """
    A saved set of options, stored as JSON with camelCase keys.

    Values are kept as the user typed them; ``to_export_config`` and
    ``to_balance_config`` parse and validate them.
    """

    input_file: str = ""
    output_path: str = ""
    export_transactions: bool = False
    export_balance_history: bool = False
    balance_history_account: str = ""
    balance_history_opening: bool = False  # True: value is the opening balance
    balance_history_value: str = ""
    selected_accounts: str = ""
    start_date: str = ""
    end_date: str = ""
    output_format: str = ""
    category_map_file: str = ""
    payee_map_file: str = ""
    account_map_file: str = ""
    tag_map_file: str = ""
    add_tag_for_import: bool = True
    skip_zero_amounts: bool = False
    extra: Dict[str, Any] = field(default_factory=dict, compare=False, repr=False)

    def is_empty(self) -> bool:
        return self.input_file == "" and self.output_path == ""

    def to_json_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data.pop("extra")
        return {_PROFILE_FIELDS[k]: v for k, v in data.items()}

    def describe(self) -> str:
        lines = ["Configuration Summary:"]
        lines.append(f"  Input File: {self.input_file}")
        lines.append(f"  Output Path: {self.output_path}")
        if self.export_transactions and self.export_balance_history:
            lines.append("  Export Type: Both transactions and balance history")
        elif self.export_transactions:
            lines.append("  Export Type: Transactions only")
        elif self.export_balance_history:
            lines.append("  Export Type: Balance history only")
        if self.selected_accounts:
            lines.append(f"  Accounts: {self.selected_accounts}")
        if self.balance_history_account:
            mode = "opening" if self.balance_history_opening else "current"
            lines.append(f"  Balance History Account: {self.balance_history_account}")
            if self.balance_history_value:
                lines.append(f"  Balance ({mode}): {self.balance_history_value}")
        if self.start_date or self.end_date:
            lines.append(f"  Date Range: {self.start_date} to {self.end_date}")
        if self.output_format:
            lines.append(f"  Format: {self.output_format}")
        maps = [
            ("Categories", self.category_map_file),
            ("Payees", self.payee_map_file),
            ("Accounts", self.account_map_file),
            ("Tags", self.tag_map_file),
        ]
        if any(path for _, path in maps):
            lines.append("  Mappings Applied:")
            lines.extend(f"    * {label}: {path}" for label, path in maps if path)
        lines.append(f"  Tag for import: {'yes' if self.add_tag_for_import else 'no'}")
        if self.skip_zero_amounts:
            lines.append("  Skip zero amounts: yes")
        return "\n".join(lines)

    def _require_paths(self) -> Tuple[Path, Path]:
        if is_null_or_whitespace(self.input_file):
            raise ConfigurationError("Profile has no input file")
        if is_null_or_whitespace(self.output_path):
            raise ConfigurationError("Profile has no output path")
        return Path(self.input_file), Path(self.output_path)

    def to_export_config(self, records_per_file: int = DEFAULT_RECORDS_PER_FILE) -> ExportConfig:
        input_file, output_path = self._require_paths()
        try:
            fmt = OutputFormat.from_string(self.output_format or "CSV")
        except ValueError as e:
            raise ConfigurationError(str(e)) from e

        def _opt(p: str) -> Optional[Path]:
            return Path(p) if p.strip() else None

        return ExportConfig(
            input_file=input_file,
            output_path=output_path,
            accounts=split_list(self.selected_accounts),
            start_date=parse_date_option(self.start_date, "start"),
            end_date=parse_date_option(self.end_date, "end"),
            output_format=fmt,
            category_map_file=_opt(self.category_map_file),
            payee_map_file=_opt(self.payee_map_file),
            account_map_file=_opt(self.account_map_file),
            tag_map_file=_opt(self.tag_map_file),
            records_per_file=records_per_file,
            add_tag_for_import=self.add_tag_for_import,
            skip_zero_amounts=self.skip_zero_amounts,
        ).validate()

    def to_balance_config(self, records_per_file: int = DEFAULT_RECORDS_PER_FILE) -> BalanceHistoryConfig:
        input_file, output_path = self._require_paths()
        if self.balance_history_opening:
            anchor = BalanceAnchor.from_strings(self.balance_history_value, None)
        else:
            anchor = BalanceAnchor.from_strings(None, self.balance_history_value)
        return BalanceHistoryConfig(
            input_file=input_file,
            output_path=output_path,
            account=self.balance_history_account.strip(),
            anchor=anchor,
            start_date=parse_date_option(self.start_date, "start"),
            end_date=parse_date_option(self.end_date, "end"),
            records_per_file=records_per_file,
        ).validate()


def load_profile(path: Path) -> RunProfile:
    """
    Load a saved profile.

    Unknown keys are kept in ``RunProfile.extra``; missing keys take the
    defaults.

    Raises:
        ConfigurationError: if the file cannot be read or is not a JSON object of options.
    """
    try:
        raw = json.loads(Path(path).read_text(encoding="utf-8"))
    except OSError as e:
        raise ConfigurationError(f"Failed to read profile {path}: {e}") from e
    except json.JSONDecodeError as e:
        raise ConfigurationError(f"Failed to parse profile {path}: {e}") from e
    if not isinstance(raw, dict):
        raise ConfigurationError(f"Profile {path} must contain a JSON object")

    known = {_PROFILE_KEYS[k]: v for k, v in raw.items() if k in _PROFILE_KEYS}
    extra = {k: v for k, v in raw.items() if k not in _PROFILE_KEYS}
    if extra:
        log.info("Ignoring unknown profile keys: %s", ", ".join(sorted(extra)))
    try:
        profile = from_dict(RunProfile, known)
    except (TypeError, ValueError) as e:
        raise ConfigurationError(f"Invalid value in profile {path}: {e}") from e
    profile.extra = extra
    return profile


def save_profile(profile: RunProfile, path: Path) -> Path:
    path = Path(path)
    try:
        path.write_text(json.dumps(profile.to_json_dict(), indent=2) + "\n", encoding="utf-8")
    except OSError as e:
        raise ConfigurationError(f"Failed to write profile {path}: {e}") from e
    return path


# endregion RunProfile

__all__ = [
    "DEFAULT_RECORDS_PER_FILE",
    "BalanceHistoryConfig",
    "ExportConfig",
    "RunProfile",
    "load_profile",
    "parse_date_option",
    "save_profile",
    "split_list",
]
