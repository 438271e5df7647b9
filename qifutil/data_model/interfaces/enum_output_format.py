from __future__ import annotations

from enum import Enum


class OutputFormat(Enum):
    """
    Target format of the transaction export.

    MONARCH is CSV with the default Monarch Money column list.
    """

    CSV = "CSV"
    JSON = "JSON"
    XML = "XML"
    MONARCH = "MONARCH"

    @classmethod
    def from_string(cls, value: str) -> "OutputFormat":
        try:
            return cls(value.strip().upper())
        except ValueError:
            choices = ", ".join(f.value for f in cls)
            raise ValueError(f"Unknown output format {value!r}; expected one of {choices}") from None

    @property
    def extension(self) -> str:
        if self is OutputFormat.JSON:
            return ".json"
        if self is OutputFormat.XML:
            return ".xml"
        return ".csv"

    @property
    def is_csv(self) -> bool:
        return self in (OutputFormat.CSV, OutputFormat.MONARCH)
