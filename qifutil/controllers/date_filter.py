# qifutil/controllers/date_filter.py
from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Optional

from qifutil.errors import ConfigurationError


@dataclass(frozen=True)
class DateRange:
    """Inclusive ``[start, end]`` window; a missing bound is unbounded."""

    start: Optional[date] = None
    end: Optional[date] = None

    def __post_init__(self) -> None:
        if self.start and self.end and self.end < self.start:
            raise ConfigurationError(
                f"End date {self.end.isoformat()} is before start date {self.start.isoformat()}"
            )

    @property
    def is_unbounded(self) -> bool:
        return self.start is None and self.end is None

    def admits(self, iso_date: str) -> bool:
        """
        True when ``iso_date`` (``YYYY-MM-DD``) lies inside the window.

        Raises:
            ValueError: if ``iso_date`` is not a valid date.
        """
        d = date.fromisoformat(iso_date)
        if self.start and d < self.start:
            return False
        if self.end and d > self.end:
            return False
        return True

    def describe(self) -> str:
        start = self.start.isoformat() if self.start else "earliest"
        end = self.end.isoformat() if self.end else "latest"
        return f"{start} to {end}"
