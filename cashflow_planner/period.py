"""Calendar month being planned."""

from __future__ import annotations

import calendar
from dataclasses import dataclass
from datetime import date
from typing import List, Optional

MONTH_NAMES = [
    'January', 'February', 'March', 'April', 'May', 'June',
    'July', 'August', 'September', 'October', 'November', 'December',
]

KEY_PREFIX = 'cashflow'


@dataclass(frozen=True, order=True)
class Period:
    year: int
    month: int  # 1..12

    def __post_init__(self) -> None:
        if not 1 <= self.month <= 12:
            raise ValueError(f"Month must be between 1 and 12, got {self.month}")

    @classmethod
    def current(cls, today: Optional[date] = None) -> 'Period':
        today = today or date.today()
        return cls(today.year, today.month)

    @classmethod
    def from_key(cls, key: str) -> 'Period':
        """Parse a storage key such as ``cashflow-2025-03``."""
        prefix, year, month = key.split('-')
        if prefix != KEY_PREFIX:
            raise ValueError(f"Not a period key: {key!r}")
        return cls(int(year), int(month))

    @property
    def start(self) -> date:
        return date(self.year, self.month, 1)

    @property
    def end(self) -> date:
        return date(self.year, self.month, calendar.monthrange(self.year, self.month)[1])

    @property
    def key(self) -> str:
        return f"{KEY_PREFIX}-{self.year:04d}-{self.month:02d}"

    @property
    def label(self) -> str:
        return f"{MONTH_NAMES[self.month - 1]} {self.year}"

    def contains(self, day: date) -> bool:
        return self.start <= day <= self.end

    def previous(self) -> 'Period':
        if self.month == 1:
            return Period(self.year - 1, 12)
        return Period(self.year, self.month - 1)

    def next(self) -> 'Period':
        if self.month == 12:
            return Period(self.year + 1, 1)
        return Period(self.year, self.month + 1)


def selectable_years(today: Optional[date] = None, span: int = 5) -> List[int]:
    """Years offered by the month picker: last year and the following ones."""
    current_year = (today or date.today()).year
    return [current_year - 1 + offset for offset in range(span)]
