from __future__ import annotations

import calendar
from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional


@dataclass(frozen=True)
class MonthWindow:
    """First and last calendar day of a month, both inclusive."""

    start: date
    end: date

    @property
    def days(self) -> int:
        return self.end.day

    def contains(self, day: date) -> bool:
        return self.start <= day <= self.end


def parse_iso_date(value: str) -> date:
    """Parse YYYY-MM-DD string into date."""
    return datetime.strptime(value, "%Y-%m-%d").date()


def now_local() -> datetime:
    """Current local time.

    Note: Wrapped so tests can patch/mocked easier.
    """
    return datetime.now()


def month_start(day: date) -> date:
    return day.replace(day=1)


def days_in_month(month: date) -> int:
    return calendar.monthrange(month.year, month.month)[1]


def month_window(month: date) -> MonthWindow:
    start = month_start(month)
    return MonthWindow(start=start, end=start.replace(day=days_in_month(start)))


def shift_month(month: date, delta: int) -> date:
    """Move by ``delta`` months, clamped to the first and last month ``date`` can hold."""
    index = month.year * 12 + (month.month - 1) + delta
    lowest = date.min.year * 12
    highest = date.max.year * 12 + 11
    index = min(max(index, lowest), highest)
    return date(index // 12, index % 12 + 1, 1)


def parse_month(value: Optional[str], *, today: Optional[date] = None) -> date:
    """Parse ``YYYY-MM`` into the first day of that month.

    Missing or malformed values fall back to the current month.
    """
    today = today or now_local().date()
    if value:
        try:
            return datetime.strptime(value.strip(), "%Y-%m").date()
        except ValueError:
            pass
    return month_start(today)


def format_month_param(month: date) -> str:
    return month.strftime("%Y-%m")


def format_month_label(month: date) -> str:
    return f"{calendar.month_name[month.month]} {month.year}"


def is_current_month(month: date, *, now: Optional[datetime] = None) -> bool:
    now = now or now_local()
    return month.year == now.year and month.month == now.month
