"""Clock capability for time-relative reports."""

from __future__ import annotations

from calendar import monthrange
from dataclasses import dataclass
from datetime import date
from typing import Protocol


class Clock(Protocol):
    """Anything that can tell the current calendar date."""

    def today(self) -> date:  # pragma: no cover - interface
        ...


class SystemClock:
    """Reads the local system date."""

    def today(self) -> date:
        return date.today()


@dataclass(frozen=True, slots=True)
class FixedClock:
    """Always reports the same date; used by tests and historical reports."""

    current: date

    def today(self) -> date:
        return self.current


def shift_months(day: date, months: int) -> date:
    """Move ``day`` by ``months`` calendar months, clamping the day of month."""

    index = day.year * 12 + (day.month - 1) + months
    year, month = divmod(index, 12)
    month += 1
    last_day = monthrange(year, month)[1]
    return date(year, month, min(day.day, last_day))
