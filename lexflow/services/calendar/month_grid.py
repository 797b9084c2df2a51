"""Month-view grid generation for the calendar screen.

The grid is always six Sunday-first weeks (42 cells): trailing days of the
previous month, every day of the requested month, then leading days of the
next month.
"""

from __future__ import annotations

import calendar
from collections.abc import Iterable
from dataclasses import dataclass
from datetime import date, timedelta

from lexflow.models.domain import Case, Task

GRID_CELLS = 42


@dataclass(frozen=True)
class DayCell:
    day: date
    is_current_month: bool

    @property
    def iso(self) -> str:
        return self.day.isoformat()


@dataclass(frozen=True)
class DayItems:
    cases: tuple[Case, ...]
    tasks: tuple[Task, ...]


def build_month_grid(year: int, month: int) -> list[DayCell]:
    """Return the 42 cells shown for ``year``/``month`` (month is 1-12)."""
    first = date(year, month, 1)
    # date.weekday() is Monday=0; shift so Sunday opens the week.
    leading = (first.weekday() + 1) % 7
    start = first - timedelta(days=leading)
    _, days_in_month = calendar.monthrange(year, month)
    last = first + timedelta(days=days_in_month - 1)
    return [
        DayCell(day=day, is_current_month=first <= day <= last)
        for day in (start + timedelta(days=offset) for offset in range(GRID_CELLS))
    ]


def shift_month(year: int, month: int, delta: int) -> tuple[int, int]:
    """Move ``delta`` months forward (or back) from ``year``/``month``."""
    index = year * 12 + (month - 1) + delta
    return index // 12, index % 12 + 1


def items_for_date(cases: Iterable[Case], tasks: Iterable[Task], day: date | str) -> DayItems:
    """Cases with a hearing and tasks with a deadline or due date on ``day``."""
    key = day.isoformat() if isinstance(day, date) else day
    return DayItems(
        cases=tuple(case for case in cases if case.next_hearing == key),
        tasks=tuple(task for task in tasks if task.deadline == key or task.due_date == key),
    )
