"""Client-side filtering over Record Store snapshots.

Pure functions: they take the tuples the store exposes and return new
tuples. Text matching is case-insensitive substring matching.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from datetime import date, timedelta

from lexflow.models.domain import (
    NOT_SCHEDULED,
    Case,
    CaseStatus,
    Client,
    LegalDocument,
    Task,
    TaskPriority,
    TaskStatus,
)

WORKPLACES: tuple[str, ...] = ("Ghatampur Court", "Mati court", "Kanpur Court")
OTHER_WORKPLACE = "Other Places"


def _contains(haystack: str | None, needle: str) -> bool:
    if not needle:
        return True
    return bool(haystack) and needle in str(haystack).lower()


def search_clients(clients: Iterable[Client], text: str = "") -> tuple[Client, ...]:
    needle = text.lower()
    return tuple(c for c in clients if _contains(c.name, needle) or _contains(c.email, needle))


def search_cases(
    cases: Iterable[Case],
    text: str = "",
    status: CaseStatus | str | None = None,
) -> tuple[Case, ...]:
    """Match title, case number, client name, act/section or police station."""
    needle = text.lower()
    matches = []
    for case in cases:
        if status is not None and case.status != status:
            continue
        if needle and not any(
            _contains(value, needle)
            for value in (
                case.title,
                case.case_number,
                case.client_name,
                case.act_section,
                case.police_station,
            )
        ):
            continue
        matches.append(case)
    return tuple(matches)


def search_tasks(tasks: Iterable[Task], text: str = "") -> tuple[Task, ...]:
    needle = text.lower()
    return tuple(
        t
        for t in tasks
        if any(_contains(value, needle) for value in (t.title, t.case_id, t.assignee))
    )


def tasks_by_status(tasks: Iterable[Task]) -> dict[TaskStatus, tuple[Task, ...]]:
    """Kanban columns, always containing every status in board order."""
    columns: dict[TaskStatus, list[Task]] = {status: [] for status in TaskStatus}
    for task in tasks:
        try:
            status = TaskStatus(task.status)
        except ValueError:
            continue
        columns[status].append(task)
    return {status: tuple(items) for status, items in columns.items()}


def search_documents(
    documents: Iterable[LegalDocument], text: str = ""
) -> tuple[LegalDocument, ...]:
    needle = text.lower()
    return tuple(
        d
        for d in documents
        if _contains(d.name, needle) or any(_contains(tag, needle) for tag in d.tags)
    )


def documents_for_case(
    documents: Iterable[LegalDocument], case_id: str
) -> tuple[LegalDocument, ...]:
    return tuple(d for d in documents if d.case_id == case_id)


def documents_for_client(
    documents: Iterable[LegalDocument], client_id: str
) -> tuple[LegalDocument, ...]:
    return tuple(d for d in documents if d.client_id == client_id)


def cases_for_client(cases: Iterable[Case], client_id: str) -> tuple[Case, ...]:
    return tuple(c for c in cases if c.client_id == client_id)


def _in_workplace(value: str, workplace: str) -> bool:
    lowered = value.lower()
    if workplace == OTHER_WORKPLACE:
        return not any(known.lower() in lowered for known in WORKPLACES)
    return workplace.lower() in lowered


def items_for_workplace(
    cases: Iterable[Case], tasks: Iterable[Task], workplace: str
) -> tuple[tuple[Case, ...], tuple[Task, ...]]:
    """Cases and tasks at ``workplace``; cases without a workplace fall back to their court.

    ``OTHER_WORKPLACE`` collects everything that matches none of ``WORKPLACES``.
    """
    matched_cases = tuple(
        c
        for c in cases
        if (c.workplace or c.court) and _in_workplace(c.workplace or c.court, workplace)
    )
    matched_tasks = tuple(t for t in tasks if t.workplace and _in_workplace(t.workplace, workplace))
    return matched_cases, matched_tasks


def upcoming_hearings(cases: Iterable[Case], limit: int | None = 3) -> tuple[Case, ...]:
    """Cases with a scheduled hearing, earliest first."""
    scheduled = sorted(
        (c for c in cases if c.next_hearing and c.next_hearing != NOT_SCHEDULED),
        key=lambda c: c.next_hearing,
    )
    return tuple(scheduled if limit is None else scheduled[:limit])


@dataclass(frozen=True)
class DashboardStats:
    active_cases: int
    pending_tasks: int
    high_priority_tasks: tuple[Task, ...]
    todays_listings: tuple[Case, ...]
    tomorrows_listings: tuple[Case, ...]
    upcoming_hearings: tuple[Case, ...]

    @property
    def next_hearing(self) -> Case | None:
        return self.upcoming_hearings[0] if self.upcoming_hearings else None


def dashboard_stats(cases: Iterable[Case], tasks: Iterable[Task], today: date) -> DashboardStats:
    cases = tuple(cases)
    tasks = tuple(tasks)
    today_iso = today.isoformat()
    tomorrow_iso = (today + timedelta(days=1)).isoformat()
    open_statuses = (CaseStatus.OPEN, CaseStatus.PENDING)
    return DashboardStats(
        active_cases=sum(1 for c in cases if c.status in open_statuses),
        pending_tasks=sum(1 for t in tasks if t.status != TaskStatus.DONE),
        high_priority_tasks=tuple(
            t for t in tasks if t.priority == TaskPriority.HIGH and t.status != TaskStatus.DONE
        ),
        todays_listings=tuple(c for c in cases if c.next_hearing == today_iso),
        tomorrows_listings=tuple(c for c in cases if c.next_hearing == tomorrow_iso),
        upcoming_hearings=upcoming_hearings(cases),
    )
