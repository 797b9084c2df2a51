"""Best-effort mirroring of hearing dates and task deadlines to Google Calendar.

One date per record is mirrored: a case's next hearing, a task's deadline
(falling back to its due date). Every failure is caught and logged here;
nothing raised by the calendar ever reaches the record write path.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import structlog

from lexflow.models.domain import NOT_SCHEDULED, TaskPriority
from lexflow.services.calendar.google_client import CalendarEvent

if TYPE_CHECKING:
    from lexflow.models.domain import Case, Task
    from lexflow.services.calendar.google_client import GoogleCalendarClient

logger: structlog.stdlib.BoundLogger = structlog.get_logger()

HEARING_COLOR = "9"
PRIORITY_COLORS = {TaskPriority.HIGH.value: "11", TaskPriority.MEDIUM.value: "5"}
PRIORITY_GLYPHS = {TaskPriority.HIGH.value: "🔴", TaskPriority.MEDIUM.value: "🟡"}
DEFAULT_PRIORITY_COLOR = "2"
DEFAULT_PRIORITY_GLYPH = "🟢"


def _is_scheduled(day: str | None) -> bool:
    return bool(day) and day != NOT_SCHEDULED


def build_case_event(case: Case) -> CalendarEvent | None:
    """Event for a case's next hearing, or None when no hearing is scheduled."""
    if not _is_scheduled(case.next_hearing):
        return None
    lines = [
        f"Case No: {case.case_number}" if case.case_number else "",
        f"Court: {case.court}" if case.court else "",
        f"Client: {case.client_name}" if case.client_name else "",
        f"CNR: {case.cnr_number}" if case.cnr_number else "",
        (
            f"{case.first_party} vs {case.opposite_party}"
            if case.first_party and case.opposite_party
            else ""
        ),
    ]
    return CalendarEvent(
        summary=f"⚖️ Hearing: {case.title or 'Case Hearing'}",
        description="\n".join(line for line in lines if line),
        start=case.next_hearing,
        color_id=HEARING_COLOR,
    )


def build_task_event(task: Task) -> CalendarEvent | None:
    """Event for a task's deadline (or due date), or None when it has neither."""
    day = task.calendar_date
    if not _is_scheduled(day):
        return None
    priority = str(task.priority or "")
    lines = [
        f"Priority: {priority}",
        f"Assignee: {task.assignee}" if task.assignee else "",
        f"Working Day: {task.working_day}" if task.working_day else "",
    ]
    glyph = PRIORITY_GLYPHS.get(priority, DEFAULT_PRIORITY_GLYPH)
    return CalendarEvent(
        summary=f"{glyph} Task: {task.title or 'Task'}",
        description="\n".join(line for line in lines if line),
        start=day,
        color_id=PRIORITY_COLORS.get(priority, DEFAULT_PRIORITY_COLOR),
    )


class CalendarMirror:
    """Replicates record dates to the calendar without ever raising."""

    def __init__(self, client: GoogleCalendarClient) -> None:
        self._client = client

    @property
    def client(self) -> GoogleCalendarClient:
        return self._client

    def is_connected(self) -> bool:
        try:
            return self._client.is_connected()
        except Exception:
            logger.exception("calendar_connection_check_failed")
            return False

    async def _sync(
        self,
        event: CalendarEvent | None,
        existing_event_id: str | None,
        *,
        kind: str,
        record_id: str | None,
    ) -> str | None:
        if event is None:
            return None
        try:
            event_id = await self._client.sync_event(existing_event_id, event)
        except Exception as exc:
            logger.warning(
                "calendar_sync_failed",
                kind=kind,
                record_id=record_id,
                error=str(exc),
            )
            return None
        logger.info("calendar_synced", kind=kind, record_id=record_id, event_id=event_id)
        return event_id

    async def sync_case(self, case: Case, existing_event_id: str | None = None) -> str | None:
        """Mirror a case's next hearing. Returns the event id, or None if nothing was mirrored."""
        if not self.is_connected():
            return None
        try:
            event = build_case_event(case)
        except Exception:
            logger.exception("calendar_event_build_failed", kind="case", record_id=case.id)
            return None
        return await self._sync(event, existing_event_id, kind="case", record_id=case.id)

    async def sync_task(self, task: Task, existing_event_id: str | None = None) -> str | None:
        """Mirror a task's deadline. Returns the event id, or None if nothing was mirrored."""
        if not self.is_connected():
            return None
        try:
            event = build_task_event(task)
        except Exception:
            logger.exception("calendar_event_build_failed", kind="task", record_id=task.id)
            return None
        return await self._sync(event, existing_event_id, kind="task", record_id=task.id)

    async def delete_event(self, event_id: str) -> None:
        if not event_id or not self.is_connected():
            return
        try:
            await self._client.delete_event(event_id)
        except Exception as exc:
            logger.warning("calendar_delete_failed", event_id=event_id, error=str(exc))
