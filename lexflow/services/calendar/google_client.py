"""Async Google Calendar v3 client.

Creates, updates and deletes all-day events on the user's primary
calendar using a cached bearer token. An HTTP 401 invalidates the cached
token immediately so later calls short-circuit until the user reconnects.
"""

from __future__ import annotations

from datetime import date, timedelta
from typing import TYPE_CHECKING, Any, Protocol

import httpx
import structlog
from pydantic import BaseModel, ConfigDict

from lexflow.core.exceptions import (
    CalendarAuthError,
    CalendarError,
    CalendarNotConfiguredError,
    CalendarNotConnectedError,
)

if TYPE_CHECKING:
    from lexflow.core.config import Settings
    from lexflow.services.calendar.credentials import CredentialStore

logger: structlog.stdlib.BoundLogger = structlog.get_logger()

PRIMARY_EVENTS_PATH = "/calendars/primary/events"
REMINDER_OVERRIDES: tuple[dict[str, Any], ...] = (
    {"method": "email", "minutes": 24 * 60},
    {"method": "popup", "minutes": 60},
)


def next_day(day: str) -> str:
    """``YYYY-MM-DD`` of the following day; all-day events end exclusively."""
    return (date.fromisoformat(day) + timedelta(days=1)).isoformat()


class CalendarEvent(BaseModel):
    """An all-day event as mirrored from a case or task."""

    model_config = ConfigDict(frozen=True)

    summary: str
    description: str = ""
    start: str
    end: str | None = None
    color_id: str = "1"

    def to_payload(self, *, with_reminders: bool = True) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "summary": self.summary,
            "description": self.description,
            "start": {"date": self.start},
            "end": {"date": self.end or next_day(self.start)},
            "colorId": self.color_id,
        }
        if with_reminders:
            payload["reminders"] = {
                "useDefault": False,
                "overrides": [dict(override) for override in REMINDER_OVERRIDES],
            }
        return payload


class TokenProvider(Protocol):
    """Runs the interactive OAuth consent and returns ``(access_token, expires_in)``."""

    async def __call__(self, client_id: str, scope: str) -> tuple[str, int]: ...


class GoogleCalendarClient:
    """Async HTTP client for the Google Calendar events API."""

    def __init__(
        self,
        settings: Settings,
        credentials: CredentialStore,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        self._base_url = settings.google_calendar_api_url.rstrip("/")
        self._client_id = settings.google_client_id
        self._scope = settings.google_calendar_scope
        self._credentials = credentials
        self._client = http_client or httpx.AsyncClient(timeout=settings.http_timeout)
        self._owns_client = http_client is None

    async def close(self) -> None:
        """Close the underlying HTTP client if we own it."""
        if self._owns_client:
            await self._client.aclose()

    @property
    def is_configured(self) -> bool:
        return bool(self._client_id)

    def is_connected(self) -> bool:
        """True when configured and holding an unexpired token."""
        return self.is_configured and self._credentials.is_connected()

    async def connect(self, token_provider: TokenProvider) -> str:
        """Obtain a token through ``token_provider`` and cache it."""
        if not self.is_configured:
            msg = "Google Calendar client id is not configured"
            raise CalendarNotConfiguredError(msg)
        token, expires_in = await token_provider(self._client_id, self._scope)
        self._credentials.store(token, expires_in)
        logger.info("calendar_connected")
        return token

    def disconnect(self) -> None:
        self._credentials.clear()

    async def _request(
        self,
        method: str,
        path: str,
        payload: dict[str, Any] | None = None,
    ) -> dict[str, Any] | None:
        token = self._credentials.get_token()
        if token is None:
            msg = "Not authenticated with Google Calendar. Please connect first."
            raise CalendarNotConnectedError(msg)

        try:
            response = await self._client.request(
                method,
                f"{self._base_url}{path}",
                json=payload,
                headers={"Authorization": f"Bearer {token}"},
            )
        except httpx.TransportError as exc:
            msg = f"Calendar API connection error: {exc}"
            raise CalendarError(msg) from exc

        if response.status_code == 401:
            self._credentials.clear()
            msg = "Google Calendar session expired. Please reconnect."
            raise CalendarAuthError(msg, details={"path": path})

        if response.is_error:
            try:
                body = response.json()
            except ValueError:
                body = None
            error = body.get("error") if isinstance(body, dict) else None
            message = error.get("message") if isinstance(error, dict) else None
            msg = message or f"Calendar API error: {response.status_code}"
            raise CalendarError(msg, details={"path": path, "status_code": response.status_code})

        if response.status_code == 204 or not response.content:
            return None
        data: dict[str, Any] = response.json()
        return data

    async def create_event(self, event: CalendarEvent) -> str:
        """Create an event and return its id."""
        result = await self._request("POST", PRIMARY_EVENTS_PATH, event.to_payload())
        event_id = (result or {}).get("id")
        if not event_id:
            msg = "Calendar API returned no event id"
            raise CalendarError(msg)
        logger.info("calendar_event_created", event_id=event_id, start=event.start)
        return str(event_id)

    async def update_event(self, event_id: str, event: CalendarEvent) -> str:
        """Patch an existing event; if that fails, create a fresh one instead."""
        try:
            result = await self._request(
                "PATCH",
                f"{PRIMARY_EVENTS_PATH}/{event_id}",
                event.to_payload(with_reminders=False),
            )
        except CalendarError as exc:
            logger.warning("calendar_event_update_failed", event_id=event_id, error=exc.message)
            return await self.create_event(event)
        logger.info("calendar_event_updated", event_id=event_id, start=event.start)
        return str((result or {}).get("id") or event_id)

    async def delete_event(self, event_id: str) -> None:
        """Delete an event. An already-deleted event is not an error."""
        try:
            await self._request("DELETE", f"{PRIMARY_EVENTS_PATH}/{event_id}")
        except CalendarError as exc:
            if exc.details.get("status_code") in (404, 410):
                logger.debug("calendar_event_already_gone", event_id=event_id)
                return
            raise
        logger.info("calendar_event_deleted", event_id=event_id)

    async def sync_event(self, event_id: str | None, event: CalendarEvent) -> str:
        """Update the event when an id is known, else create one."""
        if event_id:
            return await self.update_event(event_id, event)
        return await self.create_event(event)
