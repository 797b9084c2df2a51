"""Shared test fixtures and factory functions.

Factories return valid domain objects with sensible defaults. Override
any field via keyword arguments to create specific test scenarios
without repeating boilerplate.

The remote table service and the Google Calendar API are replaced by
in-process fakes served through httpx.MockTransport, so no test ever
leaves the process.
"""

from __future__ import annotations

import json
from collections.abc import AsyncIterator, Iterator
from typing import Any

import httpx
import pytest

from lexflow.core.config import Settings
from lexflow.db.local_storage import LocalStorage
from lexflow.models.domain import (
    Case,
    CaseStatus,
    Client,
    ClientCategory,
    ClientStatus,
    HearingEntry,
    LegalDocument,
    Task,
    TaskPriority,
    TaskStatus,
)
from lexflow.services.calendar.credentials import CredentialStore

TABLE_SERVICE_URL = "https://lexflow-test.supabase.co"
EVENTS_PATH = "/calendar/v3/calendars/primary/events"

# ---------------------------------------------------------------------------
# Settings / storage
# ---------------------------------------------------------------------------


@pytest.fixture
def test_settings(tmp_path) -> Settings:
    """Local-only settings with a per-test sqlite file and a calendar client id."""
    return Settings(
        _env_file=None,
        supabase_url="",
        supabase_anon_key="",
        google_client_id="test-client-id.apps.googleusercontent.com",
        local_storage_url=f"sqlite:///{tmp_path / 'lexflow.db'}",
        log_format="console",
        log_level="DEBUG",
    )


@pytest.fixture
def remote_settings(test_settings: Settings) -> Settings:
    """Settings with the remote table service configured."""
    return test_settings.model_copy(
        update={"supabase_url": TABLE_SERVICE_URL, "supabase_anon_key": "test-anon-key"}
    )


@pytest.fixture
def storage(test_settings: Settings) -> Iterator[LocalStorage]:
    store = LocalStorage.from_settings(test_settings)
    yield store
    store.close()


@pytest.fixture
def calendar_token(storage: LocalStorage) -> str:
    """Cache a valid calendar credential so the mirror is connected."""
    token = "test-access-token"
    CredentialStore(storage).store(token, 3600)
    return token


# ---------------------------------------------------------------------------
# Fake remote table service
# ---------------------------------------------------------------------------


class FakeTableService:
    """Minimal PostgREST stand-in: four tables, ids assigned on insert."""

    def __init__(self, tables: dict[str, list[dict[str, Any]]] | None = None) -> None:
        self.tables: dict[str, list[dict[str, Any]]] = {
            name: [] for name in ("clients", "cases", "tasks", "documents")
        }
        for name, rows in (tables or {}).items():
            self.tables[name] = [dict(row) for row in rows]
        self.requests: list[httpx.Request] = []
        self.failures: dict[str, int] = {}
        self._next_id = 1000

    def fail(self, method: str, status_code: int = 500) -> None:
        self.failures[method] = status_code

    def requests_for(self, method: str) -> list[httpx.Request]:
        return [r for r in self.requests if r.method == method]

    def handle(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if request.method in self.failures:
            return httpx.Response(self.failures[request.method], json={"message": "boom"})

        table = request.url.path.rsplit("/", 1)[-1]
        rows = self.tables.setdefault(table, [])

        if request.method == "GET":
            return httpx.Response(200, json=rows)

        if request.method == "POST":
            self._next_id += 1
            stored = {"id": self._next_id, **json.loads(request.content)}
            rows.append(stored)
            return httpx.Response(201, json=[stored])

        row_id = request.url.params["id"].removeprefix("eq.")
        if request.method == "PATCH":
            for row in rows:
                if str(row["id"]) == row_id:
                    row.update(json.loads(request.content))
            return httpx.Response(204)

        if request.method == "DELETE":
            self.tables[table] = [row for row in rows if str(row["id"]) != row_id]
            return httpx.Response(204)

        return httpx.Response(405)


@pytest.fixture
def table_service() -> FakeTableService:
    return FakeTableService()


@pytest.fixture
async def table_http_client(table_service: FakeTableService) -> AsyncIterator[httpx.AsyncClient]:
    async with httpx.AsyncClient(transport=httpx.MockTransport(table_service.handle)) as client:
        yield client


# ---------------------------------------------------------------------------
# Fake Google Calendar
# ---------------------------------------------------------------------------


class FakeCalendarService:
    """Stand-in for the events collection of the primary calendar."""

    def __init__(self) -> None:
        self.events: dict[str, dict[str, Any]] = {}
        self.requests: list[httpx.Request] = []
        self.failures: dict[str, int] = {}
        self._counter = 0

    def fail(self, method: str, status_code: int = 500) -> None:
        self.failures[method] = status_code

    def requests_for(self, method: str) -> list[httpx.Request]:
        return [r for r in self.requests if r.method == method]

    def handle(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if request.method in self.failures:
            status_code = self.failures[request.method]
            return httpx.Response(
                status_code,
                json={"error": {"code": status_code, "message": "calendar failure"}},
            )

        path = request.url.path
        if request.method == "POST" and path == EVENTS_PATH:
            self._counter += 1
            event_id = f"evt{self._counter}"
            self.events[event_id] = json.loads(request.content)
            return httpx.Response(200, json={"id": event_id, **self.events[event_id]})

        event_id = path.rsplit("/", 1)[-1]
        if event_id not in self.events:
            return httpx.Response(404, json={"error": {"code": 404, "message": "Not Found"}})

        if request.method == "PATCH":
            self.events[event_id].update(json.loads(request.content))
            return httpx.Response(200, json={"id": event_id, **self.events[event_id]})

        if request.method == "DELETE":
            del self.events[event_id]
            return httpx.Response(204)

        return httpx.Response(405)


@pytest.fixture
def calendar_service() -> FakeCalendarService:
    return FakeCalendarService()


@pytest.fixture
async def calendar_http_client(
    calendar_service: FakeCalendarService,
) -> AsyncIterator[httpx.AsyncClient]:
    async with httpx.AsyncClient(transport=httpx.MockTransport(calendar_service.handle)) as client:
        yield client


# ---------------------------------------------------------------------------
# Domain model factories
# ---------------------------------------------------------------------------


def make_client(**overrides: object) -> Client:
    """Build a valid Client with sensible defaults."""
    defaults: dict[str, object] = {
        "id": "c1",
        "name": "Rajesh Kumar",
        "email": "rajesh.k@example.com",
        "phone": "+91 98765 43210",
        "category": ClientCategory.INDIVIDUAL,
        "status": ClientStatus.ACTIVE,
        "last_contact": "2024-03-01",
    }
    defaults.update(overrides)
    return Client(**defaults)  # type: ignore[arg-type]


def make_hearing_entry(**overrides: object) -> HearingEntry:
    """Build a valid HearingEntry with sensible defaults."""
    defaults: dict[str, object] = {
        "id": "h1",
        "date": "2024-02-10",
        "purpose": "Arguments",
        "next_hearing_date": "2024-03-15",
        "notes": "Adjourned at request of respondent",
    }
    defaults.update(overrides)
    return HearingEntry(**defaults)  # type: ignore[arg-type]


def make_case(**overrides: object) -> Case:
    """Build a valid Case with sensible defaults."""
    defaults: dict[str, object] = {
        "id": "101",
        "case_number": "CIV/2024/452",
        "title": "Kumar vs. State",
        "client_id": "c1",
        "client_name": "Rajesh Kumar",
        "court": "Kanpur Court",
        "case_type": "Civil Litigation",
        "status": CaseStatus.OPEN,
        "next_hearing": "2024-03-15",
    }
    defaults.update(overrides)
    return Case(**defaults)  # type: ignore[arg-type]


def make_task(**overrides: object) -> Task:
    """Build a valid Task with sensible defaults."""
    defaults: dict[str, object] = {
        "id": "t1",
        "title": "File affidavit",
        "case_id": "101",
        "due_date": "2024-03-10",
        "priority": TaskPriority.HIGH,
        "status": TaskStatus.TODO,
        "assignee": "Adv. Sharma",
    }
    defaults.update(overrides)
    return Task(**defaults)  # type: ignore[arg-type]


def make_document(**overrides: object) -> LegalDocument:
    """Build a valid LegalDocument with sensible defaults."""
    defaults: dict[str, object] = {
        "id": "d1",
        "name": "Vakilnama_Kumar.pdf",
        "file_type": "PDF",
        "size": "1.20 MB",
        "upload_date": "2024-03-01",
        "case_id": "101",
        "tags": ("Vakilnama", "Legal"),
    }
    defaults.update(overrides)
    return LegalDocument(**defaults)  # type: ignore[arg-type]


def make_case_row(**overrides: object) -> dict[str, Any]:
    """A cases-table row as the remote service returns it."""
    row: dict[str, Any] = {
        "id": 101,
        "case_number": "CIV/2024/452",
        "title": "Kumar vs. State",
        "client_id": "c1",
        "client_name": "Rajesh Kumar",
        "court": "Kanpur Court",
        "type": "Civil Litigation",
        "status": "Open",
        "next_hearing": "2024-03-15",
        "created_at": "2024-01-01T00:00:00+00:00",
    }
    row.update(overrides)
    return row
