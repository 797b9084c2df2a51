"""End-to-end tests for DataContext against the remote table service.

The table service and Google Calendar are both served in-process through
httpx.MockTransport. Covers the remote write path, failure atomicity of
the Record Store, event-id write-back, and the startup fallback to the
local store when the remote read fails.
"""

from __future__ import annotations

import json
from typing import TYPE_CHECKING

import pytest

from lexflow.core.exceptions import BackendError
from lexflow.models.domain import CaseStatus, TaskPriority
from lexflow.seed import SEED_CLIENTS
from lexflow.services.data_context import DataContext
from tests.conftest import FakeCalendarService, FakeTableService, make_case_row

if TYPE_CHECKING:
    from collections.abc import AsyncIterator

    import httpx

    from lexflow.core.config import Settings
    from lexflow.db.local_storage import LocalStorage

pytestmark = pytest.mark.integration


NEW_CASE = {
    "case_number": "CR/2024/77",
    "title": "State vs. Verma",
    "client_id": "1",
    "client_name": "Rajesh Kumar",
    "court": "Kanpur Court",
    "case_type": "Criminal",
}


@pytest.fixture
def table_service() -> FakeTableService:
    return FakeTableService(
        {
            "clients": [{"id": 1, "name": "Rajesh Kumar", "type": "Individual"}],
            "cases": [make_case_row(id=101)],
            "tasks": [
                {"id": 11, "title": "File affidavit", "priority": "High", "status": "To Do"},
            ],
            "documents": [],
        }
    )


@pytest.fixture
async def context(
    remote_settings: Settings,
    storage: LocalStorage,
    table_http_client: httpx.AsyncClient,
    calendar_http_client: httpx.AsyncClient,
) -> AsyncIterator[DataContext]:
    ctx = DataContext.create(
        remote_settings,
        storage=storage,
        http_client=table_http_client,
        calendar_http_client=calendar_http_client,
    )
    await ctx.load()
    yield ctx
    await ctx.aclose()


# ===================================================================
# Loading
# ===================================================================


class TestLoad:
    async def test_loads_remote_rows(self, context: DataContext):
        assert context.remote_ready is True
        assert [c.id for c in context.store.clients] == ["1"]
        assert context.store.cases[0].case_type == "Civil Litigation"
        assert context.store.tasks[0].priority is TaskPriority.HIGH
        assert context.store.documents == ()

    async def test_remote_failure_falls_back_to_local(
        self,
        remote_settings: Settings,
        storage: LocalStorage,
        table_service: FakeTableService,
        table_http_client: httpx.AsyncClient,
    ):
        table_service.fail("GET", 503)
        ctx = DataContext.create(remote_settings, storage=storage, http_client=table_http_client)
        try:
            await ctx.load()

            assert ctx.store.loading is False
            assert ctx.store.clients == SEED_CLIENTS
            assert ctx.remote_ready is True
        finally:
            await ctx.aclose()

    async def test_writes_after_fallback_still_go_remote(
        self,
        remote_settings: Settings,
        storage: LocalStorage,
        table_service: FakeTableService,
        table_http_client: httpx.AsyncClient,
    ):
        table_service.fail("GET", 503)
        ctx = DataContext.create(remote_settings, storage=storage, http_client=table_http_client)
        try:
            await ctx.load()
            client = await ctx.add_client({"name": "Sunita Devi"})
        finally:
            await ctx.aclose()

        assert client.id == "1001"
        assert table_service.tables["clients"][-1]["name"] == "Sunita Devi"
        assert storage.get_item("lexflow_clients") is None


# ===================================================================
# Writes
# ===================================================================


class TestWrites:
    async def test_add_uses_server_row(
        self, context: DataContext, table_service: FakeTableService
    ):
        case = await context.add_case({**NEW_CASE, "next_hearing": "-"})

        assert case.id == "1001"
        assert case.status is CaseStatus.OPEN
        sent = json.loads(table_service.requests_for("POST")[0].content)
        assert sent["type"] == "Criminal"
        assert "id" not in sent
        assert context.store.cases[-1] == case

    async def test_update_sends_only_changed_columns(
        self, context: DataContext, table_service: FakeTableService
    ):
        await context.update_case("101", {"status": "Pending", "total_fees": "25000"})

        (patch,) = table_service.requests_for("PATCH")
        assert patch.url.params["id"] == "eq.101"
        assert json.loads(patch.content) == {"status": "Pending", "total_fees": "25000"}
        case = context.store.get("cases", "101")
        assert case is not None
        assert case.status is CaseStatus.PENDING
        assert case.title == "Kumar vs. State"

    async def test_delete(self, context: DataContext, table_service: FakeTableService):
        await context.delete_task("11")
        assert context.store.tasks == ()
        assert table_service.tables["tasks"] == []

    async def test_failed_insert_leaves_store_unchanged(
        self, context: DataContext, table_service: FakeTableService
    ):
        table_service.fail("POST", 500)
        before = context.store.cases

        with pytest.raises(BackendError):
            await context.add_case(NEW_CASE)

        assert context.store.cases is before

    async def test_failed_update_leaves_store_unchanged(
        self, context: DataContext, table_service: FakeTableService
    ):
        table_service.fail("PATCH", 500)
        before = context.store.tasks

        with pytest.raises(BackendError):
            await context.update_task("11", {"title": "Renamed"})

        assert context.store.tasks is before

    async def test_failed_delete_leaves_store_unchanged(
        self, context: DataContext, table_service: FakeTableService
    ):
        table_service.fail("DELETE", 500)
        with pytest.raises(BackendError):
            await context.delete_client("1")
        assert [c.id for c in context.store.clients] == ["1"]

    async def test_failed_update_makes_no_calendar_calls(
        self,
        context: DataContext,
        table_service: FakeTableService,
        calendar_service: FakeCalendarService,
        calendar_token: str,
    ):
        table_service.fail("PATCH", 500)
        with pytest.raises(BackendError):
            await context.update_case("101", {"next_hearing": "2024-05-01"})
        assert calendar_service.requests == []


# ===================================================================
# Calendar event-id write-back
# ===================================================================


class TestEventIdWriteBack:
    async def test_new_case_event_id_written_to_table(
        self,
        context: DataContext,
        table_service: FakeTableService,
        calendar_token: str,
    ):
        case = await context.add_case({**NEW_CASE, "next_hearing": "2024-03-15"})
        await context.wait_for_background()

        (patch,) = table_service.requests_for("PATCH")
        assert patch.url.params["id"] == f"eq.{case.id}"
        assert json.loads(patch.content) == {"google_calendar_event_id": "evt1"}
        stored = context.store.get("cases", case.id)
        assert stored is not None
        assert stored.google_calendar_event_id == "evt1"

    async def test_write_back_failure_is_contained(
        self,
        context: DataContext,
        table_service: FakeTableService,
        calendar_service: FakeCalendarService,
        calendar_token: str,
    ):
        table_service.fail("PATCH", 500)

        case = await context.add_case({**NEW_CASE, "next_hearing": "2024-03-15"})
        await context.wait_for_background()

        assert list(calendar_service.events) == ["evt1"]
        stored = context.store.get("cases", case.id)
        assert stored is not None
        assert stored.google_calendar_event_id is None

    async def test_reschedule_creates_then_records_event(
        self,
        context: DataContext,
        table_service: FakeTableService,
        calendar_token: str,
    ):
        updated = await context.update_case("101", {"next_hearing": "2024-05-01"})

        patches = [json.loads(r.content) for r in table_service.requests_for("PATCH")]
        assert patches == [
            {"next_hearing": "2024-05-01"},
            {"google_calendar_event_id": "evt1"},
        ]
        assert updated is not None
        assert updated.google_calendar_event_id == "evt1"
        assert table_service.tables["cases"][0]["google_calendar_event_id"] == "evt1"

    async def test_task_title_change_resyncs_existing_event(
        self,
        context: DataContext,
        table_service: FakeTableService,
        calendar_service: FakeCalendarService,
        calendar_token: str,
    ):
        await context.update_task("11", {"due_date": "2024-03-20"})
        await context.update_task("11", {"title": "File rejoinder"})

        assert list(calendar_service.events) == ["evt1"]
        assert calendar_service.events["evt1"]["summary"] == "🔴 Task: File rejoinder"
        assert len(table_service.requests_for("PATCH")) == 3
