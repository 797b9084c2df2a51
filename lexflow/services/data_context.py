"""CRUD orchestration over the selected backend and the Record Store.

DataContext is the one object the UI talks to. It is constructed once per
process (``DataContext.create``) and owns:
  1. the Backend chosen at startup (remote table service or local store)
  2. the RecordStore the UI renders from
  3. the CalendarMirror that copies hearing and deadline dates to Google

Write path: validate -> backend write -> Record Store update. The store is
only touched after the backend write succeeded, so a failed write leaves
it exactly as it was and the error propagates to the caller. Calendar
mirroring never raises into this path.
"""

from __future__ import annotations

import asyncio
from collections.abc import Coroutine, Mapping
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, cast

import structlog

from lexflow.core.config import get_settings
from lexflow.core.exceptions import BackendError, LexflowError
from lexflow.core.logging import record_context
from lexflow.db.backends import local_backend, select_backend
from lexflow.db.local_storage import LocalStorage
from lexflow.models.domain import Case, Client, LegalDocument, Record, Task, validate_partial
from lexflow.services.calendar.credentials import CredentialStore
from lexflow.services.calendar.google_client import GoogleCalendarClient
from lexflow.services.calendar.mirror import CalendarMirror
from lexflow.services.documents import export_content
from lexflow.services.records import RecordStore

if TYPE_CHECKING:
    import httpx

    from lexflow.core.config import Settings
    from lexflow.db.backends import Backend
    from lexflow.db.repositories import Repository
    from lexflow.services.calendar.google_client import TokenProvider
    from lexflow.services.records import CollectionName

logger: structlog.stdlib.BoundLogger = structlog.get_logger()

EVENT_ID_FIELD = "google_calendar_event_id"


@dataclass(frozen=True)
class _Collection:
    name: CollectionName
    model: type[Record]
    calendar_fields: frozenset[str] = frozenset()

    @property
    def mirrored(self) -> bool:
        return bool(self.calendar_fields)


CLIENTS = _Collection("clients", Client)
CASES = _Collection("cases", Case, frozenset({"next_hearing"}))
TASKS = _Collection("tasks", Task, frozenset({"deadline", "due_date", "title"}))
DOCUMENTS = _Collection("documents", LegalDocument)


class DataContext:
    """Record Store plus the operations that are allowed to change it."""

    def __init__(
        self,
        settings: Settings,
        backend: Backend,
        *,
        storage: LocalStorage,
        mirror: CalendarMirror,
        store: RecordStore | None = None,
        owns_storage: bool = False,
    ) -> None:
        self._settings = settings
        self._backend = backend
        self._storage = storage
        self._mirror = mirror
        self._owns_storage = owns_storage
        self.store = store or RecordStore()
        self._background: set[asyncio.Task[None]] = set()

        self.calendar_connecting = False
        self.calendar_error: str | None = None

    @classmethod
    def create(
        cls,
        settings: Settings | None = None,
        *,
        storage: LocalStorage | None = None,
        http_client: httpx.AsyncClient | None = None,
        calendar_http_client: httpx.AsyncClient | None = None,
    ) -> DataContext:
        """Wire a context from settings, selecting the backend once.

        Without explicit ``settings`` the process-wide ``get_settings()`` is used.
        """
        if settings is None:
            settings = get_settings()
        owns_storage = storage is None
        storage = storage or LocalStorage.from_settings(settings)
        backend = select_backend(settings, storage=storage, http_client=http_client)
        calendar = GoogleCalendarClient(
            settings, CredentialStore(storage), http_client=calendar_http_client
        )
        return cls(
            settings,
            backend,
            storage=storage,
            mirror=CalendarMirror(calendar),
            owns_storage=owns_storage,
        )

    # ------------------------------------------------------------------
    # Capabilities
    # ------------------------------------------------------------------

    @property
    def remote_ready(self) -> bool:
        """Whether writes go to the remote table service."""
        return self._backend.remote

    @property
    def backend(self) -> Backend:
        return self._backend

    @property
    def mirror(self) -> CalendarMirror:
        return self._mirror

    @property
    def calendar_connected(self) -> bool:
        return self._mirror.is_connected()

    # ------------------------------------------------------------------
    # Loading
    # ------------------------------------------------------------------

    async def load(self) -> None:
        """Populate the store from the backend, falling back to local storage."""
        self.store.loading = True
        try:
            try:
                await self._load_from(self._backend)
            except BackendError:
                if not self._backend.remote:
                    raise
                logger.exception("remote_load_failed")
                await self._load_from(local_backend(self._settings, self._storage))
        finally:
            self.store.loading = False

    async def _load_from(self, backend: Backend) -> None:
        clients, cases, tasks, documents = await asyncio.gather(
            backend.clients.load_all(),
            backend.cases.load_all(),
            backend.tasks.load_all(),
            backend.documents.load_all(),
        )
        self.store.replace("clients", clients)
        self.store.replace("cases", cases)
        self.store.replace("tasks", tasks)
        self.store.replace("documents", documents)
        logger.info(
            "records_loaded",
            remote=backend.remote,
            clients=len(clients),
            cases=len(cases),
            tasks=len(tasks),
            documents=len(documents),
        )

    # ------------------------------------------------------------------
    # Generic CRUD
    # ------------------------------------------------------------------

    def _repository(self, collection: _Collection) -> Repository[Any]:
        repository: Repository[Any] = getattr(self._backend, collection.name)
        return repository

    @staticmethod
    def _draft(collection: _Collection, fields: Mapping[str, Any]) -> dict[str, Any]:
        """Validate a new record's fields; returns the non-empty attributes minus the id."""
        values = validate_partial(collection.model, fields)
        values.pop("id", None)
        draft = collection.model.model_validate({**values, "id": ""})
        return {
            name: getattr(draft, name)
            for name in collection.model.model_fields
            if name != "id" and getattr(draft, name) is not None
        }

    async def _add(self, collection: _Collection, fields: Mapping[str, Any]) -> Record:
        with record_context(collection.name):
            draft = self._draft(collection, fields)
            record = await self._repository(collection).insert(draft)
            self.store.append(collection.name, record)
            logger.info("record_added", record_id=record.id)

            if collection.mirrored:
                with record_context(collection.name, record.id):
                    self._spawn(self._mirror_new_record(collection, record))
        return record

    async def _update(
        self,
        collection: _Collection,
        record_id: str,
        fields: Mapping[str, Any],
    ) -> Record | None:
        with record_context(collection.name, record_id):
            values = validate_partial(collection.model, fields)
            values.pop("id", None)
            existing = self.store.get(collection.name, record_id)
            repository = self._repository(collection)

            await repository.update(record_id, values)

            if existing is not None and collection.calendar_fields & values.keys():
                current_event_id = getattr(existing, EVENT_ID_FIELD, None)
                merged = existing.model_copy(update=values)
                event_id = await self._sync_calendar(collection, merged, current_event_id)
                if event_id and event_id != current_event_id:
                    try:
                        await repository.update(record_id, {EVENT_ID_FIELD: event_id})
                    except LexflowError:
                        logger.exception("calendar_event_id_persist_failed")
                    else:
                        values[EVENT_ID_FIELD] = event_id

            updated = self.store.merge(collection.name, record_id, values)
            if updated is None:
                logger.warning("record_update_missing")
            else:
                logger.info("record_updated", fields=sorted(values))
        return updated

    async def _delete(self, collection: _Collection, record_id: str) -> None:
        with record_context(collection.name, record_id):
            existing = self.store.get(collection.name, record_id)
            await self._repository(collection).delete(record_id)
            self.store.remove(collection.name, record_id)
            logger.info("record_deleted")

            event_id = getattr(existing, EVENT_ID_FIELD, None)
            if event_id:
                self._spawn(self._mirror.delete_event(event_id))

    # ------------------------------------------------------------------
    # Calendar mirroring
    # ------------------------------------------------------------------

    async def _sync_calendar(
        self,
        collection: _Collection,
        record: Record,
        existing_event_id: str | None,
    ) -> str | None:
        if collection is CASES:
            return await self._mirror.sync_case(cast(Case, record), existing_event_id)
        if collection is TASKS:
            return await self._mirror.sync_task(cast(Task, record), existing_event_id)
        return None

    async def _mirror_new_record(self, collection: _Collection, record: Record) -> None:
        """Background completion for ``add``: mirror, then persist the event id best-effort."""
        event_id = await self._sync_calendar(collection, record, None)
        if not event_id:
            return
        try:
            await self._repository(collection).update(record.id, {EVENT_ID_FIELD: event_id})
        except LexflowError:
            logger.exception("calendar_event_id_persist_failed")
            return
        self.store.merge(collection.name, record.id, {EVENT_ID_FIELD: event_id})

    def _spawn(self, coro: Coroutine[Any, Any, None]) -> None:
        """Run ``coro`` detached from the caller; failures are logged, never raised."""

        async def guarded() -> None:
            try:
                await coro
            except Exception:
                logger.exception("background_task_failed")

        task = asyncio.create_task(guarded())
        self._background.add(task)
        task.add_done_callback(self._background.discard)

    async def wait_for_background(self) -> None:
        """Wait until every detached calendar task has finished."""
        while self._background:
            await asyncio.gather(*list(self._background))

    async def connect_calendar(self, token_provider: TokenProvider) -> bool:
        """Run the OAuth flow through ``token_provider``; failures land in ``calendar_error``."""
        self.calendar_connecting = True
        self.calendar_error = None
        try:
            await self._mirror.client.connect(token_provider)
        except Exception as exc:
            logger.warning("calendar_connect_failed", error=str(exc))
            self.calendar_error = str(exc) or "Failed to connect Google Calendar"
            return False
        finally:
            self.calendar_connecting = False
        return True

    def disconnect_calendar(self) -> None:
        self._mirror.client.disconnect()

    # ------------------------------------------------------------------
    # Clients
    # ------------------------------------------------------------------

    async def add_client(self, fields: Mapping[str, Any]) -> Client:
        return cast(Client, await self._add(CLIENTS, fields))

    async def update_client(self, client_id: str, fields: Mapping[str, Any]) -> Client | None:
        return cast("Client | None", await self._update(CLIENTS, client_id, fields))

    async def delete_client(self, client_id: str) -> None:
        await self._delete(CLIENTS, client_id)

    # ------------------------------------------------------------------
    # Cases
    # ------------------------------------------------------------------

    async def add_case(self, fields: Mapping[str, Any]) -> Case:
        """Create a case; its hearing is mirrored to the calendar in the background."""
        return cast(Case, await self._add(CASES, fields))

    async def update_case(self, case_id: str, fields: Mapping[str, Any]) -> Case | None:
        """Write the given fields; a changed ``next_hearing`` re-syncs the calendar first."""
        return cast("Case | None", await self._update(CASES, case_id, fields))

    async def delete_case(self, case_id: str) -> None:
        await self._delete(CASES, case_id)

    # ------------------------------------------------------------------
    # Tasks
    # ------------------------------------------------------------------

    async def add_task(self, fields: Mapping[str, Any]) -> Task:
        return cast(Task, await self._add(TASKS, fields))

    async def update_task(self, task_id: str, fields: Mapping[str, Any]) -> Task | None:
        return cast("Task | None", await self._update(TASKS, task_id, fields))

    async def delete_task(self, task_id: str) -> None:
        await self._delete(TASKS, task_id)

    # ------------------------------------------------------------------
    # Documents
    # ------------------------------------------------------------------

    async def add_document(self, fields: Mapping[str, Any]) -> LegalDocument:
        return cast(LegalDocument, await self._add(DOCUMENTS, fields))

    async def update_document(
        self, document_id: str, fields: Mapping[str, Any]
    ) -> LegalDocument | None:
        return cast("LegalDocument | None", await self._update(DOCUMENTS, document_id, fields))

    async def delete_document(self, document_id: str) -> None:
        await self._delete(DOCUMENTS, document_id)

    def export_document(self, document: LegalDocument) -> bytes:
        return export_content(document)

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    async def aclose(self) -> None:
        """Drain background work and release owned clients."""
        await self.wait_for_background()
        await self._backend.close()
        await self._mirror.client.close()
        if self._owns_storage:
            self._storage.close()
