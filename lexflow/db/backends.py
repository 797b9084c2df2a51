"""Backend selection.

A Backend bundles the four collection repositories behind one interface.
Which implementation is used is decided once, at startup, from the
settings; ``Backend.remote`` is the capability flag the rest of the
package reads and it never changes afterwards.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

import structlog

from lexflow.db.mappers import CASE_MAPPER, CLIENT_MAPPER, DOCUMENT_MAPPER, TASK_MAPPER
from lexflow.db.repositories import LocalRepository, RemoteRepository, TimestampIdGenerator
from lexflow.models.domain import Case, Client, LegalDocument, Task
from lexflow.seed import SEED_CASES, SEED_CLIENTS, SEED_DOCUMENTS, SEED_TASKS
from lexflow.services.table_client import TableClient

if TYPE_CHECKING:
    import httpx

    from lexflow.core.config import Settings
    from lexflow.db.local_storage import LocalStorage
    from lexflow.db.repositories import Repository

logger: structlog.stdlib.BoundLogger = structlog.get_logger()


@dataclass
class Backend:
    """The selected storage strategy for all four collections."""

    remote: bool
    clients: Repository[Client]
    cases: Repository[Case]
    tasks: Repository[Task]
    documents: Repository[LegalDocument]
    table_client: TableClient | None = field(default=None, repr=False)

    async def close(self) -> None:
        if self.table_client is not None:
            await self.table_client.close()


def remote_backend(client: TableClient) -> Backend:
    return Backend(
        remote=True,
        clients=RemoteRepository(CLIENT_MAPPER, client),
        cases=RemoteRepository(CASE_MAPPER, client),
        tasks=RemoteRepository(TASK_MAPPER, client),
        documents=RemoteRepository(DOCUMENT_MAPPER, client),
        table_client=client,
    )


def local_backend(settings: Settings, storage: LocalStorage) -> Backend:
    """Local-store backend; collections fall back to the seed dataset."""
    prefix = settings.storage_key_prefix
    new_id = TimestampIdGenerator()
    return Backend(
        remote=False,
        clients=LocalRepository(Client, storage, f"{prefix}clients", SEED_CLIENTS, new_id),
        cases=LocalRepository(Case, storage, f"{prefix}cases", SEED_CASES, new_id),
        tasks=LocalRepository(Task, storage, f"{prefix}tasks", SEED_TASKS, new_id),
        documents=LocalRepository(
            LegalDocument, storage, f"{prefix}documents", SEED_DOCUMENTS, new_id
        ),
    )


def select_backend(
    settings: Settings,
    *,
    storage: LocalStorage,
    http_client: httpx.AsyncClient | None = None,
) -> Backend:
    """Pick the remote backend when it is configured, else the local store."""
    if settings.remote_backend_configured:
        logger.info("backend_selected", backend="remote", url=settings.supabase_url)
        return remote_backend(TableClient(settings, http_client=http_client))
    logger.info("backend_selected", backend="local", storage=settings.local_storage_url)
    return local_backend(settings, storage)
