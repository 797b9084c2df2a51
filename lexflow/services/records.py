"""In-memory Record Store.

Holds one immutable tuple per collection. Every mutation builds a new
tuple and swaps it in, so a reader holding a snapshot never observes a
partial update. Only the DataContext mutates the store.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable, Mapping
from typing import Any, Literal

import structlog

from lexflow.models.domain import Case, Client, LegalDocument, Record, Task

logger: structlog.stdlib.BoundLogger = structlog.get_logger()

CollectionName = Literal["clients", "cases", "tasks", "documents"]
COLLECTIONS: tuple[CollectionName, ...] = ("clients", "cases", "tasks", "documents")

Listener = Callable[[CollectionName], None]


class RecordStore:
    """Single source of truth the UI reads from."""

    def __init__(self) -> None:
        self._collections: dict[str, tuple[Record, ...]] = {name: () for name in COLLECTIONS}
        self._listeners: list[Listener] = []
        self.loading = True

    # -- reads -----------------------------------------------------------

    @property
    def clients(self) -> tuple[Client, ...]:
        return self._collections["clients"]  # type: ignore[return-value]

    @property
    def cases(self) -> tuple[Case, ...]:
        return self._collections["cases"]  # type: ignore[return-value]

    @property
    def tasks(self) -> tuple[Task, ...]:
        return self._collections["tasks"]  # type: ignore[return-value]

    @property
    def documents(self) -> tuple[LegalDocument, ...]:
        return self._collections["documents"]  # type: ignore[return-value]

    def snapshot(self, name: CollectionName) -> tuple[Record, ...]:
        return self._collections[name]

    def get(self, name: CollectionName, record_id: str) -> Record | None:
        return next((record for record in self._collections[name] if record.id == record_id), None)

    # -- writes ----------------------------------------------------------

    def replace(self, name: CollectionName, records: Iterable[Record]) -> None:
        self._swap(name, tuple(records))

    def append(self, name: CollectionName, record: Record) -> None:
        self._swap(name, (*self._collections[name], record))

    def merge(
        self, name: CollectionName, record_id: str, fields: Mapping[str, Any]
    ) -> Record | None:
        """Replace the record with ``record_id`` by a copy carrying ``fields``.

        Returns the new record, or None when no record has that id.
        """
        merged: Record | None = None
        records: list[Record] = []
        for record in self._collections[name]:
            if record.id == record_id:
                merged = record.model_copy(update=dict(fields))
                records.append(merged)
            else:
                records.append(record)
        if merged is not None:
            self._swap(name, tuple(records))
        return merged

    def remove(self, name: CollectionName, record_id: str) -> Record | None:
        """Drop the record with ``record_id``; a missing id is a no-op."""
        removed = self.get(name, record_id)
        if removed is not None:
            self._swap(name, tuple(r for r in self._collections[name] if r.id != record_id))
        return removed

    # -- change notification ---------------------------------------------

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Call ``listener`` with the collection name after every change."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _swap(self, name: CollectionName, records: tuple[Record, ...]) -> None:
        self._collections[name] = records
        for listener in list(self._listeners):
            try:
                listener(name)
            except Exception:
                logger.exception("record_listener_failed", collection=name)
