"""Repository protocol shared by the remote and local backends."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Protocol, TypeVar

from lexflow.models.domain import Record

RecordT = TypeVar("RecordT", bound=Record)


class Repository(Protocol[RecordT]):
    """Row store for one record collection.

    Field mappings passed to ``insert`` and ``update`` are keyed by
    attribute name and hold already-validated values.
    """

    async def load_all(self) -> list[RecordT]:
        """Return every record, oldest first."""
        ...

    async def insert(self, fields: Mapping[str, Any]) -> RecordT:
        """Store a new record and return it with its assigned id."""
        ...

    async def update(self, record_id: str, fields: Mapping[str, Any]) -> None:
        """Write only the supplied fields of an existing record."""
        ...

    async def delete(self, record_id: str) -> None:
        ...
