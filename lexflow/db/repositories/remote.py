"""Repository over a remote table.

All access to a hosted table is encapsulated here. The table row returned
by an insert is taken as ground truth for the new record.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import TYPE_CHECKING, Any, Generic

from lexflow.db.repositories.base import RecordT

if TYPE_CHECKING:
    from lexflow.db.mappers import RowMapper
    from lexflow.services.table_client import TableClient


class RemoteRepository(Generic[RecordT]):
    """Async repository for one remote table."""

    def __init__(self, mapper: RowMapper[RecordT], client: TableClient) -> None:
        self._mapper = mapper
        self._client = client

    @property
    def table(self) -> str:
        return self._mapper.table

    async def load_all(self) -> list[RecordT]:
        rows = await self._client.select_all(self.table)
        return [self._mapper.from_remote_row(row) for row in rows]

    async def insert(self, fields: Mapping[str, Any]) -> RecordT:
        row = self._mapper.to_remote_row(fields)
        row.pop("id", None)
        inserted = await self._client.insert(self.table, row)
        return self._mapper.from_remote_row(inserted)

    async def update(self, record_id: str, fields: Mapping[str, Any]) -> None:
        """Map only the supplied fields so unrelated columns are left alone."""
        row = self._mapper.to_remote_row(fields)
        row.pop("id", None)
        await self._client.update(self.table, record_id, row)

    async def delete(self, record_id: str) -> None:
        await self._client.delete(self.table, record_id)
