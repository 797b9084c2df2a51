"""Repository over the local durable store.

Each collection lives under one storage key as a JSON array. The
repository keeps the current collection in memory and rewrites the whole
array on every mutation; there are no incremental writes.
"""

from __future__ import annotations

import json
import time
from collections.abc import Mapping, Sequence
from typing import TYPE_CHECKING, Any, Generic

import structlog
from pydantic import TypeAdapter, ValidationError

from lexflow.core.exceptions import StorageError
from lexflow.db.repositories.base import RecordT

if TYPE_CHECKING:
    from lexflow.db.local_storage import LocalStorage

logger: structlog.stdlib.BoundLogger = structlog.get_logger()


class TimestampIdGenerator:
    """Millisecond-timestamp ids, strictly increasing within the process.

    Two inserts in the same millisecond get consecutive values, so an id is
    never handed out twice even after the record holding it is deleted.
    """

    def __init__(self) -> None:
        self._last = 0

    def __call__(self) -> str:
        now = time.time_ns() // 1_000_000
        self._last = max(now, self._last + 1)
        return str(self._last)


class LocalRepository(Generic[RecordT]):
    """Whole-collection JSON persistence for one record type."""

    def __init__(
        self,
        model: type[RecordT],
        storage: LocalStorage,
        key: str,
        seed: Sequence[RecordT] = (),
        id_generator: TimestampIdGenerator | None = None,
    ) -> None:
        self._model = model
        self._storage = storage
        self._key = key
        self._seed = tuple(seed)
        self._new_id = id_generator or TimestampIdGenerator()
        self._adapter: TypeAdapter[list[RecordT]] = TypeAdapter(
            list[model]  # type: ignore[valid-type]
        )
        self._records: tuple[RecordT, ...] | None = None

    @property
    def key(self) -> str:
        return self._key

    def _read(self) -> tuple[RecordT, ...]:
        try:
            raw = self._storage.get_item(self._key)
        except StorageError:
            logger.exception("local_collection_read_failed", key=self._key)
            return self._seed
        if raw is None:
            logger.info("local_collection_seeded", key=self._key, count=len(self._seed))
            return self._seed
        try:
            return tuple(self._adapter.validate_json(raw))
        except ValidationError:
            logger.warning("local_collection_unparsable", key=self._key)
            return self._seed

    def _current(self) -> tuple[RecordT, ...]:
        """The stored collection; read on first use so writes never start from the seed."""
        if self._records is None:
            self._records = self._read()
        return self._records

    def _persist(self, records: tuple[RecordT, ...]) -> None:
        payload = json.dumps(
            [record.model_dump(mode="json", by_alias=True) for record in records],
            ensure_ascii=False,
        )
        self._storage.set_item(self._key, payload)
        self._records = records

    async def load_all(self) -> list[RecordT]:
        self._records = self._read()
        return list(self._records)

    async def insert(self, fields: Mapping[str, Any]) -> RecordT:
        values = {name: value for name, value in fields.items() if name != "id"}
        record = self._model.model_validate({**values, "id": self._new_id()})
        self._persist((*self._current(), record))
        return record

    async def update(self, record_id: str, fields: Mapping[str, Any]) -> None:
        records = self._current()
        if not any(record.id == record_id for record in records):
            logger.debug("local_update_missing", key=self._key, record_id=record_id)
            return
        changes = {name: value for name, value in fields.items() if name != "id"}
        self._persist(
            tuple(
                record.model_copy(update=changes) if record.id == record_id else record
                for record in records
            )
        )

    async def delete(self, record_id: str) -> None:
        records = self._current()
        remaining = tuple(record for record in records if record.id != record_id)
        if len(remaining) == len(records):
            return
        self._persist(remaining)
