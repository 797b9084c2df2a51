"""Durable string-keyed storage with a browser ``localStorage``-shaped API.

Used for the local fallback backend (one key per collection) and for the
cached calendar credential. Every call is its own short transaction.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import structlog
from sqlalchemy import delete, select
from sqlalchemy.exc import SQLAlchemyError

from lexflow.core.exceptions import StorageError
from lexflow.db.session import create_engine, create_session_factory, get_session
from lexflow.models.database import StorageItemRow

if TYPE_CHECKING:
    from sqlalchemy import Engine

    from lexflow.core.config import Settings

logger: structlog.stdlib.BoundLogger = structlog.get_logger()


class LocalStorage:
    """Synchronous key-value store backed by a single SQL table."""

    def __init__(self, engine: Engine) -> None:
        self._engine = engine
        self._session_factory = create_session_factory(engine)

    @classmethod
    def from_settings(cls, settings: Settings) -> LocalStorage:
        return cls(create_engine(settings))

    def get_item(self, key: str) -> str | None:
        """Return the stored value for ``key``, or None when absent."""
        try:
            with get_session(self._session_factory) as session:
                row = session.get(StorageItemRow, key)
                return row.value if row is not None else None
        except SQLAlchemyError as exc:
            msg = f"Failed to read local storage key {key!r}"
            raise StorageError(msg, details={"key": key}) from exc

    def set_item(self, key: str, value: str) -> None:
        """Overwrite the value stored under ``key``."""
        try:
            with get_session(self._session_factory) as session:
                row = session.get(StorageItemRow, key)
                if row is None:
                    session.add(StorageItemRow(key=key, value=value))
                else:
                    row.value = value
        except SQLAlchemyError as exc:
            msg = f"Failed to write local storage key {key!r}"
            raise StorageError(msg, details={"key": key}) from exc
        logger.debug("local_storage_written", key=key, size=len(value))

    def remove_item(self, key: str) -> None:
        try:
            with get_session(self._session_factory) as session:
                session.execute(delete(StorageItemRow).where(StorageItemRow.key == key))
        except SQLAlchemyError as exc:
            msg = f"Failed to remove local storage key {key!r}"
            raise StorageError(msg, details={"key": key}) from exc

    def keys(self) -> list[str]:
        try:
            with get_session(self._session_factory) as session:
                result = session.execute(
                    select(StorageItemRow.key).order_by(StorageItemRow.key)
                )
                return list(result.scalars().all())
        except SQLAlchemyError as exc:
            raise StorageError("Failed to list local storage keys") from exc

    def clear(self) -> None:
        try:
            with get_session(self._session_factory) as session:
                session.execute(delete(StorageItemRow))
        except SQLAlchemyError as exc:
            raise StorageError("Failed to clear local storage") from exc
        logger.info("local_storage_cleared")

    def close(self) -> None:
        self._engine.dispose()
