"""Cached Google Calendar access token.

The bearer token and its expiry (epoch milliseconds) are kept in local
storage so a reconnect is only needed once the token lapses or the API
rejects it.
"""

from __future__ import annotations

import time
from collections.abc import Callable
from typing import TYPE_CHECKING

import structlog

if TYPE_CHECKING:
    from lexflow.db.local_storage import LocalStorage

logger: structlog.stdlib.BoundLogger = structlog.get_logger()

TOKEN_KEY = "gcal_access_token"
TOKEN_EXPIRY_KEY = "gcal_token_expiry"


class CredentialStore:
    def __init__(self, storage: LocalStorage, clock: Callable[[], float] = time.time) -> None:
        self._storage = storage
        self._clock = clock

    def _now_ms(self) -> int:
        return int(self._clock() * 1000)

    def get_token(self) -> str | None:
        """Return the cached token if it has not expired yet."""
        token = self._storage.get_item(TOKEN_KEY)
        expiry = self._storage.get_item(TOKEN_EXPIRY_KEY)
        if not token or not expiry:
            return None
        try:
            expires_at = int(expiry)
        except ValueError:
            return None
        return token if self._now_ms() < expires_at else None

    def store(self, token: str, expires_in_seconds: int) -> None:
        self._storage.set_item(TOKEN_KEY, token)
        self._storage.set_item(TOKEN_EXPIRY_KEY, str(self._now_ms() + expires_in_seconds * 1000))
        logger.info("calendar_token_stored", expires_in=expires_in_seconds)

    def clear(self) -> None:
        self._storage.remove_item(TOKEN_KEY)
        self._storage.remove_item(TOKEN_EXPIRY_KEY)
        logger.info("calendar_token_cleared")

    def is_connected(self) -> bool:
        return self.get_token() is not None
