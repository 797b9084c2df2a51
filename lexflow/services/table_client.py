"""Async client for the hosted table service (PostgREST dialect).

Exposes the four row operations the repositories need: select all rows
ordered by creation time, insert one row returning it, update by id with
a partial column set, and delete by id. Only the read is retried;
writes are sent exactly once so a failed insert can never be duplicated.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

import httpx
import structlog
from tenacity import (
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from lexflow.core.exceptions import BackendError

if TYPE_CHECKING:
    from lexflow.core.config import Settings

logger: structlog.stdlib.BoundLogger = structlog.get_logger()


class TableClient:
    """Async HTTP client for a PostgREST-style table API.

    Features:
    - Row-level CRUD keyed on the ``id`` column
    - Exponential backoff retry on transport errors for reads
    - Structured logging for all API interactions
    """

    def __init__(self, settings: Settings, http_client: httpx.AsyncClient | None = None) -> None:
        self._base_url = settings.supabase_url.rstrip("/") + settings.supabase_rest_path
        self._api_key = settings.supabase_anon_key
        self._client = http_client or httpx.AsyncClient(timeout=settings.http_timeout)
        self._owns_client = http_client is None

    async def close(self) -> None:
        """Close the underlying HTTP client if we own it."""
        if self._owns_client:
            await self._client.aclose()

    def _headers(self, *, prefer: str | None = None) -> dict[str, str]:
        headers: dict[str, str] = {
            "apikey": self._api_key,
            "Authorization": f"Bearer {self._api_key}",
            "Accept": "application/json",
        }
        if prefer:
            headers["Prefer"] = prefer
        return headers

    def _url(self, table: str) -> str:
        return f"{self._base_url}/{table}"

    async def _request(
        self,
        method: str,
        table: str,
        *,
        params: dict[str, str] | None = None,
        json: Any = None,
        prefer: str | None = None,
    ) -> httpx.Response:
        logger.debug("table_request", method=method, table=table, params=params)
        try:
            response = await self._client.request(
                method,
                self._url(table),
                params=params,
                json=json,
                headers=self._headers(prefer=prefer),
            )
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            msg = f"Table service error on {method} {table}: {exc.response.status_code}"
            raise BackendError(
                msg,
                status_code=exc.response.status_code,
                details={"table": table, "body": exc.response.text[:500]},
            ) from exc
        except httpx.TransportError as exc:
            msg = f"Table service connection error: {exc}"
            raise BackendError(msg, details={"table": table}) from exc
        return response

    @retry(
        retry=retry_if_exception_type(httpx.TransportError),
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=1, min=1, max=10),
        reraise=True,
    )
    async def _get_rows(self, table: str) -> list[dict[str, Any]]:
        response = await self._client.get(
            self._url(table),
            params={"select": "*", "order": "created_at.asc"},
            headers=self._headers(),
        )
        response.raise_for_status()
        data: list[dict[str, Any]] = response.json()
        return data

    async def select_all(self, table: str) -> list[dict[str, Any]]:
        """Fetch every row of ``table`` ordered by creation time."""
        try:
            rows = await self._get_rows(table)
        except httpx.HTTPStatusError as exc:
            msg = f"Table service error on GET {table}: {exc.response.status_code}"
            raise BackendError(msg, status_code=exc.response.status_code) from exc
        except httpx.TransportError as exc:
            msg = f"Table service connection error: {exc}"
            raise BackendError(msg, details={"table": table}) from exc
        except ValueError as exc:
            msg = f"Table service returned malformed rows for {table}"
            raise BackendError(msg, details={"table": table}) from exc

        logger.info("table_rows_fetched", table=table, count=len(rows))
        return rows

    async def insert(self, table: str, row: dict[str, Any]) -> dict[str, Any]:
        """Insert one row and return it as stored, including its assigned id."""
        response = await self._request("POST", table, json=row, prefer="return=representation")
        payload = response.json()
        inserted = payload[0] if isinstance(payload, list) and payload else payload
        if not isinstance(inserted, dict):
            msg = f"Table service returned no row for insert into {table}"
            raise BackendError(msg, details={"table": table})
        return inserted

    async def update(self, table: str, row_id: str, row: dict[str, Any]) -> None:
        """Update the given columns of the row with ``row_id``."""
        if not row:
            return
        await self._request(
            "PATCH",
            table,
            params={"id": f"eq.{row_id}"},
            json=row,
            prefer="return=minimal",
        )

    async def delete(self, table: str, row_id: str) -> None:
        await self._request("DELETE", table, params={"id": f"eq.{row_id}"})
