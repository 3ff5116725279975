from __future__ import annotations

import json
from collections.abc import Mapping, Sequence
from typing import Final

import httpx

from core.models import QueryResult, Row, StoreError

_REST_PREFIX: Final[str] = "/rest/v1"
_SINGLE_OBJECT: Final[str] = "application/vnd.pgrst.object+json"

# httpx raises InvalidURL outside the HTTPError hierarchy.
TRANSPORT_ERRORS: Final = (httpx.HTTPError, httpx.InvalidURL)


class TableStore:
    """Interface for reading and writing rows of a hosted table."""

    async def select_all(self, table: str) -> QueryResult:  # pragma: no cover - interface
        raise NotImplementedError

    async def select_single(
        self, table: str, columns: Sequence[str], filters: Mapping[str, str]
    ) -> QueryResult:  # pragma: no cover - interface
        raise NotImplementedError

    async def insert(
        self, table: str, rows: Sequence[Row]
    ) -> QueryResult:  # pragma: no cover - interface
        raise NotImplementedError


def _error_from_response(resp: httpx.Response) -> StoreError:
    """Build a StoreError from a PostgREST error answer.

    Falls back to the raw body when the answer is not the usual JSON object.
    """
    fallback = StoreError(
        message=resp.text.strip() or f"status {resp.status_code}",
        status_code=resp.status_code,
    )
    try:
        body = json.loads(resp.text)
    except json.JSONDecodeError:
        return fallback
    if not isinstance(body, dict):
        return fallback
    msg = body.get("message")
    return StoreError(
        message=str(msg) if msg else fallback.message,
        code=_opt_str(body.get("code")),
        details=_opt_str(body.get("details")),
        hint=_opt_str(body.get("hint")),
        status_code=resp.status_code,
    )


def _opt_str(value: object) -> str | None:
    return None if value is None else str(value)


def _rows_from(obj: object) -> list[Row] | None:
    if isinstance(obj, dict):
        return [{str(k): v for k, v in obj.items()}]
    if isinstance(obj, list) and all(isinstance(r, dict) for r in obj):
        return [{str(k): v for k, v in r.items()} for r in obj]
    return None


class PostgrestTableStore(TableStore):
    """Table store backed by a hosted PostgREST endpoint (``/rest/v1``).

    HTTP error answers become ``QueryResult.error``; transport failures
    (``TRANSPORT_ERRORS``) propagate to the caller.
    """

    def __init__(self, client: httpx.AsyncClient, base_url: str, api_key: str) -> None:
        self._client = client
        self._base = base_url.rstrip("/") + _REST_PREFIX
        self._key = api_key

    def _headers(self, **extra: str) -> dict[str, str]:
        headers = {"apikey": self._key, "Authorization": f"Bearer {self._key}"}
        headers.update(extra)
        return headers

    def _table_url(self, table: str) -> str:
        return f"{self._base}/{table}"

    def _result(self, resp: httpx.Response) -> QueryResult:
        if not (200 <= resp.status_code < 300):
            return QueryResult(error=_error_from_response(resp))
        try:
            obj = json.loads(resp.text) if resp.text else []
        except json.JSONDecodeError:
            return QueryResult(
                error=StoreError(
                    message="store returned a non-JSON body",
                    status_code=resp.status_code,
                )
            )
        rows = _rows_from(obj)
        if rows is None:
            return QueryResult(
                error=StoreError(
                    message="store returned an unexpected body",
                    status_code=resp.status_code,
                )
            )
        return QueryResult(rows=rows)

    async def select_all(self, table: str) -> QueryResult:
        resp = await self._client.get(
            self._table_url(table), params={"select": "*"}, headers=self._headers()
        )
        return self._result(resp)

    async def select_single(
        self, table: str, columns: Sequence[str], filters: Mapping[str, str]
    ) -> QueryResult:
        params = {"select": ",".join(columns)}
        for column, value in filters.items():
            params[column] = f"eq.{value}"
        resp = await self._client.get(
            self._table_url(table),
            params=params,
            headers=self._headers(Accept=_SINGLE_OBJECT),
        )
        return self._result(resp)

    async def insert(self, table: str, rows: Sequence[Row]) -> QueryResult:
        resp = await self._client.post(
            self._table_url(table),
            json=list(rows),
            headers=self._headers(Prefer="return=representation"),
        )
        return self._result(resp)
