from __future__ import annotations

import logging
from typing import Final

import httpx

from core.models import ForwardOutcome
from core.table_store import TRANSPORT_ERRORS, TableStore

JSON_HEADERS: Final[dict[str, str]] = {"Content-Type": "application/json"}


class RowForwarder:
    """Fetch every row of one table and relay them to a webhook as a JSON array.

    The run is strictly sequential: the POST is issued only after the read
    resolved. Failures are logged and reported through the returned
    ForwardOutcome; nothing is retried and no exception escapes ``forward``.
    """

    def __init__(
        self,
        *,
        store: TableStore,
        client: httpx.AsyncClient,
        table: str,
        webhook_url: str,
        logger: logging.Logger,
    ) -> None:
        self._store = store
        self._client = client
        self._table = table
        self._webhook_url = webhook_url
        self._logger = logger

    async def forward(self) -> ForwardOutcome:
        if self._table.strip() == "" or self._webhook_url.strip() == "":
            self._logger.error(
                "forwarder configuration missing",
                extra={
                    "table": self._table,
                    "has_url": bool(self._webhook_url.strip()),
                },
            )
            return ForwardOutcome(status="config_missing", error="config_missing")

        fetched = 0
        try:
            result = await self._store.select_all(self._table)
            if result.error is not None:
                self._logger.error(
                    "Table store fetch failed: %s",
                    result.error.message,
                    extra={"table": self._table, "status_code": result.error.status_code},
                )
                return ForwardOutcome(status="query_failed", error=result.error.message)

            rows = result.rows
            fetched = len(rows)
            self._logger.info(
                "Fetched %d rows", fetched, extra={"table": self._table, "rows": fetched}
            )

            resp = await self._client.post(
                self._webhook_url, json=rows, headers=JSON_HEADERS
            )
            resp.raise_for_status()
        except httpx.HTTPStatusError as exc:
            code = exc.response.status_code
            self._logger.error(
                "Webhook rejected rows: %s",
                exc,
                extra={"url": self._webhook_url, "status_code": code},
            )
            return ForwardOutcome(
                status="send_failed", rows=fetched, response_status=code, error=str(exc)
            )
        except TRANSPORT_ERRORS as exc:
            self._logger.error(
                "Forwarding failed: %s", exc, extra={"url": self._webhook_url}
            )
            return ForwardOutcome(status="send_failed", rows=fetched, error=str(exc))

        self._logger.info(
            "Sent rows to webhook",
            extra={"url": self._webhook_url, "status_code": resp.status_code},
        )
        return ForwardOutcome(
            status="forwarded", rows=fetched, response_status=resp.status_code
        )
