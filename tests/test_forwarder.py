from __future__ import annotations

import asyncio
import json
import logging
from collections.abc import Sequence

import httpx
import pytest

from core.forwarder import RowForwarder
from core.models import ForwardOutcome, QueryResult, Row, StoreError
from core.table_store import TableStore

WEBHOOK = "https://hooks.example.test/webhook/abc"


class _StoreStub(TableStore):
    def __init__(self, result: QueryResult) -> None:
        self._result = result
        self.tables: list[str] = []

    async def select_all(self, table: str) -> QueryResult:
        self.tables.append(table)
        return self._result


class _RaisingStore(TableStore):
    async def select_all(self, table: str) -> QueryResult:
        raise httpx.ConnectError("store unreachable")


class _Webhook:
    def __init__(self, status: int = 200, fail: bool = False) -> None:
        self.status = status
        self.fail = fail
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.fail:
            raise httpx.ConnectError("connection refused", request=request)
        return httpx.Response(self.status, json={"ok": True})


def _forward(
    store: TableStore, hook: _Webhook, *, table: str = "staff", url: str = WEBHOOK
) -> ForwardOutcome:
    async def _run() -> ForwardOutcome:
        async with httpx.AsyncClient(transport=httpx.MockTransport(hook)) as client:
            forwarder = RowForwarder(
                store=store,
                client=client,
                table=table,
                webhook_url=url,
                logger=logging.getLogger(__name__),
            )
            return await forwarder.forward()

    return asyncio.run(_run())


@pytest.mark.parametrize(
    "rows",
    [
        [],
        [{"id": "s1", "name": "Ana", "is_active": True}],
        [
            {"id": "s2", "nested": {"a": [1, 2]}, "rate": 17.5, "note": None},
            {"id": "s1", "name": "Zoë"},
            {"id": "s3"},
        ],
    ],
)
def test_forward_posts_rows_verbatim(rows: Sequence[Row]) -> None:
    store = _StoreStub(QueryResult(rows=list(rows)))
    hook = _Webhook()

    outcome = _forward(store, hook)

    assert outcome.status == "forwarded"
    assert outcome.rows == len(rows)
    assert outcome.response_status == 200
    assert store.tables == ["staff"]
    assert len(hook.requests) == 1
    req = hook.requests[0]
    assert req.method == "POST"
    assert str(req.url) == WEBHOOK
    assert req.headers["content-type"] == "application/json"
    assert "authorization" not in req.headers
    assert json.loads(req.content) == list(rows)


def test_query_error_skips_webhook() -> None:
    store = _StoreStub(
        QueryResult(error=StoreError(message="permission denied", status_code=401))
    )
    hook = _Webhook()

    outcome = _forward(store, hook)

    assert outcome.status == "query_failed"
    assert outcome.error == "permission denied"
    assert hook.requests == []


def test_network_failure_is_caught() -> None:
    store = _StoreStub(QueryResult(rows=[{"id": 1}]))
    hook = _Webhook(fail=True)

    outcome = _forward(store, hook)

    assert outcome.status == "send_failed"
    assert outcome.rows == 1
    assert outcome.error is not None and "connection refused" in outcome.error


def test_non_2xx_answer_is_reported() -> None:
    store = _StoreStub(QueryResult(rows=[{"id": 1}]))
    hook = _Webhook(status=404)

    outcome = _forward(store, hook)

    assert outcome.status == "send_failed"
    assert outcome.response_status == 404
    assert len(hook.requests) == 1


def test_read_transport_failure_is_caught() -> None:
    hook = _Webhook()

    outcome = _forward(_RaisingStore(), hook)

    assert outcome.status == "send_failed"
    assert outcome.error == "store unreachable"
    assert hook.requests == []


def test_missing_webhook_url_makes_no_calls() -> None:
    store = _StoreStub(QueryResult(rows=[{"id": 1}]))
    hook = _Webhook()

    outcome = _forward(store, hook, url="  ")

    assert outcome.status == "config_missing"
    assert store.tables == []
    assert hook.requests == []


def test_forward_logs_status(caplog: pytest.LogCaptureFixture) -> None:
    store = _StoreStub(QueryResult(rows=[{"id": 1}, {"id": 2}]))
    with caplog.at_level(logging.INFO):
        _forward(store, _Webhook(status=202))
    messages = [r.getMessage() for r in caplog.records]
    assert "Fetched 2 rows" in messages
    sent = [r for r in caplog.records if r.getMessage() == "Sent rows to webhook"]
    assert sent and getattr(sent[0], "status_code") == 202


def test_malformed_webhook_url_is_caught() -> None:
    store = _StoreStub(QueryResult(rows=[{"id": 1}]))
    hook = _Webhook()

    outcome = _forward(store, hook, url="http://example.com:abc/hook")

    assert outcome.status == "send_failed"
    assert outcome.rows == 1
    assert outcome.error is not None and "abc" in outcome.error
    assert hook.requests == []
