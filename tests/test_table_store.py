from __future__ import annotations

import asyncio
import json
from collections.abc import Awaitable, Callable

import httpx
import pytest

from core.models import QueryResult
from core.table_store import PostgrestTableStore

Handler = Callable[[httpx.Request], httpx.Response]


def _run(
    handler: Handler, call: Callable[[PostgrestTableStore], Awaitable[QueryResult]]
) -> QueryResult:
    async def _go() -> QueryResult:
        async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as client:
            store = PostgrestTableStore(client, "https://proj.example.test/", "anon-key")
            return await call(store)

    return asyncio.run(_go())


def test_select_all_requests_every_column() -> None:
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json=[{"id": 1}, {"id": 2}])

    result = _run(handler, lambda s: s.select_all("staff"))

    assert result.error is None
    assert result.rows == [{"id": 1}, {"id": 2}]
    req = seen[0]
    assert req.method == "GET"
    assert req.url.path == "/rest/v1/staff"
    assert req.url.params["select"] == "*"
    assert req.headers["apikey"] == "anon-key"
    assert req.headers["authorization"] == "Bearer anon-key"


def test_select_all_maps_error_body() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(
            404,
            json={
                "code": "42P01",
                "message": 'relation "public.nope" does not exist',
                "details": None,
                "hint": None,
            },
        )

    result = _run(handler, lambda s: s.select_all("nope"))

    assert result.rows == []
    assert result.error is not None
    assert result.error.code == "42P01"
    assert result.error.status_code == 404
    assert "does not exist" in result.error.message


@pytest.mark.parametrize("body", ["<html>bad gateway</html>", ""])
def test_select_all_non_json_error(body: str) -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(502, text=body)

    result = _run(handler, lambda s: s.select_all("staff"))

    assert result.error is not None
    assert result.error.status_code == 502
    assert result.error.message in {body, "status 502"}


def test_select_all_unexpected_success_body() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json="not rows")

    result = _run(handler, lambda s: s.select_all("staff"))

    assert result.error is not None
    assert result.error.message == "store returned an unexpected body"


def test_select_single_uses_eq_filters_and_object_accept() -> None:
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json={"id": "s1", "name": "Ana"})

    result = _run(
        handler,
        lambda s: s.select_single(
            "staff", ("id", "name"), {"email": "ana@example.test", "is_active": "true"}
        ),
    )

    assert result.rows == [{"id": "s1", "name": "Ana"}]
    params = seen[0].url.params
    assert params["select"] == "id,name"
    assert params["email"] == "eq.ana@example.test"
    assert params["is_active"] == "eq.true"
    assert seen[0].headers["accept"] == "application/vnd.pgrst.object+json"


def test_select_single_no_rows_is_error() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(
            406,
            json={"code": "PGRST116", "message": "JSON object requested, multiple (or no) rows returned"},
        )

    result = _run(handler, lambda s: s.select_single("staff", ("id",), {"id": "x"}))

    assert result.error is not None
    assert result.error.code == "PGRST116"


def test_insert_returns_representation() -> None:
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        rows = json.loads(request.content)
        return httpx.Response(201, json=[{**r, "id": i} for i, r in enumerate(rows)])

    result = _run(handler, lambda s: s.insert("schedules", [{"status": "DRAFT"}]))

    assert result.rows == [{"status": "DRAFT", "id": 0}]
    assert seen[0].method == "POST"
    assert seen[0].headers["prefer"] == "return=representation"


def test_transport_error_propagates() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("down", request=request)

    with pytest.raises(httpx.ConnectError):
        _run(handler, lambda s: s.select_all("staff"))
