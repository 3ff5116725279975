from __future__ import annotations

import logging
from collections.abc import AsyncGenerator, Generator
from typing import Annotated

import httpx
from fastapi import Depends
from redis import Redis

from api.config import Settings
from api.logging import get_logger
from api.types import QueueProtocol
from core.staff_auth import StaffSessionAuth
from core.table_store import PostgrestTableStore, TableStore


def get_settings() -> Settings:
    """Dependency: typed application settings from environment."""
    return Settings.from_env()


SettingsDep = Annotated[Settings, Depends(get_settings)]


def get_redis(settings: SettingsDep) -> Generator[Redis, None, None]:
    """Dependency: Redis client using URL from settings; closes on teardown."""
    client = Redis.from_url(settings.redis_url, encoding="utf-8", decode_responses=True)
    try:
        yield client
    finally:
        client.close()


def get_request_logger() -> logging.Logger:
    """Dependency: request-scoped logger (delegates to global logger)."""
    return get_logger(__name__)


def get_queue(
    redis: Annotated[Redis, Depends(get_redis)],
) -> QueueProtocol:
    """Dependency: RQ queue bound to provided Redis connection.

    This import is local to keep import graph light and to enable easy dependency
    overriding in tests.
    """
    from rq import Queue

    q: QueueProtocol = Queue(connection=redis)
    return q


async def get_http_client() -> AsyncGenerator[httpx.AsyncClient, None]:
    """Dependency: outbound HTTP client without a timeout; closed on teardown."""
    client = httpx.AsyncClient(timeout=None)
    try:
        yield client
    finally:
        await client.aclose()


def get_table_store(
    settings: SettingsDep,
    client: Annotated[httpx.AsyncClient, Depends(get_http_client)],
) -> TableStore:
    return PostgrestTableStore(client, settings.store_url, settings.store_key)


def get_staff_auth(
    settings: SettingsDep,
    store: Annotated[TableStore, Depends(get_table_store)],
    logger: Annotated[logging.Logger, Depends(get_request_logger)],
) -> StaffSessionAuth:
    """Dependency: fresh staff auth status per request (loading until checked)."""
    return StaffSessionAuth(store=store, table=settings.staff_table, logger=logger)
