from __future__ import annotations

import asyncio
import logging
from datetime import datetime, timezone

import httpx
from redis import Redis

from api.config import Settings
from api.logging import get_logger
from core.forwarder import RowForwarder
from core.models import ForwardOutcome
from core.table_store import PostgrestTableStore


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


async def run_forwarder(
    settings: Settings,
    logger: logging.Logger,
    *,
    transport: httpx.AsyncBaseTransport | None = None,
) -> ForwardOutcome:
    """Build the store client and forwarder from settings and run one forward.

    ``transport`` replaces the network layer of the shared HTTP client.
    """
    missing = settings.missing_forward_config()
    if missing:
        logger.error(
            "forwarder configuration missing", extra={"table": settings.source_table}
        )
        return ForwardOutcome(
            status="config_missing", error="missing: " + ", ".join(missing)
        )

    async with httpx.AsyncClient(timeout=None, transport=transport) as client:
        store = PostgrestTableStore(client, settings.store_url, settings.store_key)
        forwarder = RowForwarder(
            store=store,
            client=client,
            table=settings.source_table,
            webhook_url=settings.webhook_url,
            logger=logger,
        )
        return await forwarder.forward()


def forward_rows_impl(
    job_id: str,
    *,
    redis: Redis,
    settings: Settings,
    logger: logging.Logger,
    transport: httpx.AsyncBaseTransport | None = None,
) -> dict[str, object]:
    """Run one forward and record its outcome under ``forward:{job_id}``.

    Forward failures mark the job failed but are not raised.
    """
    key = f"forward:{job_id}"
    redis.hset(
        key,
        mapping={"status": "processing", "updated_at": _now(), "message": "started"},
    )

    outcome = asyncio.run(run_forwarder(settings, logger, transport=transport))

    mapping = {
        "updated_at": _now(),
        "rows": str(outcome.rows),
        "message": outcome.status,
    }
    if outcome.response_status is not None:
        mapping["response_status"] = str(outcome.response_status)
    if outcome.status == "forwarded":
        mapping["status"] = "completed"
        logger.info("Forward job completed", extra={"job_id": job_id, "rows": outcome.rows})
    else:
        mapping["status"] = "failed"
        mapping["error"] = outcome.error or outcome.status
        logger.warning(
            "Forward job failed: %s", outcome.status, extra={"job_id": job_id}
        )
    redis.hset(key, mapping=mapping)
    return {"job_id": job_id, "status": mapping["status"], "rows": outcome.rows}


def forward_rows(job_id: str) -> dict[str, object]:
    """RQ job entry point. Loads deps from env and delegates to the impl."""
    from api.logging import setup_logging

    settings = Settings.from_env()
    setup_logging(settings.log_level)  # Initialize logging for worker process
    logger = get_logger(__name__)
    client = Redis.from_url(settings.redis_url, encoding="utf-8", decode_responses=True)
    try:
        return forward_rows_impl(job_id, redis=client, settings=settings, logger=logger)
    finally:
        client.close()
