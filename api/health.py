from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Literal

from redis import Redis
from redis import exceptions as redis_exceptions

from api.config import Settings
from api.errors import HealthStatusError
from api.models import HealthResponse


def _overall(redis_ok: bool, store_ok: bool) -> Literal["healthy", "degraded", "unhealthy"]:
    if redis_ok and store_ok:
        return "healthy"
    if redis_ok or store_ok:
        return "degraded"
    return "unhealthy"


def compute_health(
    redis: Redis, settings: Settings, logger: logging.Logger
) -> HealthResponse:
    """Compute service health from Redis reachability and store configuration.

    On Redis failure, raises HealthStatusError which is handled centrally to
    return a 200 OK with a structured payload.
    """
    store_ok = settings.store_configured
    try:
        redis_ok = bool(redis.ping())
    except redis_exceptions.RedisError as exc:
        logger.warning("Redis health check failed", exc_info=exc)
        raise HealthStatusError(
            status=_overall(False, store_ok), redis=False, store=store_ok
        ) from exc

    return HealthResponse(
        status=_overall(redis_ok, store_ok),
        redis=redis_ok,
        store=store_ok,
        timestamp=datetime.now(timezone.utc),
    )
