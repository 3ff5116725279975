from __future__ import annotations

import logging
from datetime import datetime, timezone
from uuid import uuid4

from redis import Redis

from api.models import ForwardJobResponse, ForwardJobStatus, JobState
from api.types import QueueProtocol

_STATES: tuple[JobState, ...] = ("queued", "processing", "completed", "failed")


def _opt_int(raw: str | None) -> int | None:
    if raw is None or not raw.strip().isdigit():
        return None
    return int(raw)


class ForwardJobService:
    """Service for forward job lifecycle; all dependencies are injected explicitly."""

    def __init__(
        self,
        *,
        redis: Redis,
        logger: logging.Logger,
        queue: QueueProtocol,
    ) -> None:
        self._redis = redis
        self._logger = logger
        self._queue = queue

    async def create_job(self) -> ForwardJobResponse:
        """Record a queued forward run and enqueue it for a worker."""
        job_id = str(uuid4())
        now = datetime.now(timezone.utc)

        self._logger.debug("Enqueuing forward job", extra={"job_id": job_id})

        self._redis.hset(
            f"forward:{job_id}",
            mapping={"status": "queued", "created_at": now.isoformat()},
        )

        # RQ serializes callables by import path
        self._queue.enqueue("api.jobs.forward_rows", job_id)

        return ForwardJobResponse(job_id=job_id, status="queued", created_at=now)

    def get_job_status(self, job_id: str) -> ForwardJobStatus | None:
        """Fetch job status from Redis; returns None if not found."""
        data = self._redis.hgetall(f"forward:{job_id}")  # expected dict[str, str]
        if not data:
            return None

        raw_status = data.get("status", "queued")
        status: JobState = "queued"
        for state in _STATES:
            if state == raw_status:
                status = state
        created_at_raw = data.get("created_at")
        updated_at_raw = data.get("updated_at", created_at_raw)
        created_at = (
            datetime.fromisoformat(created_at_raw)
            if created_at_raw
            else datetime.now(timezone.utc)
        )
        updated_at = (
            datetime.fromisoformat(updated_at_raw) if updated_at_raw else created_at
        )

        return ForwardJobStatus(
            job_id=job_id,
            status=status,
            rows=_opt_int(data.get("rows")),
            response_status=_opt_int(data.get("response_status")),
            message=data.get("message"),
            created_at=created_at,
            updated_at=updated_at,
            error=data.get("error"),
        )
