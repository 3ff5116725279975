from __future__ import annotations

from datetime import datetime
from typing import Literal

from pydantic import BaseModel

JobState = Literal["queued", "processing", "completed", "failed"]


class ForwardJobResponse(BaseModel):
    job_id: str
    status: JobState
    created_at: datetime


class ForwardJobStatus(BaseModel):
    job_id: str
    status: JobState
    rows: int | None = None
    response_status: int | None = None
    message: str | None = None
    created_at: datetime
    updated_at: datetime
    error: str | None = None


class HealthResponse(BaseModel):
    status: Literal["healthy", "degraded", "unhealthy"]
    redis: bool
    store: bool
    timestamp: datetime


class ErrorResponse(BaseModel):
    error: str
    code: Literal[
        "INVALID_REQUEST",
        "FORWARD_NOT_FOUND",
        "STORE_UNAVAILABLE",
        "INTERNAL_ERROR",
    ]
    details: dict[str, object] | None = None
    timestamp: datetime


class ScheduleRowErrors(BaseModel):
    index: int
    errors: list[str]


class ScheduleRejected(BaseModel):
    message: str
    errors: list[ScheduleRowErrors]
    example: dict[str, str]


class ScheduleInserted(BaseModel):
    message: str
    inserted: int
    rows: list[dict[str, object]]
