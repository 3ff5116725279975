from __future__ import annotations

import json
from dataclasses import asdict, dataclass, field
from typing import Literal, TypeGuard

Row = dict[str, object]

ScheduleStatus = Literal["DRAFT", "PUBLISHED", "ARCHIVED"]
GeneratedBy = Literal["AI", "MANUAL"]
ForwardStatus = Literal["forwarded", "query_failed", "send_failed", "config_missing"]


@dataclass(frozen=True)
class StoreError:
    """Error body returned by the table store (PostgREST shape)."""

    message: str
    code: str | None = None
    details: str | None = None
    hint: str | None = None
    status_code: int | None = None


@dataclass(frozen=True)
class QueryResult:
    rows: list[Row] = field(default_factory=list)
    error: StoreError | None = None


@dataclass(frozen=True)
class ForwardOutcome:
    status: ForwardStatus
    rows: int = 0
    response_status: int | None = None
    error: str | None = None


@dataclass(frozen=True)
class StaffIdentity:
    staff_id: str
    name: str
    email: str
    business_id: str
    is_active: bool

    @staticmethod
    def from_row(row: Row) -> StaffIdentity:
        return StaffIdentity(
            staff_id=str(row.get("id", "")),
            name=str(row.get("name", "")),
            email=str(row.get("email", "")),
            business_id=str(row.get("business_id", "")),
            is_active=bool(row.get("is_active", False)),
        )

    def to_session(self) -> str:
        return json.dumps(asdict(self), separators=(",", ":"))


def is_schedule_status(value: str) -> TypeGuard[ScheduleStatus]:
    return value in ("DRAFT", "PUBLISHED", "ARCHIVED")


def is_generated_by(value: str) -> TypeGuard[GeneratedBy]:
    return value in ("AI", "MANUAL")
