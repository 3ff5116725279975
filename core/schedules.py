from __future__ import annotations

from collections.abc import Mapping
from datetime import date, datetime, timezone

from core.models import Row, is_generated_by, is_schedule_status

_BUSINESS_KEYS = ("business_id", "businessId", "businessID", "business")
_WEEK_START_KEYS = ("week_start_date", "weekStartDate", "start_date", "startDate")
_GENERATED_BY_KEYS = ("generated_by", "generatedBy")


def _first(item: Mapping[str, object], keys: tuple[str, ...]) -> object:
    for key in keys:
        value = item.get(key)
        if value:
            return value
    return None


def to_date_only(value: object) -> str | None:
    """Format a date-like value as a UTC ``YYYY-MM-DD`` string, or None."""
    if not value:
        return None
    if isinstance(value, datetime):
        dt = value
    elif isinstance(value, date):
        return value.isoformat()
    elif isinstance(value, str):
        text = value.strip()
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        try:
            dt = datetime.fromisoformat(text)
        except ValueError:
            return None
    else:
        return None
    if dt.tzinfo is not None:
        dt = dt.astimezone(timezone.utc)
    return dt.date().isoformat()


def normalize_schedule(item: Mapping[str, object]) -> Row:
    business = _first(item, _BUSINESS_KEYS)
    status = str(item.get("status") or "DRAFT").upper()
    generated_by = str(_first(item, _GENERATED_BY_KEYS) or "MANUAL").upper()
    week_start = to_date_only(_first(item, _WEEK_START_KEYS)) or to_date_only(
        datetime.now(timezone.utc)
    )
    return {
        "business_id": business,
        "week_start_date": week_start,
        "status": status if is_schedule_status(status) else "DRAFT",
        "generated_by": generated_by if is_generated_by(generated_by) else "MANUAL",
    }


def validate_schedule(row: Row) -> list[str]:
    errors: list[str] = []
    if not row.get("business_id"):
        errors.append("business_id is required")
    if not row.get("week_start_date"):
        errors.append("week_start_date is required (YYYY-MM-DD)")
    status = row.get("status")
    if not isinstance(status, str) or not is_schedule_status(status):
        errors.append("status must be one of DRAFT, PUBLISHED, ARCHIVED")
    generated_by = row.get("generated_by")
    if not isinstance(generated_by, str) or not is_generated_by(generated_by):
        errors.append("generated_by must be one of AI, MANUAL")
    return errors


SCHEDULE_EXAMPLE: dict[str, str] = {
    "business_id": "<uuid>",
    "week_start_date": "2025-09-29",
    "status": "DRAFT|PUBLISHED|ARCHIVED",
    "generated_by": "AI|MANUAL",
}
