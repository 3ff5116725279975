from __future__ import annotations

import os
from dataclasses import dataclass


@dataclass(frozen=True)
class Settings:
    """Application settings loaded from environment in a type-safe, framework-free way."""

    redis_url: str
    environment: str
    store_url: str = ""
    store_key: str = ""
    source_table: str = "staff"
    webhook_url: str = ""
    staff_table: str = "staff"
    schedules_table: str = "schedules"
    auth_landing_route: str = "/staff-auth"
    log_level: str = "INFO"

    @staticmethod
    def from_env() -> Settings:
        prefix = "SHIFTLINK_"

        def _get(name: str, default: str) -> str:
            return os.getenv(f"{prefix}{name}", default).strip() or default

        return Settings(
            redis_url=_get("REDIS_URL", "redis://localhost:6379/0"),
            environment=_get("ENV", "local"),
            store_url=_get("STORE_URL", ""),
            store_key=_get("STORE_KEY", ""),
            source_table=_get("SOURCE_TABLE", "staff"),
            webhook_url=_get("WEBHOOK_URL", ""),
            staff_table=_get("STAFF_TABLE", "staff"),
            schedules_table=_get("SCHEDULES_TABLE", "schedules"),
            auth_landing_route=_get("AUTH_LANDING_ROUTE", "/staff-auth"),
            log_level=_get("LOG_LEVEL", "INFO"),
        )

    @property
    def store_configured(self) -> bool:
        return self.store_url != "" and self.store_key != ""

    def missing_forward_config(self) -> list[str]:
        """Names of forwarder settings that are empty."""
        required = {
            "store_url": self.store_url,
            "store_key": self.store_key,
            "source_table": self.source_table,
            "webhook_url": self.webhook_url,
        }
        return [name for name, value in required.items() if value == ""]
