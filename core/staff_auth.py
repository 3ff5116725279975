from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from typing import Final

import httpx

from core.models import StaffIdentity
from core.table_store import TRANSPORT_ERRORS, TableStore

STAFF_COLUMNS: Final[tuple[str, ...]] = ("id", "name", "email", "business_id", "is_active")

SESSION_INVALID_MSG: Final[str] = "Failed to validate session"
NO_STAFF_MSG: Final[str] = (
    "No active staff member found with this email address. "
    "Please contact your manager."
)
UNEXPECTED_MSG: Final[str] = "An unexpected error occurred. Please try again."


class SessionFormatError(ValueError):
    """Raised when a stored staff session cannot be decoded."""


@dataclass(frozen=True)
class SignInResult:
    success: bool
    error: str | None = None


def parse_session(stored: str) -> str:
    """Return the staff id held by a stored session value."""
    try:
        obj = json.loads(stored)
    except json.JSONDecodeError as exc:
        raise SessionFormatError("stored session is not JSON") from exc
    if not isinstance(obj, dict):
        raise SessionFormatError("stored session is not an object")
    staff_id = obj.get("staff_id")
    return "" if staff_id is None else str(staff_id)


class StaffSessionAuth:
    """Staff authentication status backed by the staff table.

    Mirrors the shape the access gate reads: ``staff_user``, ``loading`` and
    ``error``. ``loading`` stays True until the first session check finishes.
    """

    def __init__(self, *, store: TableStore, table: str, logger: logging.Logger) -> None:
        self._store = store
        self._table = table
        self._logger = logger
        self.staff_user: StaffIdentity | None = None
        self.loading = True
        self.error: str | None = None

    async def _find_active(self, column: str, value: str) -> StaffIdentity | None:
        result = await self._store.select_single(
            self._table, STAFF_COLUMNS, {column: value, "is_active": "true"}
        )
        if result.error is not None or not result.rows:
            return None
        return StaffIdentity.from_row(result.rows[0])

    async def check_session(self, stored: str | None) -> None:
        """Validate a stored session against the staff table."""
        self.error = None
        try:
            if stored:
                staff_id = parse_session(stored)
                identity = await self._find_active("id", staff_id) if staff_id else None
                if identity is None:
                    self._logger.warning(
                        "Stored staff user not found or inactive, clearing session",
                        extra={"table": self._table},
                    )
                self.staff_user = identity
        except (SessionFormatError, httpx.HTTPError, httpx.InvalidURL) as exc:
            self._logger.error("Error checking staff session: %s", exc)
            self.error = SESSION_INVALID_MSG
            self.staff_user = None
        finally:
            self.loading = False

    async def sign_in(self, email: str) -> SignInResult:
        self.loading = True
        self.error = None
        try:
            identity = await self._find_active("email", email.strip().lower())
        except TRANSPORT_ERRORS as exc:
            self._logger.error("Staff sign in error: %s", exc)
            self.error = UNEXPECTED_MSG
            return SignInResult(success=False, error=UNEXPECTED_MSG)
        finally:
            self.loading = False

        if identity is None:
            self.error = NO_STAFF_MSG
            return SignInResult(success=False, error=NO_STAFF_MSG)
        self.staff_user = identity
        self._logger.info("Staff signed in", extra={"table": self._table})
        return SignInResult(success=True)

    def sign_out(self) -> None:
        self.staff_user = None
        self.error = None

    def session_value(self) -> str | None:
        """Value to persist in the session cookie, or None to clear it."""
        return None if self.staff_user is None else self.staff_user.to_session()
