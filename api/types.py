from __future__ import annotations

from typing import Protocol


class QueueProtocol(Protocol):
    """Minimal interface for a background job queue."""

    def enqueue(self, func: str, *args: object, **kwargs: object) -> object: ...


class RedirectRecorder:
    """Navigator that remembers the last requested redirect.

    HTTP routes hand it to the access gate and turn the recorded target into
    a redirect response once rendering is done.
    """

    def __init__(self) -> None:
        self.target: str | None = None
        self.replace = False

    def navigate(self, to: str, *, replace: bool) -> None:
        self.target = to
        self.replace = replace
