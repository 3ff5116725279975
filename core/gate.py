from __future__ import annotations

import html
from dataclasses import dataclass
from typing import Final, Protocol, assert_never

from core.models import StaffIdentity

DEFAULT_LANDING_ROUTE: Final[str] = "/staff-auth"


class AuthStatusSource(Protocol):
    """Read-only view of an authentication collaborator."""

    @property
    def staff_user(self) -> StaffIdentity | None: ...

    @property
    def loading(self) -> bool: ...

    @property
    def error(self) -> str | None: ...


class Navigator(Protocol):
    def navigate(self, to: str, *, replace: bool) -> None: ...


@dataclass(frozen=True)
class Loading:
    pass


@dataclass(frozen=True)
class Errored:
    message: str


@dataclass(frozen=True)
class Unauthenticated:
    pass


@dataclass(frozen=True)
class Authenticated:
    children: str


GateState = Loading | Errored | Unauthenticated | Authenticated


def resolve_gate_state(source: AuthStatusSource, children: str) -> GateState:
    """Snapshot the auth source into a gate state.

    Precedence: loading, then error, then missing identity.
    """
    if source.loading:
        return Loading()
    if source.error:
        return Errored(source.error)
    if source.staff_user is None:
        return Unauthenticated()
    return Authenticated(children)


def _skeleton_bar(classes: str) -> str:
    return f'<div class="skeleton {classes}"></div>'


def render_skeleton() -> str:
    cards = "".join(_skeleton_bar("h-32 rounded-lg") for _ in range(3))
    return (
        '<div class="min-h-screen bg-background p-6" data-gate="loading">'
        '<div class="max-w-6xl mx-auto space-y-8">'
        '<div class="flex items-center space-x-4">'
        f'{_skeleton_bar("w-12 h-12 rounded-xl")}'
        '<div class="space-y-2">'
        f'{_skeleton_bar("h-8 w-48")}{_skeleton_bar("h-4 w-32")}'
        "</div></div>"
        f'<div class="grid grid-cols-1 md:grid-cols-3 gap-6">{cards}</div>'
        "</div></div>"
    )


def render_error_panel(message: str) -> str:
    return (
        '<div class="min-h-screen bg-background p-6 flex items-center justify-center"'
        ' data-gate="error">'
        '<div class="text-center space-y-4">'
        '<h2 class="text-2xl font-bold text-destructive">Authentication Error</h2>'
        f'<p class="text-muted-foreground">{html.escape(message)}</p>'
        "</div></div>"
    )


class AccessGate:
    """Route guard that renders children only for an authenticated staff user.

    Redirects go through the injected navigator with replace semantics. The
    gate keeps no state; every ``render`` call re-reads the auth source.
    """

    def __init__(
        self,
        source: AuthStatusSource,
        navigator: Navigator,
        *,
        landing_route: str = DEFAULT_LANDING_ROUTE,
    ) -> None:
        self._source = source
        self._navigator = navigator
        self._landing_route = landing_route

    def render(self, children: str) -> str:
        state = resolve_gate_state(self._source, children)
        match state:
            case Loading():
                return render_skeleton()
            case Errored(message=message):
                self._navigator.navigate(self._landing_route, replace=True)
                return render_error_panel(message)
            case Unauthenticated():
                self._navigator.navigate(self._landing_route, replace=True)
                return ""
            case Authenticated(children=content):
                return content
            case _:
                assert_never(state)
