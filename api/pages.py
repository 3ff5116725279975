from __future__ import annotations

import html

from core.models import StaffIdentity


def page(title: str, body: str) -> str:
    return (
        "<!doctype html><html><head>"
        f'<meta charset="utf-8"><title>{html.escape(title)}</title>'
        f"</head><body>{body}</body></html>"
    )


def login_page(*, error: str | None = None, email: str = "") -> str:
    alert = (
        f'<p class="text-destructive" role="alert">{html.escape(error)}</p>'
        if error
        else ""
    )
    return page(
        "Staff Login",
        '<div class="w-full max-w-md space-y-6">'
        '<h1 class="text-3xl font-bold">Staff Portal</h1>'
        "<p>Enter your email to access your staff dashboard</p>"
        f"{alert}"
        '<form method="post" action="/staff-auth">'
        '<label for="email">Email Address</label>'
        f'<input id="email" name="email" type="email" value="{html.escape(email)}"'
        ' placeholder="your.email@company.com" required>'
        '<button type="submit">Sign In</button>'
        "</form>"
        "<p>Need help? Contact your manager or business owner</p>"
        "</div>",
    )


def portal_content(staff: StaffIdentity | None) -> str:
    """Staff portal body; only ever shown behind the access gate."""
    if staff is None:
        return ""
    return (
        '<main data-page="staff-portal">'
        f"<h1>Welcome, {html.escape(staff.name)}</h1>"
        f"<p>{html.escape(staff.email)}</p>"
        '<form method="post" action="/staff-auth/logout">'
        '<button type="submit">Sign Out</button></form>'
        "</main>"
    )
