# core/access.py

"""
Page access guard.

decide_access() maps (session state, requested path) to a typed decision;
dependencies.auth.require_page turns a redirect decision into AccessRedirect,
which the app answers with 303 See Other.
"""

from dataclasses import dataclass
from typing import Optional

from core.roles import LOGIN_PATH, VERIFY_PATH, home_for
from models.enums import BaseStrEnum, Role


class AccessOutcome(BaseStrEnum):
    render = "render"
    redirect = "redirect"
    loading = "loading"


@dataclass(frozen=True)
class AccessDecision:
    outcome: AccessOutcome
    target: Optional[str] = None
    page: Optional[str] = None
    role: Optional[Role] = None

    @property
    def allowed(self) -> bool:
        return self.outcome == AccessOutcome.render


# ============================================================
# Page table
# ============================================================
PAGES = {
    "/owner": "owner_dashboard",
    "/owner/rooms": "room_management",
    "/owner/tenants": "tenant_management",
    "/owner/maintenance": "maintenance_management",
    "/owner/payments": "payment_management",
    "/owner/notifications": "notifications",
    "/tenant": "tenant_dashboard",
    "/tenant/profile": "tenant_profile",
    "/tenant/payments": "payment_history",
    "/tenant/payments/new": "payment_submission",
    "/tenant/maintenance": "maintenance_requests",
    "/tenant/notifications": "notifications",
}

PUBLIC_PAGES = {LOGIN_PATH: "login"}
AUTHENTICATED_PAGES = {VERIFY_PATH: "verification"}

FALLBACK_PATH = "/owner"


def normalize_path(path: str) -> str:
    path = "/" + path.strip().strip("/")
    return path


def match_page(path: str) -> Optional[str]:
    path = normalize_path(path)
    return PAGES.get(path) or PUBLIC_PAGES.get(path) or AUTHENTICATED_PAGES.get(path)


def _redirect(target: str, role: Optional[Role] = None) -> AccessDecision:
    return AccessDecision(AccessOutcome.redirect, target=target, role=role)


# ============================================================
# Guard
# ============================================================
def decide_access(session, path: str) -> AccessDecision:
    path = normalize_path(path)

    if session.is_loading:
        return AccessDecision(AccessOutcome.loading)

    authenticated = session.is_authenticated
    role = session.role if authenticated else None

    # Login is public; signed-in users are sent to their dashboard
    if path == LOGIN_PATH:
        if authenticated:
            return _redirect(home_for(role), role)
        return AccessDecision(AccessOutcome.render, page=PUBLIC_PAGES[path])

    if not authenticated:
        return _redirect(LOGIN_PATH)

    if path == "/":
        return _redirect(home_for(role), role)

    # Verification needs a session but no particular role
    if path == VERIFY_PATH:
        if session.user.verified:
            return _redirect(home_for(role), role)
        return AccessDecision(AccessOutcome.render, page=AUTHENTICATED_PAGES[path], role=role)

    page = PAGES.get(path)
    if page is None:
        return _redirect(FALLBACK_PATH, role)

    segment = path.split("/")[1]
    if segment != role.value:
        return _redirect(home_for(role), role)

    return AccessDecision(AccessOutcome.render, page=page, role=role)
