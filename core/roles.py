# core/roles.py

from typing import Optional

from models.enums import Role


# ============================================
# ROLE → DEFAULT DASHBOARD
# ============================================
ROLE_HOME = {
    Role.owner: "/owner",
    Role.tenant: "/tenant",
}

LOGIN_PATH = "/login"
VERIFY_PATH = "/verify"


def normalize_role(value) -> Optional[Role]:
    """Map a profile's role column to Role; None for anything unknown."""
    if isinstance(value, Role):
        return value
    try:
        return Role(str(value).strip().lower())
    except ValueError:
        return None


def home_for(role) -> str:
    """Dashboard path for a role. Unknown roles get the login page."""
    normalized = normalize_role(role)
    if normalized is None:
        return LOGIN_PATH
    return ROLE_HOME[normalized]
