from typing import Optional

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials

from core.access import AccessOutcome, decide_access
from core.config import settings
from core.errors import AccessRedirect
from core.persistence import get_state_storage
from core.supabase_client import get_supabase_client
from stores.registry import StoreRegistry
from stores.session import SessionStore, SessionUser


bearer_scheme = HTTPBearer(auto_error=False)


# ============================================================
# TOKEN (Authorization: Bearer … or the session cookie)
# ============================================================
def get_access_token(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
) -> Optional[str]:
    if credentials and credentials.credentials:
        return credentials.credentials
    return request.cookies.get(settings.SESSION_COOKIE_NAME) or None


# ============================================================
# SESSION (one per request, restored from the token)
# ============================================================
def get_session(token: Optional[str] = Depends(get_access_token)) -> SessionStore:
    client = get_supabase_client()
    if not client:
        raise HTTPException(500, "Supabase client not configured")

    session = SessionStore(client)
    session.initialize(token)
    return session


def get_current_user(session: SessionStore = Depends(get_session)) -> SessionUser:
    if not session.is_authenticated:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or expired authentication token",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return session.user


# ============================================================
# STORES (namespaced by user, rehydrated from local state)
# ============================================================
def get_stores(
    session: SessionStore = Depends(get_session),
    storage=Depends(get_state_storage),
) -> StoreRegistry:
    return StoreRegistry.for_session(session, storage)


# ============================================================
# PAGE GUARD
# ============================================================
def require_page(page_path: str):
    """
    Router dependency: run the access guard for `page_path`.
    Redirect decisions raise AccessRedirect (answered with 303).
    """
    def checker(session: SessionStore = Depends(get_session)):
        decision = decide_access(session, page_path)
        if decision.outcome == AccessOutcome.loading:
            raise HTTPException(503, "Session is still loading")
        if decision.outcome == AccessOutcome.redirect:
            raise AccessRedirect(decision.target)
        return decision
    return checker
