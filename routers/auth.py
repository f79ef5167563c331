from fastapi import APIRouter, HTTPException, Depends, Response

from core.config import settings
from core.errors import AuthError
from core.logging_config import logger
from core.persistence import get_state_storage
from core.rate_limiter import require_rate_limit
from core.supabase_client import get_supabase_client
from dependencies.auth import get_session, require_page
from models.auth import LoginRequest, LoginResponse
from stores.registry import StoreRegistry
from stores.session import SessionStore


router = APIRouter(
    tags=["Auth"],
)


def _set_session_cookie(response: Response, token: str):
    response.set_cookie(
        key=settings.SESSION_COOKIE_NAME,
        value=token,
        httponly=True,
        samesite="lax",
        secure=settings.ENV == "production",
    )


# ============================================================
# LOGIN PAGE
# ============================================================
@router.get("/login", summary="Login page")
def login_page(decision=Depends(require_page("/login"))):
    # Signed-in users never get here: the guard redirects them home
    return {"page": decision.page, "error": None}


# ============================================================
# LOGIN (SUPABASE AUTH + PROFILE)
# ============================================================
@router.post("/login", response_model=LoginResponse, summary="Authenticate user")
def login(payload: LoginRequest, response: Response):
    email = payload.email.strip().lower()

    require_rate_limit(
        f"login:{email}",
        max_requests=settings.LOGIN_RATE_LIMIT,
        window_seconds=settings.LOGIN_RATE_WINDOW_SECONDS,
    )

    client = get_supabase_client()
    if not client:
        raise HTTPException(500, "Supabase client not configured")

    session = SessionStore(client)
    try:
        user = session.login(email, payload.password)
    except AuthError:
        raise HTTPException(status_code=401, detail=session.error)

    _set_session_cookie(response, session.access_token)

    return LoginResponse(
        access_token=session.access_token,
        role=user.role,
        redirect_to=user.home,
    )


# ============================================================
# LOGOUT (remote sign-out + store teardown)
# ============================================================
@router.post("/logout", summary="Sign out and clear cached state")
def logout(
    response: Response,
    session: SessionStore = Depends(get_session),
    storage=Depends(get_state_storage),
):
    if session.user:
        StoreRegistry(session.client, storage, session.user.id).clear()
        logger.info(f"Cleared cached stores for {session.user.id}")

    session.logout()
    response.delete_cookie(settings.SESSION_COOKIE_NAME)
    return {"success": True, "redirect_to": "/login"}
