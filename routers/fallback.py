# routers/fallback.py

from fastapi import APIRouter, Depends, HTTPException

from core.access import AccessOutcome, decide_access
from core.errors import AccessRedirect
from dependencies.auth import get_session
from stores.session import SessionStore


# Registered last: anything no page claimed ends up here
router = APIRouter(
    tags=["Pages"],
)


@router.get("/{path:path}", include_in_schema=False)
def unmatched_page(path: str, session: SessionStore = Depends(get_session)):
    decision = decide_access(session, path)
    if decision.outcome == AccessOutcome.loading:
        raise HTTPException(503, "Session is still loading")
    if decision.outcome == AccessOutcome.redirect:
        raise AccessRedirect(decision.target)
    # A page that matched here has no endpoint of its own
    raise HTTPException(404, "Page not found")
