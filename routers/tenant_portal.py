# routers/tenant_portal.py

from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, File, Form, UploadFile
from fastapi.exceptions import RequestValidationError
from pydantic import ValidationError

from core.errors import RemoteFetchError, RemoteMutationError, handle_supabase_error
from core.logging_config import logger
from core.storage import PROFILE_PHOTOS_BUCKET, upload_public_file
from dependencies.auth import get_current_user, get_session, get_stores, require_page
from models.profile import ProfileUpdate
from stores.registry import StoreRegistry
from stores.session import SessionStore, SessionUser


dashboard_router = APIRouter(
    prefix="/tenant",
    tags=["Tenant Portal"],
    dependencies=[Depends(require_page("/tenant"))],
)

profile_router = APIRouter(
    prefix="/tenant/profile",
    tags=["Tenant Portal"],
    dependencies=[Depends(require_page("/tenant/profile"))],
)

RECENT_PAYMENTS = 3


# -----------------------------------------------------
# GET /tenant
# Room, lease, active requests, recent payments, unread count
# -----------------------------------------------------
@dashboard_router.get("", summary="Tenant dashboard")
def tenant_dashboard(
    current_user: SessionUser = Depends(get_current_user),
    stores: StoreRegistry = Depends(get_stores),
):
    scope = {"tenant_id": current_user.id}
    try:
        stores.maintenance.fetch_all(scope)
        stores.payments.fetch_all(scope)
    except RemoteFetchError as e:
        raise handle_supabase_error(e, "Failed to load dashboard")

    lease = None
    try:
        stores.tenants.fetch_all({"id": current_user.id})
        lease = stores.tenants.lease_for(current_user.id)
    except RemoteFetchError as e:
        logger.warning(f"Lease for {current_user.id} unavailable: {e}")

    unread = 0
    try:
        stores.notifications.fetch_for_user(current_user.id)
        unread = stores.notifications.unread_count(current_user.id)
    except RemoteFetchError as e:
        logger.warning(f"Notifications for {current_user.id} unavailable: {e}")

    return {
        "page": "tenant_dashboard",
        "user": {"id": current_user.id, "name": current_user.name, "verified": current_user.verified},
        "room": stores.room_for_tenant(current_user.id),
        "lease": lease,
        "active_requests": stores.maintenance.active(current_user.id),
        "recent_payments": stores.payments.rows[:RECENT_PAYMENTS],
        "pending_payments": stores.payments.total_pending(),
        "unread_notifications": unread,
    }


# -----------------------------------------------------
# GET /tenant/profile
# -----------------------------------------------------
@profile_router.get("", summary="My profile")
def view_profile(current_user: SessionUser = Depends(get_current_user)):
    return {
        "page": "tenant_profile",
        "profile": current_user,
    }


# -----------------------------------------------------
# PATCH /tenant/profile (multipart; photo optional)
# 1) photo → profile-photos; 2) profile row
# -----------------------------------------------------
@profile_router.patch("", summary="Update my profile")
def update_profile(
    full_name: str = Form(...),
    phone_number: str = Form(...),
    date_of_birth: date = Form(...),
    photo: Optional[UploadFile] = File(None),
    session: SessionStore = Depends(get_session),
):
    try:
        form = ProfileUpdate(full_name=full_name, phone_number=phone_number, date_of_birth=date_of_birth)
    except ValidationError as e:
        raise RequestValidationError(e.errors())

    patch = form.model_dump()

    if photo is not None and photo.filename:
        patch["profile_photo_url"] = upload_public_file(
            session.client,
            PROFILE_PHOTOS_BUCKET,
            session.user.id,
            photo.filename,
            photo.file.read(),
            photo.content_type,
        )

    try:
        user = session.update_profile(patch)
    except RemoteMutationError as e:
        raise handle_supabase_error(e, "Failed to update profile")

    logger.info(f"Tenant {user.id} updated profile")
    return {"success": True, "profile": user}
