# routers/verification.py

from fastapi import APIRouter, Depends, File, Form, HTTPException, UploadFile
from fastapi.exceptions import RequestValidationError
from pydantic import ValidationError

from core.errors import RemoteMutationError, handle_supabase_error
from core.logging_config import logger
from core.storage import TENANT_PHOTOS_BUCKET, upload_public_file
from dependencies.auth import get_session, require_page
from models.profile import VerificationSubmit
from stores.session import SessionStore


router = APIRouter(
    prefix="/verify",
    tags=["Verification"],
    dependencies=[Depends(require_page("/verify"))],
)


# -----------------------------------------------------
# GET /verify
# Only reached by signed-in users without an identity number
# -----------------------------------------------------
@router.get("", summary="Tenant onboarding page")
def verification_page(session: SessionStore = Depends(get_session)):
    user = session.user
    return {
        "page": "verification",
        "user": {"id": user.id, "name": user.name, "role": user.role},
        "verified": user.verified,
    }


# -----------------------------------------------------
# POST /verify
# 1) upload photo → tenant-photos
# 2) store aadhaar number + photo URL on the profile
# A failure in step 2 leaves the uploaded photo in place.
# -----------------------------------------------------
@router.post("", summary="Submit identity number and photo")
def submit_verification(
    aadhaar_number: str = Form(...),
    photo: UploadFile = File(...),
    session: SessionStore = Depends(get_session),
):
    try:
        form = VerificationSubmit(aadhaar_number=aadhaar_number)
    except ValidationError as e:
        raise RequestValidationError(e.errors())

    user = session.user
    content = photo.file.read()

    photo_url = upload_public_file(
        session.client,
        TENANT_PHOTOS_BUCKET,
        user.id,
        photo.filename,
        content,
        photo.content_type,
    )

    try:
        updated = session.update_profile({
            "aadhaar_number": form.aadhaar_number,
            "profile_photo_url": photo_url,
        })
    except RemoteMutationError as e:
        raise handle_supabase_error(e, "Failed to save verification")

    if not updated.verified:
        raise HTTPException(500, "Verification was not recorded")

    logger.info(f"User {user.id} completed identity verification")
    return {
        "success": True,
        "profile_photo_url": photo_url,
        "redirect_to": updated.home,
    }
