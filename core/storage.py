# core/storage.py

import re
import uuid
from typing import Optional

from core.config import settings
from core.errors import UploadError, extract_supabase_error
from core.logging_config import logger


# -----------------------------------------------------
# Buckets
# -----------------------------------------------------
TENANT_PHOTOS_BUCKET = "tenant-photos"
PAYMENT_PROOFS_BUCKET = "payment-proofs"
PROFILE_PHOTOS_BUCKET = "profile-photos"

IMAGE_EXTENSIONS = {"jpg", "jpeg", "png", "webp", "gif", "heic"}


# -----------------------------------------------------
# Filename helpers
# -----------------------------------------------------
def safe_filename(filename: str) -> str:
    return re.sub(r"[^A-Za-z0-9._-]", "_", filename)


def file_extension(filename: Optional[str], default: str = "jpg") -> str:
    if not filename or "." not in filename:
        return default
    return safe_filename(filename.rsplit(".", 1)[-1].lower()) or default


def build_object_path(owner_id: str, filename: Optional[str]) -> str:
    """<owner_id>/<uuid>.<ext>, unique per upload."""
    return f"{safe_filename(owner_id)}/{uuid.uuid4().hex}.{file_extension(filename)}"


def validate_image(filename: Optional[str], content: bytes, max_bytes: Optional[int] = None):
    limit = max_bytes or settings.MAX_UPLOAD_BYTES
    if not content:
        raise UploadError("Uploaded file is empty")
    if len(content) > limit:
        raise UploadError(f"File size must be less than {limit // (1024 * 1024)}MB")
    if file_extension(filename) not in IMAGE_EXTENSIONS:
        raise UploadError("Only image files can be uploaded")


# -----------------------------------------------------
# Upload → public URL
# -----------------------------------------------------
def upload_public_file(
    client,
    bucket: str,
    owner_id: str,
    filename: Optional[str],
    content: bytes,
    content_type: Optional[str] = None,
) -> str:
    """
    Upload bytes to a Supabase Storage bucket and return the public URL.

    Only the upload itself happens here. Callers persist the URL in a row
    afterwards; if that second step fails the stored file stays orphaned.
    """
    validate_image(filename, content)
    path = build_object_path(owner_id, filename)

    try:
        bucket_api = client.storage.from_(bucket)
        bucket_api.upload(
            path,
            content,
            file_options={"content-type": content_type or "application/octet-stream"},
        )
        public_url = bucket_api.get_public_url(path)
    except Exception as e:
        logger.error(f"Upload to {bucket}/{path} failed: {extract_supabase_error(e)}")
        raise UploadError("Failed to upload file", cause=e)

    logger.info(f"Uploaded {bucket}/{path} ({len(content)} bytes)")
    return public_url
