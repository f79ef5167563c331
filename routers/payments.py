# routers/payments.py

from typing import Optional

from fastapi import APIRouter, Depends, File, Form, HTTPException, Query, UploadFile
from fastapi.exceptions import RequestValidationError
from pydantic import ValidationError

from core.errors import RemoteFetchError, RemoteMutationError, handle_supabase_error
from core.logging_config import logger
from core.storage import PAYMENT_PROOFS_BUCKET, upload_public_file
from dependencies.auth import get_current_user, get_stores, require_page
from models.enums import NotificationType, VerificationStatus
from models.payment import PaymentCreate, PaymentRead, PaymentSummary
from stores.registry import StoreRegistry
from stores.session import SessionUser


owner_router = APIRouter(
    prefix="/owner/payments",
    tags=["Payments"],
    dependencies=[Depends(require_page("/owner/payments"))],
)

history_router = APIRouter(
    prefix="/tenant/payments",
    tags=["Payments"],
    dependencies=[Depends(require_page("/tenant/payments"))],
)

submission_router = APIRouter(
    prefix="/tenant/payments/new",
    tags=["Payments"],
    dependencies=[Depends(require_page("/tenant/payments/new"))],
)


# =============================================================
# OWNER: list + totals
# =============================================================
@owner_router.get("", summary="Payment management page")
def list_payments(
    status: Optional[VerificationStatus] = Query(None),
    stores: StoreRegistry = Depends(get_stores),
):
    try:
        stores.payments.fetch_all()
    except RemoteFetchError as e:
        raise handle_supabase_error(e, "Failed to fetch payments")

    rows = stores.payments.by_status(status) if status else stores.payments.rows
    return {
        "page": "payment_management",
        "payments": [PaymentRead.model_validate(p) for p in rows],
        "summary": PaymentSummary(**stores.payments.summary()),
    }


# -------------------------------------------------------------
# Verify / reject, then tell the tenant (two independent calls)
# -------------------------------------------------------------
def _review_payment(stores: StoreRegistry, payment_id: str, status: VerificationStatus) -> dict:
    action = stores.payments.verify if status == VerificationStatus.verified else stores.payments.reject
    try:
        payment = action(payment_id)
    except RemoteMutationError as e:
        raise handle_supabase_error(e, f"Failed to mark payment {status}")

    if payment is None:
        raise HTTPException(404, "Payment not found")

    logger.info(f"Payment {payment_id} marked {status}")

    if status == VerificationStatus.verified:
        title, kind = "Payment verified", NotificationType.success
        message = f"Your payment of {payment.get('amount')} has been verified."
    else:
        title, kind = "Payment rejected", NotificationType.error
        message = f"Your payment of {payment.get('amount')} was rejected. Please check the proof and resubmit."

    try:
        stores.notifications.notify(payment["tenant_id"], title, message, kind, link="/tenant/payments")
    except RemoteMutationError as e:
        logger.warning(f"Payment {payment_id} {status} but tenant not notified: {e}")

    return payment


@owner_router.post("/{payment_id}/verify", response_model=PaymentRead, summary="Verify a payment")
def verify_payment(payment_id: str, stores: StoreRegistry = Depends(get_stores)):
    return _review_payment(stores, payment_id, VerificationStatus.verified)


@owner_router.post("/{payment_id}/reject", response_model=PaymentRead, summary="Reject a payment")
def reject_payment(payment_id: str, stores: StoreRegistry = Depends(get_stores)):
    return _review_payment(stores, payment_id, VerificationStatus.rejected)


# =============================================================
# TENANT: history
# =============================================================
@history_router.get("", summary="My payment history")
def payment_history(
    current_user: SessionUser = Depends(get_current_user),
    stores: StoreRegistry = Depends(get_stores),
):
    try:
        rows = stores.payments.fetch_all({"tenant_id": current_user.id})
    except RemoteFetchError as e:
        raise handle_supabase_error(e, "Failed to fetch payments")

    return {
        "page": "payment_history",
        "payments": [PaymentRead.model_validate(p) for p in rows],
        "summary": PaymentSummary(**stores.payments.summary()),
    }


# =============================================================
# TENANT: submission (multipart, proof image required)
# =============================================================
@submission_router.get("", summary="Payment submission page")
def payment_form(
    current_user: SessionUser = Depends(get_current_user),
    stores: StoreRegistry = Depends(get_stores),
):
    room = stores.room_for_tenant(current_user.id)
    return {
        "page": "payment_submission",
        "room": room,
        "suggested_amount": room.get("monthly_rent") if room else None,
    }


@submission_router.post("", response_model=PaymentRead, status_code=201, summary="Submit a payment")
def submit_payment(
    amount: str = Form(...),
    payment_date: str = Form(...),
    proof: UploadFile = File(..., description="Screenshot or photo of the payment"),
    current_user: SessionUser = Depends(get_current_user),
    stores: StoreRegistry = Depends(get_stores),
):
    try:
        form = PaymentCreate(amount=amount, payment_date=payment_date)
    except ValidationError as e:
        raise RequestValidationError(e.errors())

    # 1) proof → payment-proofs; 2) payment row. No rollback of step 1.
    proof_url = upload_public_file(
        stores.client,
        PAYMENT_PROOFS_BUCKET,
        current_user.id,
        proof.filename,
        proof.file.read(),
        proof.content_type,
    )

    room = stores.room_for_tenant(current_user.id)
    try:
        payment = stores.payments.create({
            "tenant_id": current_user.id,
            "room_id": room["id"] if room else None,
            "amount": form.amount,
            "payment_date": form.payment_date,
            "payment_screenshot_url": proof_url,
        })
    except RemoteMutationError as e:
        logger.error(f"Proof uploaded to {proof_url} but payment row not saved")
        raise handle_supabase_error(e, "Failed to submit payment")

    logger.info(f"Tenant {current_user.id} submitted payment {payment.get('id')} of {form.amount}")
    return payment
