# models/payment.py

from datetime import date, datetime
from decimal import Decimal
from typing import Optional
from pydantic import BaseModel, Field

from .enums import VerificationStatus


class PaymentCreate(BaseModel):
    """
    Tenant payment form. The proof image arrives as a separate upload;
    tenant, room and verification status are set server-side.
    """
    amount: Decimal = Field(..., gt=0, decimal_places=2, description="Amount must be greater than 0")
    payment_date: date


class PaymentRead(BaseModel):
    id: str
    tenant_id: str
    room_id: Optional[str] = None
    amount: Decimal
    payment_date: date
    payment_screenshot_url: Optional[str] = None
    verification_status: VerificationStatus = VerificationStatus.pending
    tenant: Optional[dict] = None
    room: Optional[dict] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class PaymentSummary(BaseModel):
    """Totals shown above the owner's payment table."""

    total_verified: Decimal
    total_pending: Decimal
    verification_rate: int = Field(..., description="Verified share of all payments, in percent")
    count: int
