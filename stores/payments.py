# stores/payments.py

from decimal import Decimal
from typing import Optional

from core.errors import ConstraintError
from models.enums import VerificationStatus
from stores.base import EntityStore


def _amount(row: dict) -> Decimal:
    return Decimal(str(row.get("amount") or 0))


class PaymentStore(EntityStore):
    table = "payments"
    storage_key = "payment-storage"
    select_columns = "*, tenant:profiles!tenant_id(*), room:rooms(*)"
    order_by = "payment_date"
    order_desc = True

    status_field = "verification_status"

    def prepare_create(self, data: dict) -> dict:
        if _amount(data) <= 0:
            raise ConstraintError("Amount must be greater than 0")
        data["verification_status"] = VerificationStatus.pending.value
        return data

    def update(self, record_id: str, patch: dict, expect: Optional[dict] = None) -> Optional[dict]:
        if "verification_status" in patch and expect is None:
            rest = {k: v for k, v in patch.items() if k != "verification_status"}
            row = self._set_status(record_id, patch["verification_status"])
            if row is None or not rest:
                return row
            patch = rest
        return super().update(record_id, patch, expect)

    def _set_status(self, payment_id: str, status) -> Optional[dict]:
        return self.change_status(payment_id, status, VerificationStatus)

    def verify(self, payment_id: str) -> Optional[dict]:
        return self._set_status(payment_id, VerificationStatus.verified)

    def reject(self, payment_id: str) -> Optional[dict]:
        return self._set_status(payment_id, VerificationStatus.rejected)

    # -------------------------------------------------------------
    # Projections
    # -------------------------------------------------------------
    def _total(self, status: VerificationStatus) -> Decimal:
        return sum((_amount(r) for r in self.by_status(status)), Decimal("0"))

    def total_verified(self) -> Decimal:
        return self._total(VerificationStatus.verified)

    def total_pending(self) -> Decimal:
        return self._total(VerificationStatus.pending)

    def verification_rate(self) -> int:
        rows = self.rows
        if not rows:
            return 0
        verified = len(self.by_status(VerificationStatus.verified))
        return round(verified / len(rows) * 100)

    def summary(self) -> dict:
        return {
            "total_verified": self.total_verified(),
            "total_pending": self.total_pending(),
            "verification_rate": self.verification_rate(),
            "count": len(self),
        }
