# stores/tenants.py

from datetime import date
from typing import Optional

from core.errors import ConstraintError
from stores.base import EntityStore


def _as_date(value) -> Optional[date]:
    if value is None or isinstance(value, date):
        return value
    return date.fromisoformat(str(value)[:10])


class TenantStore(EntityStore):
    """Lease records. A tenant row's id is the tenant's profile id."""

    table = "tenants"
    storage_key = "tenant-storage"
    select_columns = "*, profile:profiles(*), room:rooms(*)"
    order_by = "lease_start_date"
    order_desc = True

    tenant_field = "id"

    # -------------------------------------------------------------
    # Checks
    # -------------------------------------------------------------
    def _require_room(self, room_id: str):
        rows = self._execute(
            f"Look up room {room_id}",
            lambda: self.client.table("rooms").select("id").eq("id", room_id).limit(1).execute(),
        )
        if not rows:
            raise ConstraintError(f"Room {room_id} not found")

    @staticmethod
    def _check_lease_dates(row: dict):
        start = _as_date(row.get("lease_start_date"))
        end = _as_date(row.get("lease_end_date"))
        if start and end and start > end:
            raise ConstraintError("lease_start_date must be on or before lease_end_date")

    # -------------------------------------------------------------
    # Writes
    # -------------------------------------------------------------
    def prepare_create(self, data: dict) -> dict:
        self._check_lease_dates(data)
        self._require_room(data["room_id"])
        return data

    def update(self, record_id: str, patch: dict, expect: Optional[dict] = None) -> Optional[dict]:
        dates = {"lease_start_date", "lease_end_date"}
        if dates & patch.keys():
            merged = patch
            if not dates <= patch.keys():
                merged = {**(self.fetch_one(record_id) or {}), **patch}
            self._check_lease_dates(merged)
        if patch.get("room_id"):
            self._require_room(patch["room_id"])
        return super().update(record_id, patch, expect)

    def verify_identity(self, tenant_id: str) -> Optional[dict]:
        return self.update(tenant_id, {"aadhaar_verified": True})

    def mark_contract_signed(self, tenant_id: str) -> Optional[dict]:
        return self.update(tenant_id, {"contract_signed": True})

    # -------------------------------------------------------------
    # Projections
    # -------------------------------------------------------------
    def lease_for(self, tenant_id: str) -> Optional[dict]:
        return self.get(tenant_id)

    def unverified(self) -> list[dict]:
        return [t for t in self.rows if not t.get("aadhaar_verified")]

    def active_on(self, day: date) -> list[dict]:
        active = []
        for t in self.rows:
            start = _as_date(t.get("lease_start_date"))
            end = _as_date(t.get("lease_end_date"))
            if start and end and start <= day <= end:
                active.append(t)
        return active
