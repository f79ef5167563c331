# stores/maintenance.py

from typing import Optional

from models.enums import MaintenanceStatus
from stores.base import EntityStore


class MaintenanceStore(EntityStore):
    table = "maintenance_requests"
    storage_key = "maintenance-storage"
    select_columns = "*, tenant:profiles!tenant_id(*), room:rooms(*)"
    order_by = "created_at"
    order_desc = True

    def prepare_create(self, data: dict) -> dict:
        # New requests always start pending, whatever the caller sent
        data["status"] = MaintenanceStatus.pending.value
        return data

    def update(self, record_id: str, patch: dict, expect: Optional[dict] = None) -> Optional[dict]:
        # Status changes only go through the guarded write
        if "status" in patch and expect is None:
            rest = {k: v for k, v in patch.items() if k != "status"}
            row = self.set_status(record_id, patch["status"])
            if row is None or not rest:
                return row
            patch = rest
        return super().update(record_id, patch, expect)

    def set_status(self, request_id: str, status) -> Optional[dict]:
        return self.change_status(request_id, status, MaintenanceStatus)

    # -------------------------------------------------------------
    # Projections
    # -------------------------------------------------------------
    def active(self, tenant_id: Optional[str] = None) -> list[dict]:
        rows = self.by_tenant(tenant_id) if tenant_id else self.rows
        return [
            r for r in rows
            if r.get("status") in (MaintenanceStatus.pending.value, MaintenanceStatus.in_progress.value)
        ]

    def status_counts(self) -> dict:
        counts = {s.value: 0 for s in MaintenanceStatus}
        for r in self.rows:
            if r.get("status") in counts:
                counts[r["status"]] += 1
        return counts
