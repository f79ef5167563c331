# stores/rooms.py

from typing import Optional

from core.errors import ConstraintError
from models.room import room_status
from stores.base import EntityStore


class RoomStore(EntityStore):
    table = "rooms"
    storage_key = "room-storage"
    order_by = "room_number"

    tenant_field = "current_tenant_id"

    # -------------------------------------------------------------
    # Invariant: occupied ⇒ current tenant set
    # -------------------------------------------------------------
    @staticmethod
    def _check_occupancy(row: dict):
        if row.get("is_occupied") and not row.get("current_tenant_id"):
            raise ConstraintError("An occupied room needs a current tenant")

    def prepare_create(self, data: dict) -> dict:
        data.setdefault("is_occupied", bool(data.get("current_tenant_id")))
        self._check_occupancy(data)
        return data

    def update(self, record_id: str, patch: dict, expect: Optional[dict] = None) -> Optional[dict]:
        patch = dict(patch)

        # Vacating a room drops its tenant reference
        if patch.get("is_occupied") is False and "current_tenant_id" not in patch:
            patch["current_tenant_id"] = None

        if "is_occupied" in patch or "current_tenant_id" in patch:
            merged = patch
            if not ("is_occupied" in patch and "current_tenant_id" in patch):
                merged = {**(self.fetch_one(record_id) or {}), **patch}
            self._check_occupancy(merged)
        return super().update(record_id, patch, expect)

    def assign_tenant(self, room_id: str, tenant_id: str) -> Optional[dict]:
        return self.update(room_id, {"is_occupied": True, "current_tenant_id": tenant_id})

    def release(self, room_id: str, tenant_id: str) -> Optional[dict]:
        """Vacate the room only while the backend still lists this tenant in it."""
        room = self.fetch_one(room_id)
        if room is None or room.get("current_tenant_id") != tenant_id:
            return room
        return self.update(
            room_id,
            {"is_occupied": False, "current_tenant_id": None},
            expect={"current_tenant_id": tenant_id},
        )

    # -------------------------------------------------------------
    # Projections
    # -------------------------------------------------------------
    def by_status(self, status) -> list[dict]:
        """Filter on the derived badge (occupied / available), not a column."""
        return [r for r in self.rows if room_status(r) == str(status)]

    def for_tenant(self, tenant_id: str) -> Optional[dict]:
        rooms = self.by_tenant(tenant_id)
        return rooms[0] if rooms else None

    def occupancy(self) -> dict:
        rows = self.rows
        total = len(rows)
        occupied = sum(1 for r in rows if room_status(r) == "occupied")
        return {
            "total_rooms": total,
            "occupied_rooms": occupied,
            "available_rooms": total - occupied,
            "occupancy_rate": round(occupied / total * 100) if total else 0,
        }
