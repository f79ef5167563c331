# stores/meter_readings.py

from decimal import Decimal
from typing import Optional

from core.errors import ConstraintError
from stores.base import EntityStore


class MeterReadingStore(EntityStore):
    table = "meter_readings"
    storage_key = "meter-reading-storage"
    order_by = "reading_date"
    order_desc = True

    def prepare_create(self, data: dict) -> dict:
        if Decimal(str(data.get("reading_value", 0))) < 0:
            raise ConstraintError("Meter reading cannot be negative")
        return data

    def latest_for(self, room_id: str) -> Optional[dict]:
        readings = self.by_room(room_id)
        return readings[0] if readings else None

    def consumption(self, room_id: str) -> Optional[Decimal]:
        """Difference between the two most recent readings of a room."""
        readings = self.by_room(room_id)
        if len(readings) < 2:
            return None
        return Decimal(str(readings[0]["reading_value"])) - Decimal(str(readings[1]["reading_value"]))
