# models/room.py

from datetime import datetime
from decimal import Decimal
from typing import Optional
from pydantic import BaseModel, Field, field_validator, model_validator

from .enums import RoomStatus


def room_status(row: dict) -> RoomStatus:
    """
    Badge for a room row. A room with a current tenant is never
    shown as available, even if the occupancy flag lags behind.
    """
    if row.get("is_occupied") or row.get("current_tenant_id"):
        return RoomStatus.occupied
    return RoomStatus.available


# -------------------------------------------------
# Shared fields
# -------------------------------------------------
class RoomBase(BaseModel):
    room_number: str = Field(..., min_length=1, description="Room number (unique per property)")
    floor_number: int = Field(..., ge=0, description="Floor number must be 0 or greater")
    monthly_rent: Decimal = Field(..., ge=0, description="Rent must be 0 or greater")

    @field_validator("room_number", mode="before")
    def strip_room_number(cls, v):
        if isinstance(v, (int, float)):
            v = str(v)
        if isinstance(v, str):
            return v.strip()
        return v


# -------------------------------------------------
# Create
# -------------------------------------------------
class RoomCreate(RoomBase):
    is_occupied: bool = False
    current_tenant_id: Optional[str] = None

    @model_validator(mode="after")
    def occupied_needs_tenant(self):
        if self.is_occupied and not self.current_tenant_id:
            raise ValueError("An occupied room needs a current tenant")
        return self


# -------------------------------------------------
# Update (PATCH)
# -------------------------------------------------
class RoomUpdate(BaseModel):
    room_number: Optional[str] = Field(None, min_length=1)
    floor_number: Optional[int] = Field(None, ge=0)
    monthly_rent: Optional[Decimal] = Field(None, ge=0)
    is_occupied: Optional[bool] = None
    current_tenant_id: Optional[str] = None

    @model_validator(mode="after")
    def occupied_needs_tenant(self):
        # Only checkable when both sides are in the patch;
        # RoomStore re-checks against the cached row.
        fields = self.model_fields_set
        if (
            "is_occupied" in fields
            and "current_tenant_id" in fields
            and self.is_occupied
            and not self.current_tenant_id
        ):
            raise ValueError("An occupied room needs a current tenant")
        return self


# -------------------------------------------------
# Read (Supabase → API response)
# -------------------------------------------------
class RoomRead(RoomBase):
    id: str
    is_occupied: bool = False
    current_tenant_id: Optional[str] = None
    status: RoomStatus = RoomStatus.available
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @model_validator(mode="before")
    def derive_status(cls, data):
        if isinstance(data, dict):
            data = {**data, "status": room_status(data)}
        return data
