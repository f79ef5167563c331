# models/maintenance.py

from datetime import datetime
from typing import Optional
from pydantic import BaseModel, Field, field_validator

from .enums import MaintenanceStatus


REQUEST_TYPES = [
    "plumbing",
    "electrical",
    "appliance",
    "furniture",
    "cleaning",
    "pest_control",
    "other",
]


class MaintenanceRequestCreate(BaseModel):
    """Tenant form. Tenant, room and status are filled in server-side."""

    request_type: str = Field(..., min_length=1, description="Request type is required")
    description: str = Field(..., min_length=10, description="Description must be at least 10 characters")

    @field_validator("request_type", "description", mode="before")
    def strip_text(cls, v):
        if isinstance(v, str):
            return v.strip()
        return v


class MaintenanceStatusUpdate(BaseModel):
    """Owner action."""

    status: MaintenanceStatus


class MaintenanceRequestRead(BaseModel):
    id: str
    tenant_id: str
    room_id: Optional[str] = None
    request_type: str
    description: Optional[str] = None
    status: MaintenanceStatus = MaintenanceStatus.pending
    tenant: Optional[dict] = None
    room: Optional[dict] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
