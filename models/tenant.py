# models/tenant.py

from datetime import date, datetime
from typing import Optional
from pydantic import BaseModel, Field, model_validator


class TenantBase(BaseModel):
    room_id: str = Field(..., min_length=1)
    lease_start_date: date
    lease_end_date: date
    rent_due_day: int = Field(..., ge=1, le=31, description="Day of month rent is due")


class TenantCreate(TenantBase):
    """
    Lease record. `id` is the tenant's profile id
    (the profile itself is provisioned outside this system).
    """
    id: str = Field(..., min_length=1)
    aadhaar_verified: bool = False
    contract_signed: bool = False

    @model_validator(mode="after")
    def lease_dates_ordered(self):
        if self.lease_start_date > self.lease_end_date:
            raise ValueError("lease_start_date must be on or before lease_end_date")
        return self


class TenantUpdate(BaseModel):
    room_id: Optional[str] = Field(None, min_length=1)
    lease_start_date: Optional[date] = None
    lease_end_date: Optional[date] = None
    rent_due_day: Optional[int] = Field(None, ge=1, le=31)
    aadhaar_verified: Optional[bool] = None
    contract_signed: Optional[bool] = None

    @model_validator(mode="after")
    def lease_dates_ordered(self):
        if (
            self.lease_start_date
            and self.lease_end_date
            and self.lease_start_date > self.lease_end_date
        ):
            raise ValueError("lease_start_date must be on or before lease_end_date")
        return self


class TenantRead(TenantBase):
    id: str
    aadhaar_verified: bool = False
    contract_signed: bool = False
    profile: Optional[dict] = None
    room: Optional[dict] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
