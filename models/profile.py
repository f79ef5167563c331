# models/profile.py

from datetime import date, datetime
from typing import Optional
from pydantic import BaseModel, Field, field_validator

from .enums import Role


AADHAAR_PATTERN = r"^\d{12}$"


class Profile(BaseModel):
    """Row of the `profiles` table, plus the auth email."""

    id: str
    email: Optional[str] = None
    full_name: Optional[str] = None
    role: Role
    aadhaar_number: Optional[str] = None
    phone_number: Optional[str] = None
    date_of_birth: Optional[date] = None
    profile_photo_url: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @field_validator("role", mode="before")
    def normalize_role(cls, v):
        if isinstance(v, str):
            return v.strip().lower()
        return v


class ProfileUpdate(BaseModel):
    """Self-service profile form."""

    full_name: str = Field(..., min_length=1, description="Full name is required")
    phone_number: str = Field(..., min_length=10, description="Phone number must be at least 10 digits")
    date_of_birth: date

    @field_validator("full_name", "phone_number", mode="before")
    def strip_text(cls, v):
        if isinstance(v, str):
            return v.strip()
        return v


class VerificationSubmit(BaseModel):
    """Tenant onboarding: identity number (the photo comes as a file)."""

    aadhaar_number: str = Field(..., pattern=AADHAAR_PATTERN, description="12-digit Aadhaar number")

    @field_validator("aadhaar_number", mode="before")
    def strip_spaces(cls, v):
        if isinstance(v, str):
            return v.replace(" ", "").strip()
        return v
