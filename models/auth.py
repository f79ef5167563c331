from pydantic import BaseModel, EmailStr, Field

from .enums import Role


class LoginRequest(BaseModel):
    email: EmailStr
    password: str = Field(..., min_length=6, description="Password must be at least 6 characters")


class LoginResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    role: Role
    redirect_to: str
