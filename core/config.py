from typing import List, Optional
from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field


class Settings(BaseSettings):
    # -------------------------------------------------
    # General
    # -------------------------------------------------
    PROJECT_NAME: str = "RentProp API"
    ENV: str = "development"

    # -------------------------------------------------
    # Frontend origins (CORS)
    # -------------------------------------------------
    FRONTEND_ORIGINS: List[str] = [
        "http://localhost:5173",
        "http://localhost:3000",
    ]

    BACKEND_CORS_ORIGINS: List[str] = []

    # -------------------------------------------------
    # Supabase (DB, Storage & Auth)
    # -------------------------------------------------
    SUPABASE_URL: Optional[str] = None
    SUPABASE_ANON_KEY: Optional[str] = None
    SUPABASE_SERVICE_ROLE_KEY: Optional[str] = None

    # -------------------------------------------------
    # Session + local persisted store state
    # -------------------------------------------------
    SESSION_COOKIE_NAME: str = "rentprop_session"
    STATE_DIR: str = Field(".rentprop_state", description="Directory for persisted store caches")

    # -------------------------------------------------
    # Uploads (profile photos, payment proofs)
    # -------------------------------------------------
    MAX_UPLOAD_BYTES: int = Field(5 * 1024 * 1024, description="Upload size limit (default: 5MB)")

    # -------------------------------------------------
    # Login rate limiting
    # -------------------------------------------------
    LOGIN_RATE_LIMIT: int = Field(10, description="Login attempts allowed per window (default: 10)")
    LOGIN_RATE_WINDOW_SECONDS: int = Field(300, description="Login rate limit window (default: 5 minutes)")

    # -------------------------------------------------
    # Rent reminder job
    # -------------------------------------------------
    RENT_REMINDER_DAYS_AHEAD: int = Field(3, description="Days before rent_due_day to remind tenants")

    # -------------------------------------------------
    # Model Config (process environment only)
    # -------------------------------------------------
    model_config = SettingsConfigDict(case_sensitive=True)


# Instantiate settings
settings = Settings()

# -------------------------------------------------
# Build CORS list after loading settings
# -------------------------------------------------
settings.BACKEND_CORS_ORIGINS = sorted(
    {origin.rstrip("/") for origin in settings.FRONTEND_ORIGINS}
)
