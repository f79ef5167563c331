# core/errors.py

from typing import Optional

from fastapi import HTTPException


# ============================================================
# Domain exceptions
# ============================================================
class RentPropError(Exception):
    """Base class for errors raised by stores and services."""


class AuthError(RentPropError):
    """Invalid credentials or an unusable remote session."""

    user_message = "Invalid email or password"


class ProfileMissingError(AuthError):
    """Authenticated, but no matching row in `profiles`."""

    user_message = "User profile not found"


class RemoteMutationError(RentPropError):
    """
    A remote call to the backend failed (network or backend rejection).
    Keeps the underlying exception so routers can map it to a status code.
    """

    def __init__(self, operation: str, cause: Exception):
        self.operation = operation
        self.cause = cause
        super().__init__(f"{operation}: {extract_supabase_error(cause)}")


class RemoteFetchError(RemoteMutationError):
    """A read against the backend failed; callers may degrade to an empty view."""


class UploadError(RentPropError):
    """Object storage upload failed or the file was rejected."""

    def __init__(self, message: str, cause: Optional[Exception] = None):
        self.cause = cause
        super().__init__(message)


class InvalidTransitionError(RentPropError):
    """Status change not allowed from the current status."""

    def __init__(self, current: str, requested: str):
        self.current = current
        self.requested = requested
        super().__init__(f"Cannot change status from '{current}' to '{requested}'")


class ConstraintError(RentPropError):
    """The write would break a domain invariant (missing room, occupied without tenant, ...)."""


class AccessRedirect(RentPropError):
    """Raised by the page guard; app handler turns it into a 303."""

    def __init__(self, target: str):
        self.target = target
        super().__init__(f"Redirect to {target}")


# ============================================================
# Supabase error helpers
# ============================================================
def extract_supabase_error(error: Exception) -> str:
    """
    Safely extract readable details from Supabase Python client errors.
    Handles:
      • PostgREST errors
      • GoTrue (Auth) errors
      • Storage errors
      • Generic Python exceptions
    """

    # Case 1: Supabase Auth / PostgREST errors carry .message
    message = getattr(error, "message", None)
    if message:
        return str(message)

    # Case 2: errors with args (common)
    if getattr(error, "args", None):
        return str(error.args[0])

    # Case 3: Plain string fallback
    return str(error) or "Unknown Supabase error"


def handle_supabase_error(error: Exception, operation: str = "Database operation", status_code: int = 500) -> HTTPException:
    """
    Handle Supabase errors with consistent formatting.
    Returns HTTPException (doesn't raise) so caller can customize or re-raise.

    Args:
        error: The exception that occurred (RemoteMutationError is unwrapped)
        operation: Description of what operation failed (e.g., "Failed to create room")
        status_code: HTTP status code (default 500)
    """
    from core.logging_config import logger

    if isinstance(error, RemoteMutationError):
        error = error.cause

    error_detail = extract_supabase_error(error)
    logger.error(f"{operation}: {error_detail}")

    # Provide user-friendly messages for common errors
    error_lower = error_detail.lower()
    if "duplicate" in error_lower or "unique" in error_lower:
        return HTTPException(status_code=400, detail=f"{operation}: Record already exists")
    elif "foreign key" in error_lower:
        return HTTPException(status_code=400, detail=f"{operation}: Invalid reference")
    elif "not found" in error_lower or "does not exist" in error_lower:
        return HTTPException(status_code=404, detail=f"{operation}: Resource not found")
    else:
        return HTTPException(status_code=status_code, detail=f"{operation} failed")
