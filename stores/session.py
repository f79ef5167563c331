# stores/session.py

"""
Session/Role store: who is signed in, and in which role.

States:
    initializing ──initialize()──► anonymous | authenticated
    anonymous ──login()──► authenticating ──► authenticated | anonymous
    authenticated ──logout()──► anonymous

A failed login keeps its user-visible message in `error` until
clear_error() is called (or the next login attempt starts).
"""

from datetime import date
from typing import Optional

from pydantic import BaseModel

from core.errors import (
    AuthError,
    ProfileMissingError,
    RemoteFetchError,
    RemoteMutationError,
    extract_supabase_error,
)
from core.logging_config import get_logger
from core.roles import home_for, normalize_role
from core.supabase_client import scope_client_to_user
from core.utils import sanitize, utc_now_iso
from models.enums import BaseStrEnum, Role


log = get_logger("stores.session")


class SessionStatus(BaseStrEnum):
    initializing = "initializing"
    anonymous = "anonymous"
    authenticating = "authenticating"
    authenticated = "authenticated"


# ============================================================
# Session identity
# ============================================================
class SessionUser(BaseModel):
    id: str
    email: str = ""
    role: Role
    full_name: Optional[str] = None
    verified: bool = False

    aadhaar_number: Optional[str] = None
    phone_number: Optional[str] = None
    date_of_birth: Optional[date] = None
    profile_photo_url: Optional[str] = None

    @property
    def name(self) -> str:
        return self.full_name or self.email

    @property
    def home(self) -> str:
        return home_for(self.role)

    @classmethod
    def from_profile(cls, profile: dict, email: Optional[str]) -> "SessionUser":
        role = normalize_role(profile.get("role"))
        if role is None:
            raise AuthError(f"Unsupported role {profile.get('role')!r}")

        return cls(
            id=str(profile["id"]),
            email=email or profile.get("email") or "",
            role=role,
            full_name=profile.get("full_name"),
            # Owners need no onboarding; tenants count as verified once
            # their identity number is on file.
            verified=role == Role.owner or bool(profile.get("aadhaar_number")),
            aadhaar_number=profile.get("aadhaar_number"),
            phone_number=profile.get("phone_number"),
            date_of_birth=profile.get("date_of_birth") or None,
            profile_photo_url=profile.get("profile_photo_url"),
        )


# ============================================================
# Session store
# ============================================================
class SessionStore:
    def __init__(self, client):
        self.client = client
        self.status = SessionStatus.initializing
        self.user: Optional[SessionUser] = None
        self.error: Optional[str] = None
        self.access_token: Optional[str] = None
        self.refresh_token: Optional[str] = None

    # ---------------------------------------------------------
    # State
    # ---------------------------------------------------------
    @property
    def is_authenticated(self) -> bool:
        return self.status == SessionStatus.authenticated and self.user is not None

    @property
    def is_loading(self) -> bool:
        return self.status in (SessionStatus.initializing, SessionStatus.authenticating)

    @property
    def role(self) -> Optional[Role]:
        return self.user.role if self.user else None

    def _set_anonymous(self):
        self.status = SessionStatus.anonymous
        self.user = None
        self.access_token = None
        self.refresh_token = None

    def _set_authenticated(self, user: SessionUser, access_token: Optional[str], refresh_token: Optional[str] = None):
        self.user = user
        self.access_token = access_token
        self.refresh_token = refresh_token
        self.status = SessionStatus.authenticated
        if access_token:
            scope_client_to_user(self.client, access_token)

    # ---------------------------------------------------------
    # Profile lookup
    # ---------------------------------------------------------
    def _load_profile(self, user_id: str) -> dict:
        try:
            result = (
                self.client.table("profiles")
                .select("*")
                .eq("id", user_id)
                .maybe_single()
                .execute()
            )
        except Exception as e:
            raise RemoteFetchError("Failed to load profile", e)

        # maybe_single() can hand back None instead of an empty response
        profile = result.data if result is not None else None
        if not profile:
            raise ProfileMissingError(f"No profile row for user {user_id}")
        return profile

    # ---------------------------------------------------------
    # login / logout / initialize / clear_error
    # ---------------------------------------------------------
    def login(self, email: str, password: str) -> SessionUser:
        email = email.strip().lower()
        self.status = SessionStatus.authenticating
        self.error = None

        try:
            response = self.client.auth.sign_in_with_password(
                {"email": email, "password": password}
            )
        except Exception as e:
            log.warning(f"Login attempt failed for {email}: {type(e).__name__}")
            return self._fail(AuthError(extract_supabase_error(e)))

        auth_user = getattr(response, "user", None)
        auth_session = getattr(response, "session", None)
        if not auth_user or not auth_session or not auth_session.access_token:
            return self._fail(AuthError("Login failed"))

        try:
            profile = self._load_profile(auth_user.id)
            user = SessionUser.from_profile(profile, auth_user.email)
        except AuthError as e:
            log.warning(f"Login for {email} rejected: {e}")
            return self._fail(e)
        except RemoteFetchError as e:
            log.error(f"Login for {email}: {e}")
            return self._fail(AuthError(str(e)))

        self._set_authenticated(user, auth_session.access_token, getattr(auth_session, "refresh_token", None))
        log.info(f"User {user.id} signed in as {user.role}")
        return user

    def _fail(self, error: AuthError):
        self._set_anonymous()
        self.error = error.user_message
        raise error

    def logout(self):
        """Never raises: remote sign-out failures are only logged."""
        user_id = self.user.id if self.user else None
        try:
            # Per-request clients hold no session; revoke the token itself
            if self.access_token:
                self.client.auth.admin.sign_out(self.access_token)
            self.client.auth.sign_out()
        except Exception as e:
            log.warning(f"Remote sign-out failed for {user_id}: {extract_supabase_error(e)}")
        finally:
            self._set_anonymous()
        if user_id:
            log.info(f"User {user_id} signed out")

    def initialize(self, access_token: Optional[str] = None) -> Optional[SessionUser]:
        """
        Restore a persisted session: the given access token (bearer or
        cookie), else whatever session the client itself holds.
        """
        self.status = SessionStatus.initializing
        auth_user = None
        token = access_token
        refresh = None

        try:
            if access_token:
                response = self.client.auth.get_user(access_token)
                auth_user = getattr(response, "user", None)
            else:
                stored = self.client.auth.get_session()
                if stored is not None:
                    auth_user = stored.user
                    token = stored.access_token
                    refresh = getattr(stored, "refresh_token", None)
        except Exception as e:
            log.info(f"No usable session: {extract_supabase_error(e)}")
            auth_user = None

        if not auth_user:
            self._set_anonymous()
            return None

        try:
            profile = self._load_profile(auth_user.id)
            user = SessionUser.from_profile(profile, auth_user.email)
        except (AuthError, RemoteFetchError) as e:
            log.warning(f"Session for {auth_user.id} not restored: {e}")
            self._set_anonymous()
            return None

        self._set_authenticated(user, token, refresh)
        return user

    def clear_error(self):
        self.error = None

    # ---------------------------------------------------------
    # Profile edits
    # ---------------------------------------------------------
    def update_profile(self, patch: dict) -> SessionUser:
        if not self.is_authenticated:
            raise AuthError("Not signed in")

        payload = sanitize({**patch, "updated_at": utc_now_iso()})
        try:
            result = (
                self.client.table("profiles")
                .update(payload, returning="representation")
                .eq("id", self.user.id)
                .execute()
            )
        except Exception as e:
            raise RemoteMutationError("Failed to update profile", e)

        if result.data:
            profile = result.data[0]
        else:
            profile = {**self.user.model_dump(mode="json"), **payload}

        self.user = SessionUser.from_profile(profile, self.user.email)
        log.info(f"User {self.user.id} updated their profile")
        return self.user
