# tests/test_session_store.py

"""
Tests for the session store state machine.
"""

from types import SimpleNamespace

import pytest

from core.errors import AuthError, ProfileMissingError
from models.enums import Role
from stores.session import SessionStatus, SessionStore


def auth_response(user_id="u-1", email="owner@example.com", token="tok-1"):
    return SimpleNamespace(
        user=SimpleNamespace(id=user_id, email=email),
        session=SimpleNamespace(access_token=token, refresh_token="refresh-1"),
    )


@pytest.fixture
def owner_backend(fake_supabase):
    fake_supabase.tables["profiles"] = [
        {"id": "u-1", "role": "owner", "full_name": "Olivia Owner"},
    ]
    fake_supabase.auth.sign_in_with_password.return_value = auth_response()
    return fake_supabase


def test_new_session_is_initializing(fake_supabase):
    session = SessionStore(fake_supabase)
    assert session.status == SessionStatus.initializing
    assert session.is_loading
    assert not session.is_authenticated


def test_login_loads_profile_and_role(owner_backend):
    session = SessionStore(owner_backend)

    user = session.login("  Owner@Example.com ", "secret123")

    assert session.status == SessionStatus.authenticated
    assert user.role == Role.owner
    assert user.home == "/owner"
    assert user.verified is True
    assert user.name == "Olivia Owner"
    assert session.access_token == "tok-1"
    owner_backend.auth.sign_in_with_password.assert_called_once_with(
        {"email": "owner@example.com", "password": "secret123"}
    )
    owner_backend.postgrest.auth.assert_called_once_with("tok-1")


def test_login_invalid_credentials_keeps_error(fake_supabase):
    fake_supabase.auth.sign_in_with_password.side_effect = Exception("Invalid login credentials")
    session = SessionStore(fake_supabase)

    with pytest.raises(AuthError):
        session.login("owner@example.com", "wrong-pass")

    assert session.status == SessionStatus.anonymous
    assert session.user is None
    assert session.error == "Invalid email or password"

    session.clear_error()
    assert session.error is None
    assert session.status == SessionStatus.anonymous


def test_login_without_profile_row(fake_supabase):
    fake_supabase.auth.sign_in_with_password.return_value = auth_response(user_id="ghost")
    session = SessionStore(fake_supabase)

    with pytest.raises(ProfileMissingError):
        session.login("ghost@example.com", "secret123")

    assert session.status == SessionStatus.anonymous
    assert session.error == "User profile not found"


def test_tenant_verified_only_with_identity_number(fake_supabase):
    fake_supabase.tables["profiles"] = [
        {"id": "t-1", "role": "tenant", "full_name": "Tara"},
        {"id": "t-2", "role": "tenant", "full_name": "Tom", "aadhaar_number": "123412341234"},
    ]
    fake_supabase.auth.sign_in_with_password.side_effect = [
        auth_response("t-1", "tara@example.com"),
        auth_response("t-2", "tom@example.com"),
    ]

    first = SessionStore(fake_supabase).login("tara@example.com", "secret123")
    second = SessionStore(fake_supabase).login("tom@example.com", "secret123")

    assert first.role == Role.tenant and first.home == "/tenant"
    assert first.verified is False
    assert second.verified is True


def test_initialize_with_token_restores_session(owner_backend):
    owner_backend.auth.get_user.return_value = SimpleNamespace(
        user=SimpleNamespace(id="u-1", email="owner@example.com")
    )
    session = SessionStore(owner_backend)

    user = session.initialize("tok-9")

    assert user is not None
    assert session.is_authenticated
    assert session.access_token == "tok-9"
    owner_backend.auth.get_user.assert_called_once_with("tok-9")


def test_initialize_without_any_session_is_anonymous(fake_supabase):
    session = SessionStore(fake_supabase)

    assert session.initialize() is None
    assert session.status == SessionStatus.anonymous
    assert not session.is_loading


def test_initialize_with_expired_token_is_anonymous(fake_supabase):
    fake_supabase.auth.get_user.side_effect = Exception("JWT expired")
    session = SessionStore(fake_supabase)

    assert session.initialize("stale-token") is None
    assert session.status == SessionStatus.anonymous


def test_logout_never_raises(owner_backend):
    owner_backend.auth.sign_out.side_effect = Exception("network down")
    session = SessionStore(owner_backend)
    session.login("owner@example.com", "secret123")

    session.logout()

    assert session.status == SessionStatus.anonymous
    assert session.user is None
    assert session.access_token is None


def test_update_profile_refreshes_identity(fake_supabase):
    fake_supabase.tables["profiles"] = [{"id": "t-1", "role": "tenant", "full_name": "Tara"}]
    fake_supabase.auth.sign_in_with_password.return_value = auth_response("t-1", "tara@example.com")
    session = SessionStore(fake_supabase)
    session.login("tara@example.com", "secret123")

    user = session.update_profile({"aadhaar_number": "999988887777", "phone_number": "9876543210"})

    assert user.verified is True
    assert user.phone_number == "9876543210"
    assert fake_supabase.tables["profiles"][0]["aadhaar_number"] == "999988887777"


def test_update_profile_requires_login(fake_supabase):
    session = SessionStore(fake_supabase)
    with pytest.raises(AuthError):
        session.update_profile({"full_name": "Nobody"})


def test_logout_revokes_remote_token(owner_backend):
    session = SessionStore(owner_backend)
    session.login("owner@example.com", "secret123")

    session.logout()

    owner_backend.auth.admin.sign_out.assert_called_once_with("tok-1")


def test_logout_revokes_restored_session_token(owner_backend):
    owner_backend.auth.get_user.return_value = SimpleNamespace(
        user=SimpleNamespace(id="u-1", email="owner@example.com")
    )
    session = SessionStore(owner_backend)
    session.initialize("user-jwt")

    session.logout()

    owner_backend.auth.admin.sign_out.assert_called_once_with("user-jwt")
    assert session.status == SessionStatus.anonymous


def test_logout_survives_failed_revoke(owner_backend):
    owner_backend.auth.admin.sign_out.side_effect = Exception("network down")
    session = SessionStore(owner_backend)
    session.login("owner@example.com", "secret123")

    session.logout()

    assert session.status == SessionStatus.anonymous
