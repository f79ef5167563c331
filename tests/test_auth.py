# tests/test_auth.py

"""
Tests for login, logout and the public/fallback page routing.
"""

from types import SimpleNamespace
from unittest.mock import patch

import pytest
from fastapi.testclient import TestClient

from core.config import settings


def auth_response(user_id, email, token="test-token"):
    return SimpleNamespace(
        user=SimpleNamespace(id=user_id, email=email),
        session=SimpleNamespace(access_token=token, refresh_token="refresh"),
    )


@pytest.fixture
def backend(fake_supabase):
    fake_supabase.tables["profiles"] = [
        {"id": "owner-1", "role": "owner", "full_name": "Olivia"},
        {"id": "tenant-1", "role": "tenant", "full_name": "Tara"},
    ]
    return fake_supabase


@pytest.mark.parametrize(
    "user_id,email,home",
    [("owner-1", "owner@example.com", "/owner"), ("tenant-1", "tenant@example.com", "/tenant")],
)
def test_login_redirects_by_role(client: TestClient, backend, user_id, email, home):
    backend.auth.sign_in_with_password.return_value = auth_response(user_id, email)

    with patch("routers.auth.get_supabase_client", return_value=backend):
        response = client.post("/login", json={"email": email, "password": "password123"})

    assert response.status_code == 200
    data = response.json()
    assert data["access_token"] == "test-token"
    assert data["redirect_to"] == home
    assert data["role"] == home.strip("/")
    assert response.cookies.get(settings.SESSION_COOKIE_NAME) == "test-token"


def test_login_invalid_credentials(client: TestClient, backend):
    backend.auth.sign_in_with_password.side_effect = Exception("Invalid login credentials")

    with patch("routers.auth.get_supabase_client", return_value=backend):
        response = client.post("/login", json={"email": "owner@example.com", "password": "wrongpass"})

    assert response.status_code == 401
    assert response.json()["detail"] == "Invalid email or password"


def test_login_without_profile(client: TestClient, backend):
    backend.auth.sign_in_with_password.return_value = auth_response("nobody", "nobody@example.com")

    with patch("routers.auth.get_supabase_client", return_value=backend):
        response = client.post("/login", json={"email": "nobody@example.com", "password": "password123"})

    assert response.status_code == 401
    assert response.json()["detail"] == "User profile not found"


def test_login_form_validation(client: TestClient):
    response = client.post("/login", json={"email": "not-an-email", "password": "password123"})
    assert response.status_code == 422

    response = client.post("/login", json={"email": "owner@example.com", "password": "123"})
    assert response.status_code == 422


def test_login_not_configured(client: TestClient):
    with patch("routers.auth.get_supabase_client", return_value=None):
        response = client.post("/login", json={"email": "owner@example.com", "password": "password123"})
    assert response.status_code == 500


def test_login_rate_limiting(client: TestClient, backend):
    backend.auth.sign_in_with_password.side_effect = Exception("Invalid login credentials")

    with patch("routers.auth.get_supabase_client", return_value=backend):
        for _ in range(settings.LOGIN_RATE_LIMIT):
            response = client.post("/login", json={"email": "owner@example.com", "password": "wrongpass"})
            assert response.status_code == 401

        response = client.post("/login", json={"email": "owner@example.com", "password": "wrongpass"})

    assert response.status_code == 429
    assert "Retry-After" in response.headers

    # a different email is counted separately
    with patch("routers.auth.get_supabase_client", return_value=backend):
        response = client.post("/login", json={"email": "tenant@example.com", "password": "wrongpass"})
    assert response.status_code == 401


# -------------------------------------------------------------
# Login page + fallback routing
# -------------------------------------------------------------
def test_login_page_public(client: TestClient, login_as):
    login_as(None)
    response = client.get("/login")
    assert response.status_code == 200
    assert response.json()["page"] == "login"


def test_login_page_redirects_signed_in_user(client: TestClient, login_as):
    login_as("tenant")
    response = client.get("/login", follow_redirects=False)
    assert response.status_code == 303
    assert response.headers["location"] == "/tenant"


def test_root_redirects(client: TestClient, login_as):
    login_as(None)
    assert client.get("/", follow_redirects=False).headers["location"] == "/login"

    login_as("owner")
    assert client.get("/", follow_redirects=False).headers["location"] == "/owner"


def test_unknown_path_falls_back_to_owner(client: TestClient, login_as):
    login_as("tenant")

    response = client.get("/somewhere/else", follow_redirects=False)
    assert response.status_code == 303
    assert response.headers["location"] == "/owner"

    # ...where the guard sends the tenant home
    response = client.get("/owner", follow_redirects=False)
    assert response.headers["location"] == "/tenant"


def test_session_from_cookie(client: TestClient, backend):
    backend.auth.get_user.return_value = SimpleNamespace(
        user=SimpleNamespace(id="tenant-1", email="tenant@example.com")
    )
    client.cookies.set(settings.SESSION_COOKIE_NAME, "cookie-token")

    with patch("dependencies.auth.get_supabase_client", return_value=backend):
        response = client.get("/tenant/profile")

    assert response.status_code == 200
    assert response.json()["profile"]["id"] == "tenant-1"
    backend.auth.get_user.assert_called_with("cookie-token")


def test_bearer_token_session(client: TestClient, backend):
    backend.auth.get_user.return_value = SimpleNamespace(
        user=SimpleNamespace(id="owner-1", email="owner@example.com")
    )

    with patch("dependencies.auth.get_supabase_client", return_value=backend):
        response = client.get("/tenant/profile", headers={"Authorization": "Bearer abc"}, follow_redirects=False)

    assert response.status_code == 303
    assert response.headers["location"] == "/owner"


# -------------------------------------------------------------
# Logout
# -------------------------------------------------------------
def test_logout_clears_cached_stores(client: TestClient, login_as, state_storage):
    session = login_as("owner", user_id="owner-1")
    state_storage.set_item("owner-1", "room-storage", {"rows": [{"id": "r-1"}]})
    state_storage.set_item("owner-1", "payment-storage", {"rows": []})

    response = client.post("/logout")

    assert response.status_code == 200
    assert response.json()["redirect_to"] == "/login"
    assert state_storage.keys("owner-1") == []
    assert not session.is_authenticated


def test_logout_survives_remote_failure(client: TestClient, login_as, fake_supabase):
    fake_supabase.auth.sign_out.side_effect = Exception("network down")
    login_as("owner")

    response = client.post("/logout")

    assert response.status_code == 200
