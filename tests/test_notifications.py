# tests/test_notifications.py

"""
Tests for the notification feed (store + both role pages).
"""

import pytest

from models.enums import NotificationType
from stores.notifications import NotificationStore


def note(note_id, user_id="tenant-1", read=False, created_at="2024-03-01T09:00:00+00:00"):
    return {
        "id": note_id,
        "user_id": user_id,
        "title": "Rent due reminder",
        "message": "Your monthly rent is due in 3 days.",
        "type": "warning",
        "read": read,
        "link": "/tenant/payments",
        "created_at": created_at,
    }


@pytest.fixture
def backend(fake_supabase):
    fake_supabase.tables["notifications"] = [
        note("n-1", created_at="2024-03-01T09:00:00+00:00"),
        note("n-2", created_at="2024-03-02T09:00:00+00:00"),
        note("n-3", read=True, created_at="2024-02-01T09:00:00+00:00"),
        note("n-4", user_id="owner-1"),
    ]
    return fake_supabase


# -------------------------------------------------------------
# Store
# -------------------------------------------------------------
def test_feed_newest_first_with_unread_count(backend):
    store = NotificationStore(backend)
    store.fetch_for_user("tenant-1")

    assert [n["id"] for n in store.for_user("tenant-1")] == ["n-2", "n-1", "n-3"]
    assert store.unread_count("tenant-1") == 2
    assert [n["id"] for n in store.for_user("tenant-1", unread_only=True)] == ["n-2", "n-1"]


def test_mark_all_read_twice_is_idempotent(backend):
    store = NotificationStore(backend)
    store.fetch_for_user("tenant-1")

    store.mark_all_read("tenant-1")
    store.mark_all_read("tenant-1")

    assert store.unread_count("tenant-1") == 0
    assert all(n["read"] for n in backend.tables["notifications"] if n["user_id"] == "tenant-1")
    # other users untouched
    assert backend.tables["notifications"][3]["read"] is False


def test_mark_read_and_delete(backend):
    store = NotificationStore(backend)
    store.fetch_for_user("tenant-1")

    store.mark_read("n-1")
    assert store.get("n-1")["read"] is True
    assert store.unread_count("tenant-1") == 1

    store.delete("n-2")
    assert store.get("n-2") is None
    assert store.unread_count("tenant-1") == 0


def test_notify_creates_unread(fake_supabase):
    store = NotificationStore(fake_supabase)

    created = store.notify("tenant-9", "Hello", "Welcome aboard", NotificationType.success)

    assert created["read"] is False
    assert created["type"] == "success"
    assert store.unread_count("tenant-9") == 1


# -------------------------------------------------------------
# Pages
# -------------------------------------------------------------
def test_tenant_notifications_page(client, login_as, backend):
    login_as("tenant", user_id="tenant-1")

    response = client.get("/tenant/notifications")

    assert response.status_code == 200
    data = response.json()
    assert data["unread_count"] == 2
    assert [n["id"] for n in data["notifications"]] == ["n-2", "n-1", "n-3"]

    response = client.get("/tenant/notifications", params={"filter": "unread"})
    assert [n["id"] for n in response.json()["notifications"]] == ["n-2", "n-1"]


def test_owner_notifications_page(client, login_as, backend):
    login_as("owner", user_id="owner-1")
    response = client.get("/owner/notifications")
    assert [n["id"] for n in response.json()["notifications"]] == ["n-4"]


def test_fetch_failure_shows_empty_feed(client, login_as, backend):
    backend.fail("notifications", "select")
    login_as("tenant", user_id="tenant-1")

    response = client.get("/tenant/notifications")

    assert response.status_code == 200
    assert response.json() == {"notifications": [], "unread_count": 0}


def test_mark_all_read_endpoint(client, login_as, backend):
    login_as("tenant", user_id="tenant-1")

    for _ in range(2):
        response = client.post("/tenant/notifications/read-all")
        assert response.status_code == 200

    response = client.get("/tenant/notifications")
    assert response.json()["unread_count"] == 0


def test_mark_one_read_and_delete_endpoints(client, login_as, backend):
    login_as("tenant", user_id="tenant-1")

    response = client.post("/tenant/notifications/n-1/read")
    assert response.status_code == 200
    assert response.json()["read"] is True

    response = client.delete("/tenant/notifications/n-2")
    assert response.status_code == 200
    assert all(n["id"] != "n-2" for n in backend.tables["notifications"])
