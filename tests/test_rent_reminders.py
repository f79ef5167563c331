# tests/test_rent_reminders.py

from datetime import date
from unittest.mock import patch

import pytest

from jobs import rent_reminders
from jobs.rent_reminders import effective_due_day, tenants_due_on


def lease(tenant_id, due_day, start="2024-01-01", end="2024-12-31"):
    return {
        "id": tenant_id,
        "room_id": "r-1",
        "lease_start_date": start,
        "lease_end_date": end,
        "rent_due_day": due_day,
    }


def test_effective_due_day_clamps_to_month_end():
    assert effective_due_day(31, date(2024, 2, 10)) == 29
    assert effective_due_day(31, date(2023, 2, 10)) == 28
    assert effective_due_day(15, date(2024, 4, 1)) == 15


def test_tenants_due_on():
    leases = [lease("a", 5), lease("b", 6), lease("c", 31)]
    assert [l["id"] for l in tenants_due_on(leases, date(2024, 3, 5))] == ["a"]
    assert [l["id"] for l in tenants_due_on(leases, date(2024, 4, 30))] == ["c"]


def test_run_sends_reminders(fake_supabase):
    fake_supabase.tables["tenants"] = [
        lease("tenant-1", 8),
        lease("tenant-2", 9),
        # lease already over
        lease("tenant-3", 8, start="2023-01-01", end="2023-12-31"),
    ]

    with patch("jobs.rent_reminders.get_admin_client", return_value=fake_supabase):
        sent = rent_reminders.run(today=date(2024, 3, 5), days_ahead=3)

    assert sent == 1
    notes = fake_supabase.tables["notifications"]
    assert len(notes) == 1
    assert notes[0]["user_id"] == "tenant-1"
    assert notes[0]["title"] == "Rent due reminder"
    assert notes[0]["type"] == "warning"
    assert notes[0]["link"] == "/tenant/payments"
    assert notes[0]["message"] == "Your monthly rent is due in 3 days."


def test_run_continues_after_failed_notification(fake_supabase):
    fake_supabase.tables["tenants"] = [lease("tenant-1", 8)]
    fake_supabase.fail("notifications", "insert")

    with patch("jobs.rent_reminders.get_admin_client", return_value=fake_supabase):
        assert rent_reminders.run(today=date(2024, 3, 5), days_ahead=3) == 0


def test_run_requires_configuration():
    with patch("jobs.rent_reminders.get_admin_client", return_value=None):
        with pytest.raises(RuntimeError):
            rent_reminders.run()
