# jobs/rent_reminders.py

import calendar
from datetime import date, timedelta
from typing import Optional

from core.config import settings
from core.errors import RemoteMutationError
from core.logging_config import get_logger
from core.supabase_client import get_admin_client
from models.enums import NotificationType
from stores.notifications import NotificationStore
from stores.tenants import TenantStore


log = get_logger("jobs.rent_reminders")


def effective_due_day(rent_due_day: int, day: date) -> int:
    """Due day within `day`'s month (the 31st falls back to the month's last day)."""
    return min(rent_due_day, calendar.monthrange(day.year, day.month)[1])


def tenants_due_on(leases: list[dict], due_date: date) -> list[dict]:
    return [
        lease for lease in leases
        if lease.get("rent_due_day")
        and effective_due_day(int(lease["rent_due_day"]), due_date) == due_date.day
    ]


def run(today: Optional[date] = None, days_ahead: Optional[int] = None) -> int:
    """
    CLI entry point for the rent reminder cron.
    Sends one warning notification per tenant whose rent is due
    `days_ahead` days from today. Returns the number sent.
    """
    client = get_admin_client()
    if not client:
        raise RuntimeError("Supabase not configured")

    today = today or date.today()
    days_ahead = settings.RENT_REMINDER_DAYS_AHEAD if days_ahead is None else days_ahead
    due_date = today + timedelta(days=days_ahead)

    tenants = TenantStore(client)
    notifications = NotificationStore(client)

    tenants.fetch_all()
    due = tenants_due_on(tenants.active_on(due_date), due_date)

    sent = 0
    for lease in due:
        when = "today" if days_ahead == 0 else f"in {days_ahead} days"
        try:
            notifications.notify(
                lease["id"],
                "Rent due reminder",
                f"Your monthly rent is due {when}.",
                NotificationType.warning,
                link="/tenant/payments",
            )
            sent += 1
        except RemoteMutationError as e:
            log.error(f"Reminder for tenant {lease['id']} failed: {e}")

    log.info(f"Rent reminders sent: {sent}/{len(due)} for {due_date.isoformat()}")
    return sent


if __name__ == "__main__":
    run()
