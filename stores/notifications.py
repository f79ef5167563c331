# stores/notifications.py

from typing import Optional

from models.enums import NotificationType
from models.notification import NotificationCreate
from stores.base import EntityStore


class NotificationStore(EntityStore):
    """Per-user feed; displayed newest first."""

    table = "notifications"
    storage_key = "notification-storage"
    order_by = "created_at"
    order_desc = True

    tenant_field = "user_id"

    def fetch_for_user(self, user_id: str) -> list[dict]:
        return self.fetch_all({"user_id": user_id})

    def prepare_create(self, data: dict) -> dict:
        data["read"] = False
        data.setdefault("type", NotificationType.info.value)
        return data

    def notify(
        self,
        user_id: str,
        title: str,
        message: str,
        type: NotificationType = NotificationType.info,
        link: Optional[str] = None,
    ) -> dict:
        payload = NotificationCreate(
            user_id=user_id, title=title, message=message, type=type, link=link
        )
        return self.create(payload.model_dump(mode="json"))

    # -------------------------------------------------------------
    # Read state
    # -------------------------------------------------------------
    def mark_read(self, notification_id: str) -> Optional[dict]:
        return self.update(notification_id, {"read": True})

    def mark_all_read(self, user_id: str):
        """Idempotent: a second call matches nothing and changes nothing."""
        self.update_where({"user_id": user_id, "read": False}, {"read": True})

    # -------------------------------------------------------------
    # Projections
    # -------------------------------------------------------------
    def for_user(self, user_id: str, unread_only: bool = False) -> list[dict]:
        rows = self.by_tenant(user_id)
        if unread_only:
            rows = [r for r in rows if not r.get("read")]
        return rows

    def unread_count(self, user_id: str) -> int:
        return len(self.for_user(user_id, unread_only=True))
