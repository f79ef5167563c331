# routers/notifications.py

from typing import Literal

from fastapi import APIRouter, Depends, HTTPException, Query

from core.errors import RemoteFetchError, RemoteMutationError, handle_supabase_error
from core.logging_config import logger
from dependencies.auth import get_current_user, get_stores, require_page
from models.enums import Role
from models.notification import NotificationFeed, NotificationRead
from stores.registry import StoreRegistry
from stores.session import SessionUser


def build_router(role: Role) -> APIRouter:
    """Same notifications page under /owner and /tenant."""
    page_path = f"/{role.value}/notifications"

    router = APIRouter(
        prefix=page_path,
        tags=["Notifications"],
        dependencies=[Depends(require_page(page_path))],
    )

    # -----------------------------------------------------
    # LIST (newest first) + unread count
    # A failed fetch renders an empty feed
    # -----------------------------------------------------
    @router.get("", response_model=NotificationFeed, summary="Notifications page")
    def list_notifications(
        filter: Literal["all", "unread"] = Query("all"),
        current_user: SessionUser = Depends(get_current_user),
        stores: StoreRegistry = Depends(get_stores),
    ):
        try:
            stores.notifications.fetch_for_user(current_user.id)
        except RemoteFetchError as e:
            logger.warning(f"Notifications for {current_user.id} unavailable: {e}")
            return NotificationFeed(notifications=[], unread_count=0)

        rows = stores.notifications.for_user(current_user.id, unread_only=filter == "unread")
        return NotificationFeed(
            notifications=[NotificationRead.model_validate(n) for n in rows],
            unread_count=stores.notifications.unread_count(current_user.id),
        )

    # -----------------------------------------------------
    # MARK ALL READ (idempotent)
    # -----------------------------------------------------
    @router.post("/read-all", summary="Mark all notifications read")
    def mark_all_read(
        current_user: SessionUser = Depends(get_current_user),
        stores: StoreRegistry = Depends(get_stores),
    ):
        try:
            stores.notifications.mark_all_read(current_user.id)
        except RemoteMutationError as e:
            raise handle_supabase_error(e, "Failed to mark notifications read")
        return {"success": True, "unread_count": stores.notifications.unread_count(current_user.id)}

    # -----------------------------------------------------
    # MARK ONE READ
    # -----------------------------------------------------
    @router.post("/{notification_id}/read", response_model=NotificationRead, summary="Mark a notification read")
    def mark_read(notification_id: str, stores: StoreRegistry = Depends(get_stores)):
        try:
            notification = stores.notifications.mark_read(notification_id)
        except RemoteMutationError as e:
            raise handle_supabase_error(e, "Failed to mark notification read")

        if notification is None:
            raise HTTPException(404, "Notification not found")
        return notification

    # -----------------------------------------------------
    # DELETE
    # -----------------------------------------------------
    @router.delete("/{notification_id}", summary="Delete a notification")
    def delete_notification(notification_id: str, stores: StoreRegistry = Depends(get_stores)):
        try:
            stores.notifications.delete(notification_id)
        except RemoteMutationError as e:
            raise handle_supabase_error(e, "Failed to delete notification")
        return {"success": True, "deleted_id": notification_id}

    return router


owner_router = build_router(Role.owner)
tenant_router = build_router(Role.tenant)
