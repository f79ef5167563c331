# models/notification.py

from typing import Optional
from datetime import datetime
from pydantic import BaseModel, Field

from .enums import NotificationType


class NotificationCreate(BaseModel):
    """Created by system events (payment verified, new request, rent due)."""
    user_id: str
    title: str = Field(..., min_length=1)
    message: str = Field(..., min_length=1)
    type: NotificationType = NotificationType.info
    link: Optional[str] = Field(None, description="Page path to open, e.g. /tenant/payments")


class NotificationRead(BaseModel):
    id: str
    user_id: str
    title: str
    message: str
    type: NotificationType = NotificationType.info
    read: bool = False
    link: Optional[str] = None
    created_at: Optional[datetime] = None


class NotificationFeed(BaseModel):
    notifications: list[NotificationRead]
    unread_count: int
