from stores.base import EntityStore
from stores.maintenance import MaintenanceStore
from stores.meter_readings import MeterReadingStore
from stores.notifications import NotificationStore
from stores.payments import PaymentStore
from stores.registry import StoreRegistry
from stores.rooms import RoomStore
from stores.session import SessionStatus, SessionStore, SessionUser
from stores.tenants import TenantStore

__all__ = [
    "EntityStore",
    "MaintenanceStore",
    "MeterReadingStore",
    "NotificationStore",
    "PaymentStore",
    "RoomStore",
    "SessionStatus",
    "SessionStore",
    "SessionUser",
    "StoreRegistry",
    "TenantStore",
]
