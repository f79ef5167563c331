
# -------------------------
# Enums
# -------------------------
from .enums import (
    Role,
    MaintenanceStatus,
    VerificationStatus,
    NotificationType,
    RoomStatus,
)

# -------------------------
# Profiles
# -------------------------
from .profile import Profile, ProfileUpdate, VerificationSubmit

# -------------------------
# Rooms
# -------------------------
from .room import RoomBase, RoomCreate, RoomUpdate, RoomRead, room_status

# -------------------------
# Tenants (leases)
# -------------------------
from .tenant import TenantBase, TenantCreate, TenantUpdate, TenantRead

# -------------------------
# Maintenance
# -------------------------
from .maintenance import (
    MaintenanceRequestCreate,
    MaintenanceStatusUpdate,
    MaintenanceRequestRead,
)

# -------------------------
# Payments
# -------------------------
from .payment import PaymentCreate, PaymentRead, PaymentSummary

# -------------------------
# Notifications
# -------------------------
from .notification import NotificationCreate, NotificationRead, NotificationFeed

# -------------------------
# Meter readings
# -------------------------
from .meter_reading import MeterReadingCreate, MeterReadingRead

# -------------------------
# Auth
# -------------------------
from .auth import LoginRequest, LoginResponse

__all__ = [
    # enums
    "Role",
    "MaintenanceStatus",
    "VerificationStatus",
    "NotificationType",
    "RoomStatus",

    # profiles
    "Profile",
    "ProfileUpdate",
    "VerificationSubmit",

    # rooms
    "RoomBase",
    "RoomCreate",
    "RoomUpdate",
    "RoomRead",
    "room_status",

    # tenants
    "TenantBase",
    "TenantCreate",
    "TenantUpdate",
    "TenantRead",

    # maintenance
    "MaintenanceRequestCreate",
    "MaintenanceStatusUpdate",
    "MaintenanceRequestRead",

    # payments
    "PaymentCreate",
    "PaymentRead",
    "PaymentSummary",

    # notifications
    "NotificationCreate",
    "NotificationRead",
    "NotificationFeed",

    # meter readings
    "MeterReadingCreate",
    "MeterReadingRead",

    # auth
    "LoginRequest",
    "LoginResponse",
]
