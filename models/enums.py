from enum import Enum


class BaseStrEnum(str, Enum):
    """
    Base enum that serializes cleanly to a string
    and provides a .list() method for UI dropdowns.
    """

    def __str__(self):
        return str(self.value)

    @classmethod
    def list(cls):
        return [item.value for item in cls]


# -----------------------------------------------------
# ROLE
# -----------------------------------------------------
class Role(BaseStrEnum):
    """Profile role; also the leading segment of every page path."""

    owner = "owner"
    tenant = "tenant"


# -----------------------------------------------------
# MAINTENANCE STATUS
# -----------------------------------------------------
class MaintenanceStatus(BaseStrEnum):
    """Workflow state for a maintenance request."""

    pending = "pending"
    in_progress = "in_progress"
    completed = "completed"
    cancelled = "cancelled"

    @property
    def is_terminal(self) -> bool:
        return self in (MaintenanceStatus.completed, MaintenanceStatus.cancelled)

    def can_transition_to(self, target: "MaintenanceStatus") -> bool:
        target = MaintenanceStatus(target)
        if target == self:
            return True
        return target in MAINTENANCE_TRANSITIONS[self]


MAINTENANCE_TRANSITIONS = {
    MaintenanceStatus.pending: {MaintenanceStatus.in_progress, MaintenanceStatus.cancelled},
    MaintenanceStatus.in_progress: {MaintenanceStatus.completed, MaintenanceStatus.cancelled},
    MaintenanceStatus.completed: set(),
    MaintenanceStatus.cancelled: set(),
}


# -----------------------------------------------------
# PAYMENT VERIFICATION STATUS
# -----------------------------------------------------
class VerificationStatus(BaseStrEnum):
    """Tri-state payment lifecycle flag."""

    pending = "pending"
    verified = "verified"
    rejected = "rejected"

    def can_transition_to(self, target: "VerificationStatus") -> bool:
        target = VerificationStatus(target)
        if target == self:
            return True
        return self == VerificationStatus.pending


# -----------------------------------------------------
# NOTIFICATION TYPE
# -----------------------------------------------------
class NotificationType(BaseStrEnum):
    """Severity shown next to a notification."""

    info = "info"
    success = "success"
    warning = "warning"
    error = "error"


# -----------------------------------------------------
# ROOM STATUS BADGE
# -----------------------------------------------------
class RoomStatus(BaseStrEnum):
    occupied = "occupied"
    available = "available"
