from enum import Enum


class PropertyStatus(str, Enum):
    AVAILABLE = "AVAILABLE"
    LEASED = "LEASED"
    NOTICE_GIVEN = "NOTICE_GIVEN"


class LeaseType(str, Enum):
    FIXED = "FIXED"
    RENEWABLE = "RENEWABLE"


class ActionStatus(str, Enum):
    PENDING = "PENDING"
    DONE = "DONE"


class HistoryStatus(str, Enum):
    PENDING = "PENDING"
    DONE = "DONE"
    ARCHIVED = "ARCHIVED"


class ClosureReason(str, Enum):
    """Why a commitment reached DONE."""

    MANUAL = "MANUAL"
    AUTO_LEASE_LOST = "AUTO_LEASE_LOST"


class AlertLevel(str, Enum):
    URGENT = "URGENT"
    WARNING = "WARNING"


class UserRole(str, Enum):
    ADMIN = "ADMIN"
    EXECUTIVE = "EXECUTIVE"
    OPERATIONS = "OPERATIONS"
