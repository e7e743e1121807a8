from leasing_desk.domain.properties import Available, Leased, NoticeGiven, Property
from leasing_desk.domain.value_objects import (
    ActionStatus,
    ClosureReason,
    HistoryStatus,
    LeaseType,
    PropertyStatus,
)
from leasing_desk.domain.visits import ActionHistoryItem, Visit

__all__ = [
    "ActionHistoryItem",
    "ActionStatus",
    "Available",
    "ClosureReason",
    "HistoryStatus",
    "LeaseType",
    "Leased",
    "NoticeGiven",
    "Property",
    "PropertyStatus",
    "Visit",
]

__version__ = "0.1.0"
