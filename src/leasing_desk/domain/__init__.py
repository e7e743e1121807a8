from leasing_desk.domain.alerts import AlertReport, CommitmentAlert, StaleProperty
from leasing_desk.domain.identifiers import (
    IdGenerator,
    RandomIdGenerator,
    SequentialIdGenerator,
)
from leasing_desk.domain.lease_resolution import (
    AUTO_CLOSURE_ACTION,
    AUTO_CLOSURE_NOTE,
    LeaseResolution,
    LeaseResolutionState,
)
from leasing_desk.domain.properties import (
    Available,
    Leased,
    NoticeGiven,
    Property,
    StatusDetails,
    build_status_details,
    missing_status_fields,
)
from leasing_desk.domain.team import DEFAULT_TEAM, TeamMember, executive_names
from leasing_desk.domain.value_objects import (
    ActionStatus,
    AlertLevel,
    ClosureReason,
    HistoryStatus,
    LeaseType,
    PropertyStatus,
    UserRole,
)
from leasing_desk.domain.visits import ActionHistoryItem, Visit

__all__ = [
    "AUTO_CLOSURE_ACTION",
    "AUTO_CLOSURE_NOTE",
    "ActionHistoryItem",
    "ActionStatus",
    "AlertLevel",
    "AlertReport",
    "Available",
    "ClosureReason",
    "CommitmentAlert",
    "DEFAULT_TEAM",
    "HistoryStatus",
    "IdGenerator",
    "LeaseResolution",
    "LeaseResolutionState",
    "LeaseType",
    "Leased",
    "NoticeGiven",
    "Property",
    "PropertyStatus",
    "RandomIdGenerator",
    "SequentialIdGenerator",
    "StaleProperty",
    "StatusDetails",
    "TeamMember",
    "UserRole",
    "Visit",
    "build_status_details",
    "executive_names",
    "missing_status_fields",
]
