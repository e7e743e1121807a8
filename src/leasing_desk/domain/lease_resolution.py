"""Lease resolution saga domain model."""

from dataclasses import dataclass, field
from datetime import UTC, datetime
from enum import Enum
from uuid import uuid4

from leasing_desk.domain.properties import Property
from leasing_desk.domain.value_objects import PropertyStatus

AUTO_CLOSURE_ACTION = "Automatic closure: property no longer available"
AUTO_CLOSURE_NOTE = "Property no longer available"


def _utc_now() -> datetime:
    return datetime.now(UTC)


def _new_resolution_id() -> str:
    return uuid4().hex[:12]


class LeaseResolutionState(str, Enum):
    """State of a lease resolution."""

    AWAITING_WINNER_RESOLUTION = "AWAITING_WINNER_RESOLUTION"
    READY_TO_COMMIT = "READY_TO_COMMIT"
    COMMITTED = "COMMITTED"
    CANCELLED = "CANCELLED"


@dataclass
class LeaseResolution:
    """A held save that moves a property into LEASED.

    The save only reaches the store once every pending commitment of the
    winning client is resolved. Committing then closes the other clients'
    pending commitments and persists ``property``.
    """

    property: Property
    winner_name: str
    previous_status: PropertyStatus | None = None
    pending_winner_visit_ids: list[str] = field(default_factory=list)
    id: str = field(default_factory=_new_resolution_id)
    state: LeaseResolutionState = LeaseResolutionState.READY_TO_COMMIT
    auto_closed_visit_ids: list[str] = field(default_factory=list)
    created_at: datetime = field(default_factory=_utc_now)
    closed_at: datetime | None = None

    def __post_init__(self) -> None:
        if self.pending_winner_visit_ids:
            self.state = LeaseResolutionState.AWAITING_WINNER_RESOLUTION

    @property
    def is_open(self) -> bool:
        return self.state in (
            LeaseResolutionState.AWAITING_WINNER_RESOLUTION,
            LeaseResolutionState.READY_TO_COMMIT,
        )

    @property
    def property_id(self) -> str:
        return self.property.id

    def mark_winner_visit_resolved(self, visit_id: str) -> None:
        if visit_id in self.pending_winner_visit_ids:
            self.pending_winner_visit_ids.remove(visit_id)
        if not self.pending_winner_visit_ids:
            self.state = LeaseResolutionState.READY_TO_COMMIT

    def mark_committed(self, auto_closed_visit_ids: list[str]) -> None:
        self.auto_closed_visit_ids = list(auto_closed_visit_ids)
        self.state = LeaseResolutionState.COMMITTED
        self.closed_at = _utc_now()

    def mark_cancelled(self) -> None:
        self.state = LeaseResolutionState.CANCELLED
        self.closed_at = _utc_now()


__all__ = [
    "AUTO_CLOSURE_ACTION",
    "AUTO_CLOSURE_NOTE",
    "LeaseResolution",
    "LeaseResolutionState",
]
