"""Visit and commitment domain models."""

from dataclasses import dataclass, field
from datetime import UTC, date, datetime
from decimal import Decimal

from leasing_desk.domain.value_objects import (
    ActionStatus,
    ClosureReason,
    HistoryStatus,
)


def _utc_now() -> datetime:
    return datetime.now(UTC)


@dataclass(frozen=True)
class ActionHistoryItem:
    """A commitment that was superseded or closed automatically.

    Items are appended to ``Visit.history`` and never modified afterwards.
    """

    action: str
    scheduled_date: date | None
    status: HistoryStatus
    archived_date: date
    completed_date: date | None = None
    note: str | None = None
    closure_reason: ClosureReason | None = None


@dataclass
class Visit:
    """A prospective tenant's visit to a property.

    The visit facts (date, executive, client, offer, broker, comments) are
    fixed at creation. The active commitment (``next_action`` and the fields
    after it) is only changed by the commitment lifecycle and the lease
    resolution coordinator.
    """

    property_id: str
    visit_date: date
    executive_name: str
    client_name: str
    next_action: str
    next_action_date: date | None
    id: str = ""
    client_phone: str | None = None
    client_email: str | None = None
    offer_uf: Decimal | None = None
    has_broker: bool = False
    broker_name: str | None = None
    comments: str = ""
    action_status: ActionStatus = ActionStatus.PENDING
    action_completed_date: date | None = None
    closure_reason: ClosureReason | None = None
    history: list[ActionHistoryItem] = field(default_factory=list)
    created_at: datetime = field(default_factory=_utc_now)

    @property
    def is_pending(self) -> bool:
        return self.action_status == ActionStatus.PENDING

    @property
    def was_auto_closed(self) -> bool:
        return self.closure_reason == ClosureReason.AUTO_LEASE_LOST

    def archive_current_action(
        self,
        today: date,
        *,
        status: HistoryStatus | None = None,
        note: str | None = None,
        closure_reason: ClosureReason | None = None,
    ) -> ActionHistoryItem:
        """Append the active commitment to the history and return the item.

        ``status`` defaults to the commitment's own status.
        """
        item = ActionHistoryItem(
            action=self.next_action,
            scheduled_date=self.next_action_date,
            status=status or HistoryStatus(self.action_status.value),
            archived_date=today,
            completed_date=self.action_completed_date,
            note=note,
            closure_reason=closure_reason,
        )
        self.history.append(item)
        return item


__all__ = ["ActionHistoryItem", "Visit"]
