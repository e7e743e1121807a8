"""Alert result models."""

from dataclasses import dataclass, field
from datetime import date

from leasing_desk.domain.properties import Property
from leasing_desk.domain.value_objects import AlertLevel
from leasing_desk.domain.visits import Visit


@dataclass(frozen=True)
class StaleProperty:
    """A non-leased property without recent visit activity."""

    property: Property
    reference_date: date
    days_inactive: int
    last_visit_date: date | None = None

    @property
    def never_visited(self) -> bool:
        return self.last_visit_date is None


@dataclass(frozen=True)
class CommitmentAlert:
    """A pending commitment that is overdue or due soon."""

    visit: Visit
    days_left: int
    level: AlertLevel

    @property
    def is_overdue(self) -> bool:
        return self.days_left < 0


@dataclass(frozen=True)
class AlertReport:
    stale_properties: list[StaleProperty] = field(default_factory=list)
    action_alerts: list[CommitmentAlert] = field(default_factory=list)

    @property
    def total(self) -> int:
        return len(self.stale_properties) + len(self.action_alerts)

    @property
    def urgent_count(self) -> int:
        return sum(1 for a in self.action_alerts if a.level == AlertLevel.URGENT)


__all__ = ["AlertReport", "CommitmentAlert", "StaleProperty"]
