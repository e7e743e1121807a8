"""Alert and staleness engine.

Alerts are never stored. Every call recomputes them from the current
properties and visits, optionally "as of" an earlier date.

Stale property: a property that is not leased and whose reference date
(latest visit, else vacancy start, else creation date) lies more than
``stale_threshold_days`` before the evaluation date. Today's alerts count
every visit, scheduled future ones included; historical evaluations only
count visits up to their date.

Commitment alert: a pending commitment with a due date. Overdue ones are
URGENT, those due within ``warning_days`` are WARNING, the rest are dropped.
"""

from collections.abc import Callable, Iterable
from datetime import date

from leasing_desk.domain.alerts import AlertReport, CommitmentAlert, StaleProperty
from leasing_desk.domain.properties import Available, Property
from leasing_desk.domain.value_objects import ActionStatus, AlertLevel
from leasing_desk.domain.visits import Visit
from leasing_desk.logging_config import get_logger
from leasing_desk.repositories.interfaces import VisitRepository
from leasing_desk.services.property_status import PropertyStatusAutomaton

logger = get_logger(__name__)

DEFAULT_STALE_THRESHOLD_DAYS = 30
DEFAULT_WARNING_DAYS = 10


def _latest_visit_dates(visits: Iterable[Visit], cutoff: date | None = None) -> dict[str, date]:
    latest: dict[str, date] = {}
    for visit in visits:
        if cutoff is not None and visit.visit_date > cutoff:
            continue
        current = latest.get(visit.property_id)
        if current is None or visit.visit_date > current:
            latest[visit.property_id] = visit.visit_date
    return latest


def find_stale_properties(
    properties: Iterable[Property],
    visits: Iterable[Visit],
    as_of: date,
    threshold_days: int = DEFAULT_STALE_THRESHOLD_DAYS,
    *,
    cutoff: bool = False,
) -> list[StaleProperty]:
    """Return the non-leased properties without activity for more than the threshold.

    The reference date is the property's latest visit, scheduled ones
    included. With ``cutoff`` the evaluation is historical: visits dated
    after ``as_of`` and properties created after it are ignored.
    """
    latest = _latest_visit_dates(visits, as_of if cutoff else None)
    stale: list[StaleProperty] = []
    for prop in properties:
        if prop.is_leased or (cutoff and prop.created_at.date() > as_of):
            continue
        last_visit = latest.get(prop.id)
        if last_visit is not None:
            reference = last_visit
        elif isinstance(prop.status_details, Available) and prop.status_details.vacancy_start_date:
            reference = prop.status_details.vacancy_start_date
        else:
            reference = prop.created_at.date()
        days_inactive = (as_of - reference).days
        if days_inactive > threshold_days:
            stale.append(
                StaleProperty(
                    property=prop,
                    reference_date=reference,
                    days_inactive=days_inactive,
                    last_visit_date=last_visit,
                )
            )
    return stale


def classify_commitment(days_left: int, warning_days: int = DEFAULT_WARNING_DAYS) -> AlertLevel | None:
    if days_left < 0:
        return AlertLevel.URGENT
    if days_left <= warning_days:
        return AlertLevel.WARNING
    return None


def find_commitment_alerts(
    visits: Iterable[Visit],
    today: date,
    warning_days: int = DEFAULT_WARNING_DAYS,
) -> list[CommitmentAlert]:
    """Return alerts for pending commitments, most urgent first."""
    alerts: list[CommitmentAlert] = []
    for visit in visits:
        if visit.action_status == ActionStatus.DONE or visit.next_action_date is None:
            continue
        days_left = (visit.next_action_date - today).days
        level = classify_commitment(days_left, warning_days)
        if level is not None:
            alerts.append(CommitmentAlert(visit=visit, days_left=days_left, level=level))
    alerts.sort(key=lambda a: a.days_left)
    return alerts


class AlertService:
    def __init__(
        self,
        automaton: PropertyStatusAutomaton,
        visit_repo: VisitRepository,
        clock: Callable[[], date] = date.today,
        stale_threshold_days: int = DEFAULT_STALE_THRESHOLD_DAYS,
        warning_days: int = DEFAULT_WARNING_DAYS,
    ) -> None:
        self._automaton = automaton
        self._visit_repo = visit_repo
        self._clock = clock
        self.stale_threshold_days = stale_threshold_days
        self.warning_days = warning_days

    def today(self) -> date:
        return self._clock()

    def get_alerts(self) -> AlertReport:
        """Compute stale properties and commitment alerts for today."""
        today = self._clock()
        properties = self._automaton.refresh_all()
        visits = list(self._visit_repo.list_all())
        report = AlertReport(
            stale_properties=find_stale_properties(
                properties, visits, today, self.stale_threshold_days
            ),
            action_alerts=find_commitment_alerts(visits, today, self.warning_days),
        )
        logger.debug(
            "alerts_computed",
            stale=len(report.stale_properties),
            action_alerts=len(report.action_alerts),
            urgent=report.urgent_count,
        )
        return report

    def stale_properties_as_of(self, as_of: date) -> list[StaleProperty]:
        """Stale properties as they stood on ``as_of``, ignoring later visits."""
        properties = self._automaton.refresh_all()
        visits = list(self._visit_repo.list_all())
        return find_stale_properties(
            properties, visits, as_of, self.stale_threshold_days, cutoff=True
        )
