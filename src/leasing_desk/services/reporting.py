"""Portfolio reports: stock, executive activity, stale trend and visit lists."""

from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import date, timedelta

from leasing_desk.domain.team import DEFAULT_TEAM, TeamMember, executive_names
from leasing_desk.domain.value_objects import PropertyStatus
from leasing_desk.domain.visits import Visit
from leasing_desk.logging_config import get_logger
from leasing_desk.services.alerts import DEFAULT_STALE_THRESHOLD_DAYS, find_stale_properties
from leasing_desk.services.portfolio import PortfolioService

logger = get_logger(__name__)


@dataclass(frozen=True)
class StockSummary:
    total: int
    available: int
    leased: int
    notice_given: int
    average_vacancy_days: int


@dataclass(frozen=True)
class ExecutiveActivity:
    executive_name: str
    this_week: int
    this_month: int
    previous_month: int


@dataclass(frozen=True)
class TrendPoint:
    as_of: date
    stale_count: int


@dataclass(frozen=True)
class StaleTrend:
    points: list[TrendPoint] = field(default_factory=list)
    recovered: int = 0

    @property
    def current(self) -> int:
        return self.points[-1].stale_count if self.points else 0


def _previous_month(today: date) -> tuple[int, int]:
    if today.month == 1:
        return today.year - 1, 12
    return today.year, today.month - 1


class ReportingService:
    def __init__(
        self,
        portfolio: PortfolioService,
        clock: Callable[[], date] = date.today,
        stale_threshold_days: int = DEFAULT_STALE_THRESHOLD_DAYS,
        team: tuple[TeamMember, ...] = DEFAULT_TEAM,
    ) -> None:
        self._portfolio = portfolio
        self._clock = clock
        self._stale_threshold_days = stale_threshold_days
        self._team = team

    def stock_summary(self) -> StockSummary:
        """Count properties per status and average the vacancy of available ones."""
        today = self._clock()
        properties = self._portfolio.list_properties()
        counts = {status: 0 for status in PropertyStatus}
        vacancy_days: list[int] = []
        for prop in properties:
            counts[prop.status] += 1
            days = prop.days_vacant(today)
            if days is not None:
                vacancy_days.append(days)
        average = round(sum(vacancy_days) / len(vacancy_days)) if vacancy_days else 0
        return StockSummary(
            total=len(properties),
            available=counts[PropertyStatus.AVAILABLE],
            leased=counts[PropertyStatus.LEASED],
            notice_given=counts[PropertyStatus.NOTICE_GIVEN],
            average_vacancy_days=average,
        )

    def executive_activity(self) -> list[ExecutiveActivity]:
        """Visits per executive this week (from Monday), this month and last month."""
        today = self._clock()
        week_start = today - timedelta(days=today.weekday())
        prev_year, prev_month = _previous_month(today)
        visits = self._portfolio.list_visits()

        activity: list[ExecutiveActivity] = []
        for name in executive_names(self._team):
            own = [v for v in visits if v.executive_name == name]
            activity.append(
                ExecutiveActivity(
                    executive_name=name,
                    this_week=sum(1 for v in own if week_start <= v.visit_date <= today),
                    this_month=sum(
                        1
                        for v in own
                        if v.visit_date.year == today.year
                        and v.visit_date.month == today.month
                    ),
                    previous_month=sum(
                        1
                        for v in own
                        if v.visit_date.year == prev_year and v.visit_date.month == prev_month
                    ),
                )
            )
        return activity

    def stale_trend(self, points: int = 5) -> StaleTrend:
        """Stale counts today and at each of the previous ``points - 1`` weeks.

        Points are ordered oldest first. Past points only count visits up to
        their date; today's point matches the alert report. ``recovered``
        counts properties that were stale 30 days ago and are not stale today.
        """
        today = self._clock()
        properties = self._portfolio.list_properties()
        visits = self._portfolio.list_visits()

        def stale_ids(as_of: date) -> set[str]:
            return {
                s.property.id
                for s in find_stale_properties(
                    properties,
                    visits,
                    as_of,
                    self._stale_threshold_days,
                    cutoff=as_of < today,
                )
            }

        trend = [
            TrendPoint(as_of=as_of, stale_count=len(stale_ids(as_of)))
            for as_of in (today - timedelta(weeks=i) for i in range(points - 1, -1, -1))
        ]
        recovered = stale_ids(today - timedelta(days=30)) - stale_ids(today)
        logger.debug("stale_trend_computed", points=len(trend), recovered=len(recovered))
        return StaleTrend(points=trend, recovered=len(recovered))

    def recent_visits(self, days: int = 7) -> list[Visit]:
        today = self._clock()
        since = today - timedelta(days=days)
        return [v for v in self._portfolio.list_visits() if since <= v.visit_date <= today]

    def client_history(self, client_name: str) -> list[Visit]:
        return self._portfolio.list_visits(client_name=client_name)
