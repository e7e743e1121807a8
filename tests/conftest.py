from collections.abc import Callable, Iterator
from dataclasses import dataclass
from datetime import UTC, date, datetime
from decimal import Decimal

import pytest

from leasing_desk.domain.identifiers import SequentialIdGenerator
from leasing_desk.domain.properties import Available, Property, StatusDetails
from leasing_desk.domain.visits import Visit
from leasing_desk.repositories.interfaces import PropertyRepository, VisitRepository
from leasing_desk.repositories.memory import (
    InMemoryPropertyRepository,
    InMemoryVisitRepository,
)
from leasing_desk.repositories.sqlite import (
    SQLiteDatabase,
    SQLitePropertyRepository,
    SQLiteVisitRepository,
)
from leasing_desk.services.alerts import AlertService
from leasing_desk.services.commitments import CommitmentService
from leasing_desk.services.lease_resolution import LeaseResolutionCoordinator
from leasing_desk.services.portfolio import PortfolioService
from leasing_desk.services.property_status import PropertyStatusAutomaton
from leasing_desk.services.reporting import ReportingService

TODAY = date(2024, 1, 15)


class Clock:
    """Settable clock injected into services."""

    def __init__(self, today: date = TODAY) -> None:
        self.today = today

    def __call__(self) -> date:
        return self.today


@dataclass
class Desk:
    property_repo: PropertyRepository
    visit_repo: VisitRepository
    clock: Clock
    automaton: PropertyStatusAutomaton
    commitments: CommitmentService
    coordinator: LeaseResolutionCoordinator
    portfolio: PortfolioService
    alerts: AlertService
    reporting: ReportingService


def build_desk(
    property_repo: PropertyRepository, visit_repo: VisitRepository, clock: Clock
) -> Desk:
    automaton = PropertyStatusAutomaton(property_repo, clock=clock)
    commitments = CommitmentService(visit_repo, clock=clock)
    coordinator = LeaseResolutionCoordinator(
        property_repo, visit_repo, commitments, clock=clock
    )
    portfolio = PortfolioService(
        property_repo,
        visit_repo,
        automaton,
        coordinator,
        id_generator=SequentialIdGenerator(),
        clock=clock,
    )
    return Desk(
        property_repo=property_repo,
        visit_repo=visit_repo,
        clock=clock,
        automaton=automaton,
        commitments=commitments,
        coordinator=coordinator,
        portfolio=portfolio,
        alerts=AlertService(automaton, visit_repo, clock=clock),
        reporting=ReportingService(portfolio, clock=clock),
    )


@pytest.fixture
def clock() -> Clock:
    return Clock()


@pytest.fixture
def db() -> Iterator[SQLiteDatabase]:
    """Create an in-memory SQLite database for testing."""
    database = SQLiteDatabase(":memory:")
    database.initialize()
    yield database
    database.close()


@pytest.fixture(params=["memory", "sqlite"])
def desk(request: pytest.FixtureRequest, clock: Clock) -> Iterator[Desk]:
    """Fully wired services over each store backend."""
    if request.param == "memory":
        yield build_desk(InMemoryPropertyRepository(), InMemoryVisitRepository(), clock)
        return
    database = SQLiteDatabase(":memory:")
    database.initialize()
    yield build_desk(
        SQLitePropertyRepository(database), SQLiteVisitRepository(database), clock
    )
    database.close()


@pytest.fixture
def make_property() -> Callable[..., Property]:
    def _make(
        property_id: str = "",
        status_details: StatusDetails | None = None,
        created_at: datetime | None = None,
        **overrides,
    ) -> Property:
        created = created_at or datetime(2023, 1, 1, tzinfo=UTC)
        fields = {
            "address": "Av. Apoquindo 4500",
            "commune": "Las Condes",
            "property_type": "Oficina",
            "owner": "Inversiones Andes",
            "price_uf": Decimal("4500"),
        }
        fields.update(overrides)
        return Property(
            id=property_id,
            status_details=status_details or Available(vacancy_start_date=date(2024, 1, 1)),
            created_at=created,
            updated_at=created,
            **fields,
        )

    return _make


@pytest.fixture
def make_visit() -> Callable[..., Visit]:
    def _make(property_id: str, client_name: str = "Ana Rojas", **overrides) -> Visit:
        fields = {
            "visit_date": date(2024, 1, 5),
            "executive_name": "Juan Pérez",
            "next_action": "Llamar cliente",
            "next_action_date": date(2024, 1, 20),
        }
        fields.update(overrides)
        return Visit(property_id=property_id, client_name=client_name, **fields)

    return _make
