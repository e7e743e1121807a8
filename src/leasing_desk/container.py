"""Dependency injection container for Leasing Desk.

Services are created lazily on first access and cached, so every caller in
the process shares one store connection and one lease resolution
coordinator (open resolutions live in its memory).

Usage:
    from leasing_desk.container import get_container

    container = get_container()
    portfolio = container.portfolio_service
"""

from collections.abc import Callable
from datetime import date
from functools import cached_property, lru_cache
from typing import TYPE_CHECKING

from leasing_desk.config import Settings, get_settings
from leasing_desk.logging_config import get_logger

if TYPE_CHECKING:
    from leasing_desk.domain.identifiers import IdGenerator
    from leasing_desk.repositories.interfaces import PropertyRepository, VisitRepository
    from leasing_desk.repositories.sqlite import SQLiteDatabase
    from leasing_desk.services.alerts import AlertService
    from leasing_desk.services.commitments import CommitmentService
    from leasing_desk.services.lease_resolution import LeaseResolutionCoordinator
    from leasing_desk.services.portfolio import PortfolioService
    from leasing_desk.services.property_status import PropertyStatusAutomaton
    from leasing_desk.services.reference_value import ReferenceValueService
    from leasing_desk.services.remote_properties import RemotePropertySource
    from leasing_desk.services.reporting import ReportingService

logger = get_logger(__name__)


class Container:
    """Dependency injection container.

    For tests, build one directly with custom settings and a fixed clock:

        container = Container(settings=Settings(sqlite_path=":memory:"), clock=lambda: today)
    """

    def __init__(
        self,
        settings: Settings | None = None,
        clock: Callable[[], date] = date.today,
        id_generator: "IdGenerator | None" = None,
    ) -> None:
        self._settings = settings or get_settings()
        self._clock = clock
        self._id_generator = id_generator
        logger.debug(
            "container_created",
            sqlite_path=str(self._settings.sqlite_path),
            environment=self._settings.environment.value,
        )

    @property
    def settings(self) -> Settings:
        return self._settings

    @property
    def clock(self) -> Callable[[], date]:
        return self._clock

    @cached_property
    def database(self) -> "SQLiteDatabase":
        """SQLite database, initialized and seeded on first access."""
        from leasing_desk.repositories.seed import seed_if_empty
        from leasing_desk.repositories.sqlite import SQLiteDatabase, SQLitePropertyRepository

        db_path = str(self._settings.sqlite_path)
        logger.info("initializing_sqlite_database", path=db_path)
        db = SQLiteDatabase(db_path, check_same_thread=False)
        db.initialize()
        if self._settings.seed_on_empty:
            seed_if_empty(SQLitePropertyRepository(db))
        return db

    @cached_property
    def property_repository(self) -> "PropertyRepository":
        from leasing_desk.repositories.sqlite import SQLitePropertyRepository

        return SQLitePropertyRepository(self.database)

    @cached_property
    def visit_repository(self) -> "VisitRepository":
        from leasing_desk.repositories.sqlite import SQLiteVisitRepository

        return SQLiteVisitRepository(self.database)

    @cached_property
    def id_generator(self) -> "IdGenerator":
        from leasing_desk.domain.identifiers import RandomIdGenerator

        return self._id_generator or RandomIdGenerator()

    @cached_property
    def property_status_automaton(self) -> "PropertyStatusAutomaton":
        from leasing_desk.services.property_status import PropertyStatusAutomaton

        return PropertyStatusAutomaton(self.property_repository, clock=self._clock)

    @cached_property
    def commitment_service(self) -> "CommitmentService":
        from leasing_desk.services.commitments import CommitmentService

        return CommitmentService(self.visit_repository, clock=self._clock)

    @cached_property
    def lease_coordinator(self) -> "LeaseResolutionCoordinator":
        from leasing_desk.services.lease_resolution import LeaseResolutionCoordinator

        return LeaseResolutionCoordinator(
            self.property_repository,
            self.visit_repository,
            self.commitment_service,
            clock=self._clock,
        )

    @cached_property
    def portfolio_service(self) -> "PortfolioService":
        from leasing_desk.services.portfolio import PortfolioService

        return PortfolioService(
            self.property_repository,
            self.visit_repository,
            self.property_status_automaton,
            self.lease_coordinator,
            id_generator=self.id_generator,
            clock=self._clock,
        )

    @cached_property
    def alert_service(self) -> "AlertService":
        from leasing_desk.services.alerts import AlertService

        return AlertService(
            self.property_status_automaton,
            self.visit_repository,
            clock=self._clock,
            stale_threshold_days=self._settings.stale_threshold_days,
            warning_days=self._settings.alert_warning_days,
        )

    @cached_property
    def reporting_service(self) -> "ReportingService":
        from leasing_desk.services.reporting import ReportingService

        return ReportingService(
            self.portfolio_service,
            clock=self._clock,
            stale_threshold_days=self._settings.stale_threshold_days,
        )

    @cached_property
    def reference_value_service(self) -> "ReferenceValueService":
        from leasing_desk.services.reference_value import ReferenceValueService

        return ReferenceValueService(
            self._settings.uf_api_url, timeout=self._settings.http_timeout_seconds
        )

    @cached_property
    def remote_property_source(self) -> "RemotePropertySource":
        from leasing_desk.services.remote_properties import RemotePropertySource

        return RemotePropertySource(
            self._settings.remote_properties_url,
            fallback=self.portfolio_service.list_properties,
            api_key=self._settings.remote_properties_api_key,
            timeout=self._settings.http_timeout_seconds,
        )

    def close(self) -> None:
        """Close the database connection if it was opened."""
        if "database" in self.__dict__:
            logger.info("closing_database_connection")
            self.database.close()

    def __enter__(self) -> "Container":
        return self

    def __exit__(self, *args: object) -> None:
        self.close()


_container: Container | None = None


@lru_cache
def get_container() -> Container:
    """Get the global container singleton.

    For testing, create a Container directly instead of using this function.
    """
    global _container
    if _container is None:
        _container = Container()
    return _container


def reset_container() -> None:
    """Reset the global container.

    Used primarily for testing to ensure a fresh container state.
    """
    global _container
    if _container is not None:
        _container.close()
        _container = None
    get_container.cache_clear()


# FastAPI dependency functions
def get_portfolio_service() -> "PortfolioService":
    return get_container().portfolio_service


def get_commitment_service() -> "CommitmentService":
    return get_container().commitment_service


def get_lease_coordinator() -> "LeaseResolutionCoordinator":
    return get_container().lease_coordinator


def get_alert_service() -> "AlertService":
    return get_container().alert_service


def get_reporting_service() -> "ReportingService":
    return get_container().reporting_service


def get_reference_value_service() -> "ReferenceValueService":
    return get_container().reference_value_service
