"""Portfolio service: the store facade used by the API and CLI."""

from collections.abc import Callable
from dataclasses import dataclass
from datetime import date

from leasing_desk.domain.identifiers import (
    PROPERTY_PREFIX,
    VISIT_PREFIX,
    IdGenerator,
    RandomIdGenerator,
)
from leasing_desk.domain.lease_resolution import LeaseResolution
from leasing_desk.domain.properties import Property, missing_status_fields
from leasing_desk.domain.value_objects import PropertyStatus
from leasing_desk.domain.visits import Visit
from leasing_desk.exceptions import (
    LeasedPropertyDeletionError,
    PropertyNotFoundError,
    PropertyValidationError,
    VisitNotFoundError,
)
from leasing_desk.logging_config import get_logger
from leasing_desk.repositories.interfaces import PropertyRepository, VisitRepository
from leasing_desk.services.lease_resolution import LeaseResolutionCoordinator
from leasing_desk.services.property_status import PropertyStatusAutomaton

logger = get_logger(__name__)


@dataclass
class PropertySaveResult:
    """Outcome of a property save.

    ``resolution`` is set when the save moved the property into LEASED over
    pending visits; the property is then held, not stored.
    """

    property: Property
    resolution: LeaseResolution | None = None

    @property
    def held(self) -> bool:
        return self.resolution is not None


class PortfolioService:
    def __init__(
        self,
        property_repo: PropertyRepository,
        visit_repo: VisitRepository,
        automaton: PropertyStatusAutomaton,
        lease_coordinator: LeaseResolutionCoordinator,
        id_generator: IdGenerator | None = None,
        clock: Callable[[], date] = date.today,
    ) -> None:
        self._property_repo = property_repo
        self._visit_repo = visit_repo
        self._automaton = automaton
        self._lease_coordinator = lease_coordinator
        self._id_generator = id_generator or RandomIdGenerator()
        self._clock = clock

    def today(self) -> date:
        return self._clock()

    def list_properties(self, status: PropertyStatus | None = None) -> list[Property]:
        """Return all properties after expiring ended notices."""
        properties = self._automaton.refresh_all()
        if status is not None:
            properties = [p for p in properties if p.status == status]
        return properties

    def get_property(self, property_id: str) -> Property:
        prop = self._property_repo.get(property_id)
        if prop is None:
            raise PropertyNotFoundError(property_id)
        return self._automaton.refresh(prop)

    def save_property(self, prop: Property) -> PropertySaveResult:
        """Insert or replace a property.

        A property without id gets a fresh one. On replace, ``created_at`` is
        kept from the stored version. Moving into LEASED while visits on the
        property have pending commitments returns a held result instead of
        writing.

        Raises:
            PropertyValidationError: If the status variant misses required fields
        """
        missing = missing_status_fields(prop.status_details)
        if missing:
            raise PropertyValidationError(prop.status.value, missing)

        previous: Property | None = None
        if not prop.id:
            prop.id = self._id_generator.new_id(PROPERTY_PREFIX, self._property_repo.exists)
        else:
            previous = self._property_repo.get(prop.id)
            if previous is not None:
                prop.created_at = previous.created_at

        if self._lease_coordinator.requires_resolution(prop, previous):
            resolution = self._lease_coordinator.begin(
                prop, previous.status if previous is not None else None
            )
            return PropertySaveResult(property=prop, resolution=resolution)

        prop.touch()
        if previous is None:
            self._property_repo.add(prop)
        else:
            self._property_repo.update(prop)
        logger.info(
            "property_saved",
            property_id=prop.id,
            status=prop.status.value,
            created=previous is None,
        )
        return PropertySaveResult(property=prop)

    def delete_property(self, property_id: str) -> tuple[list[Property], list[Visit]]:
        """Delete a property and all its visits.

        Returns the remaining properties and visits.

        Raises:
            PropertyNotFoundError: If the property does not exist
            LeasedPropertyDeletionError: If the property is leased
        """
        prop = self._property_repo.get(property_id)
        if prop is None:
            raise PropertyNotFoundError(property_id)
        if prop.is_leased:
            raise LeasedPropertyDeletionError(property_id)
        self._visit_repo.delete_by_property(property_id)
        self._property_repo.delete(property_id)
        logger.info("property_deleted", property_id=property_id)
        return self.list_properties(), self.list_visits()

    def add_visit(self, visit: Visit) -> Visit:
        """Record a visit on an existing property.

        Raises:
            PropertyNotFoundError: If the visited property does not exist
        """
        if not self._property_repo.exists(visit.property_id):
            raise PropertyNotFoundError(visit.property_id)
        if not visit.id:
            visit.id = self._id_generator.new_id(VISIT_PREFIX, self._visit_repo.exists)
        self._visit_repo.add(visit)
        logger.info(
            "visit_added",
            visit_id=visit.id,
            property_id=visit.property_id,
            client=visit.client_name,
            executive=visit.executive_name,
        )
        return visit

    def get_visit(self, visit_id: str) -> Visit:
        visit = self._visit_repo.get(visit_id)
        if visit is None:
            raise VisitNotFoundError(visit_id)
        return visit

    def list_visits(
        self, property_id: str | None = None, client_name: str | None = None
    ) -> list[Visit]:
        """Return visits newest first, optionally filtered."""
        if property_id is not None:
            visits = list(self._visit_repo.list_by_property(property_id))
        else:
            visits = list(self._visit_repo.list_all())
        if client_name is not None:
            wanted = client_name.strip().lower()
            visits = [v for v in visits if v.client_name.strip().lower() == wanted]
        return visits
