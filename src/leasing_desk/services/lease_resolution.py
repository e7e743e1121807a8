"""Lease resolution coordinator.

Saving a property into LEASED while clients still have pending commitments
on it is a two-phase operation:

1. ``begin`` holds the save in a ``LeaseResolution``. Nothing is written.
2. The winning client's own pending commitments are resolved one by one
   with ``resolve_winner_commitment``.
3. ``commit`` closes every other client's pending commitment with an
   automatic-closure record and then persists the property.

``cancel`` abandons the save and leaves every entity as it was. Open
resolutions live in this process only; once closed, only the most recent
``closed_retention`` are kept so their final state can still be read.
"""

from collections import OrderedDict
from collections.abc import Callable
from datetime import date

from leasing_desk.domain.lease_resolution import (
    AUTO_CLOSURE_ACTION,
    AUTO_CLOSURE_NOTE,
    LeaseResolution,
    LeaseResolutionState,
)
from leasing_desk.domain.properties import Property
from leasing_desk.domain.value_objects import (
    ActionStatus,
    ClosureReason,
    HistoryStatus,
    PropertyStatus,
)
from leasing_desk.domain.visits import Visit
from leasing_desk.exceptions import (
    LeaseResolutionNotFoundError,
    LeaseResolutionPendingError,
    LeaseResolutionStateError,
    VisitNotFoundError,
)
from leasing_desk.logging_config import get_logger, resolution_context
from leasing_desk.repositories.interfaces import PropertyRepository, VisitRepository
from leasing_desk.services.commitments import CommitmentService

logger = get_logger(__name__)

DEFAULT_CLOSED_RETENTION = 100


def partition_pending_visits(
    visits: list[Visit], winner_name: str
) -> tuple[list[Visit], list[Visit]]:
    """Split pending visits into (winner, others) by client name."""
    winners: list[Visit] = []
    others: list[Visit] = []
    for visit in visits:
        if not visit.is_pending:
            continue
        if visit.client_name == winner_name:
            winners.append(visit)
        else:
            others.append(visit)
    return winners, others


class LeaseResolutionCoordinator:
    def __init__(
        self,
        property_repo: PropertyRepository,
        visit_repo: VisitRepository,
        commitments: CommitmentService,
        clock: Callable[[], date] = date.today,
        closed_retention: int = DEFAULT_CLOSED_RETENTION,
    ) -> None:
        self._property_repo = property_repo
        self._visit_repo = visit_repo
        self._commitments = commitments
        self._clock = clock
        self._closed_retention = closed_retention
        self._resolutions: dict[str, LeaseResolution] = {}
        self._closed: OrderedDict[str, LeaseResolution] = OrderedDict()

    def pending_visits(self, property_id: str) -> list[Visit]:
        return [v for v in self._visit_repo.list_by_property(property_id) if v.is_pending]

    def requires_resolution(self, prop: Property, previous: Property | None) -> bool:
        """True when saving ``prop`` moves it into LEASED over pending visits."""
        if not prop.is_leased:
            return False
        if previous is not None and previous.is_leased:
            return False
        return bool(self.pending_visits(prop.id))

    def begin(self, prop: Property, previous_status: PropertyStatus | None) -> LeaseResolution:
        """Hold ``prop`` until the winner's pending commitments are resolved."""
        winner_name = prop.current_tenant or ""
        winners, others = partition_pending_visits(
            self.pending_visits(prop.id), winner_name
        )
        resolution = LeaseResolution(
            property=prop,
            winner_name=winner_name,
            previous_status=previous_status,
            pending_winner_visit_ids=[v.id for v in winners],
        )
        self._resolutions[resolution.id] = resolution
        logger.info(
            "lease_resolution_started",
            resolution_id=resolution.id,
            property_id=prop.id,
            winner=winner_name,
            pending_winner_visits=len(winners),
            competing_visits=len(others),
            state=resolution.state.value,
        )
        return resolution

    def get(self, resolution_id: str) -> LeaseResolution:
        resolution = self._resolutions.get(resolution_id) or self._closed.get(resolution_id)
        if resolution is None:
            raise LeaseResolutionNotFoundError(resolution_id)
        return resolution

    def list_open(self) -> list[LeaseResolution]:
        return list(self._resolutions.values())

    def _retire(self, resolution: LeaseResolution) -> None:
        self._resolutions.pop(resolution.id, None)
        self._closed[resolution.id] = resolution
        while len(self._closed) > self._closed_retention:
            self._closed.popitem(last=False)

    def _get_open(self, resolution_id: str, action: str) -> LeaseResolution:
        resolution = self.get(resolution_id)
        if not resolution.is_open:
            raise LeaseResolutionStateError(resolution_id, resolution.state.value, action)
        return resolution

    def resolve_winner_commitment(self, resolution_id: str, visit_id: str) -> LeaseResolution:
        """Mark one of the winner's pending commitments as done.

        Raises:
            LeaseResolutionNotFoundError: If the resolution does not exist
            LeaseResolutionStateError: If the resolution is closed
            VisitNotFoundError: If the visit is not a pending winner visit
        """
        resolution = self._get_open(resolution_id, "resolve a commitment of")
        if visit_id not in resolution.pending_winner_visit_ids:
            raise VisitNotFoundError(visit_id)
        self._commitments.mark_done(visit_id)
        resolution.mark_winner_visit_resolved(visit_id)
        logger.info(
            "winner_commitment_resolved",
            resolution_id=resolution.id,
            visit_id=visit_id,
            remaining=len(resolution.pending_winner_visit_ids),
        )
        return resolution

    def commit(self, resolution_id: str) -> LeaseResolution:
        """Close competing commitments and persist the held property.

        The winner's visits are re-read from the store first; a winner visit
        that became pending after ``begin`` holds the commit again.

        Raises:
            LeaseResolutionNotFoundError: If the resolution does not exist
            LeaseResolutionStateError: If the resolution is closed
            LeaseResolutionPendingError: If winner commitments are still pending
        """
        resolution = self._get_open(resolution_id, "commit")
        with resolution_context(resolution.id, resolution.property_id):
            winners, _ = partition_pending_visits(
                self.pending_visits(resolution.property_id), resolution.winner_name
            )
            if winners:
                resolution.pending_winner_visit_ids = [v.id for v in winners]
                resolution.state = LeaseResolutionState.AWAITING_WINNER_RESOLUTION
                raise LeaseResolutionPendingError(
                    resolution.id, resolution.pending_winner_visit_ids
                )

            closed = self.close_non_winner_commitments(
                resolution.property_id, resolution.winner_name
            )
            prop = resolution.property
            prop.touch()
            if self._property_repo.exists(prop.id):
                self._property_repo.update(prop)
            else:
                self._property_repo.add(prop)
            resolution.mark_committed(closed)
            self._retire(resolution)
            logger.info(
                "lease_resolution_committed",
                winner=resolution.winner_name,
                auto_closed=len(closed),
            )
        return resolution

    def cancel(self, resolution_id: str) -> LeaseResolution:
        resolution = self._get_open(resolution_id, "cancel")
        resolution.mark_cancelled()
        self._retire(resolution)
        logger.info(
            "lease_resolution_cancelled",
            resolution_id=resolution.id,
            property_id=resolution.property_id,
        )
        return resolution

    def close_non_winner_commitments(self, property_id: str, winner_name: str) -> list[str]:
        """Close every pending commitment on the property not held by the winner.

        Each closed commitment is archived with an ``ARCHIVED`` history item and
        replaced by a DONE automatic-closure commitment. Returns the ids of the
        closed visits.
        """
        today = self._clock()
        _, others = partition_pending_visits(self.pending_visits(property_id), winner_name)
        closed: list[str] = []
        for visit in others:
            visit.archive_current_action(
                today,
                status=HistoryStatus.ARCHIVED,
                note=AUTO_CLOSURE_NOTE,
                closure_reason=ClosureReason.AUTO_LEASE_LOST,
            )
            visit.next_action = AUTO_CLOSURE_ACTION
            visit.action_status = ActionStatus.DONE
            visit.action_completed_date = today
            visit.closure_reason = ClosureReason.AUTO_LEASE_LOST
            self._visit_repo.update(visit)
            closed.append(visit.id)
            logger.info(
                "non_winner_commitment_closed",
                visit_id=visit.id,
                property_id=property_id,
                client=visit.client_name,
            )
        return closed
