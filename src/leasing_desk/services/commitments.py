"""Commitment lifecycle for visits.

A visit carries one active commitment (next action, due date, status).
Completing it stamps the completion date; replacing it archives the old
commitment into the visit history first. History only ever grows.
"""

from collections.abc import Callable
from datetime import date

from leasing_desk.domain.value_objects import ActionStatus, ClosureReason
from leasing_desk.domain.visits import Visit
from leasing_desk.exceptions import CommitmentValidationError, VisitNotFoundError
from leasing_desk.logging_config import get_logger
from leasing_desk.repositories.interfaces import VisitRepository

logger = get_logger(__name__)


class CommitmentService:
    def __init__(
        self,
        visit_repo: VisitRepository,
        clock: Callable[[], date] = date.today,
    ) -> None:
        self._visit_repo = visit_repo
        self._clock = clock

    def _get_visit(self, visit_id: str) -> Visit:
        visit = self._visit_repo.get(visit_id)
        if visit is None:
            raise VisitNotFoundError(visit_id)
        return visit

    def mark_done(self, visit_id: str) -> Visit:
        """Close the active commitment manually.

        Calling it again on a DONE commitment re-stamps the completion date.
        History is not touched.

        Raises:
            VisitNotFoundError: If the visit does not exist
        """
        visit = self._get_visit(visit_id)
        visit.action_status = ActionStatus.DONE
        visit.action_completed_date = self._clock()
        visit.closure_reason = ClosureReason.MANUAL
        self._visit_repo.update(visit)
        logger.info(
            "commitment_marked_done",
            visit_id=visit.id,
            action=visit.next_action,
            completed_date=str(visit.action_completed_date),
        )
        return visit

    def schedule_new_action(
        self,
        visit_id: str,
        action: str,
        action_date: date | None,
        note: str | None = None,
    ) -> Visit:
        """Archive the active commitment and replace it with a new pending one.

        The archived item keeps the old action, its scheduled date, its status
        at archive time and its completion date if any.

        Raises:
            CommitmentValidationError: If ``action`` is blank or ``action_date`` missing
            VisitNotFoundError: If the visit does not exist
        """
        if not action or not action.strip():
            raise CommitmentValidationError(visit_id, "action is required")
        if action_date is None:
            raise CommitmentValidationError(visit_id, "action date is required")

        visit = self._get_visit(visit_id)
        archived = visit.archive_current_action(
            self._clock(),
            note=note or None,
            closure_reason=visit.closure_reason,
        )
        visit.next_action = action.strip()
        visit.next_action_date = action_date
        visit.action_status = ActionStatus.PENDING
        visit.action_completed_date = None
        visit.closure_reason = None
        self._visit_repo.update(visit)
        logger.info(
            "commitment_rescheduled",
            visit_id=visit.id,
            archived_action=archived.action,
            archived_status=archived.status.value,
            action=visit.next_action,
            action_date=str(action_date),
            history_size=len(visit.history),
        )
        return visit
