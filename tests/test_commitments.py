"""Tests for CommitmentService."""

from datetime import date, timedelta

import pytest

from leasing_desk.domain.value_objects import ActionStatus, ClosureReason, HistoryStatus
from leasing_desk.exceptions import CommitmentValidationError, VisitNotFoundError


@pytest.fixture
def visit_id(desk, make_property, make_visit) -> str:
    desk.property_repo.add(make_property("P-10001"))
    visit = desk.portfolio.add_visit(
        make_visit(
            "P-10001", next_action="Llamar cliente", next_action_date=date(2024, 1, 10)
        )
    )
    return visit.id


class TestMarkDone:
    def test_marks_commitment_done_today(self, desk, visit_id: str) -> None:
        visit = desk.commitments.mark_done(visit_id)

        assert visit.action_status == ActionStatus.DONE
        assert visit.action_completed_date == desk.clock.today
        assert visit.closure_reason == ClosureReason.MANUAL
        assert visit.history == []

    def test_persists_change(self, desk, visit_id: str) -> None:
        desk.commitments.mark_done(visit_id)

        stored = desk.visit_repo.get(visit_id)
        assert stored is not None
        assert stored.action_status == ActionStatus.DONE

    def test_repeat_restamps_completion_date(self, desk, visit_id: str) -> None:
        desk.commitments.mark_done(visit_id)
        desk.clock.today = desk.clock.today + timedelta(days=3)

        visit = desk.commitments.mark_done(visit_id)

        assert visit.action_completed_date == date(2024, 1, 18)
        assert visit.history == []

    def test_unknown_visit_raises(self, desk) -> None:
        with pytest.raises(VisitNotFoundError):
            desk.commitments.mark_done("V-00000")


class TestScheduleNewAction:
    def test_archives_pending_commitment_and_sets_new_one(
        self, desk, visit_id: str
    ) -> None:
        """'Llamar cliente' due 2024-01-10 replaced by 'Enviar contrato' due 2024-01-20."""
        visit = desk.commitments.schedule_new_action(
            visit_id, "Enviar contrato", date(2024, 1, 20)
        )

        assert len(visit.history) == 1
        item = visit.history[0]
        assert item.action == "Llamar cliente"
        assert item.scheduled_date == date(2024, 1, 10)
        assert item.status == HistoryStatus.PENDING
        assert item.archived_date == desk.clock.today
        assert item.completed_date is None
        assert visit.next_action == "Enviar contrato"
        assert visit.next_action_date == date(2024, 1, 20)
        assert visit.action_status == ActionStatus.PENDING

    def test_archives_done_commitment_with_completion_date(
        self, desk, visit_id: str
    ) -> None:
        desk.commitments.mark_done(visit_id)

        visit = desk.commitments.schedule_new_action(
            visit_id, "Firmar contrato", date(2024, 1, 25), note="Cliente confirmó"
        )

        item = visit.history[0]
        assert item.status == HistoryStatus.DONE
        assert item.completed_date == desk.clock.today
        assert item.note == "Cliente confirmó"
        assert item.closure_reason == ClosureReason.MANUAL
        assert visit.action_completed_date is None
        assert visit.closure_reason is None

    def test_history_grows_by_one_per_call(self, desk, visit_id: str) -> None:
        actions = [
            ("Enviar contrato", date(2024, 1, 20)),
            ("Revisar contrato", date(2024, 1, 22)),
            ("Firmar contrato", date(2024, 1, 25)),
        ]
        previous = ("Llamar cliente", date(2024, 1, 10))

        for n, (action, due) in enumerate(actions, start=1):
            visit = desk.commitments.schedule_new_action(visit_id, action, due)
            assert len(visit.history) == n
            assert (visit.history[-1].action, visit.history[-1].scheduled_date) == previous
            previous = (action, due)

    def test_history_persisted(self, desk, visit_id: str) -> None:
        desk.commitments.schedule_new_action(visit_id, "Enviar contrato", date(2024, 1, 20))

        stored = desk.visit_repo.get(visit_id)
        assert stored is not None
        assert [h.action for h in stored.history] == ["Llamar cliente"]
        assert stored.next_action == "Enviar contrato"

    def test_blank_action_rejected_before_mutation(self, desk, visit_id: str) -> None:
        with pytest.raises(CommitmentValidationError):
            desk.commitments.schedule_new_action(visit_id, "  ", date(2024, 1, 20))

        stored = desk.visit_repo.get(visit_id)
        assert stored is not None
        assert stored.history == []

    def test_missing_date_rejected(self, desk, visit_id: str) -> None:
        with pytest.raises(CommitmentValidationError):
            desk.commitments.schedule_new_action(visit_id, "Enviar contrato", None)

    def test_unknown_visit_raises(self, desk) -> None:
        with pytest.raises(VisitNotFoundError):
            desk.commitments.schedule_new_action("V-00000", "Enviar contrato", date(2024, 1, 20))
