"""Tests for domain models."""

import random
from datetime import date
from decimal import Decimal

import pytest

from leasing_desk.domain.alerts import AlertReport, CommitmentAlert, StaleProperty
from leasing_desk.domain.identifiers import (
    PROPERTY_PREFIX,
    VISIT_PREFIX,
    RandomIdGenerator,
    SequentialIdGenerator,
)
from leasing_desk.domain.lease_resolution import LeaseResolution, LeaseResolutionState
from leasing_desk.domain.properties import (
    Available,
    Leased,
    NoticeGiven,
    Property,
    build_status_details,
    missing_status_fields,
)
from leasing_desk.domain.team import DEFAULT_TEAM, executive_names, role_can_delete_properties
from leasing_desk.domain.value_objects import (
    ActionStatus,
    AlertLevel,
    HistoryStatus,
    LeaseType,
    PropertyStatus,
    UserRole,
)
from leasing_desk.domain.visits import Visit

TODAY = date(2024, 1, 15)


class TestStatusVariants:
    def test_status_derives_from_variant(self, make_property) -> None:
        prop = make_property("P-10001")
        assert prop.status == PropertyStatus.AVAILABLE

        prop.status_details = NoticeGiven(notice_end_date=date(2024, 3, 1))
        assert prop.status == PropertyStatus.NOTICE_GIVEN
        assert prop.current_tenant is None

        prop.status_details = Leased(current_tenant="Tech Corp")
        assert prop.status == PropertyStatus.LEASED
        assert prop.is_leased
        assert prop.current_tenant == "Tech Corp"

    def test_build_ignores_fields_of_other_statuses(self) -> None:
        details = build_status_details(
            PropertyStatus.NOTICE_GIVEN,
            vacancy_start_date=date(2024, 1, 1),
            notice_end_date=date(2024, 3, 1),
            current_tenant="Tech Corp",
        )

        assert details == NoticeGiven(notice_end_date=date(2024, 3, 1))

    def test_build_leased_defaults_to_fixed(self) -> None:
        details = build_status_details(PropertyStatus.LEASED, current_tenant="Ana")

        assert details.lease_type == LeaseType.FIXED

    @pytest.mark.parametrize(
        ("details", "missing"),
        [
            (Available(), ["vacancy_start_date"]),
            (NoticeGiven(), ["notice_end_date"]),
            (Leased(current_tenant="  "), ["current_tenant", "lease_start_date", "lease_end_date"]),
            (
                Leased(
                    current_tenant="Ana",
                    lease_start_date=date(2024, 1, 1),
                    lease_end_date=date(2025, 1, 1),
                ),
                [],
            ),
        ],
    )
    def test_missing_status_fields(self, details, missing) -> None:
        assert missing_status_fields(details) == missing


class TestPropertyDerivedFields:
    def test_days_vacant(self, make_property) -> None:
        prop = make_property(status_details=Available(vacancy_start_date=date(2023, 12, 1)))

        assert prop.days_vacant(TODAY) == 45
        assert prop.days_to_handover(TODAY) is None

    def test_days_vacant_falls_back_to_creation_and_clamps(self, make_property) -> None:
        assert make_property(status_details=Available()).days_vacant(TODAY) == 379
        future = make_property(status_details=Available(vacancy_start_date=date(2024, 2, 1)))
        assert future.days_vacant(TODAY) == 0

    def test_days_to_handover(self, make_property) -> None:
        prop = make_property(status_details=NoticeGiven(notice_end_date=date(2024, 1, 10)))

        assert prop.days_to_handover(TODAY) == -5
        assert prop.days_vacant(TODAY) is None

    def test_touch_updates_timestamp(self, make_property) -> None:
        prop = make_property()
        before = prop.updated_at

        prop.touch()

        assert prop.updated_at > before
        assert prop.created_at == before


class TestVisit:
    def test_archive_keeps_current_commitment_status(self, make_visit) -> None:
        visit = make_visit("P-10001")
        visit.action_status = ActionStatus.DONE
        visit.action_completed_date = date(2024, 1, 12)

        item = visit.archive_current_action(TODAY, note="Cliente pidió más tiempo")

        assert item.status == HistoryStatus.DONE
        assert item.scheduled_date == date(2024, 1, 20)
        assert item.completed_date == date(2024, 1, 12)
        assert item.archived_date == TODAY
        assert visit.history == [item]

    def test_archive_with_explicit_status(self, make_visit) -> None:
        visit = make_visit("P-10001")

        item = visit.archive_current_action(TODAY, status=HistoryStatus.ARCHIVED)

        assert item.status == HistoryStatus.ARCHIVED
        assert visit.is_pending
        assert not visit.was_auto_closed

    def test_defaults(self) -> None:
        visit = Visit(
            property_id="P-10001",
            visit_date=TODAY,
            executive_name="Juan Pérez",
            client_name="Ana",
            next_action="Llamar",
            next_action_date=None,
        )

        assert visit.action_status == ActionStatus.PENDING
        assert visit.history == []
        assert visit.offer_uf is None


class TestLeaseResolution:
    def _resolution(self, make_property, pending: list[str]) -> LeaseResolution:
        prop = make_property("P-10001", status_details=Leased(current_tenant="Ana"))
        return LeaseResolution(property=prop, winner_name="Ana", pending_winner_visit_ids=pending)

    def test_starts_awaiting_when_winner_has_pending_visits(self, make_property) -> None:
        resolution = self._resolution(make_property, ["V-1", "V-2"])

        assert resolution.state == LeaseResolutionState.AWAITING_WINNER_RESOLUTION
        assert resolution.property_id == "P-10001"

        resolution.mark_winner_visit_resolved("V-1")
        assert resolution.state == LeaseResolutionState.AWAITING_WINNER_RESOLUTION
        resolution.mark_winner_visit_resolved("V-2")
        assert resolution.state == LeaseResolutionState.READY_TO_COMMIT

    def test_closing_states(self, make_property) -> None:
        committed = self._resolution(make_property, [])
        committed.mark_committed(["V-3"])
        cancelled = self._resolution(make_property, [])
        cancelled.mark_cancelled()

        assert committed.auto_closed_visit_ids == ["V-3"]
        assert not committed.is_open
        assert committed.closed_at is not None
        assert cancelled.state == LeaseResolutionState.CANCELLED
        assert not cancelled.is_open


class TestIdentifiers:
    def test_sequential_skips_used_ids(self) -> None:
        generator = SequentialIdGenerator()
        used = {"P-10000", "P-10001"}

        assert generator.new_id(PROPERTY_PREFIX, used.__contains__) == "P-10002"
        assert generator.new_id(PROPERTY_PREFIX, used.__contains__) == "P-10003"
        assert generator.new_id(VISIT_PREFIX, used.__contains__) == "V-10000"

    def test_random_ids_are_five_digits(self) -> None:
        generator = RandomIdGenerator(random.Random(7))

        new_id = generator.new_id(VISIT_PREFIX, lambda candidate: False)

        prefix, digits = new_id.split("-")
        assert prefix == "V"
        assert len(digits) == 5

    def test_random_gives_up_when_space_is_taken(self) -> None:
        generator = RandomIdGenerator(random.Random(7))

        with pytest.raises(RuntimeError):
            generator.new_id(PROPERTY_PREFIX, lambda candidate: True)


class TestTeam:
    def test_executive_names_exclude_admin(self) -> None:
        assert executive_names(DEFAULT_TEAM) == ["Juan Pérez", "Maria Gomez"]

    @pytest.mark.parametrize(
        ("role", "allowed"),
        [(UserRole.ADMIN, True), (UserRole.EXECUTIVE, False), (UserRole.OPERATIONS, False)],
    )
    def test_only_admin_deletes(self, role, allowed) -> None:
        assert role_can_delete_properties(role) is allowed


class TestAlertReport:
    def test_totals(self, make_property, make_visit) -> None:
        prop: Property = make_property("P-10001", price_uf=Decimal("10"))
        visit = make_visit("P-10001")
        report = AlertReport(
            stale_properties=[
                StaleProperty(property=prop, reference_date=date(2023, 12, 1), days_inactive=45)
            ],
            action_alerts=[
                CommitmentAlert(visit=visit, days_left=-2, level=AlertLevel.URGENT),
                CommitmentAlert(visit=visit, days_left=3, level=AlertLevel.WARNING),
            ],
        )

        assert report.total == 3
        assert report.urgent_count == 1
        assert report.stale_properties[0].never_visited
        assert report.action_alerts[0].is_overdue
