"""Tests for SQLite repository implementations."""

from datetime import date
from decimal import Decimal

import pytest

from leasing_desk.domain.properties import Available, Leased, NoticeGiven
from leasing_desk.domain.value_objects import (
    ActionStatus,
    ClosureReason,
    HistoryStatus,
    LeaseType,
    PropertyStatus,
)
from leasing_desk.repositories.seed import seed_if_empty
from leasing_desk.repositories.sqlite import (
    SQLiteDatabase,
    SQLitePropertyRepository,
    SQLiteVisitRepository,
)


@pytest.fixture
def property_repo(db: SQLiteDatabase) -> SQLitePropertyRepository:
    return SQLitePropertyRepository(db)


@pytest.fixture
def visit_repo(db: SQLiteDatabase) -> SQLiteVisitRepository:
    return SQLiteVisitRepository(db)


class TestSQLiteDatabase:
    def test_initialize_is_repeatable(self, db: SQLiteDatabase) -> None:
        db.initialize()

        tables = {
            row["name"]
            for row in db.get_connection().execute(
                "SELECT name FROM sqlite_master WHERE type = 'table'"
            )
        }
        assert {"properties", "visits"} <= tables

    def test_file_database_persists_between_connections(self, tmp_path, make_property) -> None:
        path = tmp_path / "desk.db"
        first = SQLiteDatabase(path)
        first.initialize()
        SQLitePropertyRepository(first).add(make_property("P-10001"))
        first.close()

        second = SQLiteDatabase(path)
        assert SQLitePropertyRepository(second).get("P-10001") is not None
        second.close()


class TestSQLitePropertyRepository:
    def test_leased_variant_round_trip(self, property_repo, make_property) -> None:
        details = Leased(
            current_tenant="Tech Corp",
            lease_start_date=date(2023, 1, 1),
            lease_end_date=date(2025, 12, 31),
            lease_type=LeaseType.RENEWABLE,
        )
        property_repo.add(
            make_property(
                "P-10001",
                status_details=details,
                land_m2=Decimal("300.5"),
                condominium="Edificio Norte",
            )
        )

        stored = property_repo.get("P-10001")

        assert stored.status == PropertyStatus.LEASED
        assert stored.status_details == details
        assert stored.land_m2 == Decimal("300.5")
        assert stored.condominium == "Edificio Norte"

    def test_update_switches_variant_and_clears_old_columns(
        self, db, property_repo, make_property
    ) -> None:
        prop = make_property(
            "P-10001", status_details=NoticeGiven(notice_end_date=date(2024, 2, 1))
        )
        property_repo.add(prop)

        prop.status_details = Available(vacancy_start_date=date(2024, 2, 1))
        property_repo.update(prop)

        row = db.get_connection().execute(
            "SELECT status, notice_end_date, vacancy_start_date FROM properties WHERE id = ?",
            ("P-10001",),
        ).fetchone()
        assert row["status"] == "AVAILABLE"
        assert row["notice_end_date"] is None
        assert row["vacancy_start_date"] == "2024-02-01"

    def test_malformed_dates_read_as_unset(self, db, property_repo, make_property) -> None:
        property_repo.add(
            make_property(
                "P-10001", status_details=NoticeGiven(notice_end_date=date(2024, 2, 1))
            )
        )
        db.get_connection().execute(
            "UPDATE properties SET notice_end_date = 'not-a-date' WHERE id = 'P-10001'"
        )

        stored = property_repo.get("P-10001")

        assert stored.status_details == NoticeGiven(notice_end_date=None)

    def test_get_missing_returns_none(self, property_repo) -> None:
        assert property_repo.get("P-00000") is None

    def test_delete(self, property_repo, make_property) -> None:
        property_repo.add(make_property("P-10001"))

        property_repo.delete("P-10001")

        assert property_repo.count() == 0


class TestSQLiteVisitRepository:
    def test_history_round_trip(self, property_repo, visit_repo, make_property, make_visit) -> None:
        property_repo.add(make_property("P-10001"))
        visit = make_visit(
            "P-10001", id="V-10001", offer_uf=Decimal("4300.50"), has_broker=True,
            broker_name="Corredora Sur",
        )
        visit.archive_current_action(
            date(2024, 1, 12),
            status=HistoryStatus.ARCHIVED,
            note="Propiedad arrendada",
            closure_reason=ClosureReason.AUTO_LEASE_LOST,
        )
        visit.action_status = ActionStatus.DONE
        visit.action_completed_date = date(2024, 1, 12)
        visit.closure_reason = ClosureReason.AUTO_LEASE_LOST
        visit_repo.add(visit)

        stored = visit_repo.get("V-10001")

        assert stored.history == visit.history
        assert stored.offer_uf == Decimal("4300.50")
        assert stored.has_broker is True
        assert stored.closure_reason == ClosureReason.AUTO_LEASE_LOST

    def test_update_only_touches_commitment(
        self, property_repo, visit_repo, make_property, make_visit
    ) -> None:
        property_repo.add(make_property("P-10001"))
        visit_repo.add(make_visit("P-10001", id="V-10001"))
        visit = visit_repo.get("V-10001")
        visit.client_name = "Otro Cliente"
        visit.next_action = "Enviar contrato"

        visit_repo.update(visit)

        stored = visit_repo.get("V-10001")
        assert stored.client_name == "Ana Rojas"
        assert stored.next_action == "Enviar contrato"

    def test_delete_by_property(self, property_repo, visit_repo, make_property, make_visit) -> None:
        property_repo.add(make_property("P-10001"))
        property_repo.add(make_property("P-10002"))
        visit_repo.add(make_visit("P-10001", id="V-10001"))
        visit_repo.add(make_visit("P-10002", id="V-10002"))

        visit_repo.delete_by_property("P-10001")

        assert [v.id for v in visit_repo.list_all()] == ["V-10002"]


class TestSeed:
    def test_seeds_three_demo_properties_once(self, property_repo) -> None:
        assert seed_if_empty(property_repo) == 3
        assert seed_if_empty(property_repo) == 0

        properties = {p.id: p for p in property_repo.list_all()}
        assert set(properties) == {"P-1001", "P-1002", "P-1003"}
        assert properties["P-1001"].status == PropertyStatus.AVAILABLE
        assert properties["P-1002"].current_tenant == "Tech Corp"
        assert properties["P-1003"].status_details == NoticeGiven(
            notice_end_date=date(2023, 12, 1)
        )
