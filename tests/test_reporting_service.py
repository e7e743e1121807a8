"""Tests for ReportingService."""

from datetime import UTC, date, datetime

from leasing_desk.domain.properties import Available, Leased, NoticeGiven


class TestStockSummary:
    def test_counts_and_average_vacancy(self, desk, make_property) -> None:
        desk.property_repo.add(
            make_property("P-10001", status_details=Available(vacancy_start_date=date(2024, 1, 5)))
        )
        desk.property_repo.add(
            make_property("P-10002", status_details=Available(vacancy_start_date=date(2024, 1, 10)))
        )
        desk.property_repo.add(
            make_property("P-10003", status_details=NoticeGiven(notice_end_date=date(2024, 3, 1)))
        )
        desk.property_repo.add(
            make_property(
                "P-10004",
                status_details=Leased(
                    current_tenant="Tech Corp",
                    lease_start_date=date(2023, 1, 1),
                    lease_end_date=date(2025, 1, 1),
                ),
            )
        )

        summary = desk.reporting.stock_summary()

        assert summary.total == 4
        assert summary.available == 2
        assert summary.notice_given == 1
        assert summary.leased == 1
        # (10 + 5) / 2 rounds to 8 with banker's rounding
        assert summary.average_vacancy_days == 8

    def test_future_vacancy_start_clamped_to_zero(self, desk, make_property) -> None:
        desk.property_repo.add(
            make_property("P-10001", status_details=Available(vacancy_start_date=date(2024, 2, 1)))
        )

        assert desk.reporting.stock_summary().average_vacancy_days == 0

    def test_empty_portfolio(self, desk) -> None:
        summary = desk.reporting.stock_summary()

        assert summary.total == 0
        assert summary.average_vacancy_days == 0


class TestExecutiveActivity:
    def test_counts_week_month_and_previous_month(
        self, desk, make_property, make_visit
    ) -> None:
        desk.property_repo.add(make_property("P-10001"))
        for visit_date in (date(2024, 1, 15), date(2024, 1, 3), date(2023, 12, 20)):
            desk.portfolio.add_visit(make_visit("P-10001", visit_date=visit_date))
        desk.portfolio.add_visit(
            make_visit("P-10001", executive_name="Maria Gomez", visit_date=date(2023, 11, 30))
        )

        activity = {a.executive_name: a for a in desk.reporting.executive_activity()}

        assert set(activity) == {"Juan Pérez", "Maria Gomez"}
        juan = activity["Juan Pérez"]
        assert (juan.this_week, juan.this_month, juan.previous_month) == (1, 2, 1)
        maria = activity["Maria Gomez"]
        assert (maria.this_week, maria.this_month, maria.previous_month) == (0, 0, 0)

    def test_previous_month_wraps_year(self, desk, make_property, make_visit) -> None:
        desk.clock.today = date(2024, 1, 31)
        desk.property_repo.add(make_property("P-10001"))
        desk.portfolio.add_visit(make_visit("P-10001", visit_date=date(2023, 12, 1)))

        juan = desk.reporting.executive_activity()[0]

        assert juan.previous_month == 1


class TestStaleTrend:
    def test_points_are_weekly_oldest_first(self, desk, make_property) -> None:
        desk.property_repo.add(
            make_property(
                "P-10001",
                status_details=Available(vacancy_start_date=date(2023, 12, 1)),
                created_at=datetime(2023, 12, 1, tzinfo=UTC),
            )
        )

        trend = desk.reporting.stale_trend()

        assert [p.as_of for p in trend.points] == [
            date(2023, 12, 18),
            date(2023, 12, 25),
            date(2024, 1, 1),
            date(2024, 1, 8),
            date(2024, 1, 15),
        ]
        assert [p.stale_count for p in trend.points] == [0, 0, 1, 1, 1]
        assert trend.current == 1

    def test_recovered_counts_properties_revisited(
        self, desk, make_property, make_visit
    ) -> None:
        desk.property_repo.add(
            make_property("P-10001", status_details=Available(vacancy_start_date=date(2023, 10, 1)))
        )
        desk.property_repo.add(
            make_property("P-10002", status_details=Available(vacancy_start_date=date(2023, 10, 1)))
        )
        desk.portfolio.add_visit(make_visit("P-10001", visit_date=date(2024, 1, 10)))

        trend = desk.reporting.stale_trend()

        assert trend.recovered == 1
        assert trend.current == 1


class TestVisitLists:
    def test_recent_visits_last_seven_days(self, desk, make_property, make_visit) -> None:
        desk.property_repo.add(make_property("P-10001"))
        recent = desk.portfolio.add_visit(make_visit("P-10001", visit_date=date(2024, 1, 8)))
        desk.portfolio.add_visit(make_visit("P-10001", visit_date=date(2024, 1, 7)))

        assert [v.id for v in desk.reporting.recent_visits()] == [recent.id]

    def test_client_history(self, desk, make_property, make_visit) -> None:
        desk.property_repo.add(make_property("P-10001"))
        desk.property_repo.add(make_property("P-10002"))
        first = desk.portfolio.add_visit(make_visit("P-10001", "Ana", visit_date=date(2024, 1, 2)))
        second = desk.portfolio.add_visit(make_visit("P-10002", "Ana", visit_date=date(2024, 1, 9)))
        desk.portfolio.add_visit(make_visit("P-10002", "Bruno"))

        assert [v.id for v in desk.reporting.client_history("Ana")] == [second.id, first.id]


class TestStaleTrendToday:
    def test_today_point_counts_scheduled_visits(
        self, desk, make_property, make_visit
    ) -> None:
        desk.property_repo.add(
            make_property("P-10001", status_details=Available(vacancy_start_date=date(2023, 10, 1)))
        )
        desk.portfolio.add_visit(make_visit("P-10001", visit_date=date(2024, 1, 18)))

        trend = desk.reporting.stale_trend()

        assert [p.stale_count for p in trend.points] == [1, 1, 1, 1, 0]
        assert trend.current == len(desk.alerts.get_alerts().stale_properties)
