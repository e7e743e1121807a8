"""Command-line interface for Leasing Desk."""

import argparse
import asyncio
import sys
from collections.abc import Callable
from datetime import date
from decimal import Decimal, InvalidOperation
from pathlib import Path

from leasing_desk import __version__
from leasing_desk.config import Settings
from leasing_desk.container import Container
from leasing_desk.domain.properties import Leased, Property
from leasing_desk.domain.team import role_can_delete_properties
from leasing_desk.domain.value_objects import LeaseType, PropertyStatus, UserRole
from leasing_desk.domain.visits import Visit
from leasing_desk.exceptions import LeasingDeskError, ReferenceValueUnavailableError
from leasing_desk.repositories.seed import seed_if_empty
from leasing_desk.repositories.sqlite import SQLiteDatabase, SQLitePropertyRepository
from leasing_desk.services.reference_value import format_clp, format_uf, uf_to_clp


def get_default_db_path() -> Path:
    """Get the default database path in user's home directory."""
    return Path.home() / ".leasing_desk" / "leasing_desk.db"


def _db_path(args: argparse.Namespace) -> Path:
    return Path(args.database) if args.database else get_default_db_path()


def _parse_date(value: str) -> date:
    return date.fromisoformat(value)


def _clock(args: argparse.Namespace) -> Callable[[], date]:
    if getattr(args, "today", None):
        fixed = _parse_date(args.today)
        return lambda: fixed
    return date.today


def _open_container(args: argparse.Namespace) -> Container | None:
    """Build a container over an existing database, or print why not."""
    db_path = _db_path(args)
    if not db_path.exists():
        print(f"No database found at {db_path}")
        print("Run 'leasing-desk init' to create a new database")
        return None
    settings = Settings(sqlite_path=db_path, seed_on_empty=False)
    return Container(settings=settings, clock=_clock(args))


def _format_visit(visit: Visit) -> str:
    due = visit.next_action_date.isoformat() if visit.next_action_date else "-"
    return (
        f"{visit.id}  {visit.visit_date}  {visit.property_id}  {visit.client_name}"
        f"  [{visit.action_status.value}] {visit.next_action} (due {due})"
    )


def cmd_init(args: argparse.Namespace) -> int:
    """Initialize a new database."""
    db_path = _db_path(args)

    if db_path.exists() and not args.force:
        print(f"Database already exists at {db_path}")
        print("Use --force to reinitialize (WARNING: will delete existing data)")
        return 1

    if db_path.exists() and args.force:
        db_path.unlink()

    db_path.parent.mkdir(parents=True, exist_ok=True)
    db = SQLiteDatabase(str(db_path))
    db.initialize()
    seeded = 0 if args.no_seed else seed_if_empty(SQLitePropertyRepository(db))
    db.close()

    print(f"Initialized database at {db_path}")
    if seeded:
        print(f"Loaded {seeded} demo properties")
    return 0


def cmd_status(args: argparse.Namespace) -> int:
    """Show portfolio status."""
    container = _open_container(args)
    if container is None:
        return 1
    with container:
        summary = container.reporting_service.stock_summary()
        visits = container.portfolio_service.list_visits()
        report = container.alert_service.get_alerts()

    print(f"Database: {_db_path(args)}")
    print(f"Properties: {summary.total}")
    print(f"  Available:    {summary.available}")
    print(f"  Leased:       {summary.leased}")
    print(f"  Notice given: {summary.notice_given}")
    print(f"Average vacancy: {summary.average_vacancy_days} days")
    print(f"Visits: {len(visits)}")
    print(f"Alerts: {report.total} ({report.urgent_count} urgent)")
    return 0


def cmd_version(args: argparse.Namespace) -> int:
    """Show version information."""
    print(f"Leasing Desk v{__version__}")
    return 0


async def _fetch_remote(container: Container) -> list[Property]:
    source = container.remote_property_source
    try:
        return await source.fetch()
    finally:
        await source.aclose()


def cmd_properties(args: argparse.Namespace) -> int:
    """List properties."""
    container = _open_container(args)
    if container is None:
        return 1
    with container:
        status = PropertyStatus(args.status) if args.status else None
        portfolio = container.portfolio_service
        if args.remote:
            properties = asyncio.run(_fetch_remote(container))
            if status is not None:
                properties = [p for p in properties if p.status == status]
        else:
            properties = portfolio.list_properties(status)
        today = portfolio.today()

    if not properties:
        print("No properties found")
        return 0

    for prop in properties:
        line = (
            f"{prop.id}  {prop.status.value:<12}  {prop.commune:<14}  "
            f"{prop.address}  {format_uf(prop.price_uf)}"
        )
        days_vacant = prop.days_vacant(today)
        if days_vacant is not None:
            line += f"  vacant {days_vacant}d"
        if isinstance(prop.status_details, Leased):
            line += f"  tenant {prop.status_details.current_tenant}"
        days_to_handover = prop.days_to_handover(today)
        if days_to_handover is not None:
            line += f"  handover in {days_to_handover}d"
        print(line)
    return 0


def cmd_visits(args: argparse.Namespace) -> int:
    """List visits."""
    container = _open_container(args)
    if container is None:
        return 1
    with container:
        visits = container.portfolio_service.list_visits(
            property_id=args.property_id, client_name=args.client
        )

    if not visits:
        print("No visits found")
        return 0
    for visit in visits:
        print(_format_visit(visit))
        if args.history:
            for item in visit.history:
                note = f" - {item.note}" if item.note else ""
                print(
                    f"    {item.archived_date}  [{item.status.value}] {item.action}"
                    f" (was due {item.scheduled_date or '-'}){note}"
                )
    return 0


def cmd_visit_add(args: argparse.Namespace) -> int:
    """Record a visit."""
    container = _open_container(args)
    if container is None:
        return 1
    try:
        offer = Decimal(args.offer) if args.offer else None
        visit = Visit(
            property_id=args.property_id,
            visit_date=_parse_date(args.date),
            executive_name=args.executive,
            client_name=args.client,
            client_email=args.email,
            client_phone=args.phone,
            offer_uf=offer,
            next_action=args.action,
            next_action_date=_parse_date(args.action_date) if args.action_date else None,
        )
    except (ValueError, InvalidOperation) as e:
        print(f"Error: {e}")
        return 1
    with container:
        try:
            visit = container.portfolio_service.add_visit(visit)
        except LeasingDeskError as e:
            print(f"Error: {e.message}")
            return 1
    print(f"Visit recorded: {visit.id}")
    return 0


def cmd_alerts(args: argparse.Namespace) -> int:
    """Show stale properties and commitment alerts."""
    container = _open_container(args)
    if container is None:
        return 1
    with container:
        report = container.alert_service.get_alerts()

    if report.total == 0:
        print("No alerts")
        return 0

    if report.stale_properties:
        print(f"Stale properties ({len(report.stale_properties)}):")
        for stale in report.stale_properties:
            last = stale.last_visit_date.isoformat() if stale.last_visit_date else "never visited"
            print(
                f"  {stale.property.id}  {stale.property.address}"
                f"  {stale.days_inactive} days inactive ({last})"
            )
    if report.action_alerts:
        print(f"Commitments ({len(report.action_alerts)}):")
        for alert in report.action_alerts:
            when = (
                f"overdue {-alert.days_left}d"
                if alert.is_overdue
                else f"due in {alert.days_left}d"
            )
            print(
                f"  [{alert.level.value}] {alert.visit.id}  {alert.visit.client_name}:"
                f" {alert.visit.next_action} ({when})"
            )
    return 0


def cmd_done(args: argparse.Namespace) -> int:
    """Mark a visit's commitment as done."""
    container = _open_container(args)
    if container is None:
        return 1
    with container:
        try:
            visit = container.commitment_service.mark_done(args.visit_id)
        except LeasingDeskError as e:
            print(f"Error: {e.message}")
            return 1
    print(f"Commitment done: {visit.id} ({visit.next_action})")
    return 0


def cmd_schedule(args: argparse.Namespace) -> int:
    """Archive a visit's commitment and schedule a new one."""
    container = _open_container(args)
    if container is None:
        return 1
    try:
        action_date = _parse_date(args.date)
    except ValueError:
        print(f"Error: Invalid date: {args.date}")
        return 1
    with container:
        try:
            visit = container.commitment_service.schedule_new_action(
                args.visit_id, args.action, action_date, args.note
            )
        except LeasingDeskError as e:
            print(f"Error: {e.message}")
            return 1
    print(f"Scheduled for {visit.id}: {visit.next_action} on {visit.next_action_date}")
    print(f"  History items: {len(visit.history)}")
    return 0


def cmd_lease(args: argparse.Namespace) -> int:
    """Lease a property to a tenant.

    Competing clients' pending commitments are closed automatically. When the
    tenant has pending commitments of their own, ``--resolve-winner`` marks
    them done; without it the lease is cancelled and nothing changes.
    """
    container = _open_container(args)
    if container is None:
        return 1
    with container:
        portfolio = container.portfolio_service
        coordinator = container.lease_coordinator
        try:
            prop = portfolio.get_property(args.property_id)
            prop.status_details = Leased(
                current_tenant=args.tenant,
                lease_start_date=_parse_date(args.start),
                lease_end_date=_parse_date(args.end),
                lease_type=LeaseType(args.type),
            )
            result = portfolio.save_property(prop)
            if result.resolution is None:
                print(f"Property {prop.id} leased to {args.tenant}")
                return 0

            resolution = result.resolution
            if resolution.pending_winner_visit_ids and not args.resolve_winner:
                coordinator.cancel(resolution.id)
                print(f"{args.tenant} has pending commitments on {prop.id}:")
                for visit_id in resolution.pending_winner_visit_ids:
                    print(f"  {visit_id}")
                print("Resolve them first or pass --resolve-winner. Nothing was changed.")
                return 1
            for visit_id in list(resolution.pending_winner_visit_ids):
                coordinator.resolve_winner_commitment(resolution.id, visit_id)
            resolution = coordinator.commit(resolution.id)
        except ValueError as e:
            print(f"Error: {e}")
            return 1
        except LeasingDeskError as e:
            print(f"Error: {e.message}")
            return 1

    print(f"Property {resolution.property_id} leased to {resolution.winner_name}")
    if resolution.auto_closed_visit_ids:
        print(f"Closed competing commitments: {', '.join(resolution.auto_closed_visit_ids)}")
    return 0


def cmd_delete(args: argparse.Namespace) -> int:
    """Delete a property and its visits."""
    try:
        role = UserRole(args.role.upper())
    except ValueError:
        print(f"Error: Unknown role: {args.role}")
        return 1
    if not role_can_delete_properties(role):
        print(f"Error: role {role.value} cannot delete properties")
        return 1

    container = _open_container(args)
    if container is None:
        return 1
    with container:
        try:
            properties, _ = container.portfolio_service.delete_property(args.property_id)
        except LeasingDeskError as e:
            print(f"Error: {e.message}")
            return 1
    print(f"Deleted {args.property_id}; {len(properties)} properties remain")
    return 0


def cmd_report(args: argparse.Namespace) -> int:
    """Show a portfolio report."""
    container = _open_container(args)
    if container is None:
        return 1
    with container:
        reporting = container.reporting_service
        if args.kind == "stock":
            summary = reporting.stock_summary()
            print(f"Total: {summary.total}")
            print(f"Available: {summary.available}")
            print(f"Leased: {summary.leased}")
            print(f"Notice given: {summary.notice_given}")
            print(f"Average vacancy: {summary.average_vacancy_days} days")
        elif args.kind == "executives":
            print(f"{'Executive':<20} {'Week':>5} {'Month':>6} {'Prev':>5}")
            for activity in reporting.executive_activity():
                print(
                    f"{activity.executive_name:<20} {activity.this_week:>5}"
                    f" {activity.this_month:>6} {activity.previous_month:>5}"
                )
        elif args.kind == "trend":
            trend = reporting.stale_trend(args.points)
            for point in trend.points:
                print(f"{point.as_of}  {point.stale_count}")
            print(f"Recovered: {trend.recovered}")
        elif args.kind == "recent":
            visits = reporting.recent_visits(args.days)
            if not visits:
                print("No recent visits")
            for visit in visits:
                print(_format_visit(visit))
        elif args.kind == "client":
            if not args.client:
                print("Error: --client is required for the client report")
                return 1
            visits = reporting.client_history(args.client)
            if not visits:
                print(f"No visits for {args.client}")
            for visit in visits:
                print(_format_visit(visit))
    return 0


def cmd_uf(args: argparse.Namespace) -> int:
    """Show the current UF value and optionally convert an amount."""
    settings = Settings()
    container = Container(settings=settings)
    service = container.reference_value_service

    async def fetch():
        try:
            return await service.current()
        finally:
            await service.aclose()

    try:
        reference = asyncio.run(fetch())
    except ReferenceValueUnavailableError as e:
        print(f"Error: {e.message}")
        return 1

    print(f"UF {reference.value} (as of {reference.as_of or 'unknown'})")
    if args.amount:
        try:
            amount = Decimal(args.amount)
        except InvalidOperation:
            print(f"Error: Invalid amount: {args.amount}")
            return 1
        print(f"{format_uf(amount)} = {format_clp(uf_to_clp(amount, reference))}")
    return 0


def cmd_serve(args: argparse.Namespace) -> int:
    """Run the HTTP API."""
    import uvicorn

    settings = Settings()
    uvicorn.run(
        "leasing_desk.api.app:app",
        host=args.host or settings.api_host,
        port=args.port or settings.api_port,
        reload=settings.api_reload,
    )
    return 0


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        prog="leasing-desk",
        description="Leasing Desk - property portfolio, visits and commitment alerts",
    )
    parser.add_argument(
        "--database",
        "-d",
        help="Path to SQLite database file",
        default=None,
    )
    parser.add_argument(
        "--today",
        help="Evaluate as of this date (YYYY-MM-DD) instead of the current date",
        default=None,
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # init command
    init_parser = subparsers.add_parser("init", help="Initialize a new database")
    init_parser.add_argument(
        "--force",
        "-f",
        action="store_true",
        help="Force reinitialization (deletes existing data)",
    )
    init_parser.add_argument(
        "--no-seed", action="store_true", help="Do not load the demo properties"
    )
    init_parser.set_defaults(func=cmd_init)

    # status command
    status_parser = subparsers.add_parser("status", help="Show portfolio status")
    status_parser.set_defaults(func=cmd_status)

    # version command
    version_parser = subparsers.add_parser("version", help="Show version")
    version_parser.set_defaults(func=cmd_version)

    # properties command
    properties_parser = subparsers.add_parser("properties", help="List properties")
    properties_parser.add_argument(
        "--status",
        choices=[s.value for s in PropertyStatus],
        help="Only show properties with this status",
    )
    properties_parser.add_argument(
        "--remote",
        action="store_true",
        help="Read from the remote property table (falls back to the local store)",
    )
    properties_parser.set_defaults(func=cmd_properties)

    # visits command
    visits_parser = subparsers.add_parser("visits", help="List visits")
    visits_parser.add_argument("--property-id", help="Only visits of this property")
    visits_parser.add_argument("--client", help="Only visits of this client")
    visits_parser.add_argument(
        "--history", action="store_true", help="Show archived commitments"
    )
    visits_parser.set_defaults(func=cmd_visits)

    # visit-add command
    visit_add_parser = subparsers.add_parser("visit-add", help="Record a visit")
    visit_add_parser.add_argument("property_id", help="Visited property ID")
    visit_add_parser.add_argument("--client", required=True, help="Client name")
    visit_add_parser.add_argument("--executive", required=True, help="Executive name")
    visit_add_parser.add_argument("--date", required=True, help="Visit date (YYYY-MM-DD)")
    visit_add_parser.add_argument("--action", required=True, help="Next action")
    visit_add_parser.add_argument("--action-date", help="Next action date (YYYY-MM-DD)")
    visit_add_parser.add_argument("--email", help="Client email")
    visit_add_parser.add_argument("--phone", help="Client phone")
    visit_add_parser.add_argument("--offer", help="Offer in UF")
    visit_add_parser.set_defaults(func=cmd_visit_add)

    # alerts command
    alerts_parser = subparsers.add_parser("alerts", help="Show alerts")
    alerts_parser.set_defaults(func=cmd_alerts)

    # done command
    done_parser = subparsers.add_parser("done", help="Mark a commitment as done")
    done_parser.add_argument("visit_id", help="Visit ID")
    done_parser.set_defaults(func=cmd_done)

    # schedule command
    schedule_parser = subparsers.add_parser(
        "schedule", help="Replace a visit's commitment with a new one"
    )
    schedule_parser.add_argument("visit_id", help="Visit ID")
    schedule_parser.add_argument("--action", required=True, help="New action")
    schedule_parser.add_argument("--date", required=True, help="Due date (YYYY-MM-DD)")
    schedule_parser.add_argument("--note", help="Note stored with the archived commitment")
    schedule_parser.set_defaults(func=cmd_schedule)

    # lease command
    lease_parser = subparsers.add_parser("lease", help="Lease a property to a tenant")
    lease_parser.add_argument("property_id", help="Property ID")
    lease_parser.add_argument("--tenant", required=True, help="Tenant (winning client) name")
    lease_parser.add_argument("--start", required=True, help="Lease start (YYYY-MM-DD)")
    lease_parser.add_argument("--end", required=True, help="Lease end (YYYY-MM-DD)")
    lease_parser.add_argument(
        "--type",
        choices=[t.value for t in LeaseType],
        default=LeaseType.FIXED.value,
        help="Lease type (default: FIXED)",
    )
    lease_parser.add_argument(
        "--resolve-winner",
        action="store_true",
        help="Mark the tenant's own pending commitments as done",
    )
    lease_parser.set_defaults(func=cmd_lease)

    # delete command
    delete_parser = subparsers.add_parser("delete", help="Delete a property")
    delete_parser.add_argument("property_id", help="Property ID")
    delete_parser.add_argument(
        "--role",
        default=UserRole.EXECUTIVE.value,
        help="Role of the user performing the deletion (only admin may delete)",
    )
    delete_parser.set_defaults(func=cmd_delete)

    # report command
    report_parser = subparsers.add_parser("report", help="Show a report")
    report_parser.add_argument(
        "kind",
        choices=["stock", "executives", "trend", "recent", "client"],
        help="Report to show",
    )
    report_parser.add_argument("--client", help="Client name for the client report")
    report_parser.add_argument(
        "--points", type=int, default=5, help="Trend points (default: 5)"
    )
    report_parser.add_argument(
        "--days", type=int, default=7, help="Window for recent visits (default: 7)"
    )
    report_parser.set_defaults(func=cmd_report)

    # uf command
    uf_parser = subparsers.add_parser("uf", help="Show the current UF value")
    uf_parser.add_argument("--amount", help="Amount in UF to convert to pesos")
    uf_parser.set_defaults(func=cmd_uf)

    # serve command
    serve_parser = subparsers.add_parser("serve", help="Run the HTTP API")
    serve_parser.add_argument("--host", help="Bind address")
    serve_parser.add_argument("--port", type=int, help="Port")
    serve_parser.set_defaults(func=cmd_serve)

    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return 0

    if args.today:
        try:
            _parse_date(args.today)
        except ValueError:
            print(f"Error: Invalid date: {args.today}")
            return 1

    result: int = args.func(args)
    return result


if __name__ == "__main__":
    sys.exit(main())
