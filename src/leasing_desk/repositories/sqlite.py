"""SQLite implementations of repository interfaces."""

from __future__ import annotations

import json
import sqlite3
from collections.abc import Iterable
from datetime import date, datetime
from decimal import Decimal
from pathlib import Path
from typing import Any

from leasing_desk.domain.properties import (
    Available,
    Leased,
    NoticeGiven,
    Property,
    build_status_details,
)
from leasing_desk.domain.value_objects import (
    ActionStatus,
    ClosureReason,
    HistoryStatus,
    LeaseType,
    PropertyStatus,
)
from leasing_desk.domain.visits import ActionHistoryItem, Visit
from leasing_desk.repositories.interfaces import PropertyRepository, VisitRepository


def _parse_date(value: str | None) -> date | None:
    """Parse an ISO date; blank or malformed values read as unset."""
    if not value:
        return None
    try:
        return date.fromisoformat(value[:10])
    except ValueError:
        return None


def _iso(value: date | None) -> str | None:
    return value.isoformat() if value is not None else None


class SQLiteDatabase:
    """SQLite database connection manager."""

    def __init__(
        self, path: str | Path = ":memory:", check_same_thread: bool = True
    ) -> None:
        self._path = str(path)
        self._check_same_thread = check_same_thread
        self._connection: sqlite3.Connection | None = None

    def get_connection(self) -> sqlite3.Connection:
        """Get or create the database connection."""
        if self._connection is None:
            self._connection = sqlite3.connect(
                self._path, check_same_thread=self._check_same_thread
            )
            self._connection.row_factory = sqlite3.Row
            self._connection.execute("PRAGMA foreign_keys = ON")
        return self._connection

    def initialize(self) -> None:
        """Create all database tables."""
        conn = self.get_connection()
        conn.executescript(
            """
            -- Properties table
            CREATE TABLE IF NOT EXISTS properties (
                id TEXT PRIMARY KEY,
                address TEXT NOT NULL,
                commune TEXT NOT NULL,
                property_type TEXT NOT NULL,
                owner TEXT NOT NULL DEFAULT '',
                condominium TEXT,
                price_uf TEXT NOT NULL,
                land_m2 TEXT NOT NULL DEFAULT '0',
                built_m2 TEXT NOT NULL DEFAULT '0',
                storage_m2 TEXT NOT NULL DEFAULT '0',
                status TEXT NOT NULL,
                vacancy_start_date TEXT,
                notice_end_date TEXT,
                current_tenant TEXT,
                lease_start_date TEXT,
                lease_end_date TEXT,
                lease_type TEXT,
                created_at TEXT NOT NULL,
                updated_at TEXT NOT NULL
            );
            CREATE INDEX IF NOT EXISTS idx_properties_status ON properties(status);

            -- Visits table; history is a JSON array of archived commitments
            CREATE TABLE IF NOT EXISTS visits (
                id TEXT PRIMARY KEY,
                property_id TEXT NOT NULL,
                visit_date TEXT NOT NULL,
                executive_name TEXT NOT NULL,
                client_name TEXT NOT NULL,
                client_phone TEXT,
                client_email TEXT,
                offer_uf TEXT,
                has_broker INTEGER NOT NULL DEFAULT 0,
                broker_name TEXT,
                comments TEXT NOT NULL DEFAULT '',
                next_action TEXT NOT NULL DEFAULT '',
                next_action_date TEXT,
                action_status TEXT NOT NULL DEFAULT 'PENDING',
                action_completed_date TEXT,
                closure_reason TEXT,
                history TEXT NOT NULL DEFAULT '[]',
                created_at TEXT NOT NULL,
                FOREIGN KEY (property_id) REFERENCES properties(id) ON DELETE CASCADE
            );
            CREATE INDEX IF NOT EXISTS idx_visits_property ON visits(property_id);
            """
        )
        conn.commit()

    def close(self) -> None:
        """Close the database connection."""
        if self._connection is not None:
            self._connection.close()
            self._connection = None


class SQLitePropertyRepository(PropertyRepository):
    """SQLite implementation of PropertyRepository."""

    def __init__(self, database: SQLiteDatabase) -> None:
        self._db = database

    def add(self, prop: Property) -> None:
        conn = self._db.get_connection()
        conn.execute(
            """
            INSERT INTO properties (id, address, commune, property_type, owner, condominium,
                                    price_uf, land_m2, built_m2, storage_m2, status,
                                    vacancy_start_date, notice_end_date, current_tenant,
                                    lease_start_date, lease_end_date, lease_type,
                                    created_at, updated_at)
            VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
            """,
            (prop.id, *self._columns(prop), prop.created_at.isoformat()),
        )
        conn.commit()

    def get(self, property_id: str) -> Property | None:
        conn = self._db.get_connection()
        row = conn.execute(
            "SELECT * FROM properties WHERE id = ?", (property_id,)
        ).fetchone()
        if row is None:
            return None
        return self._row_to_property(row)

    def list_all(self) -> Iterable[Property]:
        conn = self._db.get_connection()
        rows = conn.execute("SELECT * FROM properties ORDER BY id").fetchall()
        return [self._row_to_property(row) for row in rows]

    def update(self, prop: Property) -> None:
        conn = self._db.get_connection()
        conn.execute(
            """
            UPDATE properties SET
                address = ?,
                commune = ?,
                property_type = ?,
                owner = ?,
                condominium = ?,
                price_uf = ?,
                land_m2 = ?,
                built_m2 = ?,
                storage_m2 = ?,
                status = ?,
                vacancy_start_date = ?,
                notice_end_date = ?,
                current_tenant = ?,
                lease_start_date = ?,
                lease_end_date = ?,
                lease_type = ?,
                updated_at = ?
            WHERE id = ?
            """,
            (*self._columns(prop), prop.id),
        )
        conn.commit()

    def delete(self, property_id: str) -> None:
        conn = self._db.get_connection()
        conn.execute("DELETE FROM properties WHERE id = ?", (property_id,))
        conn.commit()

    def count(self) -> int:
        conn = self._db.get_connection()
        return conn.execute("SELECT COUNT(*) FROM properties").fetchone()[0]

    def _columns(self, prop: Property) -> tuple[Any, ...]:
        """Column values shared by INSERT and UPDATE, ending with updated_at."""
        vacancy_start = notice_end = tenant = lease_start = lease_end = lease_type = None
        details = prop.status_details
        match details:
            case Available():
                vacancy_start = _iso(details.vacancy_start_date)
            case NoticeGiven():
                notice_end = _iso(details.notice_end_date)
            case Leased():
                tenant = details.current_tenant
                lease_start = _iso(details.lease_start_date)
                lease_end = _iso(details.lease_end_date)
                lease_type = details.lease_type.value
        return (
            prop.address,
            prop.commune,
            prop.property_type,
            prop.owner,
            prop.condominium,
            str(prop.price_uf),
            str(prop.land_m2),
            str(prop.built_m2),
            str(prop.storage_m2),
            prop.status.value,
            vacancy_start,
            notice_end,
            tenant,
            lease_start,
            lease_end,
            lease_type,
            prop.updated_at.isoformat(),
        )

    def _row_to_property(self, row: sqlite3.Row) -> Property:
        details = build_status_details(
            PropertyStatus(row["status"]),
            vacancy_start_date=_parse_date(row["vacancy_start_date"]),
            notice_end_date=_parse_date(row["notice_end_date"]),
            current_tenant=row["current_tenant"],
            lease_start_date=_parse_date(row["lease_start_date"]),
            lease_end_date=_parse_date(row["lease_end_date"]),
            lease_type=LeaseType(row["lease_type"]) if row["lease_type"] else None,
        )
        return Property(
            id=row["id"],
            address=row["address"],
            commune=row["commune"],
            property_type=row["property_type"],
            owner=row["owner"],
            condominium=row["condominium"],
            price_uf=Decimal(row["price_uf"]),
            land_m2=Decimal(row["land_m2"]),
            built_m2=Decimal(row["built_m2"]),
            storage_m2=Decimal(row["storage_m2"]),
            status_details=details,
            created_at=datetime.fromisoformat(row["created_at"]),
            updated_at=datetime.fromisoformat(row["updated_at"]),
        )


class SQLiteVisitRepository(VisitRepository):
    """SQLite implementation of VisitRepository."""

    def __init__(self, database: SQLiteDatabase) -> None:
        self._db = database

    def add(self, visit: Visit) -> None:
        conn = self._db.get_connection()
        conn.execute(
            """
            INSERT INTO visits (id, property_id, visit_date, executive_name, client_name,
                                client_phone, client_email, offer_uf, has_broker, broker_name,
                                comments, next_action, next_action_date, action_status,
                                action_completed_date, closure_reason, history, created_at)
            VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
            """,
            (
                visit.id,
                visit.property_id,
                visit.visit_date.isoformat(),
                visit.executive_name,
                visit.client_name,
                visit.client_phone,
                visit.client_email,
                str(visit.offer_uf) if visit.offer_uf is not None else None,
                1 if visit.has_broker else 0,
                visit.broker_name,
                visit.comments,
                *self._commitment_columns(visit),
                visit.created_at.isoformat(),
            ),
        )
        conn.commit()

    def get(self, visit_id: str) -> Visit | None:
        conn = self._db.get_connection()
        row = conn.execute("SELECT * FROM visits WHERE id = ?", (visit_id,)).fetchone()
        if row is None:
            return None
        return self._row_to_visit(row)

    def list_all(self) -> Iterable[Visit]:
        conn = self._db.get_connection()
        rows = conn.execute(
            "SELECT * FROM visits ORDER BY visit_date DESC, created_at DESC"
        ).fetchall()
        return [self._row_to_visit(row) for row in rows]

    def list_by_property(self, property_id: str) -> Iterable[Visit]:
        conn = self._db.get_connection()
        rows = conn.execute(
            "SELECT * FROM visits WHERE property_id = ? ORDER BY visit_date DESC, created_at DESC",
            (property_id,),
        ).fetchall()
        return [self._row_to_visit(row) for row in rows]

    def update(self, visit: Visit) -> None:
        # Visit facts are immutable after creation; only the commitment is written.
        conn = self._db.get_connection()
        conn.execute(
            """
            UPDATE visits SET
                next_action = ?,
                next_action_date = ?,
                action_status = ?,
                action_completed_date = ?,
                closure_reason = ?,
                history = ?
            WHERE id = ?
            """,
            (*self._commitment_columns(visit), visit.id),
        )
        conn.commit()

    def delete_by_property(self, property_id: str) -> None:
        conn = self._db.get_connection()
        conn.execute("DELETE FROM visits WHERE property_id = ?", (property_id,))
        conn.commit()

    def _commitment_columns(self, visit: Visit) -> tuple[Any, ...]:
        return (
            visit.next_action,
            _iso(visit.next_action_date),
            visit.action_status.value,
            _iso(visit.action_completed_date),
            visit.closure_reason.value if visit.closure_reason else None,
            json.dumps([self._history_item_to_dict(h) for h in visit.history]),
        )

    def _history_item_to_dict(self, item: ActionHistoryItem) -> dict[str, Any]:
        return {
            "action": item.action,
            "scheduled_date": _iso(item.scheduled_date),
            "status": item.status.value,
            "archived_date": item.archived_date.isoformat(),
            "completed_date": _iso(item.completed_date),
            "note": item.note,
            "closure_reason": item.closure_reason.value if item.closure_reason else None,
        }

    def _dict_to_history_item(self, data: dict[str, Any]) -> ActionHistoryItem:
        return ActionHistoryItem(
            action=data.get("action") or "",
            scheduled_date=_parse_date(data.get("scheduled_date")),
            status=HistoryStatus(data["status"]),
            archived_date=date.fromisoformat(data["archived_date"]),
            completed_date=_parse_date(data.get("completed_date")),
            note=data.get("note"),
            closure_reason=ClosureReason(data["closure_reason"])
            if data.get("closure_reason")
            else None,
        )

    def _row_to_visit(self, row: sqlite3.Row) -> Visit:
        return Visit(
            id=row["id"],
            property_id=row["property_id"],
            visit_date=date.fromisoformat(row["visit_date"]),
            executive_name=row["executive_name"],
            client_name=row["client_name"],
            client_phone=row["client_phone"],
            client_email=row["client_email"],
            offer_uf=Decimal(row["offer_uf"]) if row["offer_uf"] is not None else None,
            has_broker=bool(row["has_broker"]),
            broker_name=row["broker_name"],
            comments=row["comments"],
            next_action=row["next_action"],
            next_action_date=_parse_date(row["next_action_date"]),
            action_status=ActionStatus(row["action_status"]),
            action_completed_date=_parse_date(row["action_completed_date"]),
            closure_reason=ClosureReason(row["closure_reason"])
            if row["closure_reason"]
            else None,
            history=[
                self._dict_to_history_item(item) for item in json.loads(row["history"])
            ],
            created_at=datetime.fromisoformat(row["created_at"]),
        )
