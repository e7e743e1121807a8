"""Property domain model.

A property shares its descriptive fields across all statuses; the fields
that only make sense for one status live in a status variant:

- ``Available``: vacancy start date, anchors days-vacant
- ``NoticeGiven``: notice end date, anchors days-to-handover
- ``Leased``: tenant, lease dates and lease type

``Property.status`` is derived from the variant, so a property can never
carry, for example, a notice end date while leased.
"""

from dataclasses import dataclass, field
from datetime import UTC, date, datetime
from decimal import Decimal

from leasing_desk.domain.value_objects import LeaseType, PropertyStatus


def _utc_now() -> datetime:
    return datetime.now(UTC)


@dataclass(frozen=True)
class Available:
    """Property on the market, vacant since ``vacancy_start_date``."""

    vacancy_start_date: date | None = None


@dataclass(frozen=True)
class NoticeGiven:
    """Current tenant leaves on ``notice_end_date``."""

    notice_end_date: date | None = None


@dataclass(frozen=True)
class Leased:
    """Property under a lease with ``current_tenant``."""

    current_tenant: str = ""
    lease_start_date: date | None = None
    lease_end_date: date | None = None
    lease_type: LeaseType = LeaseType.FIXED


StatusDetails = Available | NoticeGiven | Leased


def status_of(details: StatusDetails) -> PropertyStatus:
    match details:
        case Available():
            return PropertyStatus.AVAILABLE
        case NoticeGiven():
            return PropertyStatus.NOTICE_GIVEN
        case Leased():
            return PropertyStatus.LEASED
    raise TypeError(f"Unknown status details: {details!r}")


def missing_status_fields(details: StatusDetails) -> list[str]:
    """Return the required fields of the status variant that are unset."""
    match details:
        case Available(vacancy_start_date=start):
            return [] if start else ["vacancy_start_date"]
        case NoticeGiven(notice_end_date=end):
            return [] if end else ["notice_end_date"]
        case Leased():
            missing = []
            if not details.current_tenant.strip():
                missing.append("current_tenant")
            if details.lease_start_date is None:
                missing.append("lease_start_date")
            if details.lease_end_date is None:
                missing.append("lease_end_date")
            return missing
    raise TypeError(f"Unknown status details: {details!r}")


def build_status_details(
    status: PropertyStatus,
    *,
    vacancy_start_date: date | None = None,
    notice_end_date: date | None = None,
    current_tenant: str | None = None,
    lease_start_date: date | None = None,
    lease_end_date: date | None = None,
    lease_type: LeaseType | None = None,
) -> StatusDetails:
    """Build the variant for ``status`` from flat form-like fields.

    Fields that do not belong to ``status`` are ignored.
    """
    match status:
        case PropertyStatus.AVAILABLE:
            return Available(vacancy_start_date=vacancy_start_date)
        case PropertyStatus.NOTICE_GIVEN:
            return NoticeGiven(notice_end_date=notice_end_date)
        case PropertyStatus.LEASED:
            return Leased(
                current_tenant=current_tenant or "",
                lease_start_date=lease_start_date,
                lease_end_date=lease_end_date,
                lease_type=lease_type or LeaseType.FIXED,
            )
    raise ValueError(f"Unknown property status: {status!r}")


@dataclass
class Property:
    address: str
    commune: str
    property_type: str
    owner: str
    price_uf: Decimal
    status_details: StatusDetails = field(default_factory=Available)
    id: str = ""
    land_m2: Decimal = Decimal("0")
    built_m2: Decimal = Decimal("0")
    storage_m2: Decimal = Decimal("0")
    condominium: str | None = None
    created_at: datetime = field(default_factory=_utc_now)
    updated_at: datetime = field(default_factory=_utc_now)

    @property
    def status(self) -> PropertyStatus:
        return status_of(self.status_details)

    @property
    def is_leased(self) -> bool:
        return isinstance(self.status_details, Leased)

    @property
    def current_tenant(self) -> str | None:
        if isinstance(self.status_details, Leased):
            return self.status_details.current_tenant
        return None

    def days_vacant(self, today: date) -> int | None:
        """Days since the vacancy started, ``None`` unless available."""
        if not isinstance(self.status_details, Available):
            return None
        start = self.status_details.vacancy_start_date or self.created_at.date()
        return max((today - start).days, 0)

    def days_to_handover(self, today: date) -> int | None:
        """Days until the noticed tenant leaves, ``None`` unless notice given."""
        if not isinstance(self.status_details, NoticeGiven):
            return None
        if self.status_details.notice_end_date is None:
            return None
        return (self.status_details.notice_end_date - today).days

    def touch(self) -> None:
        self.updated_at = _utc_now()


__all__ = [
    "Available",
    "Leased",
    "NoticeGiven",
    "Property",
    "StatusDetails",
    "build_status_details",
    "missing_status_fields",
    "status_of",
]
