"""Demo portfolio loaded into an empty store."""

from datetime import UTC, date, datetime
from decimal import Decimal

from leasing_desk.domain.properties import Available, Leased, NoticeGiven, Property
from leasing_desk.domain.value_objects import LeaseType
from leasing_desk.logging_config import get_logger
from leasing_desk.repositories.interfaces import PropertyRepository

logger = get_logger(__name__)

_SEED_CREATED_AT = datetime(2023, 1, 1, tzinfo=UTC)


def demo_properties() -> list[Property]:
    return [
        Property(
            id="P-1001",
            address="Av. Providencia 1234, Of. 505",
            commune="Providencia",
            property_type="Oficina",
            owner="Inversiones Santa Maria",
            price_uf=Decimal("4500"),
            land_m2=Decimal("0"),
            built_m2=Decimal("85"),
            status_details=Available(vacancy_start_date=date(2023, 10, 1)),
            created_at=_SEED_CREATED_AT,
            updated_at=_SEED_CREATED_AT,
        ),
        Property(
            id="P-1002",
            address="Isidora Goyenechea 3000",
            commune="Las Condes",
            property_type="Oficina",
            owner="Rentas Las Condes SpA",
            price_uf=Decimal("12000"),
            land_m2=Decimal("0"),
            built_m2=Decimal("200"),
            storage_m2=Decimal("10"),
            status_details=Leased(
                current_tenant="Tech Corp",
                lease_start_date=date(2023, 1, 1),
                lease_end_date=date(2025, 12, 31),
                lease_type=LeaseType.FIXED,
            ),
            created_at=_SEED_CREATED_AT,
            updated_at=_SEED_CREATED_AT,
        ),
        Property(
            id="P-1003",
            address="Alonso de Córdova 2500",
            commune="Vitacura",
            property_type="Local Comercial",
            owner="Familia Errázuriz",
            price_uf=Decimal("15000"),
            land_m2=Decimal("300"),
            built_m2=Decimal("150"),
            status_details=NoticeGiven(notice_end_date=date(2023, 12, 1)),
            created_at=_SEED_CREATED_AT,
            updated_at=_SEED_CREATED_AT,
        ),
    ]


def seed_if_empty(property_repo: PropertyRepository) -> int:
    """Load the demo properties when the store has none.

    Returns the number of properties inserted.
    """
    if property_repo.count() > 0:
        return 0
    properties = demo_properties()
    for prop in properties:
        property_repo.add(prop)
    logger.info("demo_portfolio_seeded", count=len(properties))
    return len(properties)
