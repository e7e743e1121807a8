from leasing_desk.repositories.interfaces import PropertyRepository, VisitRepository
from leasing_desk.repositories.memory import (
    InMemoryPropertyRepository,
    InMemoryVisitRepository,
)
from leasing_desk.repositories.seed import demo_properties, seed_if_empty
from leasing_desk.repositories.sqlite import (
    SQLiteDatabase,
    SQLitePropertyRepository,
    SQLiteVisitRepository,
)

__all__ = [
    "InMemoryPropertyRepository",
    "InMemoryVisitRepository",
    "PropertyRepository",
    "SQLiteDatabase",
    "SQLitePropertyRepository",
    "SQLiteVisitRepository",
    "VisitRepository",
    "demo_properties",
    "seed_if_empty",
]
