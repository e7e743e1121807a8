"""In-memory implementations of repository interfaces.

Entities are copied on the way in and out so callers must go through
``update`` to change what is stored, as with the SQLite backend.
"""

from collections.abc import Iterable
from copy import deepcopy

from leasing_desk.domain.properties import Property
from leasing_desk.domain.visits import Visit
from leasing_desk.repositories.interfaces import PropertyRepository, VisitRepository


class InMemoryPropertyRepository(PropertyRepository):
    def __init__(self) -> None:
        self._properties: dict[str, Property] = {}

    def add(self, prop: Property) -> None:
        self._properties[prop.id] = deepcopy(prop)

    def get(self, property_id: str) -> Property | None:
        prop = self._properties.get(property_id)
        return deepcopy(prop) if prop is not None else None

    def list_all(self) -> Iterable[Property]:
        return [deepcopy(p) for _, p in sorted(self._properties.items())]

    def update(self, prop: Property) -> None:
        if prop.id in self._properties:
            self._properties[prop.id] = deepcopy(prop)

    def delete(self, property_id: str) -> None:
        self._properties.pop(property_id, None)

    def count(self) -> int:
        return len(self._properties)


class InMemoryVisitRepository(VisitRepository):
    def __init__(self) -> None:
        self._visits: dict[str, Visit] = {}

    def add(self, visit: Visit) -> None:
        self._visits[visit.id] = deepcopy(visit)

    def get(self, visit_id: str) -> Visit | None:
        visit = self._visits.get(visit_id)
        return deepcopy(visit) if visit is not None else None

    def list_all(self) -> Iterable[Visit]:
        return [deepcopy(v) for v in self._newest_first(self._visits.values())]

    def list_by_property(self, property_id: str) -> Iterable[Visit]:
        return [
            deepcopy(v)
            for v in self._newest_first(self._visits.values())
            if v.property_id == property_id
        ]

    def update(self, visit: Visit) -> None:
        if visit.id in self._visits:
            self._visits[visit.id] = deepcopy(visit)

    def delete_by_property(self, property_id: str) -> None:
        self._visits = {
            vid: v for vid, v in self._visits.items() if v.property_id != property_id
        }

    @staticmethod
    def _newest_first(visits: Iterable[Visit]) -> list[Visit]:
        return sorted(visits, key=lambda v: (v.visit_date, v.created_at), reverse=True)
