from abc import ABC, abstractmethod
from collections.abc import Iterable

from leasing_desk.domain.properties import Property
from leasing_desk.domain.visits import Visit


class PropertyRepository(ABC):
    @abstractmethod
    def add(self, prop: Property) -> None:
        pass

    @abstractmethod
    def get(self, property_id: str) -> Property | None:
        pass

    @abstractmethod
    def list_all(self) -> Iterable[Property]:
        pass

    @abstractmethod
    def update(self, prop: Property) -> None:
        pass

    @abstractmethod
    def delete(self, property_id: str) -> None:
        pass

    def exists(self, property_id: str) -> bool:
        return self.get(property_id) is not None

    def count(self) -> int:
        return len(list(self.list_all()))


class VisitRepository(ABC):
    @abstractmethod
    def add(self, visit: Visit) -> None:
        pass

    @abstractmethod
    def get(self, visit_id: str) -> Visit | None:
        pass

    @abstractmethod
    def list_all(self) -> Iterable[Visit]:
        pass

    @abstractmethod
    def list_by_property(self, property_id: str) -> Iterable[Visit]:
        pass

    @abstractmethod
    def update(self, visit: Visit) -> None:
        pass

    @abstractmethod
    def delete_by_property(self, property_id: str) -> None:
        pass

    def exists(self, visit_id: str) -> bool:
        return self.get(visit_id) is not None
