"""Read-triggered property status transitions.

A property whose notice period has ended becomes available again the first
time anyone reads it. The vacancy starts on the notice end date, so the
days-vacant figure covers the gap between handover and the read.
"""

from collections.abc import Callable
from dataclasses import replace
from datetime import date

from leasing_desk.domain.properties import Available, NoticeGiven, Property
from leasing_desk.logging_config import get_logger
from leasing_desk.repositories.interfaces import PropertyRepository

logger = get_logger(__name__)


def expire_notice(prop: Property, today: date) -> Property | None:
    """Return the transitioned property, or ``None`` when nothing changes.

    Only a NOTICE_GIVEN property whose notice end date is strictly before
    ``today`` qualifies. An unset notice date never qualifies.
    """
    details = prop.status_details
    if not isinstance(details, NoticeGiven):
        return None
    if details.notice_end_date is None or details.notice_end_date >= today:
        return None
    return replace(
        prop, status_details=Available(vacancy_start_date=details.notice_end_date)
    )


class PropertyStatusAutomaton:
    def __init__(
        self,
        property_repo: PropertyRepository,
        clock: Callable[[], date] = date.today,
    ) -> None:
        self._property_repo = property_repo
        self._clock = clock

    def apply(self, properties: list[Property]) -> tuple[list[Property], list[Property]]:
        """Transition expired notices without persisting.

        Returns the full list (transitioned entries replaced) and the list of
        properties that changed.
        """
        today = self._clock()
        result: list[Property] = []
        changed: list[Property] = []
        for prop in properties:
            transitioned = expire_notice(prop, today)
            if transitioned is None:
                result.append(prop)
                continue
            transitioned.touch()
            result.append(transitioned)
            changed.append(transitioned)
        return result, changed

    def refresh_all(self) -> list[Property]:
        """Read every property, persist any transitions and return the set."""
        properties, changed = self.apply(list(self._property_repo.list_all()))
        for prop in changed:
            self._property_repo.update(prop)
            logger.info(
                "property_notice_expired",
                property_id=prop.id,
                vacancy_start_date=str(prop.status_details.vacancy_start_date),
            )
        return properties

    def refresh(self, prop: Property) -> Property:
        """Apply the transition to a single property read from the store."""
        _, changed = self.apply([prop])
        if not changed:
            return prop
        transitioned = changed[0]
        self._property_repo.update(transitioned)
        logger.info(
            "property_notice_expired",
            property_id=transitioned.id,
            vacancy_start_date=str(transitioned.status_details.vacancy_start_date),
        )
        return transitioned
