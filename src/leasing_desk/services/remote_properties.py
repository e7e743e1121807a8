"""Remote property table with fallback to the local portfolio.

The remote table is exposed PostgREST style (``/rest/v1/properties``) and
uses Spanish column names and status labels. Rows are mapped onto
``Property``; fields the remote table does not carry stay unset.
"""

from __future__ import annotations

from collections.abc import Callable
from datetime import UTC, date, datetime
from decimal import Decimal, InvalidOperation
from typing import Any

import httpx

from leasing_desk.domain.properties import Property, build_status_details
from leasing_desk.domain.value_objects import PropertyStatus
from leasing_desk.logging_config import get_logger

logger = get_logger(__name__)

REMOTE_STATUS_MAP: dict[str, PropertyStatus] = {
    "Disponible": PropertyStatus.AVAILABLE,
    "Arrendado": PropertyStatus.LEASED,
    "Aviso entrega": PropertyStatus.NOTICE_GIVEN,
}


def _decimal(value: Any) -> Decimal:
    if value in (None, ""):
        return Decimal("0")
    try:
        return Decimal(str(value))
    except InvalidOperation:
        return Decimal("0")


def _date(value: Any) -> date | None:
    if not isinstance(value, str) or not value:
        return None
    try:
        return date.fromisoformat(value[:10])
    except ValueError:
        return None


def map_remote_row(row: dict[str, Any]) -> Property:
    """Map a remote row onto a property. Unknown statuses read as available."""
    status = REMOTE_STATUS_MAP.get(row.get("status") or "", PropertyStatus.AVAILABLE)
    now = datetime.now(UTC)
    return Property(
        id=str(row.get("id") or ""),
        address=row.get("address") or "",
        commune=row.get("comuna") or "",
        property_type=row.get("property_type") or "Oficina",
        owner=row.get("owner_name") or "",
        condominium=row.get("condominium_name") or None,
        price_uf=_decimal(row.get("arriendo_publicacion_uf")),
        land_m2=_decimal(row.get("superficie_terreno")),
        built_m2=_decimal(row.get("superficie_construida")),
        storage_m2=_decimal(row.get("superficie_bodega")),
        status_details=build_status_details(
            status, vacancy_start_date=_date(row.get("fecha_disponible_desde"))
        ),
        created_at=now,
        updated_at=now,
    )


class RemotePropertySource:
    def __init__(
        self,
        base_url: str | None,
        fallback: Callable[[], list[Property]],
        api_key: str | None = None,
        client: httpx.AsyncClient | None = None,
        timeout: float = 10.0,
    ) -> None:
        self._base_url = base_url.rstrip("/") if base_url else None
        self._fallback = fallback
        self._api_key = api_key
        self._client = client if client is not None else httpx.AsyncClient(timeout=timeout)

    async def aclose(self) -> None:
        await self._client.aclose()

    def _headers(self) -> dict[str, str]:
        if not self._api_key:
            return {}
        return {"apikey": self._api_key, "Authorization": f"Bearer {self._api_key}"}

    async def fetch(self) -> list[Property]:
        """Return the remote properties ordered by name, or the local snapshot.

        Falls back when no remote is configured, on any HTTP error, and when
        the remote returns no rows.
        """
        if self._base_url is None:
            return self._fallback()
        try:
            response = await self._client.get(
                f"{self._base_url}/rest/v1/properties",
                params={"select": "*", "order": "property_name.asc"},
                headers=self._headers(),
            )
            response.raise_for_status()
            rows = response.json()
        except (httpx.HTTPError, ValueError) as e:
            logger.warning("remote_properties_fallback", reason=str(e) or type(e).__name__)
            return self._fallback()
        if not isinstance(rows, list) or not rows:
            logger.warning("remote_properties_fallback", reason="empty result")
            return self._fallback()
        properties = [map_remote_row(row) for row in rows if isinstance(row, dict)]
        logger.info("remote_properties_fetched", count=len(properties))
        return properties
