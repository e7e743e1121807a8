"""UF reference value lookup and conversions.

Prices are listed in UF (Unidad de Fomento). The current UF value in pesos
is read from a public indicator API returning::

    {"codigo": "uf", "serie": [{"fecha": "2024-01-10T03:00:00.000Z", "valor": 36789.12}]}

The first element of ``serie`` is the latest value.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Any

import httpx

from leasing_desk.exceptions import ReferenceValueUnavailableError
from leasing_desk.logging_config import get_logger

logger = get_logger(__name__)

DEFAULT_UF_URL = "https://mindicador.cl/api/uf"


@dataclass(frozen=True)
class ReferenceValue:
    value: Decimal
    as_of: date | None = None


def _group_thousands(integer_part: int) -> str:
    return f"{integer_part:,}".replace(",", ".")


def format_uf(amount: Decimal) -> str:
    """Render an amount in UF with Chilean separators, e.g. ``UF 4.500,25``."""
    quantized = amount.quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)
    integer_part = int(quantized)
    cents = abs(quantized - integer_part)
    text = _group_thousands(integer_part)
    if cents:
        text += "," + f"{cents:.2f}"[2:].rstrip("0")
    return f"UF {text}"


def uf_to_clp(price_uf: Decimal, reference: ReferenceValue) -> Decimal:
    """Convert a UF amount to whole pesos."""
    return (price_uf * reference.value).quantize(Decimal("1"), rounding=ROUND_HALF_UP)


def format_clp(amount: Decimal) -> str:
    return f"$ {_group_thousands(int(amount))}"


def parse_reference_value(payload: Any) -> ReferenceValue:
    """Extract the latest value from an indicator payload.

    Raises:
        ReferenceValueUnavailableError: If the payload has no usable value
    """
    try:
        latest = payload["serie"][0]
        value = Decimal(str(latest["valor"]))
    except (KeyError, IndexError, TypeError, InvalidOperation) as e:
        raise ReferenceValueUnavailableError("unexpected response payload") from e
    as_of: date | None = None
    raw_date = latest.get("fecha")
    if isinstance(raw_date, str):
        try:
            as_of = date.fromisoformat(raw_date[:10])
        except ValueError:
            as_of = None
    return ReferenceValue(value=value, as_of=as_of)


class ReferenceValueService:
    def __init__(
        self,
        url: str = DEFAULT_UF_URL,
        client: httpx.AsyncClient | None = None,
        timeout: float = 10.0,
    ) -> None:
        self._url = url
        self._client = client if client is not None else httpx.AsyncClient(timeout=timeout)

    async def aclose(self) -> None:
        await self._client.aclose()

    async def current(self) -> ReferenceValue:
        """Fetch the latest UF value.

        Raises:
            ReferenceValueUnavailableError: On network errors, non-2xx responses
                or malformed payloads
        """
        try:
            response = await self._client.get(self._url)
            response.raise_for_status()
            payload = response.json()
        except httpx.HTTPError as e:
            raise ReferenceValueUnavailableError(str(e) or type(e).__name__) from e
        except ValueError as e:
            raise ReferenceValueUnavailableError("response is not JSON") from e
        reference = parse_reference_value(payload)
        logger.debug("reference_value_fetched", value=str(reference.value), as_of=str(reference.as_of))
        return reference

    async def current_or_none(self) -> ReferenceValue | None:
        """Like ``current`` but returns ``None`` when the value is unavailable."""
        try:
            return await self.current()
        except ReferenceValueUnavailableError as e:
            logger.warning("reference_value_unavailable", reason=e.context.get("reason"))
            return None
