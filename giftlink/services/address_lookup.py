from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable
from typing import Any, Protocol

import httpx
import structlog

from giftlink.core.config import settings
from giftlink.schemas.address import AddressSuggestion, ResolvedAddress

logger = structlog.get_logger(__name__)

STATIC_ADDRESSES: tuple[ResolvedAddress, ...] = (
    ResolvedAddress(
        id="addr_1",
        label="200 University Ave W, Waterloo, ON, Canada",
        line1="200 University Ave W",
        city="Waterloo",
        region="ON",
        postal_code="N2L 3G1",
        country="Canada",
        country_code="CA",
    ),
    ResolvedAddress(
        id="addr_2",
        label="33 New Montgomery St, San Francisco, CA 94105, USA",
        line1="33 New Montgomery St",
        city="San Francisco",
        region="CA",
        postal_code="94105",
        country="United States",
        country_code="US",
    ),
    ResolvedAddress(
        id="addr_3",
        label="1 Martin Place, Sydney NSW 2000, Australia",
        line1="1 Martin Place",
        city="Sydney",
        region="NSW",
        postal_code="2000",
        country="Australia",
        country_code="AU",
    ),
    ResolvedAddress(
        id="addr_4",
        label="101 Collins St, Melbourne VIC 3000, Australia",
        line1="101 Collins St",
        city="Melbourne",
        region="VIC",
        postal_code="3000",
        country="Australia",
        country_code="AU",
    ),
)

OK_STATUSES = {"OK", "ZERO_RESULTS"}


class AddressLookupError(Exception):
    pass


class AddressLookup(Protocol):
    async def search_addresses(self, query: str) -> list[AddressSuggestion]: ...

    async def get_place_details(self, place_id: str) -> ResolvedAddress: ...


class StaticAddressLookup:
    def __init__(self, addresses: tuple[ResolvedAddress, ...] = STATIC_ADDRESSES) -> None:
        self.addresses = {address.id: address for address in addresses}

    async def search_addresses(self, query: str) -> list[AddressSuggestion]:
        normalized = query.strip().lower()
        if not normalized:
            return []
        return [
            AddressSuggestion(id=address.id, label=address.label)
            for address in self.addresses.values()
            if normalized in address.label.lower()
        ]

    async def get_place_details(self, place_id: str) -> ResolvedAddress:
        address = self.addresses.get(place_id)
        if address is None:
            raise AddressLookupError(f"Unknown address: {place_id}")
        return address


def _component(components: list[dict[str, Any]], *types: str, short: bool = False) -> str | None:
    key = "short_name" if short else "long_name"
    for wanted in types:
        for component in components:
            if wanted in (component.get("types") or []):
                value = component.get(key)
                if value:
                    return str(value)
    return None


def parse_place_details(place_id: str, payload: dict[str, Any]) -> ResolvedAddress:
    result = payload.get("result")
    if not isinstance(result, dict):
        raise AddressLookupError("Address details missing from response")
    components = [item for item in result.get("address_components") or [] if isinstance(item, dict)]
    country = _component(components, "country")
    if not country:
        raise AddressLookupError("Address has no country")
    number = _component(components, "street_number")
    route = _component(components, "route")
    line1 = " ".join(part for part in (number, route) if part) or None
    return ResolvedAddress(
        id=place_id,
        label=result.get("formatted_address") or line1 or country,
        line1=line1,
        city=_component(components, "locality", "postal_town", "sublocality"),
        region=_component(components, "administrative_area_level_1", short=True),
        postal_code=_component(components, "postal_code"),
        country=country,
        country_code=_component(components, "country", short=True),
    )


class PlacesAddressLookup:
    def __init__(
        self,
        base_url: str | None = None,
        api_key: str | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.base_url = (base_url or settings.ADDRESS_LOOKUP_BASE_URL).rstrip("/")
        self.api_key = api_key if api_key is not None else settings.ADDRESS_LOOKUP_API_KEY
        self.transport = transport

    async def search_addresses(self, query: str) -> list[AddressSuggestion]:
        normalized = query.strip()
        if not normalized:
            return []
        data = await self._get("/autocomplete/json", {"input": normalized, "types": "address"})
        suggestions: list[AddressSuggestion] = []
        for prediction in data.get("predictions") or []:
            if not isinstance(prediction, dict):
                continue
            place_id = prediction.get("place_id")
            label = prediction.get("description")
            if place_id and label:
                suggestions.append(AddressSuggestion(id=str(place_id), label=str(label)))
        return suggestions

    async def get_place_details(self, place_id: str) -> ResolvedAddress:
        data = await self._get(
            "/details/json",
            {"place_id": place_id, "fields": "address_component,formatted_address"},
        )
        return parse_place_details(place_id, data)

    async def _get(self, path: str, params: dict[str, str]) -> dict[str, Any]:
        if not self.api_key:
            raise AddressLookupError("ADDRESS_LOOKUP_API_KEY is not configured")
        url = f"{self.base_url}{path}"
        query = {**params, "key": self.api_key}
        try:
            async with httpx.AsyncClient(
                timeout=settings.REQUEST_TIMEOUT_SEC, transport=self.transport
            ) as client:
                response = await client.get(url, params=query)
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            logger.error(
                "errors",
                stage="address_lookup_http",
                path=path,
                status_code=exc.response.status_code,
            )
            raise AddressLookupError(
                f"Address lookup failed: {exc.response.status_code}"
            ) from exc
        except httpx.HTTPError as exc:
            logger.error("errors", stage="address_lookup_http", path=path, error=str(exc))
            raise AddressLookupError(f"Address lookup failed: {exc}") from exc

        try:
            data = response.json()
        except ValueError as exc:
            logger.error("errors", stage="address_lookup_http", path=path, response=response.text)
            raise AddressLookupError("Address lookup returned invalid JSON") from exc

        if not isinstance(data, dict):
            raise AddressLookupError("Address lookup returned an unexpected payload")
        status = data.get("status")
        if status is not None and status not in OK_STATUSES:
            logger.error("errors", stage="address_lookup_status", path=path, status=status)
            raise AddressLookupError(f"Address lookup failed: {status}")
        return data


def get_address_lookup() -> AddressLookup:
    provider = settings.ADDRESS_LOOKUP_PROVIDER.strip().lower()
    if provider == "places":
        return PlacesAddressLookup()
    if provider == "static":
        return StaticAddressLookup()
    raise AddressLookupError(f"Unknown address lookup provider: {provider}")


class AddressSearchDebouncer:
    def __init__(
        self,
        lookup: AddressLookup,
        delay_ms: int | None = None,
        min_chars: int | None = None,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        self.lookup = lookup
        self.delay = (
            settings.ADDRESS_SEARCH_DEBOUNCE_MS if delay_ms is None else delay_ms
        ) / 1000.0
        self.min_chars = settings.ADDRESS_SEARCH_MIN_CHARS if min_chars is None else min_chars
        self._sleep = sleep
        self._generation = 0

    def _is_current(self, generation: int) -> bool:
        return generation == self._generation

    async def search(self, query: str) -> list[AddressSuggestion] | None:
        self._generation += 1
        generation = self._generation
        normalized = query.strip()
        if len(normalized) < self.min_chars:
            return []
        if self.delay > 0:
            await self._sleep(self.delay)
        if not self._is_current(generation):
            return None
        results = await self.lookup.search_addresses(normalized)
        if not self._is_current(generation):
            return None
        return results
