"""
Places gateway - the typed boundary in front of the Google Maps Platform
Places and Geocoding web services.

Each operation returns parsed domain objects or raises one of
``NetworkError``, ``ProviderError`` or ``MalformedResponseError``. There is
no caching and no retry. Every call carries the configured timeout, whether
or not the HTTP client was injected.
"""

import logging
from typing import Optional, Type, TypeVar

import httpx
from pydantic import BaseModel, ValidationError

from vetmap.core.exceptions import (
    EmptyQueryError,
    MalformedResponseError,
    NetworkError,
    ProviderError,
)
from vetmap.core.validation import normalize_query, validate_radius
from vetmap.schemas.google import (
    EMPTY_STATUS,
    SUCCESS_STATUS,
    AutocompleteResponse,
    DetailsResponse,
    GeocodeResponse,
    NearbySearchResponse,
)
from vetmap.schemas.place import Coordinate, Place, SuggestionEntry

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://maps.googleapis.com/maps/api"
DETAILS_FIELDS = "place_id,name,geometry,formatted_address,rating"
NOT_FOUND_STATUSES = {"ZERO_RESULTS", "NOT_FOUND"}

ResponseT = TypeVar("ResponseT", bound=BaseModel)


class PlacesGateway:
    """Async client for nearby-search, autocomplete, details and geocode."""

    def __init__(
        self,
        api_key: Optional[str],
        base_url: str = DEFAULT_BASE_URL,
        timeout_seconds: float = 10.0,
        language: Optional[str] = None,
        client: Optional[httpx.AsyncClient] = None,
    ):
        self.api_key = api_key
        self.base_url = base_url.rstrip("/")
        self.language = language
        self.timeout = httpx.Timeout(timeout_seconds)
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(timeout=self.timeout)

        if not api_key:
            logger.warning(
                "Places API key not configured. "
                "Set PLACES_API_KEY in .env file."
            )

    async def __aenter__(self) -> "PlacesGateway":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.close()

    async def close(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    async def nearby_search(self, center: Coordinate, radius_m: int, category: str) -> list[Place]:
        """
        Search places of ``category`` within ``radius_m`` meters of ``center``.

        Returns:
            Places in provider order; empty when the provider reports ZERO_RESULTS

        Raises:
            ProviderError: Any status other than OK or ZERO_RESULTS
        """
        validate_radius(radius_m)
        params = {
            "location": center.as_param(),
            "radius": str(radius_m),
            "type": category,
        }
        data = await self._get("place/nearbysearch/json", params, NearbySearchResponse)
        self._check_status("nearbysearch", data.status, data.error_message, allow_empty=True)
        places = [result.to_place() for result in data.results]
        logger.info(
            f"Nearby search returned {len(places)} places",
            extra={"status": data.status, "radius_m": radius_m, "category": category},
        )
        return places

    async def autocomplete(self, prefix_text: str) -> list[SuggestionEntry]:
        """Suggest places for partially typed input. Blank input never hits the network."""
        text = normalize_query(prefix_text)
        if not text:
            return []
        data = await self._get("place/autocomplete/json", {"input": text}, AutocompleteResponse)
        self._check_status("autocomplete", data.status, data.error_message, allow_empty=True)
        return [prediction.to_suggestion() for prediction in data.predictions]

    async def resolve_details(self, suggestion_id: str) -> Place:
        """Turn a selected suggestion into a concrete place."""
        params = {"place_id": suggestion_id, "fields": DETAILS_FIELDS}
        data = await self._get("place/details/json", params, DetailsResponse)
        self._check_status("details", data.status, data.error_message)
        if data.result is None:
            raise MalformedResponseError("details", details={"reason": "missing result"})
        return data.result.to_place()

    async def geocode(self, address: str) -> Place:
        """
        Geocode a free-text address; the first match wins.

        Raises:
            EmptyQueryError: If the address is blank
            ProviderError: ZERO_RESULTS or any other non-OK status
        """
        text = normalize_query(address)
        if not text:
            raise EmptyQueryError()
        data = await self._get("geocode/json", {"address": text}, GeocodeResponse)
        self._check_status("geocode", data.status, data.error_message)
        if not data.results:
            raise MalformedResponseError("geocode", details={"reason": "missing results"})
        return data.results[0].to_place()

    async def _get(self, endpoint: str, params: dict, schema: Type[ResponseT]) -> ResponseT:
        query = dict(params)
        if self.language:
            query["language"] = self.language
        query["key"] = self.api_key or ""

        try:
            response = await self._client.get(
                f"{self.base_url}/{endpoint}",
                params=query,
                timeout=self.timeout,
            )
        except httpx.TimeoutException as e:
            logger.warning(f"Timeout calling {endpoint}")
            raise NetworkError(
                "Map service did not respond in time",
                details={"endpoint": endpoint},
            ) from e
        except httpx.HTTPError as e:
            logger.warning(f"Transport error calling {endpoint}: {e}")
            raise NetworkError(details={"endpoint": endpoint}) from e

        if response.status_code != 200:
            logger.warning(f"{endpoint} returned HTTP {response.status_code}")
            raise NetworkError(
                f"Map service returned HTTP {response.status_code}",
                http_status=response.status_code,
                details={"endpoint": endpoint},
            )

        try:
            return schema.model_validate_json(response.content)
        except ValidationError as e:
            logger.error(f"Malformed {endpoint} response: {e.error_count()} validation errors")
            raise MalformedResponseError(endpoint, details={"errors": e.error_count()}) from e

    @staticmethod
    def _check_status(
        endpoint: str,
        status: str,
        error_message: Optional[str],
        allow_empty: bool = False,
    ) -> None:
        if status == SUCCESS_STATUS:
            return
        if allow_empty and status == EMPTY_STATUS:
            return
        logger.warning(
            f"{endpoint} failed with provider status {status}",
            extra={"provider_message": error_message},
        )
        message = "No matching places found" if status in NOT_FOUND_STATUSES else None
        raise ProviderError(
            status,
            message=message,
            details={"endpoint": endpoint, "provider_message": error_message},
        )
