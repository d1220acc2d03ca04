"""
Wiring for the search coordinator and its collaborators.
Builds every component from ``Settings`` unless a caller supplies its own.
"""

import logging
from typing import Optional

import httpx

from vetmap.config.settings import Settings, StorageBackend, get_settings
from vetmap.core.logging import configure_logging
from vetmap.schemas.place import Coordinate
from vetmap.services.coordinate_store import CoordinateStore
from vetmap.services.favorites_store import FavoritesStore
from vetmap.services.location_service import (
    FixedLocationProvider,
    LocationProvider,
    LocationService,
)
from vetmap.services.places_gateway import PlacesGateway
from vetmap.services.presenter import MapPresenter
from vetmap.services.search_coordinator import SearchCoordinator
from vetmap.storage.key_value import JsonFileStorage, KeyValueStorage, MemoryStorage
from vetmap.storage.redis_storage import RedisStorage

logger = logging.getLogger(__name__)


def create_storage(config: Settings) -> KeyValueStorage:
    """Pick the favorites backend named in the storage settings."""
    backend = config.storage.backend
    if backend == StorageBackend.REDIS:
        return RedisStorage(config.redis.url, socket_timeout=config.redis.socket_timeout)
    if backend == StorageBackend.MEMORY:
        return MemoryStorage()
    return JsonFileStorage(config.get_storage_path())


def create_location_provider(config: Settings) -> LocationProvider:
    location = config.location
    coordinate = None
    if location.fixed_latitude is not None and location.fixed_longitude is not None:
        coordinate = Coordinate(latitude=location.fixed_latitude, longitude=location.fixed_longitude)
    return FixedLocationProvider(coordinate, permission_granted=location.permission_granted)


def create_places_gateway(config: Settings, client: Optional[httpx.AsyncClient] = None) -> PlacesGateway:
    places = config.places
    return PlacesGateway(
        api_key=places.api_key,
        base_url=places.base_url,
        timeout_seconds=places.timeout_seconds,
        language=places.language,
        client=client,
    )


def create_search_coordinator(
    presenter: Optional[MapPresenter] = None,
    config: Optional[Settings] = None,
    location_provider: Optional[LocationProvider] = None,
    storage: Optional[KeyValueStorage] = None,
    http_client: Optional[httpx.AsyncClient] = None,
) -> SearchCoordinator:
    """
    Build a ready-to-mount coordinator.

    Args:
        presenter: Map surface receiving the coordinator's output
        config: Settings to use (defaults to the global settings)
        location_provider: Device location source (defaults to the configured fixed provider)
        storage: Favorites backend (defaults to the configured backend)
        http_client: Shared httpx client for the gateway

    Returns:
        SearchCoordinator; call ``mount()`` on it from the event loop
    """
    config = config or get_settings()
    configure_logging(config.log_level.value, config.log_format)

    favorites = FavoritesStore(storage or create_storage(config), key=config.storage.favorites_key)
    location = LocationService(
        location_provider or create_location_provider(config),
        accuracy=config.location.accuracy,
        timeout_seconds=config.places.timeout_seconds,
    )
    search = config.search

    logger.info(f"Creating search coordinator for {config.app_name} ({config.environment.value})")
    return SearchCoordinator(
        gateway=create_places_gateway(config, http_client),
        favorites=favorites,
        coordinates=CoordinateStore(),
        location=location,
        presenter=presenter,
        radius_m=config.places.nearby_radius_m,
        category=config.places.category,
        debounce_seconds=search.debounce_ms / 1000.0,
        fallback_coordinate=Coordinate(
            latitude=search.fallback_latitude,
            longitude=search.fallback_longitude,
        ),
    )
