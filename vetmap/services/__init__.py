from .coordinate_store import CoordinateStore
from .favorites_store import FavoritesStore
from .location_service import (
    LocationProvider,
    FixedLocationProvider,
    DeniedLocationProvider,
    LocationService,
)
from .places_gateway import PlacesGateway
from .presenter import MapPresenter
from .search_coordinator import SearchCoordinator

__all__ = [
    "CoordinateStore",
    "FavoritesStore",
    "LocationProvider",
    "FixedLocationProvider",
    "DeniedLocationProvider",
    "LocationService",
    "PlacesGateway",
    "MapPresenter",
    "SearchCoordinator",
]
