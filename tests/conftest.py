"""
Shared test doubles for the search coordinator tests.
"""
import asyncio
from typing import Optional

import pytest

from vetmap.core.exceptions import PersistenceError
from vetmap.schemas.place import Coordinate, Place, SuggestionEntry
from vetmap.services.coordinate_store import CoordinateStore
from vetmap.services.favorites_store import FavoritesStore
from vetmap.services.location_service import FixedLocationProvider, LocationService
from vetmap.services.presenter import MapPresenter
from vetmap.services.search_coordinator import SearchCoordinator
from vetmap.storage.key_value import MemoryStorage

SEOUL = Coordinate(latitude=37.5665, longitude=126.9780)
GANGNAM = Coordinate(latitude=37.4979, longitude=127.0276)
HONGDAE = Coordinate(latitude=37.5563, longitude=126.9220)


def make_place(place_id: str, coordinate: Coordinate = SEOUL, name: Optional[str] = None) -> Place:
    return Place(
        id=place_id,
        name=name or f"Animal Hospital {place_id}",
        coordinate=coordinate,
        address=f"{place_id} Sejong-daero, Jung-gu",
        rating=4.5,
    )


class FakeGateway:
    """
    Scriptable stand-in for PlacesGateway.

    Results are looked up per request; an Exception value is raised instead
    of returned. An asyncio.Event registered in ``gates`` holds the matching
    request open until the test sets it.
    """

    def __init__(self):
        self.calls = []
        self.gates = {}
        self.autocomplete_results = {}
        self.details_results = {}
        self.geocode_results = {}
        self.nearby_results = {}
        self.default_nearby = []
        self.closed = False

    async def _respond(self, gate_key, value):
        gate = self.gates.get(gate_key)
        if gate is not None:
            await gate.wait()
        if isinstance(value, Exception):
            raise value
        return value

    def count(self, name: str) -> int:
        return sum(1 for call in self.calls if call[0] == name)

    async def autocomplete(self, prefix_text):
        self.calls.append(("autocomplete", prefix_text))
        return await self._respond(("autocomplete", prefix_text), self.autocomplete_results.get(prefix_text, []))

    async def resolve_details(self, suggestion_id):
        self.calls.append(("resolve_details", suggestion_id))
        return await self._respond(("details", suggestion_id), self.details_results[suggestion_id])

    async def geocode(self, address):
        self.calls.append(("geocode", address))
        return await self._respond(("geocode", address), self.geocode_results[address])

    async def nearby_search(self, center, radius_m, category):
        self.calls.append(("nearby_search", center, radius_m, category))
        return await self._respond(("nearby", center), self.nearby_results.get(center, self.default_nearby))

    async def close(self):
        self.closed = True


class RecordingPresenter(MapPresenter):
    def __init__(self):
        self.coordinates = []
        self.markers = []
        self.suggestions = []
        self.selections = []
        self.routes = []
        self.errors = []

    def on_coordinate_changed(self, coordinate):
        self.coordinates.append(coordinate)

    def on_markers_changed(self, nearby, favorites):
        self.markers.append((list(nearby), list(favorites)))

    def on_suggestions_changed(self, suggestions):
        self.suggestions.append(list(suggestions))

    def on_selection_changed(self, place):
        self.selections.append(place)

    def on_route_changed(self, origin, destination):
        self.routes.append((origin, destination))

    def on_error(self, message):
        self.errors.append(message)


class FailingStorage(MemoryStorage):
    """Memory storage whose writes can be switched to fail."""

    def __init__(self, initial=None):
        super().__init__(initial)
        self.fail_writes = False
        self.fail_reads = False

    async def get(self, key):
        if self.fail_reads:
            raise PersistenceError("disk unavailable")
        return await super().get(key)

    async def set(self, key, value):
        if self.fail_writes:
            raise PersistenceError("disk full")
        await super().set(key, value)


class SlowStorage(MemoryStorage):
    """Memory storage whose writes block until ``release`` is set."""

    def __init__(self):
        super().__init__()
        self.release = asyncio.Event()
        self.writes = 0

    async def set(self, key, value):
        self.writes += 1
        await self.release.wait()
        await super().set(key, value)


@pytest.fixture
def gateway():
    return FakeGateway()


@pytest.fixture
def presenter():
    return RecordingPresenter()


@pytest.fixture
def storage():
    return FailingStorage()


@pytest.fixture
def location_provider():
    return FixedLocationProvider(SEOUL)


@pytest.fixture
def coordinator(gateway, presenter, storage, location_provider):
    return SearchCoordinator(
        gateway=gateway,
        favorites=FavoritesStore(storage),
        coordinates=CoordinateStore(),
        location=LocationService(location_provider, timeout_seconds=1.0),
        presenter=presenter,
        debounce_seconds=0.05,
    )


@pytest.fixture
def suggestion():
    return SuggestionEntry(id="sg-1", description="Gangnam Station, Seoul")


@pytest.fixture
def place_factory():
    return make_place


@pytest.fixture
def slow_storage():
    return SlowStorage()
