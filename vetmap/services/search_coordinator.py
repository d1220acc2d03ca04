"""
Search coordinator - turns typed text, picked suggestions and device fixes
into a confirmed coordinate, nearby veterinary hospitals and a route.

All state lives in one immutable ``SearchSession`` that is swapped on each
event. Remote calls are tracked per kind with request tokens: a response is
applied only while its token is still the newest of its kind, so a slow
answer can never overwrite a newer one.
"""

import logging
from typing import Optional

from vetmap.core.exceptions import (
    EmptyQueryError,
    PersistenceError,
    VetMapException,
)
from vetmap.core.scheduling import DebounceTimer, RequestKind, RequestTracker
from vetmap.core.session import (
    SearchSession,
    with_nearby_results,
    with_query_text,
    with_resolved_coordinate,
    with_resolved_place,
    with_selected_place,
    with_suggestions,
    without_selection,
)
from vetmap.core.validation import normalize_query
from vetmap.schemas.place import Coordinate, Place
from vetmap.services.coordinate_store import CoordinateStore
from vetmap.services.favorites_store import FavoritesStore
from vetmap.services.location_service import LocationService
from vetmap.services.places_gateway import PlacesGateway
from vetmap.services.presenter import MapPresenter

logger = logging.getLogger(__name__)

DEFAULT_CATEGORY = "veterinary_care"
DEFAULT_RADIUS_M = 5000
DEFAULT_DEBOUNCE_SECONDS = 0.5
# Seoul City Hall
FALLBACK_COORDINATE = Coordinate(latitude=37.5665, longitude=126.9780)


class SearchCoordinator:
    """
    Event-driven owner of the search session.

    Handlers run on a single event loop and never raise for remote, sensor
    or storage failures; those are logged and reported through
    ``MapPresenter.on_error`` while the session keeps its previous value.
    """

    def __init__(
        self,
        gateway: PlacesGateway,
        favorites: FavoritesStore,
        coordinates: CoordinateStore,
        location: LocationService,
        presenter: Optional[MapPresenter] = None,
        radius_m: int = DEFAULT_RADIUS_M,
        category: str = DEFAULT_CATEGORY,
        debounce_seconds: float = DEFAULT_DEBOUNCE_SECONDS,
        fallback_coordinate: Coordinate = FALLBACK_COORDINATE,
    ):
        self.gateway = gateway
        self.favorites = favorites
        self.coordinates = coordinates
        self.location = location
        self.presenter = presenter or MapPresenter()
        self.radius_m = radius_m
        self.category = category
        self.fallback_coordinate = fallback_coordinate

        self._session = SearchSession()
        self._debounce = DebounceTimer(debounce_seconds)
        self._requests = RequestTracker()

    @property
    def session(self) -> SearchSession:
        return self._session

    @property
    def map_center(self) -> Coordinate:
        """Where the map should be centered: the last good coordinate or the fallback."""
        return self._session.resolved_coordinate or self.fallback_coordinate

    def is_favorite(self, place_id: str) -> bool:
        return self.favorites.contains(place_id)

    async def mount(self) -> None:
        """Screen opened: load favorites, show the initial map, then locate the device."""
        await self.favorites.load()
        self.presenter.on_coordinate_changed(self.map_center)
        self._emit_markers()
        await self.locate_device()

    async def close(self) -> None:
        """Screen closed: drop pending input and release the HTTP client and storage."""
        self._debounce.cancel()
        await self.gateway.close()
        await self.favorites.close()

    async def wait_idle(self) -> None:
        """Wait for the pending debounced autocomplete, if any, to finish."""
        await self._debounce.wait()

    async def text_changed(self, new_text: str) -> None:
        self._session = with_query_text(self._session, new_text)

        if not self._session.has_query:
            self._debounce.cancel()
            self._requests.invalidate(RequestKind.AUTOCOMPLETE)
            self.presenter.on_suggestions_changed(())
            return

        self._debounce.schedule(lambda: self._run_autocomplete(new_text))

    async def _run_autocomplete(self, text: str) -> None:
        token = self._requests.issue(RequestKind.AUTOCOMPLETE)
        try:
            suggestions = await self.gateway.autocomplete(text)
        except VetMapException as e:
            if self._autocomplete_is_current(token, text):
                self._report(e)
            return

        if not self._autocomplete_is_current(token, text):
            logger.debug(f"Dropping stale suggestions for '{text}'")
            return

        self._session = with_suggestions(self._session, suggestions)
        self.presenter.on_suggestions_changed(self._session.suggestions)

    def _autocomplete_is_current(self, token: int, text: str) -> bool:
        return (
            self._requests.is_current(RequestKind.AUTOCOMPLETE, token)
            and self._session.query_text == text
        )

    async def suggestion_selected(self, suggestion_id: str) -> None:
        self._stop_autocomplete()
        token = self._requests.issue(RequestKind.RESOLVE)
        try:
            place = await self.gateway.resolve_details(suggestion_id)
        except VetMapException as e:
            if self._requests.is_current(RequestKind.RESOLVE, token):
                self._report(e)
            return

        if not self._requests.is_current(RequestKind.RESOLVE, token):
            logger.debug(f"Dropping stale resolution of suggestion {suggestion_id}")
            return

        logger.info(f"Suggestion resolved to {place.name}", extra={"place_id": place.id})
        self._session = with_resolved_place(self._session, place)
        self.presenter.on_suggestions_changed(())
        await self._recenter_and_refresh(place.coordinate)

    async def search_submitted(self) -> None:
        """Geocode the typed text as an address. Blank text is ignored."""
        text = self._session.query_text
        if not normalize_query(text):
            logger.debug("Ignoring search with empty query")
            return

        self._stop_autocomplete()
        token = self._requests.issue(RequestKind.RESOLVE)
        try:
            place = await self.gateway.geocode(text)
        except EmptyQueryError:
            return
        except VetMapException as e:
            if self._requests.is_current(RequestKind.RESOLVE, token):
                self._report(e)
            return

        if not self._requests.is_current(RequestKind.RESOLVE, token):
            logger.debug(f"Dropping stale geocode result for '{text}'")
            return

        logger.info(f"Address resolved to {place.address}", extra={"place_id": place.id})
        self._session = with_resolved_place(self._session, place, query_text=text)
        # Results around the previous center no longer apply.
        self._session = with_nearby_results(self._session, ())
        self.presenter.on_suggestions_changed(())
        self._emit_markers()
        await self._recenter_and_refresh(place.coordinate)

    async def locate_device(self) -> None:
        """Center on the device location; failures keep the last good coordinate."""
        token = self._requests.issue(RequestKind.RESOLVE)
        try:
            coordinate = await self.location.locate()
        except VetMapException as e:
            if self._requests.is_current(RequestKind.RESOLVE, token):
                self._report(e)
            return

        if not self._requests.is_current(RequestKind.RESOLVE, token):
            logger.debug("Dropping device fix superseded by a newer search")
            return

        self._session = with_resolved_coordinate(self._session, coordinate)
        await self._recenter_and_refresh(coordinate)

    async def nearby_refresh(self, center: Coordinate) -> None:
        token = self._requests.issue(RequestKind.NEARBY)
        try:
            places = await self.gateway.nearby_search(center, self.radius_m, self.category)
        except VetMapException as e:
            if self._requests.is_current(RequestKind.NEARBY, token):
                self._report(e)
            return

        if not self._requests.is_current(RequestKind.NEARBY, token):
            logger.debug(f"Dropping stale nearby results around {center.as_param()}")
            return

        self._session = with_nearby_results(self._session, places)
        self._emit_markers()

    async def marker_selected(self, place: Place) -> None:
        self._session = with_selected_place(self._session, place)
        self.presenter.on_selection_changed(place)
        self.presenter.on_route_changed(self.coordinates.current(), self._session.route_destination)

    async def selection_cleared(self) -> None:
        self._session = without_selection(self._session)
        self.presenter.on_selection_changed(None)

    async def favorite_toggled(self, place: Place) -> None:
        try:
            await self.favorites.toggle(place)
        except PersistenceError as e:
            self._report(e)
            return
        self._emit_markers()

    def _stop_autocomplete(self) -> None:
        self._debounce.cancel()
        self._requests.invalidate(RequestKind.AUTOCOMPLETE)

    async def _recenter_and_refresh(self, coordinate: Coordinate) -> None:
        self.coordinates.set_current(coordinate)
        self.presenter.on_coordinate_changed(coordinate)
        if self._session.route_destination is not None:
            self.presenter.on_route_changed(coordinate, self._session.route_destination)
        await self.nearby_refresh(coordinate)

    def _emit_markers(self) -> None:
        self.presenter.on_markers_changed(
            list(self._session.nearby_results),
            self.favorites.favorites.to_list(),
        )

    def _report(self, error: VetMapException) -> None:
        logger.warning(
            f"{error.error_code.value}: {error.message}",
            extra={"error_code": error.error_code.value},
        )
        self.presenter.on_error(error.message)
