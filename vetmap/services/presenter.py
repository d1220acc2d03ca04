"""Outbound callbacks from the search coordinator to the map surface."""
from typing import Optional, Sequence

from vetmap.schemas.place import Coordinate, Place, SuggestionEntry


class MapPresenter:
    """
    Receives everything the map screen renders.

    The base implementation ignores every callback; a rendering surface
    overrides the ones it cares about.
    """

    def on_coordinate_changed(self, coordinate: Coordinate) -> None:
        pass

    def on_markers_changed(self, nearby: Sequence[Place], favorites: Sequence[Place]) -> None:
        pass

    def on_suggestions_changed(self, suggestions: Sequence[SuggestionEntry]) -> None:
        pass

    def on_selection_changed(self, place: Optional[Place]) -> None:
        pass

    def on_route_changed(self, origin: Optional[Coordinate], destination: Optional[Coordinate]) -> None:
        pass

    def on_error(self, message: str) -> None:
        pass
