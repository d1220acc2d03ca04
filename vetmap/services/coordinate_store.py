"""Holds the coordinate the map is currently centered on."""
from typing import Optional

from vetmap.schemas.place import Coordinate


class CoordinateStore:
    def __init__(self, initial: Optional[Coordinate] = None):
        self._current = initial

    def current(self) -> Optional[Coordinate]:
        return self._current

    def set_current(self, coordinate: Coordinate) -> None:
        # Coordinate validates its own range; re-check in case a caller
        # passes an unvalidated copy built with model_construct.
        self._current = Coordinate.model_validate(coordinate.model_dump())
