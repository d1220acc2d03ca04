from typing import Iterable, Iterator

from pydantic import TypeAdapter

from vetmap.schemas.place import Place

_PLACE_LIST = TypeAdapter(list[Place])


class FavoriteSet:
    """
    Bookmarked places keyed by id.

    Membership checks are by id; iteration follows insertion order so the
    favorite markers keep a stable display order. Instances are immutable:
    ``toggled`` returns a new set.
    """

    __slots__ = ("_places",)

    def __init__(self, places: Iterable[Place] = ()):
        ordered: dict[str, Place] = {}
        for place in places:
            ordered.setdefault(place.id, place)
        self._places = ordered

    def contains(self, place_id: str) -> bool:
        return place_id in self._places

    def __contains__(self, item) -> bool:
        if isinstance(item, Place):
            item = item.id
        return item in self._places

    def __iter__(self) -> Iterator[Place]:
        return iter(self._places.values())

    def __len__(self) -> int:
        return len(self._places)

    def __eq__(self, other):
        if not isinstance(other, FavoriteSet):
            return NotImplemented
        return list(self._places) == list(other._places)

    def __repr__(self) -> str:
        return f"FavoriteSet({list(self._places)!r})"

    def toggled(self, place: Place) -> "FavoriteSet":
        """Remove ``place`` if its id is present, otherwise append it."""
        if place.id in self._places:
            return FavoriteSet(p for p in self._places.values() if p.id != place.id)
        return FavoriteSet([*self._places.values(), place])

    def to_list(self) -> list[Place]:
        return list(self._places.values())

    def to_json(self) -> str:
        return _PLACE_LIST.dump_json(self.to_list()).decode("utf-8")

    @classmethod
    def from_json(cls, payload: str | bytes) -> "FavoriteSet":
        """Parse a stored payload; raises ``pydantic.ValidationError`` if corrupt."""
        return cls(_PLACE_LIST.validate_json(payload))
