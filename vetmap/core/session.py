"""
Search session state and its transitions.

``SearchSession`` is an immutable value. Each transition takes the current
session plus the event payload and returns the next session, leaving the
input untouched; the coordinator only ever swaps whole values.
"""
from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Optional, Sequence

from vetmap.core.validation import normalize_query
from vetmap.schemas.place import Coordinate, Place, SuggestionEntry


@dataclass(frozen=True)
class SearchSession:
    query_text: str = ""
    suggestions: tuple[SuggestionEntry, ...] = ()
    resolved_coordinate: Optional[Coordinate] = None
    nearby_results: tuple[Place, ...] = ()
    selected_place: Optional[Place] = None
    route_destination: Optional[Coordinate] = None

    @property
    def has_query(self) -> bool:
        return bool(normalize_query(self.query_text))


def with_query_text(session: SearchSession, text: str) -> SearchSession:
    """Record new input; blank input also drops the suggestion list."""
    if not normalize_query(text):
        return replace(session, query_text=text, suggestions=())
    return replace(session, query_text=text)


def with_suggestions(session: SearchSession, suggestions: Sequence[SuggestionEntry]) -> SearchSession:
    return replace(session, suggestions=tuple(suggestions))


def with_resolved_place(session: SearchSession, place: Place, query_text: Optional[str] = None) -> SearchSession:
    """A place was confirmed: recenter on it and close the suggestion list."""
    return replace(
        session,
        query_text=place.name if query_text is None else query_text,
        suggestions=(),
        resolved_coordinate=place.coordinate,
    )


def with_resolved_coordinate(session: SearchSession, coordinate: Coordinate) -> SearchSession:
    return replace(session, resolved_coordinate=coordinate)


def with_nearby_results(session: SearchSession, places: Sequence[Place]) -> SearchSession:
    """Replace the nearby results wholesale."""
    return replace(session, nearby_results=tuple(places))


def with_selected_place(session: SearchSession, place: Place) -> SearchSession:
    return replace(session, selected_place=place, route_destination=place.coordinate)


def without_selection(session: SearchSession) -> SearchSession:
    # The route stays drawn after the detail panel closes.
    return replace(session, selected_place=None)
