"""Favorites store - the persisted set of bookmarked hospitals."""

import asyncio
import logging
from typing import Optional

from pydantic import ValidationError

from vetmap.core.exceptions import PersistenceError
from vetmap.schemas.favorite import FavoriteSet
from vetmap.schemas.place import Place
from vetmap.storage.key_value import KeyValueStorage

logger = logging.getLogger(__name__)

DEFAULT_FAVORITES_KEY = "favorites"


class FavoritesStore:
    """
    Holds the in-memory ``FavoriteSet`` and keeps it in step with storage.

    A mutation is committed in memory only after ``save`` succeeded, so the
    displayed favorites never drift from the persisted ones.
    """

    def __init__(self, storage: KeyValueStorage, key: str = DEFAULT_FAVORITES_KEY):
        self.storage = storage
        self.key = key
        self._favorites = FavoriteSet()
        self._pending: set[str] = set()
        self._write_lock = asyncio.Lock()

    @property
    def favorites(self) -> FavoriteSet:
        return self._favorites

    def contains(self, place_id: str) -> bool:
        return self._favorites.contains(place_id)

    async def load(self) -> FavoriteSet:
        """
        Load the persisted set. Unreadable storage or a corrupt payload is
        logged and yields an empty set; the app stays usable without favorites.
        """
        try:
            payload: Optional[str] = await self.storage.get(self.key)
            loaded = FavoriteSet.from_json(payload) if payload else FavoriteSet()
        except PersistenceError as e:
            logger.warning(f"Failed to load favorites, starting empty: {e.message}", extra=e.details)
            loaded = FavoriteSet()
        except ValidationError as e:
            logger.warning(f"Stored favorites are corrupt, starting empty: {e.error_count()} errors")
            loaded = FavoriteSet()

        self._favorites = loaded
        logger.info(f"Loaded {len(loaded)} favorites")
        return loaded

    async def close(self) -> None:
        await self.storage.close()

    async def save(self, favorites: FavoriteSet) -> None:
        """Persist ``favorites``; raises ``PersistenceError`` on failure."""
        await self.storage.set(self.key, favorites.to_json())

    async def toggle(self, place: Place) -> FavoriteSet:
        """
        Add ``place`` if absent, remove it if present.

        A second toggle for the same place while the first is still being
        persisted is ignored.

        Raises:
            PersistenceError: The new set could not be saved; nothing changed
        """
        if place.id in self._pending:
            logger.debug(f"Toggle for {place.id} already in progress, ignoring")
            return self._favorites

        self._pending.add(place.id)
        try:
            async with self._write_lock:
                updated = self._favorites.toggled(place)
                await self.save(updated)
                self._favorites = updated
        finally:
            self._pending.discard(place.id)

        action = "added" if self._favorites.contains(place.id) else "removed"
        logger.info(f"Favorite {action}: {place.name}", extra={"place_id": place.id})
        return self._favorites
