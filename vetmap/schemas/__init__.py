from .place import Coordinate, Place, SuggestionEntry
from .favorite import FavoriteSet

__all__ = ["Coordinate", "Place", "SuggestionEntry", "FavoriteSet"]
