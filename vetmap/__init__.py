"""Veterinary hospital finder: location search and nearby results core."""

__version__ = "1.0.0"
