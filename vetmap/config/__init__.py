"""
Configuration package for the veterinary hospital finder.
"""

from .settings import (
    Settings,
    Environment,
    LogLevel,
    PlacesSettings,
    SearchSettings,
    StorageBackend,
    StorageSettings,
    RedisSettings,
    LocationSettings,
    settings,
    get_settings,
    reload_settings,
)

__all__ = [
    "Settings",
    "Environment",
    "LogLevel",
    "PlacesSettings",
    "SearchSettings",
    "StorageBackend",
    "StorageSettings",
    "RedisSettings",
    "LocationSettings",
    "settings",
    "get_settings",
    "reload_settings",
]
