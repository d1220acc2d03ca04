"""
Device location acquisition.

The sensor itself lives outside this package; it is reached through a
``LocationProvider``. ``LocationService`` adds the permission check and a
bounded wait so the coordinator never hangs on a missing fix.
"""

import asyncio
import logging
from typing import Optional, Protocol

from vetmap.core.exceptions import LocationUnavailableError, PermissionDeniedError
from vetmap.schemas.place import Coordinate

logger = logging.getLogger(__name__)


class LocationProvider(Protocol):
    async def request_permission(self) -> bool: ...

    async def get_current_fix(self, accuracy: str) -> Coordinate: ...


class FixedLocationProvider:
    """Reports a configured coordinate; without one, no fix is ever available."""

    def __init__(self, coordinate: Optional[Coordinate] = None, permission_granted: bool = True):
        self.coordinate = coordinate
        self.permission_granted = permission_granted

    async def request_permission(self) -> bool:
        return self.permission_granted

    async def get_current_fix(self, accuracy: str) -> Coordinate:
        if self.coordinate is None:
            raise LocationUnavailableError(details={"accuracy": accuracy})
        return self.coordinate


class DeniedLocationProvider:
    """A provider whose permission prompt is always refused."""

    async def request_permission(self) -> bool:
        return False

    async def get_current_fix(self, accuracy: str) -> Coordinate:
        raise PermissionDeniedError()


class LocationService:
    def __init__(self, provider: LocationProvider, accuracy: str = "high", timeout_seconds: float = 15.0):
        self.provider = provider
        self.accuracy = accuracy
        self.timeout_seconds = timeout_seconds

    async def locate(self) -> Coordinate:
        """
        Ask for permission, then for a fix.

        Raises:
            PermissionDeniedError: The user refused location access
            LocationUnavailableError: No fix within the timeout, or the sensor failed
        """
        if not await self.provider.request_permission():
            logger.info("Location permission denied")
            raise PermissionDeniedError()

        try:
            coordinate = await asyncio.wait_for(
                self.provider.get_current_fix(self.accuracy),
                timeout=self.timeout_seconds,
            )
        except asyncio.TimeoutError as e:
            logger.warning(f"No location fix after {self.timeout_seconds}s")
            raise LocationUnavailableError(
                "Timed out waiting for the current location",
                details={"timeout_seconds": self.timeout_seconds},
            ) from e

        logger.debug("Device location acquired", extra={"latitude": coordinate.latitude, "longitude": coordinate.longitude})
        return coordinate
