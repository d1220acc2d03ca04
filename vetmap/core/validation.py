"""
Input validation utilities for coordinates and search input
"""
import math


class ValidationError(ValueError):
    """Custom validation error"""
    pass


def validate_latitude(lat: float) -> float:
    """
    Validate latitude coordinate

    Args:
        lat: Latitude value

    Returns:
        Validated latitude

    Raises:
        ValidationError: If latitude is not finite or out of range
    """
    if not math.isfinite(lat):
        raise ValidationError(f"Latitude {lat} is not a finite number")

    if not -90.0 <= lat <= 90.0:
        raise ValidationError(f"Latitude {lat} out of range (must be -90 to 90)")

    return lat


def validate_longitude(lon: float) -> float:
    """
    Validate longitude coordinate

    Args:
        lon: Longitude value

    Returns:
        Validated longitude

    Raises:
        ValidationError: If longitude is not finite or out of range
    """
    if not math.isfinite(lon):
        raise ValidationError(f"Longitude {lon} is not a finite number")

    if not -180.0 <= lon <= 180.0:
        raise ValidationError(f"Longitude {lon} out of range (must be -180 to 180)")

    return lon


def validate_radius(radius: float, max_radius: float = 50000.0) -> float:
    """
    Validate search radius (in meters)

    Args:
        radius: Search radius
        max_radius: Maximum allowed radius (default 50km, the Places API cap)

    Returns:
        Validated radius

    Raises:
        ValidationError: If radius is invalid
    """
    if radius <= 0:
        raise ValidationError("Radius must be positive")

    if radius > max_radius:
        raise ValidationError(f"Radius {radius}m exceeds maximum {max_radius}m")

    return radius


def normalize_query(text: str | None) -> str:
    """Collapse surrounding whitespace; an empty result means 'no query'."""
    if not text:
        return ""
    return " ".join(text.split())
