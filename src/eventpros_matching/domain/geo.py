"""Great-circle distance and distance decay helpers."""

from __future__ import annotations

from math import asin, cos, radians, sin, sqrt

from .models import GeoLocation

EARTH_RADIUS_KM = 6371.0


def is_valid_location(location: GeoLocation | None) -> bool:
    """Return True when the location has finite, in-range coordinates."""
    if location is None:
        return False
    lat, lng = location.lat, location.lng
    # NaN fails every comparison below
    return -90.0 <= lat <= 90.0 and -180.0 <= lng <= 180.0


def haversine_km(origin: GeoLocation, destination: GeoLocation) -> float:
    """Distance between two points in kilometres using the haversine formula."""
    lat1, lng1, lat2, lng2 = map(
        radians, [origin.lat, origin.lng, destination.lat, destination.lng]
    )
    dlat = lat2 - lat1
    dlng = lng2 - lng1
    a = sin(dlat / 2) ** 2 + cos(lat1) * cos(lat2) * sin(dlng / 2) ** 2
    # Rounding can push ``a`` fractionally above 1 for antipodal points
    c = 2 * asin(sqrt(min(1.0, a)))
    return c * EARTH_RADIUS_KM


def linear_decay(distance_km: float, max_radius_km: float) -> float:
    """Score 1.0 at distance 0 falling linearly to 0.0 at ``max_radius_km`` and beyond."""
    if max_radius_km <= 0.0:
        return 1.0 if distance_km <= 0.0 else 0.0
    return max(0.0, min(1.0, 1.0 - distance_km / max_radius_km))
