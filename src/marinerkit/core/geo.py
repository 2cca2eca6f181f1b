from __future__ import annotations
from dataclasses import dataclass
from math import asin, atan2, cos, degrees, radians, sin, sqrt

"""
Great-circle helpers.

Everything here is a pure function over `GeoPoint` values (no shared state), so route
annotation and proximity ranking can call it from any thread or task. Distances are
always kilometers; conversion to nautical or statute miles is left to callers.
"""

EARTH_RADIUS_KM = 6371.0
KM_PER_NAUTICAL_MILE = 1.852
STATUTE_MILES_PER_KM = 0.621371


@dataclass(frozen=True)
class GeoPoint:
    """A latitude/longitude pair in decimal degrees."""

    lat: float
    lon: float


def distance_km(a: GeoPoint, b: GeoPoint) -> float:
    """Compute great-circle (haversine) distance in kilometers between two points."""
    if a == b:
        return 0.0
    lat1 = radians(a.lat)
    lon1 = radians(a.lon)
    lat2 = radians(b.lat)
    lon2 = radians(b.lon)

    dlat = lat2 - lat1
    dlon = lon2 - lon1

    h = sin(dlat / 2) ** 2 + cos(lat1) * cos(lat2) * sin(dlon / 2) ** 2
    # Rounding can push h a hair above 1 for antipodal points.
    return 2 * EARTH_RADIUS_KM * asin(sqrt(min(1.0, h)))


def bearing_deg(a: GeoPoint, b: GeoPoint) -> float:
    """Initial great-circle bearing from `a` toward `b`, normalized to [0, 360).

    Identical points have no defined heading; they yield 0.0 so callers never see NaN.
    """
    if a == b:
        return 0.0
    lat1 = radians(a.lat)
    lat2 = radians(b.lat)
    dlon = radians(b.lon - a.lon)

    y = sin(dlon) * cos(lat2)
    x = cos(lat1) * sin(lat2) - sin(lat1) * cos(lat2) * cos(dlon)
    heading = degrees(atan2(y, x)) % 360.0
    # `-1e-15 % 360.0` rounds up to 360.0.
    return 0.0 if heading >= 360.0 else heading


def destination_point(origin: GeoPoint, bearing: float, distance: float) -> GeoPoint:
    """Point reached by travelling `distance` km from `origin` on initial `bearing` degrees."""
    if distance == 0:
        return origin
    delta = float(distance) / EARTH_RADIUS_KM
    theta = radians(float(bearing))
    lat1 = radians(origin.lat)
    lon1 = radians(origin.lon)

    sin_lat2 = sin(lat1) * cos(delta) + cos(lat1) * sin(delta) * cos(theta)
    sin_lat2 = max(-1.0, min(1.0, sin_lat2))
    lat2 = asin(sin_lat2)
    lon2 = lon1 + atan2(
        sin(theta) * sin(delta) * cos(lat1),
        cos(delta) - sin(lat1) * sin_lat2,
    )
    lon_deg = (degrees(lon2) + 540.0) % 360.0 - 180.0
    return GeoPoint(lat=degrees(lat2), lon=lon_deg)


def km_to_nautical_miles(km: float) -> float:
    return float(km) / KM_PER_NAUTICAL_MILE


def nautical_miles_to_km(nm: float) -> float:
    return float(nm) * KM_PER_NAUTICAL_MILE


def km_to_statute_miles(km: float) -> float:
    return float(km) * STATUTE_MILES_PER_KM
