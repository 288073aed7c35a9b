"""
Distance and bounding-box helpers for radius searches.

All inputs are plain latitude/longitude pairs in degrees.
"""

import math
from dataclasses import dataclass
from typing import Tuple

# WGS84 mean earth radius
EARTH_RADIUS_KM = 6371.0088

# Rough kilometres per degree of latitude
KM_PER_DEGREE = 111.0

MILES_PER_KM = 0.62137119223733

MAX_LNG_DELTA = 180.0

MAX_LAT = 90.0
MAX_LNG = 180.0


@dataclass(frozen=True)
class GeoPoint:
    """A latitude/longitude pair in degrees."""
    lat: float
    lng: float


@dataclass(frozen=True)
class BoundingBox:
    """Rectangular lat/lng region that contains a search circle."""
    min_lat: float
    max_lat: float
    min_lng: float
    max_lng: float

    def contains(self, point: GeoPoint) -> bool:
        return (
            self.min_lat <= point.lat <= self.max_lat
            and self.min_lng <= point.lng <= self.max_lng
        )


def haversine_km(a: GeoPoint, b: GeoPoint) -> float:
    """
    Great-circle distance between two points.

    No validation is done on the inputs.

    Args:
        a: First point
        b: Second point

    Returns:
        Distance in kilometres
    """
    phi1 = math.radians(a.lat)
    phi2 = math.radians(b.lat)
    dphi = math.radians(b.lat - a.lat)
    dlambda = math.radians(b.lng - a.lng)

    h = math.sin(dphi / 2) ** 2 + math.cos(phi1) * math.cos(phi2) * math.sin(dlambda / 2) ** 2
    h = min(1.0, max(0.0, h))
    return 2 * EARTH_RADIUS_KM * math.asin(math.sqrt(h))


def bounding_box_degrees(center: GeoPoint, radius_km: float) -> Tuple[float, float]:
    """
    Convert a radius into latitude/longitude deltas around a center.

    Longitude degrees shrink with cos(latitude), so the longitude delta
    grows toward the poles. It is clamped to 180 degrees, at which point
    the box covers every longitude.

    Args:
        center: Search center
        radius_km: Search radius in kilometres

    Returns:
        Tuple of (lat_delta, lng_delta) in degrees
    """
    lat_delta = radius_km / KM_PER_DEGREE

    cos_lat = math.cos(math.radians(center.lat))
    if cos_lat <= 0:
        return lat_delta, MAX_LNG_DELTA

    lng_delta = min(radius_km / (KM_PER_DEGREE * cos_lat), MAX_LNG_DELTA)
    return lat_delta, lng_delta


def bounding_box(center: GeoPoint, radius_km: float) -> BoundingBox:
    """
    Build the bounding box around center for radius_km.

    Latitudes are clamped to [-90, 90]. The longitude delta is widened to
    the circle's exact longitude extent, asin(sin(d) / cos(lat)), which
    exceeds the per-degree approximation close to the poles. When the
    circle reaches a pole or the longitude range would leave [-180, 180],
    the box spans every longitude instead of wrapping, so it stays a
    superset of the circle for stored coordinates.
    """
    lat_delta, lng_delta = bounding_box_degrees(center, radius_km)
    min_lat = center.lat - lat_delta
    max_lat = center.lat + lat_delta

    sin_angular = math.sin(min(radius_km / EARTH_RADIUS_KM, math.pi / 2))
    cos_lat = math.cos(math.radians(center.lat))
    contains_pole = sin_angular >= cos_lat
    if not contains_pole:
        lng_delta = max(lng_delta, math.degrees(math.asin(sin_angular / cos_lat)))

    min_lng = center.lng - lng_delta
    max_lng = center.lng + lng_delta

    reaches_pole = contains_pole or min_lat <= -MAX_LAT or max_lat >= MAX_LAT
    if reaches_pole or lng_delta >= MAX_LNG_DELTA or min_lng < -MAX_LNG or max_lng > MAX_LNG:
        min_lng, max_lng = -MAX_LNG, MAX_LNG

    return BoundingBox(
        min_lat=max(min_lat, -MAX_LAT),
        max_lat=min(max_lat, MAX_LAT),
        min_lng=min_lng,
        max_lng=max_lng,
    )


def km_to_miles(km: float) -> float:
    return km * MILES_PER_KM


def miles_to_km(miles: float) -> float:
    # Inverse of km_to_miles so round trips do not drift
    return miles / MILES_PER_KM
