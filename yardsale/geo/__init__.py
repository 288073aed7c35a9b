"""Geometry helpers for radius searches."""

from .distance import (
    BoundingBox,
    GeoPoint,
    bounding_box,
    bounding_box_degrees,
    haversine_km,
    km_to_miles,
    miles_to_km,
)

__all__ = [
    'BoundingBox',
    'GeoPoint',
    'bounding_box',
    'bounding_box_degrees',
    'haversine_km',
    'km_to_miles',
    'miles_to_km',
]
