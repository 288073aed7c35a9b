"""
Search parameter parsing.

Turns raw query-string values into a SearchQuery. Location and free-text
problems are rejected; distance and limit are clamped silently.
"""

import math
from typing import List, Mapping, Optional

from yardsale.config import SearchConfig
from yardsale.error_handling import InvalidLocation, QueryTooLong
from yardsale.models import SearchQuery


def _clean(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    value = value.strip()
    return value or None


def _parse_coordinate(raw: Optional[str], name: str, bound: float) -> float:
    value = _clean(raw)
    if value is None:
        raise InvalidLocation(f"{name} is required")
    try:
        parsed = float(value)
    except ValueError as e:
        raise InvalidLocation(f"{name} must be a number, got {value!r}") from e
    if not math.isfinite(parsed) or abs(parsed) > bound:
        raise InvalidLocation(f"{name} must be between -{bound:g} and {bound:g}")
    return parsed


def clamp(value: float, low: float, high: float) -> float:
    return max(low, min(high, value))


def parse_distance_km(raw: Optional[str], config: SearchConfig) -> float:
    value = _clean(raw)
    try:
        distance = float(value) if value is not None else config.default_distance_km
    except ValueError:
        distance = config.default_distance_km
    if not math.isfinite(distance):
        distance = config.default_distance_km
    return clamp(distance, config.min_distance_km, config.max_distance_km)


def parse_limit(raw: Optional[str], config: SearchConfig) -> int:
    value = _clean(raw)
    try:
        limit = int(float(value)) if value is not None else config.default_limit
    except (ValueError, OverflowError):
        limit = config.default_limit
    return int(clamp(limit, config.min_limit, config.max_limit))


def parse_categories(raw: Optional[str], config: SearchConfig) -> List[str]:
    """Split a CSV category list, dropping blanks and duplicates."""
    value = _clean(raw)
    if value is None:
        return []

    categories = []
    for part in value.split(","):
        category = part.strip()
        if category and category not in categories:
            categories.append(category)
    return categories[:config.max_categories]


def parse_search_params(params: Mapping[str, str], config: SearchConfig) -> SearchQuery:
    """
    Build a SearchQuery from request query parameters.

    Args:
        params: Query parameters (lat, lng, distanceKm, dateRange,
            startDate, endDate, categories, q, city, limit, cursor)
        config: Search bounds and defaults

    Returns:
        Validated SearchQuery

    Raises:
        InvalidLocation: If lat/lng are missing, unparseable or out of range
        QueryTooLong: If q exceeds the configured length
    """
    lat = _parse_coordinate(params.get("lat"), "lat", 90.0)
    lng = _parse_coordinate(params.get("lng"), "lng", 180.0)

    q = _clean(params.get("q"))
    if q is not None and len(q) > config.max_query_length:
        raise QueryTooLong(f"q must be at most {config.max_query_length} characters")

    distance_raw = params.get("distanceKm")
    if distance_raw is None:
        distance_raw = params.get("distance")

    return SearchQuery(
        lat=lat,
        lng=lng,
        radius_km=parse_distance_km(distance_raw, config),
        date_range=_clean(params.get("dateRange")),
        start_date=_clean(params.get("startDate")),
        end_date=_clean(params.get("endDate")),
        categories=parse_categories(params.get("categories"), config),
        q=q,
        city=_clean(params.get("city")),
        limit=parse_limit(params.get("limit"), config),
        cursor=_clean(params.get("cursor")),
    )
