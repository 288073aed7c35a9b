"""
Row normalization shared by both search paths.

Rows from the spatial procedure and from the bounding-box query go through
the same function so the two paths cannot drift apart.
"""

import logging
from datetime import datetime
from enum import Enum
from typing import Iterable, List, Mapping, Union

from pydantic import ValidationError

from yardsale.filtering import public_location
from yardsale.geo import GeoPoint, haversine_km
from yardsale.models import SaleRecord, SearchResultRow

logger = logging.getLogger(__name__)


class SearchPath(str, Enum):
    """Which query produced a row"""
    PRIMARY = "primary"
    FALLBACK = "fallback"


def normalize_row(
    raw: Mapping,
    center: GeoPoint,
    now: datetime,
) -> SearchResultRow:
    """
    Project a raw database row into a SearchResultRow.

    Distance is the haversine distance from the true coordinates (before
    any privacy masking) on both paths. A distance reported by the spatial
    procedure is ignored, so radius filtering and ordering cannot differ
    between paths.

    Raises:
        ValidationError: If the row is missing required fields or its
            end is before its start
    """
    sale = SaleRecord.model_validate(dict(raw))

    distance = haversine_km(center, GeoPoint(lat=sale.lat, lng=sale.lng)) * 1000

    lat, lng, is_masked, reveal = public_location(sale, now)

    return SearchResultRow(
        id=sale.id,
        title=sale.title,
        description=sale.description,
        city=sale.city,
        state=sale.state,
        zip_code=sale.zip_code,
        lat=lat,
        lng=lng,
        date_start=sale.date_start,
        time_start=sale.time_start,
        date_end=sale.date_end,
        time_end=sale.time_end,
        tags=sale.tags,
        status=sale.status.value if sale.status else None,
        starts_at=sale.starts_at,
        ends_at=sale.ends_at,
        distance_meters=max(distance, 0.0),
        is_masked=is_masked,
        reveal_time=reveal,
    )


def normalize_rows(
    raws: Iterable[Mapping],
    path: SearchPath,
    center: GeoPoint,
    now: datetime,
    log: Union[logging.Logger, logging.LoggerAdapter] = logger,
) -> List[SearchResultRow]:
    """Normalize rows, skipping any that fail validation."""
    rows = []
    skipped = 0

    for raw in raws:
        try:
            rows.append(normalize_row(raw, center, now))
        except ValidationError as e:
            skipped += 1
            log.warning(f"Skipping malformed sale row {raw.get('id')!r} ({path.value}): {e.error_count()} errors")

    if skipped:
        log.info(f"Normalized {len(rows)} {path.value} rows, skipped {skipped}")
    return rows
