"""
Sale filter implementation for search results.

This module provides filtering of normalized search rows by distance,
date window and free text. Every filter is applied the same way no matter
which query path produced the rows.
"""

from typing import List, Optional

from yardsale.dates import DateWindow, overlaps
from yardsale.models import SearchResultRow

# Meters of slack for float error at the radius boundary
RADIUS_TOLERANCE_METERS = 1e-6

# Columns free text is matched against, on both query paths
TEXT_SEARCH_FIELDS = ("title", "description", "city", "state")


class SaleFilter:
    """Filters search rows by radius, date window and text.

    Each method returns a new list and leaves the input untouched.
    """

    def filter_by_radius(
        self,
        rows: List[SearchResultRow],
        radius_meters: float
    ) -> List[SearchResultRow]:
        """Keep rows whose distance is within the requested radius.

        Rows produced from a bounding box can sit in the box corners,
        outside the circle; this is where they are removed.

        Args:
            rows: Rows with distance_meters populated
            radius_meters: Search radius in meters

        Returns:
            Rows with distance_meters <= radius_meters
        """
        limit = radius_meters + RADIUS_TOLERANCE_METERS
        return [row for row in rows if 0 <= row.distance_meters <= limit]

    def filter_by_date_window(
        self,
        rows: List[SearchResultRow],
        window: Optional[DateWindow]
    ) -> List[SearchResultRow]:
        """Keep rows whose [starts_at, ends_at] overlaps the window.

        Args:
            rows: Rows to filter
            window: Date window, or None for no filtering

        Returns:
            Overlapping rows
        """
        if window is None:
            return list(rows)
        return [row for row in rows if overlaps(row.starts_at, row.ends_at, window)]

    def filter_by_text(
        self,
        rows: List[SearchResultRow],
        text: Optional[str]
    ) -> List[SearchResultRow]:
        """Case-insensitive substring match on the TEXT_SEARCH_FIELDS columns.

        Args:
            rows: Rows to filter
            text: Free-text query, None or blank for no filtering

        Returns:
            Matching rows
        """
        if not text or not text.strip():
            return list(rows)

        needle = text.strip().lower()
        filtered = []

        for row in rows:
            haystack = (getattr(row, name) for name in TEXT_SEARCH_FIELDS)
            if any(field and needle in field.lower() for field in haystack):
                filtered.append(row)

        return filtered
