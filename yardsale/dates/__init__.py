"""Date window helpers for sales filtering."""

from .date_window import (
    DateWindow,
    combine_date_time,
    end_of_day,
    format_date_window,
    overlaps,
    resolve_date_window,
)

__all__ = [
    'DateWindow',
    'combine_date_time',
    'end_of_day',
    'format_date_window',
    'overlaps',
    'resolve_date_window',
]
