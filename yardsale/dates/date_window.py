"""
Date window computation for sales filtering.

All windows are computed in UTC and are half-open: [start, end).
"""

from dataclasses import dataclass
from datetime import date, datetime, time, timedelta, timezone
from typing import Optional, Union

from yardsale.error_handling.errors import InvalidDateRange


SATURDAY = 5
SUNDAY = 6

# Range kinds that resolve to "no window"
OPEN_RANGES = {None, "", "any"}


@dataclass(frozen=True)
class DateWindow:
    """
    A concrete date interval derived from a date-range filter.

    Attributes:
        start: Inclusive start instant
        end: Exclusive end instant
        label: Short label such as "This Weekend"
        display: Label plus the covered dates, for UI display
    """
    start: datetime
    end: datetime
    label: str
    display: str = ""


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


def _midnight(day: date) -> datetime:
    return datetime.combine(day, time.min, tzinfo=timezone.utc)


def _make_window(start: datetime, end: datetime, label: str) -> DateWindow:
    return DateWindow(start=start, end=end, label=label, display=format_date_window(start, end, label))


def combine_date_time(day: date, at: Optional[time] = None) -> datetime:
    """
    Combine separate date and time parts into a UTC instant.

    A missing time means the start of the day.
    """
    at = at or time.min
    if at.tzinfo is not None:
        at = at.replace(tzinfo=None)
    return datetime.combine(day, at, tzinfo=timezone.utc)


def end_of_day(day: date) -> datetime:
    """Last representable instant of day."""
    return datetime.combine(day, time.max, tzinfo=timezone.utc)


def format_date_window(start: datetime, end: datetime, label: str) -> str:
    """
    Format a window for display.

    The end bound is exclusive, so the last covered day is the day of
    the instant just before it.
    """
    first_day = start.date().isoformat()
    last_day = (end - timedelta(microseconds=1)).date().isoformat()

    if first_day == last_day:
        return f"{label} • {first_day}"
    return f"{label} • {first_day} to {last_day}"


def today_window(now: datetime) -> DateWindow:
    start = _midnight(now.astimezone(timezone.utc).date())
    return _make_window(start, start + timedelta(days=1), "Today")


def weekend_window(now: datetime) -> DateWindow:
    """
    Saturday 00:00 through Monday 00:00 of the current week.

    On Saturday or Sunday this is the weekend in progress.
    """
    today = now.astimezone(timezone.utc).date()
    weekday = today.weekday()

    if weekday == SUNDAY:
        saturday = today - timedelta(days=1)
    else:
        saturday = today + timedelta(days=SATURDAY - weekday)

    start = _midnight(saturday)
    return _make_window(start, start + timedelta(days=2), "This Weekend")


def next_weekend_window(now: datetime) -> DateWindow:
    current = weekend_window(now)
    return _make_window(
        current.start + timedelta(days=7),
        current.end + timedelta(days=7),
        "Next Weekend",
    )


def _parse_bound(value: str, field: str) -> Union[date, datetime]:
    value = value.strip()
    try:
        if "T" in value or " " in value:
            parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
            if parsed.tzinfo is None:
                parsed = parsed.replace(tzinfo=timezone.utc)
            return parsed.astimezone(timezone.utc)
        return date.fromisoformat(value)
    except ValueError as e:
        raise InvalidDateRange(f"Invalid {field}: {value!r}") from e


def range_window(start_value: str, end_value: str) -> DateWindow:
    """
    Window for explicit start/end bounds.

    A date-only end bound covers that whole day, so its exclusive end is
    the following midnight.

    Raises:
        InvalidDateRange: If either bound fails to parse or end < start
    """
    start_parsed = _parse_bound(start_value, "startDate")
    end_parsed = _parse_bound(end_value, "endDate")

    start = start_parsed if isinstance(start_parsed, datetime) else _midnight(start_parsed)
    if isinstance(end_parsed, datetime):
        end = end_parsed
        end_floor = end_parsed
    else:
        end_floor = _midnight(end_parsed)
        end = end_floor + timedelta(days=1)

    if end_floor < start:
        raise InvalidDateRange(f"endDate {end_value!r} is before startDate {start_value!r}")

    return _make_window(start, end, f"Custom Range ({start_value.strip()} to {end_value.strip()})")


def resolve_date_window(
    range_kind: Optional[str],
    start: Optional[str] = None,
    end: Optional[str] = None,
    now: Optional[datetime] = None,
) -> Optional[DateWindow]:
    """
    Resolve a symbolic or explicit date range into a DateWindow.

    Explicit bounds take precedence over the symbolic kind and must be
    supplied together.

    Args:
        range_kind: "any", "today", "weekend", "next_weekend" or None
        start: Explicit ISO start bound
        end: Explicit ISO end bound
        now: Reference instant, defaults to the current UTC time

    Returns:
        DateWindow, or None when no date filtering applies

    Raises:
        InvalidDateRange: For malformed, incomplete or inverted explicit bounds
    """
    if start or end:
        if not (start and end):
            raise InvalidDateRange("startDate and endDate must be supplied together")
        return range_window(start, end)

    now = now or _utc_now()
    kind = (range_kind or "").strip().lower()

    if kind in OPEN_RANGES:
        return None
    if kind == "today":
        return today_window(now)
    if kind == "weekend":
        return weekend_window(now)
    if kind == "next_weekend":
        return next_weekend_window(now)
    return None


def overlaps(sale_start: datetime, sale_end: Optional[datetime], window: DateWindow) -> bool:
    """
    Check whether a sale's [start, end] interval intersects the window.

    A sale with no end runs until the end of its start day.
    """
    if sale_end is None:
        sale_end = end_of_day(sale_start.astimezone(timezone.utc).date())
    return sale_start < window.end and sale_end >= window.start
