"""
Property-based tests for date window resolution and overlap checks.
"""

from datetime import datetime, timedelta, timezone

import pytest
from hypothesis import given, settings, strategies as st

from yardsale.dates import overlaps, resolve_date_window
from yardsale.error_handling import InvalidDateRange

from factories import FIXED_NOW


def utc(*args):
    return datetime(*args, tzinfo=timezone.utc)


now_values = st.datetimes(
    min_value=datetime(2020, 1, 1),
    max_value=datetime(2030, 12, 31),
    timezones=st.just(timezone.utc),
)


def test_weekend_from_wednesday():
    """A Wednesday resolves to Saturday 00:00 through Monday 00:00 of that week."""
    window = resolve_date_window("weekend", now=FIXED_NOW)

    assert window.start == utc(2024, 10, 12)
    assert window.end == utc(2024, 10, 14)
    assert window.label == "This Weekend"


def test_next_weekend_from_wednesday():
    window = resolve_date_window("next_weekend", now=FIXED_NOW)

    assert window.start == utc(2024, 10, 19)
    assert window.end == utc(2024, 10, 21)
    assert window.label == "Next Weekend"


@pytest.mark.parametrize("now", [
    utc(2024, 10, 12, 0, 0),
    utc(2024, 10, 12, 15, 30),
    utc(2024, 10, 13, 23, 59),
])
def test_weekend_on_saturday_or_sunday_is_current_weekend(now):
    window = resolve_date_window("weekend", now=now)

    assert window.start == utc(2024, 10, 12)
    assert window.end == utc(2024, 10, 14)


def test_weekend_from_monday():
    window = resolve_date_window("weekend", now=utc(2024, 10, 7, 12))
    assert window.start == utc(2024, 10, 12)


@given(now=now_values)
@settings(max_examples=100)
def test_next_weekend_is_seven_days_after_weekend(now):
    weekend = resolve_date_window("weekend", now=now)
    next_weekend = resolve_date_window("next_weekend", now=now)

    assert next_weekend.start - weekend.start == timedelta(days=7)
    assert next_weekend.end - weekend.end == timedelta(days=7)


@given(now=now_values)
@settings(max_examples=100)
def test_weekend_window_shape(now):
    """Starts on a Saturday midnight, lasts two days, and has not ended yet."""
    window = resolve_date_window("weekend", now=now)

    assert window.start.weekday() == 5
    assert window.start.hour == window.start.minute == window.start.second == 0
    assert window.end - window.start == timedelta(days=2)
    assert window.end > now
    assert window.start - now < timedelta(days=6)


@given(now=now_values)
def test_today_contains_now(now):
    window = resolve_date_window("today", now=now)

    assert window.start <= now < window.end
    assert window.end - window.start == timedelta(days=1)


@pytest.mark.parametrize("kind", [None, "", "any", "ANY", "someday"])
def test_open_ranges_have_no_window(kind):
    assert resolve_date_window(kind, now=FIXED_NOW) is None


def test_explicit_dates_cover_whole_end_day():
    window = resolve_date_window("range", "2024-10-12", "2024-10-13")

    assert window.start == utc(2024, 10, 12)
    assert window.end == utc(2024, 10, 14)
    assert window.label == "Custom Range (2024-10-12 to 2024-10-13)"


def test_explicit_bounds_win_over_symbolic_kind():
    window = resolve_date_window("today", "2024-11-01", "2024-11-01", now=FIXED_NOW)
    assert window.start == utc(2024, 11, 1)
    assert window.end == utc(2024, 11, 2)


def test_explicit_datetime_bounds():
    window = resolve_date_window(None, "2024-10-12T08:00:00Z", "2024-10-12T12:00:00Z")

    assert window.start == utc(2024, 10, 12, 8)
    assert window.end == utc(2024, 10, 12, 12)


@pytest.mark.parametrize("start,end", [
    ("2024-10-13", "2024-10-12"),
    ("not-a-date", "2024-10-12"),
    ("2024-10-12", "2024-13-40"),
    ("2024-10-12", None),
    (None, "2024-10-12"),
])
def test_invalid_explicit_ranges(start, end):
    with pytest.raises(InvalidDateRange):
        resolve_date_window("range", start, end)


def test_display_for_single_and_multi_day_windows():
    assert resolve_date_window("today", now=FIXED_NOW).display == "Today • 2024-10-09"
    assert resolve_date_window("weekend", now=FIXED_NOW).display == \
        "This Weekend • 2024-10-12 to 2024-10-13"


class TestOverlaps:
    window = resolve_date_window("weekend", now=FIXED_NOW)

    def test_sale_inside_window(self):
        assert overlaps(utc(2024, 10, 12, 8), utc(2024, 10, 12, 14), self.window)

    def test_sale_ending_friday_night(self):
        assert not overlaps(utc(2024, 10, 11, 8), utc(2024, 10, 11, 23, 59), self.window)

    def test_sale_starting_monday_midnight_is_outside(self):
        assert not overlaps(utc(2024, 10, 14, 0), utc(2024, 10, 14, 4), self.window)

    def test_multi_day_sale_spanning_window(self):
        assert overlaps(utc(2024, 10, 10, 8), utc(2024, 10, 16, 17), self.window)

    def test_sale_ending_exactly_at_window_start(self):
        assert overlaps(utc(2024, 10, 11, 20), utc(2024, 10, 12, 0), self.window)

    def test_missing_end_runs_to_end_of_start_day(self):
        assert not overlaps(utc(2024, 10, 11, 8), None, self.window)
        assert overlaps(utc(2024, 10, 13, 22), None, self.window)
