"""
Unit tests for the date helpers.
Tests relative due-date labels and day arithmetic.
"""

from datetime import datetime, timedelta, timezone
from zoneinfo import ZoneInfo

import pytest

from fm_dashboard.dashboard.dates import (
    day_difference,
    format_relative,
    is_same_day,
    round_half_up,
    to_utc,
)


NOW = datetime(2025, 3, 7, 10, 0, tzinfo=timezone.utc)
CHICAGO = ZoneInfo("America/Chicago")


class TestFormatRelative:
    """Tests for relative due-date labels."""

    def test_later_today(self):
        """Same calendar day, later on, is 'Today'."""
        assert format_relative(NOW.replace(hour=23, minute=59), NOW) == "Today"

    def test_earlier_today(self):
        """Same calendar day, already passed, is still 'Today'."""
        assert format_relative(NOW.replace(hour=8), NOW) == "Today"

    def test_tomorrow(self):
        """Next calendar day is 'Tomorrow' regardless of the hour."""
        assert format_relative(datetime(2025, 3, 8, 21, 0, tzinfo=timezone.utc), NOW) == "Tomorrow"

    def test_overdue(self):
        """Past dates show how many days overdue."""
        assert format_relative(NOW - timedelta(days=3), NOW) == "3 days overdue"

    def test_within_a_week(self):
        """Dates up to a week out show the day count."""
        assert format_relative(NOW + timedelta(days=5), NOW) == "5 days"
        assert format_relative(NOW + timedelta(days=7), NOW) == "7 days"

    def test_yesterday_evening_rounds_to_zero_days(self):
        """Less than a day past, but on the previous calendar day, is '0 days'."""
        assert format_relative(datetime(2025, 3, 6, 20, 0, tzinfo=timezone.utc), NOW) == "0 days"

    def test_far_future_uses_short_date(self):
        """More than a week out shows an absolute US short date."""
        assert format_relative(NOW + timedelta(days=8), NOW) == "3/15/2025"

    def test_far_future_with_custom_format(self):
        """A strftime pattern overrides the absolute date format."""
        assert format_relative(NOW + timedelta(days=8), NOW, "%Y-%m-%d") == "2025-03-15"

    def test_no_due_date(self):
        assert format_relative(None, NOW) == "No due date"

    def test_calendar_day_uses_now_timezone(self):
        """Dates in other zones are compared in now's timezone."""
        eastern = timezone(timedelta(hours=-5))
        # 23:30 on the 7th in UTC-5 is 04:30 on the 8th in UTC
        due = datetime(2025, 3, 7, 23, 30, tzinfo=eastern)
        assert format_relative(due, NOW) == "Tomorrow"

    def test_naive_date_assumed_in_now_timezone(self):
        """Naive dates are read in now's timezone."""
        assert format_relative(datetime(2025, 3, 7, 18, 0), NOW) == "Today"


class TestDayDifference:
    """Tests for ceiling day differences."""

    @pytest.mark.parametrize("delta,expected", [
        (timedelta(0), 0),
        (timedelta(hours=3), 1),
        (timedelta(days=1), 1),
        (timedelta(days=1, seconds=1), 2),
        (timedelta(hours=-3), 0),
        (timedelta(hours=-25), -1),
        (timedelta(days=-2), -2),
    ])
    def test_rounds_up(self, delta, expected):
        assert day_difference(NOW + delta, NOW) == expected

    def test_counts_elapsed_time_across_dst_start(self):
        """Clocks spring forward overnight: 12:00 CST to 12:30 CDT is 23.5 hours."""
        now = datetime(2025, 3, 8, 12, 0, tzinfo=CHICAGO)
        due = datetime(2025, 3, 9, 12, 30, tzinfo=CHICAGO)
        assert day_difference(due, now) == 1

    def test_counts_elapsed_time_across_dst_end(self):
        """Clocks fall back overnight: 12:00 CDT to 11:30 CST is 24.5 hours."""
        now = datetime(2025, 11, 1, 12, 0, tzinfo=CHICAGO)
        due = datetime(2025, 11, 2, 11, 30, tzinfo=CHICAGO)
        assert day_difference(due, now) == 2

    def test_naive_value_read_in_reference_zone(self):
        now = datetime(2025, 3, 8, 12, 0, tzinfo=CHICAGO)
        assert day_difference(datetime(2025, 3, 9, 12, 30), now) == 1


class TestToUtc:
    """Tests for UTC conversion."""

    def test_aware_value(self):
        value = datetime(2025, 3, 9, 12, 30, tzinfo=CHICAGO)
        assert to_utc(value, NOW) == datetime(2025, 3, 9, 17, 30, tzinfo=timezone.utc)
        assert to_utc(value, NOW).tzinfo is timezone.utc

    def test_naive_value_takes_reference_zone(self):
        now = datetime(2025, 3, 8, 12, 0, tzinfo=CHICAGO)
        assert to_utc(datetime(2025, 3, 8, 12, 0), now) == datetime(2025, 3, 8, 18, 0, tzinfo=timezone.utc)

    def test_naive_reference_stays_naive(self):
        naive_now = datetime(2025, 3, 7, 10, 0)
        assert to_utc(NOW, naive_now) == naive_now


class TestIsSameDay:
    """Tests for calendar-day equality."""

    def test_midnight_boundary(self):
        assert is_same_day(NOW.replace(hour=0, minute=0), NOW)
        assert not is_same_day(NOW.replace(hour=0, minute=0) - timedelta(seconds=1), NOW)


class TestRoundHalfUp:
    """Tests for one-decimal rounding."""

    @pytest.mark.parametrize("value,expected", [
        (2.25, 2.3),
        (-2.25, -2.2),
        (100 / 3, 33.3),
        (200 / 3, 66.7),
        (60.0, 60.0),
        (0.0, 0.0),
    ])
    def test_values(self, value, expected):
        assert round_half_up(value) == expected
