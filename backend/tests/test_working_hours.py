"""Tests for working-time arithmetic."""

import pytest
from datetime import date, datetime, time, timedelta, timezone
import sys
import os

sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

from services.working_hours import WorkingHours, business_duration


def utc(*args):
    return datetime(*args, tzinfo=timezone.utc)


class TestBusinessDuration:
    """Test the default Monday-Friday 09:00-17:00 UTC calendar."""

    def test_within_one_day(self):
        assert business_duration(utc(2024, 1, 1, 10), utc(2024, 1, 1, 11, 30)) == timedelta(hours=1, minutes=30)

    def test_across_two_days(self):
        """Monday 10:00 to Tuesday 12:00 is 7h + 3h."""
        assert business_duration(utc(2024, 1, 1, 10), utc(2024, 1, 2, 12)) == timedelta(hours=10)

    def test_clips_to_working_window(self):
        assert business_duration(utc(2024, 1, 1, 6), utc(2024, 1, 1, 20)) == timedelta(hours=8)

    def test_skips_weekend(self):
        """Friday 16:00 to Monday 10:00 is one hour each side."""
        assert business_duration(utc(2024, 1, 5, 16), utc(2024, 1, 8, 10)) == timedelta(hours=2)

    def test_weekend_only_is_zero(self):
        assert business_duration(utc(2024, 1, 6, 10), utc(2024, 1, 7, 15)) == timedelta(0)

    def test_reversed_interval_is_negative(self):
        assert business_duration(utc(2024, 1, 2, 12), utc(2024, 1, 1, 10)) == -timedelta(hours=10)

    def test_naive_datetimes_are_utc(self):
        assert business_duration(datetime(2024, 1, 1, 10), utc(2024, 1, 1, 12)) == timedelta(hours=2)


class TestWorkingHoursCalendar:
    """Test calendar configuration."""

    def test_holidays_are_skipped(self):
        calendar = WorkingHours(holidays=[date(2024, 1, 1)])
        assert calendar.business_duration(utc(2024, 1, 1, 10), utc(2024, 1, 2, 12)) == timedelta(hours=3)

    def test_uses_calendar_time_zone(self):
        """The working window applies in the calendar's own zone."""
        calendar = WorkingHours(tz=timezone(timedelta(hours=-5)))
        assert calendar.business_duration(utc(2024, 1, 1, 13), utc(2024, 1, 1, 23)) == timedelta(hours=8)

    def test_custom_window_and_days(self):
        calendar = WorkingHours(work_days=(5,), day_start=time(10), day_end=time(12))
        assert calendar.business_duration(utc(2024, 1, 5, 0), utc(2024, 1, 7, 0)) == timedelta(hours=2)

    def test_rejects_empty_window(self):
        with pytest.raises(ValueError):
            WorkingHours(day_start=time(17), day_end=time(9))

    def test_is_working_day(self):
        calendar = WorkingHours()
        assert calendar.is_working_day(date(2024, 1, 5)) is True
        assert calendar.is_working_day(date(2024, 1, 6)) is False
