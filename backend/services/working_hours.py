"""Working-time arithmetic between two timestamps."""

from datetime import date, datetime, time, timedelta, timezone, tzinfo


class WorkingHours:
    """Fixed weekly calendar: working days, a daily window, and holidays.

    Defaults to Monday-Friday, 09:00-17:00 UTC with no holidays.
    """

    def __init__(self, work_days=(0, 1, 2, 3, 4), day_start: time = time(9),
                 day_end: time = time(17), holidays=(), tz: tzinfo = timezone.utc):
        if day_end <= day_start:
            raise ValueError("day_end must be after day_start")
        self.work_days = frozenset(work_days)
        self.day_start = day_start
        self.day_end = day_end
        self.holidays = frozenset(holidays)
        self.tz = tz

    def is_working_day(self, day: date) -> bool:
        return day.weekday() in self.work_days and day not in self.holidays

    def _localize(self, moment: datetime) -> datetime:
        if moment.tzinfo is None:
            moment = moment.replace(tzinfo=timezone.utc)
        return moment.astimezone(self.tz)

    def business_duration(self, start: datetime, end: datetime) -> timedelta:
        """Working time elapsed between ``start`` and ``end``.

        Negative when ``end`` precedes ``start``.
        """
        start = self._localize(start)
        end = self._localize(end)
        if end < start:
            return -self.business_duration(end, start)

        total = timedelta(0)
        current = start.date()
        while current <= end.date():
            if self.is_working_day(current):
                window_start = datetime.combine(current, self.day_start, tzinfo=self.tz)
                window_end = datetime.combine(current, self.day_end, tzinfo=self.tz)
                overlap = min(end, window_end) - max(start, window_start)
                if overlap > timedelta(0):
                    total += overlap
            current += timedelta(days=1)

        return total


def business_duration(start: datetime, end: datetime) -> timedelta:
    """Working time between two instants on the default calendar."""
    return WorkingHours().business_duration(start, end)
