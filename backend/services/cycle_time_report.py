"""Cycle time report generation."""

from datetime import date, datetime, timedelta, timezone
from typing import Callable, Optional
import logging

from services.working_hours import business_duration as default_business_duration

REPORT_START_DATE = date(2016, 1, 1)

module_logger = logging.getLogger(__name__)


class CycleTimeReport:
    """Scans projects day by day and writes one row per closed, valid story.

    Days run from ``start_date`` up to, but not including, ``today``. Issues
    updated on several days are reported once per day they show up in.
    Day windows follow the tracker's time zone for the Jira user, while row
    timestamps and ``Week`` are in UTC, so items updated near midnight can
    land in a neighbouring window.
    """

    def __init__(self, repository, writer,
                 start_date: date = REPORT_START_DATE,
                 today: Optional[date] = None,
                 business_duration: Callable = default_business_duration,
                 include_labels: bool = True,
                 logger: Optional[logging.Logger] = None):
        self.repository = repository
        self.writer = writer
        self.start_date = start_date
        self.today = today or datetime.now(timezone.utc).date()
        self.business_duration = business_duration
        self.include_labels = include_labels
        self.logger = logger or module_logger

    def days(self):
        """Yield each day in [start_date, today)."""
        current = self.start_date
        while current < self.today:
            yield current
            current += timedelta(days=1)

    @staticmethod
    def week_of(moment: datetime) -> date:
        """Monday of the week containing ``moment``."""
        day = moment.date()
        return day - timedelta(days=day.weekday())

    def build_row(self, project: str, story) -> list:
        started_at = story.started_at
        closed_at = story.closed_at
        duration = self.business_duration(started_at, closed_at)

        row = [
            project,
            story.ref,
            story.assignee,
            started_at.isoformat(),
            closed_at.isoformat(),
            self.week_of(closed_at).isoformat(),
            story.estimate,
            int(duration.total_seconds())
        ]
        if self.include_labels:
            row.append(",".join(story.labels))
        return row

    def run(self, projects: list) -> int:
        """Write the report for ``projects`` and return the number of rows."""
        rows = 0

        for project in projects:
            for day in self.days():
                self.logger.info(f"{project} {day.isoformat()}")

                for story in self.repository.search(project, day):
                    if not story.closed:
                        continue

                    errors = story.errors
                    if errors:
                        self.logger.warning(f"  {story.ref} invalid: {', '.join(errors)}")
                        continue

                    self.logger.info(f"  {story.ref} valid: {story.estimate} points")
                    self.writer.write_row(self.build_row(project, story))
                    rows += 1

        return rows
