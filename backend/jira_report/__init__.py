"""Jira cycle time report factory."""

import logging

from services.cycle_time_report import CycleTimeReport, REPORT_START_DATE
from services.jira_client import JiraClient
from services.story_repository import StoryRepository

__version__ = "0.1.0"


def create_report(settings: dict, writer, start_date=REPORT_START_DATE,
                  today=None, include_labels: bool = True,
                  logger: logging.Logger = None) -> CycleTimeReport:
    """Create a report wired to a live Jira instance."""
    client = JiraClient(
        settings["server"],
        settings["email"],
        settings["token"],
        estimate_field=settings["estimate_field"]
    )
    repository = StoryRepository(client, estimate_field=settings["estimate_field"])

    return CycleTimeReport(
        repository,
        writer,
        start_date=start_date,
        today=today,
        include_labels=include_labels,
        logger=logger
    )
