"""Derived report facts for a single Jira issue."""

from datetime import datetime, timezone
from typing import Optional

from services.jira_client import DEFAULT_ESTIMATE_FIELD

STARTED_STATUSES = ("In Progress", "In Dev")
CLOSED_STATUSES = ("Closed", "Done")

# Checked in this order; the order is reported back in Story.errors
REQUIRED_FIELDS = ("ref", "started_at", "closed_at", "assignee", "estimate")


def parse_jira_datetime(date_str: Optional[str]) -> Optional[datetime]:
    """Parse a Jira date string into an aware UTC datetime.

    Naive values are taken to be UTC. Returns None when the value is empty
    or in an unknown format.
    """
    if not date_str:
        return None

    # Jira formats: "2024-10-31T12:11:56.289-0400" or "2024-10-31T12:11:56.289+0000"
    formats = [
        "%Y-%m-%dT%H:%M:%S.%f%z",
        "%Y-%m-%dT%H:%M:%S%z",
        "%Y-%m-%dT%H:%M:%S.%f",
        "%Y-%m-%dT%H:%M:%S",
        "%Y-%m-%d"
    ]

    for fmt in formats:
        try:
            parsed = datetime.strptime(date_str, fmt)
        except ValueError:
            continue
        if parsed.tzinfo is None:
            return parsed.replace(tzinfo=timezone.utc)
        return parsed.astimezone(timezone.utc)

    return None


def status_timestamp(histories: list, status: str) -> Optional[datetime]:
    """Return when an issue first moved into ``status``.

    Histories may arrive in any order; they are sorted by creation time
    (stable, so equal timestamps keep their original order) and the earliest
    history with a matching status transition wins.
    """
    timed = []
    for history in histories or []:
        created = parse_jira_datetime(history.get("created"))
        if created is not None:
            timed.append((created, history))

    for created, history in sorted(timed, key=lambda pair: pair[0]):
        for item in history.get("items", []):
            if item.get("field") == "status" and item.get("toString") == status:
                return created

    return None


class Story:
    """Read-only view deriving report facts from one raw Jira issue.

    Parent and child issues are looked up through the repository, so the
    same key always resolves to the same Story within a run. Nothing is
    cached here; every fact is recomputed on access.
    """

    def __init__(self, issue: dict, repository, estimate_field: str = DEFAULT_ESTIMATE_FIELD):
        self.issue = issue
        self.repository = repository
        self.estimate_field = estimate_field

    def __repr__(self):
        return f"<Story {self.ref}>"

    @property
    def fields(self) -> dict:
        return self.issue.get("fields") or {}

    @property
    def histories(self) -> list:
        changelog = self.issue.get("changelog") or {}
        return changelog.get("histories") or []

    @property
    def ref(self) -> str:
        return self.issue.get("key")

    def _first_status_timestamp(self, statuses) -> Optional[datetime]:
        for status in statuses:
            timestamp = status_timestamp(self.histories, status)
            if timestamp is not None:
                return timestamp
        return None

    @property
    def started_at(self) -> Optional[datetime]:
        return self._first_status_timestamp(STARTED_STATUSES)

    @property
    def closed_at(self) -> Optional[datetime]:
        return self._first_status_timestamp(CLOSED_STATUSES)

    @property
    def closed(self) -> bool:
        return self.closed_at is not None

    @property
    def assignee(self) -> Optional[str]:
        assignee = self.fields.get("assignee") or {}
        return assignee.get("emailAddress")

    @property
    def raw_estimate(self) -> Optional[float]:
        """Estimate recorded on the issue itself.

        Story points and sub-task estimates both land in the configured
        custom field.
        """
        value = self.fields.get(self.estimate_field)
        if value is None:
            return None
        try:
            return float(value)
        except (TypeError, ValueError):
            return None

    @property
    def estimate(self) -> Optional[float]:
        """Estimate used for reporting.

        Issues with sub-tasks carry no estimate. Leaf issues use their own
        estimate, falling back to an even share of their parent's.
        """
        if self.children:
            return None
        if self.raw_estimate is not None:
            return self.raw_estimate

        parent = self.parent
        if parent is None or parent.raw_estimate is None:
            return None
        siblings = parent.children
        if not siblings:
            return None
        return parent.raw_estimate / len(siblings)

    @property
    def labels(self) -> list:
        return list(self.fields.get("labels") or [])

    @property
    def parent(self) -> Optional["Story"]:
        parent = self.fields.get("parent")
        if not parent or not parent.get("key"):
            return None
        return self.repository.find_by_key(parent["key"])

    @property
    def children(self) -> list:
        subtasks = self.fields.get("subtasks") or []
        return [
            self.repository.find_by_key(subtask["key"])
            for subtask in subtasks
            if subtask.get("key")
        ]

    @property
    def errors(self) -> list:
        """Names of required facts that could not be derived."""
        return [name for name in REQUIRED_FIELDS if getattr(self, name) is None]

    @property
    def valid(self) -> bool:
        return not self.errors
