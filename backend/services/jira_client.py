"""Jira REST client for issue lookups and windowed searches."""

from datetime import date
from typing import Iterator, Optional
import logging
import requests

logger = logging.getLogger(__name__)

DEFAULT_ESTIMATE_FIELD = "customfield_10008"


class JiraClient:
    """Thin read-only client over the Jira REST API."""

    API_PATH = "/rest/api/2"

    def __init__(self, server: str, email: str, token: str,
                 timeout: int = 120, estimate_field: str = DEFAULT_ESTIMATE_FIELD):
        self.server = server.rstrip("/")
        self.email = email
        self.token = token
        self.timeout = timeout
        self.estimate_field = estimate_field

    @property
    def fields(self) -> list:
        """Issue fields needed to derive report facts."""
        base_fields = ["assignee", "labels", "parent", "subtasks"]
        if self.estimate_field not in base_fields:
            base_fields.append(self.estimate_field)
        return base_fields

    def _request(self, endpoint: str, params: Optional[dict] = None):
        """Make authenticated request to Jira API."""
        response = requests.get(
            f"{self.server}{self.API_PATH}{endpoint}",
            auth=(self.email, self.token),
            headers={"Accept": "application/json"},
            params=params,
            timeout=self.timeout
        )
        response.raise_for_status()
        return response.json()

    def _complete_changelog(self, issue: dict) -> dict:
        """Replace a truncated embedded changelog with the full history.

        ``expand=changelog`` embeds a capped number of histories; when the
        changelog ``total`` says more exist, they are paged in from the
        changelog endpoint.
        """
        changelog = issue.get("changelog")
        if not changelog:
            return issue

        histories = changelog.get("histories") or []
        total = changelog.get("total")
        if total is None or len(histories) >= total:
            return issue

        logger.debug(f"Changelog for {issue.get('key')} truncated at {len(histories)}/{total}")
        histories = list(self.get_changelog(issue["key"]))
        issue["changelog"] = dict(
            changelog, histories=histories, startAt=0,
            maxResults=len(histories), total=len(histories)
        )
        return issue

    def get_changelog(self, key: str, max_results: int = 100) -> Iterator[dict]:
        """Yield every changelog history of an issue, oldest page first."""
        start_at = 0

        while True:
            data = self._request(
                f"/issue/{key}/changelog",
                params={"startAt": start_at, "maxResults": max_results}
            )

            values = data.get("values", [])
            yield from values

            start_at += len(values)
            total = data.get("total")
            if not values or data.get("isLast"):
                break
            if total is not None:
                if start_at >= total:
                    break
            elif len(values) < max_results:
                break

    def get_issue(self, key: str) -> dict:
        """Fetch a single issue including its complete changelog.

        Raises requests.HTTPError if the issue does not exist or is not
        visible to the configured user.
        """
        logger.debug(f"Fetching issue {key}")
        issue = self._request(
            f"/issue/{key}",
            params={
                "fields": ",".join(self.fields),
                "expand": "changelog"
            }
        )
        return self._complete_changelog(issue)

    def search_issues(self, jql: str, max_results: int = 100) -> Iterator[dict]:
        """Yield every issue matching a JQL query, one page at a time.

        Pages may hold fewer issues than requested, so paging follows the
        reported ``total``; the short-page check applies only without one.
        """
        start_at = 0

        while True:
            logger.debug(f"Searching '{jql}' startAt={start_at}")
            data = self._request(
                "/search",
                params={
                    "jql": jql,
                    "startAt": start_at,
                    "maxResults": max_results,
                    "fields": ",".join(self.fields),
                    "expand": "changelog"
                }
            )

            issues = data.get("issues", [])
            for issue in issues:
                yield self._complete_changelog(issue)

            start_at += len(issues)
            total = data.get("total")
            if not issues:
                break
            if total is not None:
                if start_at >= total:
                    break
            elif len(issues) < max_results:
                break

    def search_updated(self, project: str, start: date, end: date) -> Iterator[dict]:
        """Yield issues in a project updated within [start, end).

        Jira evaluates the dates in the authenticated user's time zone.
        """
        jql = (
            f'project = "{project}" AND updated >= "{start.isoformat()}" '
            f'AND updated < "{end.isoformat()}"'
        )
        return self.search_issues(jql)
