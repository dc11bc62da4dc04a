"""Run-scoped cache of Story objects keyed by issue key."""

from datetime import date, timedelta
from typing import Iterator
import logging

from services.jira_client import DEFAULT_ESTIMATE_FIELD
from services.story import Story

logger = logging.getLogger(__name__)


class StoryRepository:
    """Looks up stories by key and discovers them through day-window searches.

    Every Story handed out is cached under its key so that parent and child
    references resolve to one shared instance, and each key is fetched from
    Jira at most once unless a later search returns a fresher copy.
    """

    def __init__(self, client, estimate_field: str = DEFAULT_ESTIMATE_FIELD):
        self._client = client
        self._estimate_field = estimate_field
        self._stories = {}

    def __contains__(self, ref: str) -> bool:
        return ref in self._stories

    def __len__(self) -> int:
        return len(self._stories)

    def _wrap(self, issue: dict) -> Story:
        return Story(issue, self, estimate_field=self._estimate_field)

    def find_by_key(self, ref: str) -> Story:
        """Return the cached Story for ``ref``, fetching it on first use.

        Fetch errors propagate and leave the cache untouched.
        """
        story = self._stories.get(ref)
        if story is None:
            logger.debug(f"Cache miss for {ref}")
            story = self._wrap(self._client.get_issue(ref))
            self._stories[ref] = story
        return story

    def search(self, project: str, day: date) -> Iterator[Story]:
        """Yield stories in ``project`` updated on ``day``.

        Each result replaces any cached Story for the same key.
        """
        for issue in self._client.search_updated(project, day, day + timedelta(days=1)):
            story = self._wrap(issue)
            self._stories[story.ref] = story
            yield story
