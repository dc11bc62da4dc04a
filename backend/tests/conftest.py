"""Shared fixtures for cycle report tests."""

import os
import sys
from unittest.mock import Mock

import pytest
import requests

sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

from services.jira_client import JiraClient


def make_issue(key, transitions=(), assignee="dev@example.com", estimate=None,
               parent=None, subtasks=(), labels=()):
    """Build a Jira issue payload.

    ``transitions`` is a sequence of (created, toString) pairs.
    """
    fields = {
        "summary": f"Summary of {key}",
        "assignee": {"emailAddress": assignee} if assignee else None,
        "labels": list(labels),
        "subtasks": [{"key": child} for child in subtasks],
        "customfield_10008": estimate,
    }
    if parent:
        fields["parent"] = {"key": parent}

    return {
        "key": key,
        "fields": fields,
        "changelog": {
            "histories": [
                {
                    "created": created,
                    "items": [{"field": "status", "fromString": None, "toString": status}]
                }
                for created, status in transitions
            ]
        }
    }


@pytest.fixture
def issue_factory():
    """Factory for Jira issue payloads."""
    return make_issue


@pytest.fixture
def mock_jira_credentials():
    """Mock Jira credentials for testing."""
    return {
        "server": "https://test.atlassian.net",
        "email": "test@example.com",
        "token": "test-token-123"
    }


@pytest.fixture
def sample_histories():
    """Status history deliberately out of chronological order."""
    return [
        {
            "created": "2024-01-05T14:00:00.000+0000",
            "items": [{"field": "status", "fromString": "In Progress", "toString": "Closed"}]
        },
        {
            "created": "2024-01-03T10:00:00.000+0000",
            "items": [
                {"field": "assignee", "fromString": None, "toString": "Dev"},
                {"field": "status", "fromString": "To Do", "toString": "In Progress"}
            ]
        },
        {
            "created": "2024-01-02T09:00:00.000+0000",
            "items": [{"field": "resolution", "fromString": None, "toString": "In Progress"}]
        },
        {
            "created": "2024-01-04T11:00:00.000+0000",
            "items": [{"field": "status", "fromString": "Closed", "toString": "In Progress"}]
        }
    ]


@pytest.fixture
def closed_issue():
    """Closed story worked Monday 10:00 to Tuesday 12:00 UTC."""
    return make_issue(
        "PROJ-1",
        transitions=[
            ("2024-01-01T10:00:00.000+0000", "In Progress"),
            ("2024-01-02T12:00:00.000+0000", "Closed"),
        ],
        estimate=3,
        labels=["backend", "api"]
    )


@pytest.fixture
def open_issue():
    """Story that was started but never closed."""
    return make_issue(
        "PROJ-2",
        transitions=[("2024-01-01T10:00:00.000+0000", "In Progress")],
        estimate=2
    )


@pytest.fixture
def fake_client():
    """Jira client double serving issues from in-memory data.

    Populate ``fake_client.issues`` (key -> issue) for lookups and
    ``fake_client.updated`` ((project, day) -> [issue]) for searches.
    """
    client = Mock(spec=JiraClient)
    client.issues = {}
    client.updated = {}

    def get_issue(key):
        if key not in client.issues:
            response = Mock(status_code=404)
            raise requests.exceptions.HTTPError(f"404 Client Error: {key}", response=response)
        return client.issues[key]

    def search_updated(project, start, end):
        return iter(client.updated.get((project, start), []))

    client.get_issue.side_effect = get_issue
    client.search_updated.side_effect = search_updated
    return client
