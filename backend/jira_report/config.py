"""Connection settings lookup.

Each setting is read from the environment first, then from the local
credentials file, then from ``git config``.
"""

import json
import logging
import os
import subprocess

from services.jira_client import DEFAULT_ESTIMATE_FIELD

logger = logging.getLogger(__name__)

# Same location the credentials API used; backend/config/ is gitignored
CREDENTIALS_FILE = os.path.join(
    os.path.dirname(os.path.dirname(__file__)),
    "config",
    "credentials.json"
)

# setting name -> (environment variable, credentials file key, git config key, description)
SETTINGS = {
    "server": ("JIRA_SITE", "server", "jira.site", "url"),
    "email": ("JIRA_USER", "email", "jira.user", "username"),
    "token": ("JIRA_PASSWORD", "token", "jira.password", "password"),
}


class ConfigurationError(Exception):
    """A required connection setting could not be found."""

    def __init__(self, setting: str, git_key: str, description: str):
        self.setting = setting
        self.git_key = git_key
        self.description = description
        super().__init__(
            f"I don't know your Jira API {description}!\n"
            f"Please set it with:\n"
            f"  $ git config {git_key} <{description}>"
        )


def _load_credentials(path: str) -> dict:
    """Load the ``jira`` section of a credentials file."""
    if not path or not os.path.exists(path):
        return {}
    try:
        with open(path, "r") as f:
            return json.load(f).get("jira") or {}
    except (json.JSONDecodeError, IOError) as e:
        logger.warning(f"Failed to load credentials from {path}: {e}")
        return {}


def git_setting(key: str) -> str:
    """Return a ``git config`` value, or an empty string when unset."""
    try:
        result = subprocess.run(
            ["git", "config", key],
            capture_output=True,
            text=True,
            check=False
        )
    except OSError:
        return ""
    return result.stdout.strip()


def load_settings(credentials_path: str = CREDENTIALS_FILE, environ=None) -> dict:
    """Resolve Jira connection settings.

    Returns a dict with ``server``, ``email``, ``token`` and
    ``estimate_field``. Raises ConfigurationError for the first required
    setting that has no value anywhere.
    """
    environ = os.environ if environ is None else environ
    credentials = _load_credentials(credentials_path)
    settings = {}

    for name, (env_var, file_key, git_key, description) in SETTINGS.items():
        value = environ.get(env_var) or credentials.get(file_key) or git_setting(git_key)
        if not value:
            raise ConfigurationError(name, git_key, description)
        settings[name] = value

    settings["estimate_field"] = (
        environ.get("JIRA_ESTIMATE_FIELD")
        or credentials.get("estimateField")
        or DEFAULT_ESTIMATE_FIELD
    )
    return settings
