"""Colored console logging for report runs."""

import logging
import sys

RESET = "\033[0m"
LEVEL_COLORS = {
    logging.DEBUG: RESET,
    logging.INFO: "\033[32m",
    logging.WARNING: "\033[33m",
    logging.ERROR: "\033[31m",
    logging.CRITICAL: "\033[31m",
}


class ColorFormatter(logging.Formatter):
    """Wraps each formatted record in its level's ANSI color."""

    def format(self, record):
        message = super().format(record)
        color = LEVEL_COLORS.get(record.levelno, RESET)
        return f"{color}{message}{RESET}"


def configure_logging(verbose: bool = False, stream=None) -> logging.Logger:
    """Send ``jira_report`` and ``services`` logs to stderr in color."""
    handler = logging.StreamHandler(stream or sys.stderr)
    handler.setFormatter(ColorFormatter("%(message)s"))
    level = logging.DEBUG if verbose else logging.INFO

    for name in ("jira_report", "services"):
        logger = logging.getLogger(name)
        logger.handlers = [handler]
        logger.setLevel(level)
        logger.propagate = False

    return logging.getLogger("jira_report")
