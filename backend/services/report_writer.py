"""Incremental CSV output for the cycle time report."""

import csv
import logging

logger = logging.getLogger(__name__)

HEADER = [
    "Project", "Issue", "User", "Started At", "Completed At",
    "Week", "Estimate", "Duration"
]
LABELS_COLUMN = "Labels"


class ReportWriter:
    """Writes report rows to a CSV file, flushing after each row.

    The file is truncated when opened so a run never appends to an older
    report.
    """

    def __init__(self, path, include_labels: bool = True):
        self.path = path
        self.include_labels = include_labels
        self.header = HEADER + [LABELS_COLUMN] if include_labels else list(HEADER)
        self.rows_written = 0
        self._file = None
        self._writer = None

    def open(self):
        self._file = open(self.path, "w", newline="", encoding="utf-8")
        self._writer = csv.writer(self._file)
        self._writer.writerow(self.header)
        self._file.flush()
        logger.debug(f"Writing report to {self.path}")
        return self

    def close(self):
        if self._file is not None:
            self._file.close()
            self._file = None
            self._writer = None

    def __enter__(self):
        return self.open()

    def __exit__(self, exc_type, exc, tb):
        self.close()
        return False

    def write_row(self, row: list):
        if self._writer is None:
            raise RuntimeError("ReportWriter is not open")
        if len(row) != len(self.header):
            raise ValueError(f"Expected {len(self.header)} columns, got {len(row)}")
        self._writer.writerow(row)
        self._file.flush()
        self.rows_written += 1
