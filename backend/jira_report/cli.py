"""Command line entry point for the cycle time report."""

import argparse
import sys
from datetime import date

from jira_report import create_report
from jira_report.config import CREDENTIALS_FILE, ConfigurationError, load_settings
from jira_report.logger import configure_logging
from services.cycle_time_report import REPORT_START_DATE
from services.report_writer import ReportWriter


def parse_args(argv=None):
    parser = argparse.ArgumentParser(
        description="Export Jira cycle times and estimates to CSV"
    )
    parser.add_argument("projects", nargs="+", metavar="PROJECT",
                        help="Jira project keys to report on")
    parser.add_argument("--output", default="report.csv",
                        help="CSV file to write (default: report.csv)")
    parser.add_argument("--no-labels", dest="labels", action="store_false",
                        help="Omit the Labels column")
    parser.add_argument("--credentials", default=CREDENTIALS_FILE,
                        help="Credentials JSON file with a 'jira' section")
    parser.add_argument("--start-date", type=date.fromisoformat, default=REPORT_START_DATE,
                        help="First day to scan (default: 2016-01-01)")
    parser.add_argument("--verbose", action="store_true",
                        help="Log debug output")
    return parser.parse_args(argv)


def main(argv=None) -> int:
    args = parse_args(argv)
    logger = configure_logging(args.verbose)

    try:
        settings = load_settings(args.credentials)
    except ConfigurationError as e:
        logger.error(str(e))
        return 1

    try:
        with ReportWriter(args.output, include_labels=args.labels) as writer:
            report = create_report(
                settings,
                writer,
                start_date=args.start_date,
                include_labels=args.labels,
                logger=logger
            )
            rows = report.run(args.projects)
    except Exception as e:
        logger.error(f"Aborting ({type(e).__name__}: {e})")
        logger.debug("Traceback:", exc_info=True)
        return 1

    logger.info(f"Wrote {rows} rows to {args.output}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
