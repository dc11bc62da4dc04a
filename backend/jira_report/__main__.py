import sys

from jira_report.cli import main

sys.exit(main())
