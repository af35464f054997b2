# incident_report.py

import argparse
import logging # For comprehensive logging
import sys # For sys.exit and the diagnostic stream
from datetime import datetime, timedelta, timezone
from typing import List, Optional

import pagerduty

from alarm_parser import AlarmParser
from command_builder import DiagnosticCommandBuilder
from config_manager import ConfigManager, ConfigurationError
from models import ALL, FilterCriteria, IncidentStatus
from pagerduty_handler import IncidentFetchError, PagerDutyHandler
from report_printer import ReportPrinter

LOG_FORMAT = '%(asctime)s - %(levelname)s - %(name)s - [%(module)s.%(funcName)s:%(lineno)d] - %(message)s'

logger = logging.getLogger(__name__)


def configure_logging(verbose: bool = False) -> None:
    """Diagnostics go to stderr so stdout carries only the report."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format=LOG_FORMAT,
        handlers=[logging.StreamHandler(sys.stderr)],
        force=True,
    )


class IncidentReportAgent:
    """
    Runs one report: fetch the incidents of the look-back window, filter them and print them.
    """
    def __init__(
        self,
        config: ConfigManager,
        criteria: FilterCriteria,
        client: Optional[pagerduty.RestApiV2Client] = None,
    ):
        self.config = config
        self.criteria = criteria
        settings = config.report_settings

        self.handler = PagerDutyHandler(config.credentials, settings, client=client)
        self.printer = ReportPrinter(
            self.handler,
            AlarmParser(settings),
            DiagnosticCommandBuilder(settings),
        )
        logger.debug(f"Report settings: {settings}")

    def run(self, now: Optional[datetime] = None) -> int:
        """
        Fetches, filters and prints. Returns the number of incidents printed.

        Raises:
            IncidentFetchError: any page of the incident listing failed.
        """
        until = now or datetime.now(timezone.utc)
        since = until - timedelta(hours=self.criteria.hours)

        self.printer.print_header(self.criteria)
        incidents = self.handler.fetch_all(since, until, self.criteria.statuses)
        return self.printer.print_report(incidents, self.criteria)


def _positive_int(value: str) -> int:
    try:
        hours = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid hours value: {value!r}")
    if hours <= 0:
        raise argparse.ArgumentTypeError(f"hours must be positive, got {hours}")
    return hours


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="pd-incident-report",
        description="List PagerDuty incidents, with CloudWatch alarm details and AWS CLI hints.",
    )
    parser.add_argument("--hours", type=_positive_int, default=24,
                        help="Incident look-back hours (default: 24)")
    parser.add_argument("--service", default=ALL,
                        help="Filter incidents by service (use 'all' for all services)")
    parser.add_argument("--team", default=ALL,
                        help="Filter incidents by team (use 'all' for all teams)")
    parser.add_argument("--status", default=ALL,
                        choices=[status.value for status in IncidentStatus] + [ALL],
                        help="Filter incidents by status (default: all)")
    parser.add_argument("--config", default="config.ini",
                        help="Path to the optional config.ini (default: ./config.ini)")
    parser.add_argument("--env-file", default=None,
                        help="Path to the .env file (default: ./.env)")
    parser.add_argument("--verbose", action="store_true",
                        help="Enable debug logging")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    configure_logging(args.verbose)

    try:
        config = ConfigManager(ini_file_path=args.config, env_file_path=args.env_file)
    except ConfigurationError as e:
        logger.critical(f"FATAL: {e}")
        return 1

    criteria = FilterCriteria(
        hours=args.hours, service=args.service, team=args.team, status=args.status
    )
    try:
        IncidentReportAgent(config, criteria).run()
    except IncidentFetchError as e:
        logger.critical(f"FATAL: {e}")
        return 1
    return 0


# --- Main Execution Block ---
if __name__ == "__main__":
    sys.exit(main())
