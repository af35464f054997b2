# report_printer.py

import logging
from typing import Sequence

from alarm_parser import AlarmParser
from command_builder import DiagnosticCommandBuilder
from models import FilterCriteria, Incident, IncidentStatus
from pagerduty_handler import PagerDutyHandler

logger = logging.getLogger(__name__)

SEPARATOR = "-" * 40
RULE = "─" * 60

STATUS_GLYPHS = {
    IncidentStatus.TRIGGERED: "🔴",
    IncidentStatus.ACKNOWLEDGED: "⚠️",
    IncidentStatus.RESOLVED: "✅",
}


class ReportPrinter:
    """
    Prints the human-readable incident report to stdout.
    Alarm details are looked up per printed incident, one incident at a time.
    """
    def __init__(
        self,
        handler: PagerDutyHandler,
        alarm_parser: AlarmParser,
        command_builder: DiagnosticCommandBuilder,
    ):
        self.handler = handler
        self.alarm_parser = alarm_parser
        self.command_builder = command_builder

    def print_header(self, criteria: FilterCriteria) -> None:
        print(f"\nFetching incidents for the last {criteria.hours} hours...")
        print(f"Service filter: {criteria.service}")
        print(f"Team filter: {criteria.team}")
        print(f"Status filter: {criteria.status}")
        print(SEPARATOR)

    def format_incident(self, incident: Incident) -> str:
        """Formats the fixed part of an incident block (everything except alarm details)."""
        lines = [
            RULE,
            f"{STATUS_GLYPHS[incident.status]} Incident: #{incident.incident_number}",
            f"📌 Status: {incident.status.value} | ⏰ Created: {incident.created_at}",
        ]
        if incident.resolved_at:
            lines.append(f"✅ Resolved: {incident.resolved_at}")
        lines.append(f"📚 Title: {incident.title}")
        lines.append(f"📌 Service: {incident.service_name}")
        if incident.teams:
            lines.append(f"👥 Teams: {', '.join(incident.team_names)}")
        lines.append(f"👤 Assignee(s): {', '.join(incident.assignee_names) or 'None'}")
        if incident.urgency:
            lines.append(f"⚡ Urgency: {incident.urgency}")
        if incident.priority is not None:
            lines.append(f"🎯 Priority: {incident.priority.summary}")
        return "\n".join(lines)

    def print_incident(self, incident: Incident) -> None:
        print(self.format_incident(incident))

        summary, alarm = self.alarm_parser.extract_for_incident(self.handler, incident)
        if not summary:
            return
        print(f"🌐 {summary}")
        command = self.command_builder.build_command(incident.title, alarm)
        if command:
            print(command)

    def print_report(self, incidents: Sequence[Incident], criteria: FilterCriteria) -> int:
        """
        Prints every incident that passes the service/team filters, in fetched order.

        Returns:
            The number of incidents printed.
        """
        print(f"Total incidents found: {len(incidents)}")
        print(SEPARATOR)

        printed = 0
        for incident in incidents:
            if not criteria.matches(incident):
                logger.debug(f"Incident {incident.id} filtered out (service='{incident.service_name}', teams={incident.team_names})")
                continue
            self.print_incident(incident)
            printed += 1

        logger.info(f"Printed {printed} of {len(incidents)} incident(s).")
        return printed
