# alarm_parser.py

import json
import logging
from typing import Any, Dict, Optional, Sequence, Tuple

from pydantic import ValidationError

from models import Alert, CloudAlarm, Incident, ReportSettings
from pagerduty_handler import AlertFetchError, PagerDutyHandler

logger = logging.getLogger(__name__)

# Where the CloudWatch payload may sit inside an alert body, in priority order.
# An empty key means "the body itself".
DETAIL_KEYS: Tuple[str, ...] = ("details", "custom_details", "")


class AlarmParser:
    """
    Extracts CloudWatch alarm details from the alerts attached to an incident.
    """
    def __init__(self, settings: Optional[ReportSettings] = None):
        self.settings = settings or ReportSettings()

    def _resolve_details(self, body: Dict[str, Any]) -> Dict[str, Any]:
        """Returns the first mapping found under DETAIL_KEYS."""
        for key in DETAIL_KEYS:
            candidate = body.get(key) if key else body
            if isinstance(candidate, dict):
                return candidate
        return body

    def _decode_alarm(self, alert: Alert) -> Optional[CloudAlarm]:
        """Re-encodes the alert's detail mapping and decodes it as a CloudAlarm. None on failure."""
        details = self._resolve_details(alert.body)
        try:
            data = json.dumps(details)
        except (TypeError, ValueError) as e:
            logger.warning(f"Alert {alert.id}: failed to encode details: {e}")
            return None
        try:
            return CloudAlarm.model_validate_json(data)
        except ValidationError as e:
            logger.warning(f"Alert {alert.id}: failed to decode alarm: {e}")
            return None

    def extract_alarm(self, alerts: Sequence[Alert]) -> Tuple[str, Optional[CloudAlarm]]:
        """
        Finds the first alert whose summary mentions the alarm keyword and decodes its payload.

        Alerts whose payload does not decode are skipped and the scan goes on.

        Returns:
            A tuple (summary_text, alarm); ("", None) when no alert yields an alarm.
        """
        keyword = self.settings.alarm_keyword.lower()
        for alert in alerts:
            if keyword not in alert.summary.lower():
                continue
            alarm = self._decode_alarm(alert)
            if alarm is None:
                continue
            logger.debug(f"Alert {alert.id}: decoded alarm '{alarm.alarm_name}' in region '{alarm.region}'")
            return alarm.dimensions_summary(), alarm
        return "", None

    def extract_for_incident(
        self, handler: PagerDutyHandler, incident: Incident
    ) -> Tuple[str, Optional[CloudAlarm]]:
        """Lists the incident's alerts and extracts the alarm. Listing failures yield ("", None)."""
        try:
            alerts = handler.list_incident_alerts(incident.id)
        except AlertFetchError as e:
            logger.error(f"Incident {incident.id}: {e}")
            return "", None
        return self.extract_alarm(alerts)
