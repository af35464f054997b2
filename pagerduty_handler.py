# pagerduty_handler.py

import logging
from datetime import datetime
from typing import Any, Dict, Iterable, List, Optional

import pagerduty # python-pagerduty: REST API v2 client
from pydantic import ValidationError

from models import Alert, Incident, PagerDutyCredentials, ReportSettings

logger = logging.getLogger(__name__)


class PagerDutyHandlerError(Exception):
    """Base class for errors talking to PagerDuty."""


class IncidentFetchError(PagerDutyHandlerError):
    """A page of the incident listing could not be fetched or parsed. Fatal for the run."""


class AlertFetchError(PagerDutyHandlerError):
    """The alerts of a single incident could not be listed. Recoverable."""


class PagerDutyHandler:
    """
    Read-only access to the PagerDuty REST API v2: paginated incident listing
    and per-incident alert listing.
    """
    def __init__(
        self,
        credentials: PagerDutyCredentials,
        settings: Optional[ReportSettings] = None,
        client: Optional[pagerduty.RestApiV2Client] = None,
    ):
        self.settings = settings or ReportSettings()
        # `client` is injectable so tests can substitute a mock session.
        self.client = client or self._build_client(credentials)

    @staticmethod
    def _build_client(credentials: PagerDutyCredentials) -> pagerduty.RestApiV2Client:
        """A client that gives up on the first failure instead of retrying."""
        client = pagerduty.RestApiV2Client(credentials.api_key, default_from=str(credentials.email))
        client.max_network_attempts = 1
        # 429 is otherwise retried with backoff indefinitely.
        client.retry = {429: 0}
        return client

    def fetch_all(self, since: datetime, until: datetime, statuses: Iterable[str]) -> List[Incident]:
        """
        Fetches every incident in [since, until] with one of `statuses`, page by page.

        Pages are requested with a fixed page size and concatenated in fetch order
        until PagerDuty reports `more: false`. There is no retry: the first failed
        page aborts the whole listing.

        Raises:
            IncidentFetchError: a page request failed or returned malformed incidents.
        """
        limit = self.settings.page_size
        params: Dict[str, Any] = {
            'since': since.isoformat(timespec='seconds'),
            'until': until.isoformat(timespec='seconds'),
            'statuses[]': list(statuses),
            'limit': limit,
            'offset': 0,
            'total': 'true',
        }

        all_incidents: List[Incident] = []
        while True:
            logger.debug(f"Requesting incidents page: offset={params['offset']}, limit={limit}")
            try:
                page = self.client.jget('incidents', params=dict(params))
            except pagerduty.Error as e:
                logger.error(f"PagerDuty API error listing incidents at offset {params['offset']}: {e}")
                raise IncidentFetchError(f"Failed to retrieve incidents: {e}") from e

            try:
                incidents = [Incident.model_validate(raw) for raw in page.get('incidents') or []]
            except ValidationError as e:
                logger.error(f"Malformed incident in page at offset {params['offset']}: {e}")
                raise IncidentFetchError(f"Failed to parse incidents: {e}") from e

            all_incidents.extend(incidents)
            logger.debug(
                f"Fetched {len(incidents)} incident(s) (running total {len(all_incidents)}, "
                f"reported total {page.get('total')})"
            )

            if not page.get('more'):
                break
            params['offset'] += limit

        logger.info(f"Retrieved {len(all_incidents)} incident(s) from PagerDuty.")
        return all_incidents

    def list_incident_alerts(self, incident_id: str) -> List[Alert]:
        """
        Lists all alerts of one incident.

        Raises:
            AlertFetchError: the request failed or an alert could not be parsed.
        """
        try:
            raw_alerts = list(self.client.iter_all(f'incidents/{incident_id}/alerts'))
            return [Alert.model_validate(raw) for raw in raw_alerts]
        except pagerduty.Error as e:
            raise AlertFetchError(f"failed to list alerts for incident {incident_id}: {e}") from e
        except ValidationError as e:
            raise AlertFetchError(f"malformed alert in incident {incident_id}: {e}") from e
