"""Shared pytest fixtures for the incident report tests."""

import sys
from pathlib import Path
from unittest.mock import MagicMock

import pytest

# Ensure project root is on sys.path (flat module layout)
BASE_DIR = Path(__file__).resolve().parent.parent
if str(BASE_DIR) not in sys.path:
    sys.path.insert(0, str(BASE_DIR))

from models import Alert, Incident, PagerDutyCredentials  # noqa: E402


def incident_payload(**overrides):
    """A PagerDuty incident as returned by GET /incidents."""
    payload = {
        "id": "PINC001",
        "type": "incident",
        "incident_number": 1234,
        "title": "High CPU on web-01",
        "status": "triggered",
        "created_at": "2026-10-18T08:00:00Z",
        "urgency": "high",
        "priority": None,
        "service": {"id": "PSVC001", "type": "service_reference", "summary": "Checkout API"},
        "teams": [{"id": "PTEAM01", "type": "team_reference", "summary": "Platform"}],
        "assignments": [
            {"at": "2026-10-18T08:00:01Z",
             "assignee": {"id": "PUSER01", "type": "user_reference", "summary": "Dana Lee"}},
        ],
    }
    payload.update(overrides)
    return payload


def make_incident(**overrides) -> Incident:
    return Incident.model_validate(incident_payload(**overrides))


def make_alert(summary: str, body=None, alert_id: str = "PALERT1") -> Alert:
    return Alert(id=alert_id, summary=summary, body=body or {})


def unhealthy_host_body(value: str = ".../my-tg/xyz", region: str = "Ireland", threshold=3):
    return {
        "details": {
            "AlarmName": "UnhealthyHostCount-my-tg",
            "Region": region,
            "NewStateReason": "Threshold Crossed",
            "Trigger": {
                "Dimensions": [{"name": "TargetGroup", "value": value}],
                "Threshold": threshold,
            },
        }
    }


@pytest.fixture
def credentials():
    return PagerDutyCredentials(api_key="u+test-token", email="oncall@example.com")


@pytest.fixture
def mock_client():
    """Stand-in for pagerduty.RestApiV2Client."""
    client = MagicMock()
    client.jget.return_value = {"incidents": [], "more": False}
    client.iter_all.return_value = []
    return client


@pytest.fixture
def clean_env(monkeypatch):
    """Removes the PagerDuty variables for the test and restores them afterwards."""
    for name in ("PAGERDUTY_API_KEY", "PAGERDUTY_EMAIL"):
        monkeypatch.setenv(name, "")
        monkeypatch.delenv(name)
    return monkeypatch
