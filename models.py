# models.py

from enum import Enum
from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

ALL = "all"  # Filter sentinel meaning "do not filter on this field"


class IncidentStatus(str, Enum):
    TRIGGERED = "triggered"
    ACKNOWLEDGED = "acknowledged"
    RESOLVED = "resolved"


class Reference(BaseModel):
    """A PagerDuty reference object (service, team, user, priority...)."""
    model_config = ConfigDict(frozen=True)

    id: str = ""
    summary: str = ""


class Assignment(BaseModel):
    model_config = ConfigDict(frozen=True)

    assignee: Reference = Field(default_factory=Reference)


class Incident(BaseModel):
    """
    Snapshot of one PagerDuty incident as returned by the incident-list endpoint.
    Only the fields the report needs are modelled; anything else in the payload is ignored.
    """
    model_config = ConfigDict(frozen=True)

    id: str = Field(..., description="PagerDuty incident ID, e.g. 'Q1ABCDEF2GHIJK'")
    incident_number: int = Field(..., description="Human-facing incident number")
    title: str = Field("", description="Incident title, usually the alarm name")
    status: IncidentStatus
    created_at: str = Field("", description="Creation timestamp as sent by PagerDuty")
    resolved_at: Optional[str] = Field(None, description="Resolution timestamp, if resolved")
    urgency: str = ""
    priority: Optional[Reference] = None
    service: Reference = Field(default_factory=Reference)
    teams: List[Reference] = Field(default_factory=list)
    assignments: List[Assignment] = Field(default_factory=list)

    @field_validator("title", "created_at", "urgency", mode="before")
    @classmethod
    def _none_to_empty(cls, value: Any) -> Any:
        return "" if value is None else value

    @field_validator("teams", "assignments", mode="before")
    @classmethod
    def _none_to_list(cls, value: Any) -> Any:
        return [] if value is None else value

    @property
    def service_name(self) -> str:
        return self.service.summary

    @property
    def team_names(self) -> List[str]:
        return [team.summary for team in self.teams]

    @property
    def assignee_names(self) -> List[str]:
        return [assignment.assignee.summary for assignment in self.assignments]


class Alert(BaseModel):
    """One alert attached to an incident. `body` is the provider-specific payload."""
    model_config = ConfigDict(frozen=True)

    id: str = ""
    summary: str = ""
    body: Dict[str, Any] = Field(default_factory=dict)

    @field_validator("summary", mode="before")
    @classmethod
    def _none_to_empty(cls, value: Any) -> Any:
        return "" if value is None else value

    @field_validator("body", mode="before")
    @classmethod
    def _none_to_dict(cls, value: Any) -> Any:
        return {} if value is None else value


class AlarmPayloadModel(BaseModel):
    """
    Base for models decoded from CloudWatch alarm payloads. Keys are matched
    case-insensitively ("alarmName" fills AlarmName); an exact key takes precedence.
    """
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    @model_validator(mode="before")
    @classmethod
    def _fold_key_case(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data
        by_lower = {}
        for name, field in cls.model_fields.items():
            key = field.alias or name
            by_lower[key.lower()] = key
        folded = dict(data)
        for key, value in data.items():
            if not isinstance(key, str):
                continue
            target = by_lower.get(key.lower())
            if target and target != key and target not in data:
                folded.pop(key)
                folded.setdefault(target, value)
        return folded


class Dimension(AlarmPayloadModel):
    name: str = ""
    value: str = ""

    @field_validator("name", "value", mode="before")
    @classmethod
    def _none_to_empty(cls, value: Any) -> Any:
        return "" if value is None else value


class AlarmTrigger(AlarmPayloadModel):
    dimensions: List[Dimension] = Field(default_factory=list, alias="Dimensions")
    threshold: float = Field(0.0, alias="Threshold")

    @field_validator("dimensions", mode="before")
    @classmethod
    def _none_to_list(cls, value: Any) -> Any:
        return [] if value is None else value

    @field_validator("threshold", mode="before")
    @classmethod
    def _none_to_zero(cls, value: Any) -> Any:
        return 0.0 if value is None else value


class CloudAlarm(AlarmPayloadModel):
    """
    The subset of a CloudWatch alarm notification needed for the report.
    Built from one alert's detail payload; missing fields take zero values.
    """
    alarm_name: str = Field("", alias="AlarmName")
    region: str = Field("", alias="Region", description="Console region name, not yet normalized")
    new_state_reason: str = Field("", alias="NewStateReason")
    trigger: AlarmTrigger = Field(default_factory=AlarmTrigger, alias="Trigger")

    @field_validator("alarm_name", "region", "new_state_reason", mode="before")
    @classmethod
    def _none_to_empty(cls, value: Any) -> Any:
        return "" if value is None else value

    @field_validator("trigger", mode="before")
    @classmethod
    def _none_to_trigger(cls, value: Any) -> Any:
        return {} if value is None else value

    @property
    def dimensions(self) -> List[Dimension]:
        return self.trigger.dimensions

    @property
    def threshold(self) -> float:
        return self.trigger.threshold

    def dimensions_summary(self) -> str:
        """Render the one-line dimension summary shown under an incident."""
        dims = ", ".join(f"{dim.name}: {dim.value}" for dim in self.dimensions)
        return f"AWS Dimensions: {dims} (Threshold: {self.threshold:.2f})"


class FilterCriteria(BaseModel):
    """Run-wide report filters, taken from the command line once at startup."""
    model_config = ConfigDict(frozen=True)

    hours: int = Field(24, gt=0, description="Look-back window in hours")
    service: str = Field(ALL, description="Service name filter, or 'all'")
    team: str = Field(ALL, description="Team name filter, or 'all'")
    status: Literal["triggered", "acknowledged", "resolved", "all"] = ALL

    @property
    def statuses(self) -> List[str]:
        """Statuses to request from PagerDuty."""
        if self.status == ALL:
            return [status.value for status in IncidentStatus]
        return [self.status]

    def matches(self, incident: Incident) -> bool:
        """
        Client-side service/team filter. Only the exact sentinel "all" disables a filter;
        names are compared case-insensitively.
        """
        if self.service != ALL and self.service.lower() != incident.service_name.lower():
            return False
        if self.team != ALL:
            wanted = self.team.lower()
            if not any(name.lower() == wanted for name in incident.team_names):
                return False
        return True


class ReportSettings(BaseModel):
    """
    Tunables for alarm extraction and command synthesis.
    Defaults are the values the tool ships with; config.ini may override them.
    """
    model_config = ConfigDict(frozen=True)

    page_size: int = Field(100, gt=0, le=100, description="Incidents requested per page (PagerDuty caps at 100)")
    alarm_keyword: str = Field("unhealthyhostcount", description="Alert summary substring that marks a CloudWatch alarm")
    title_keyword: str = Field("unhealthyhostcount", description="Incident title substring that enables the CLI command")
    target_dimension: str = Field("TargetGroup", description="Alarm dimension holding the target group ARN suffix")
    aws_profile: str = Field("kashxa", description="AWS CLI profile embedded in generated commands")
    default_region: str = Field("eu-west-1", description="Region used when the alarm's region is not recognised")
    region_aliases: Dict[str, str] = Field(default_factory=dict, description="Extra region aliases, lower-cased")


class PagerDutyCredentials(BaseModel):
    model_config = ConfigDict(frozen=True)

    api_key: str = Field(..., min_length=1)
    email: str = Field(..., min_length=1)
