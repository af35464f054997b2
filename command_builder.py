# command_builder.py

from typing import Optional

from models import CloudAlarm, ReportSettings
from region_normalizer import build_alias_table, normalize_region

COMMAND_HEADER = "\n💻 AWS CLI Command:\n"

TARGET_HEALTH_COMMAND = (
    "aws elbv2 describe-target-health --target-group-arn "
    "$(aws elbv2 describe-target-groups --names {target_group} "
    "--query 'TargetGroups[].TargetGroupArn' --region {region} --profile {profile} --output text) "
    "--query 'TargetHealthDescriptions[?TargetHealth.State==unhealthy].Target.Id' "
    "--region {region} --profile {profile} --output text"
)

GENERIC_COMMAND = "aws elbv2 describe-target-groups --profile {profile} | grep -A 5 'TargetGroupName'"


class DiagnosticCommandBuilder:
    """
    Builds an AWS CLI command for listing unhealthy targets behind an alarm's target group.
    """
    def __init__(self, settings: Optional[ReportSettings] = None):
        self.settings = settings or ReportSettings()
        self.region_aliases = build_alias_table(self.settings.region_aliases)

    def _target_group_name(self, alarm: CloudAlarm) -> Optional[str]:
        """
        Short target group name from the target dimension, e.g.
        "targetgroup/my-tg/abc123" -> "my-tg". None when absent or unsplittable.
        """
        wanted = self.settings.target_dimension.lower()
        value = ""
        for dim in alarm.dimensions:
            if dim.name.lower() == wanted:
                value = dim.value
        parts = value.split("/") if value else []
        if len(parts) >= 2:
            return parts[1]
        return None

    def build_command(self, incident_title: str, alarm: Optional[CloudAlarm]) -> str:
        """
        Returns the command text to print under the incident, or "" when none applies.

        A command applies only when the title contains the title keyword and an
        alarm was extracted. Without a usable target group dimension the generic
        listing command is returned instead of the parameterized one.
        """
        if alarm is None or self.settings.title_keyword.lower() not in incident_title.lower():
            return ""

        profile = self.settings.aws_profile
        target_group = self._target_group_name(alarm)
        if target_group:
            region = normalize_region(alarm.region, self.region_aliases, self.settings.default_region)
            return COMMAND_HEADER + TARGET_HEALTH_COMMAND.format(
                target_group=target_group, region=region, profile=profile
            )
        return COMMAND_HEADER + GENERIC_COMMAND.format(profile=profile)
