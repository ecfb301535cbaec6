"""
Provider metadata for the restriction authenticators.

Describes each authenticator to the host's admin console: its id, display
text, the requirement levels it may be configured with and the properties
an administrator can set.
"""

from typing import List, Optional

from pydantic import BaseModel, Field

from . import config as keys
from .schedule.models import DEFAULT_ALLOWED_DAYS, DEFAULT_END_TIME, DEFAULT_START_TIME, DEFAULT_TIMEZONE

STRING_TYPE = "String"
BOOLEAN_TYPE = "boolean"
MULTIVALUED_STRING_TYPE = "MultivaluedString"

REQUIREMENT_CHOICES = ["REQUIRED", "ALTERNATIVE", "DISABLED"]


class ConfigProperty(BaseModel):
    """A single administrator-editable setting."""

    name: str
    label: str
    type: str = STRING_TYPE
    default_value: Optional[str] = None
    help_text: str = ""


class ProviderMetadata(BaseModel):
    """Static description of an authenticator provider."""

    provider_id: str
    display_type: str
    help_text: str
    reference_category: str
    configurable: bool = True
    user_setup_allowed: bool = False
    requires_user: bool = False
    requirement_choices: List[str] = Field(default_factory=lambda: list(REQUIREMENT_CHOICES))
    properties: List[ConfigProperty] = Field(default_factory=list)


IP_RESTRICTION_PROVIDER = ProviderMetadata(
    provider_id="ip-restriction-authenticator",
    display_type="IP Restriction",
    help_text="Restricts access based on client IP address. Supports allow (+) and deny (-) rules with CIDR notation.",
    reference_category="ip-restriction",
    requires_user=False,
    properties=[
        ConfigProperty(
            name=keys.IP_RULES,
            label="IP Rules",
            type=MULTIVALUED_STRING_TYPE,
            default_value=keys.DEFAULT_IP_RULES,
            help_text=(
                "IP rules, one per entry. Prefix with + to allow or - to deny. "
                "Supports single IPs (+192.168.1.1) and CIDR (-10.0.0.0/8). "
                "Deny rules win over allow rules."
            ),
        ),
        ConfigProperty(
            name=keys.CHECK_X_FORWARDED_FOR,
            label="Check X-Forwarded-For",
            type=BOOLEAN_TYPE,
            default_value=keys.DEFAULT_CHECK_X_FORWARDED_FOR,
            help_text="Use the first address of the X-Forwarded-For header when behind a proxy or load balancer.",
        ),
        ConfigProperty(
            name=keys.ERROR_MESSAGE_BLOCKED,
            label="Blocked Error Message",
            default_value=keys.DEFAULT_ERROR_MESSAGE_BLOCKED,
            help_text="Message shown when an IP matches a deny rule.",
        ),
        ConfigProperty(
            name=keys.ERROR_MESSAGE_NOT_ALLOWED,
            label="Not Allowed Error Message",
            default_value=keys.DEFAULT_ERROR_MESSAGE_NOT_ALLOWED,
            help_text="Message shown when allow rules exist and the IP matches none of them.",
        ),
    ],
)


TIME_RESTRICTION_PROVIDER = ProviderMetadata(
    provider_id="time-restriction-authenticator",
    display_type="Time Restriction",
    help_text="Restricts login to specific days of the week and hours of the day.",
    reference_category="time-restriction",
    requires_user=True,
    properties=[
        ConfigProperty(
            name=keys.TIMEZONE,
            label="Timezone",
            default_value=DEFAULT_TIMEZONE,
            help_text="Timezone for time restriction (e.g., UTC, America/New_York, Europe/London)",
        ),
        ConfigProperty(
            name=keys.ALLOWED_DAYS,
            label="Allowed Days",
            default_value=DEFAULT_ALLOWED_DAYS,
            help_text="Comma-separated list of allowed days (MONDAY,TUESDAY,WEDNESDAY,THURSDAY,FRIDAY,SATURDAY,SUNDAY)",
        ),
        ConfigProperty(
            name=keys.START_TIME,
            label="Start Time",
            default_value=DEFAULT_START_TIME,
            help_text="Start time in HH:mm format (e.g., 09:00)",
        ),
        ConfigProperty(
            name=keys.END_TIME,
            label="End Time",
            default_value=DEFAULT_END_TIME,
            help_text="End time in HH:mm format (e.g., 17:00). Can be before start time for overnight ranges.",
        ),
        ConfigProperty(
            name=keys.ERROR_MESSAGE,
            label="Error Message",
            default_value=keys.DEFAULT_ERROR_MESSAGE,
            help_text="Message to display when access is denied",
        ),
    ],
)
