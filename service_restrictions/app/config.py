"""
Authenticator configuration for the Restrictions Service.

The host stores each authenticator's settings as a flat map of strings.
Multivalued settings arrive either as index-suffixed keys
(``ip-rules##0``, ``ip-rules##1``, ...) or as one value joined with
``##``, newlines or commas. This module turns such a map into validated
models the authenticators work with.
"""

import re
from typing import Any, Dict, List, Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from shared.config import ServiceConfig
from shared.errors import ConfigurationError
from shared.logging import get_logger
from .ip.matcher import is_valid_rule
from .ip.models import Rule
from .schedule.models import (
    Schedule, DEFAULT_TIMEZONE, DEFAULT_ALLOWED_DAYS, DEFAULT_START_TIME, DEFAULT_END_TIME,
)

logger = get_logger("restrictions.config")

# IP restriction keys
IP_RULES = "ip-rules"
CHECK_X_FORWARDED_FOR = "check-x-forwarded-for"
ERROR_MESSAGE_BLOCKED = "error-message-blocked"
ERROR_MESSAGE_NOT_ALLOWED = "error-message-not-allowed"

DEFAULT_IP_RULES = ""
DEFAULT_CHECK_X_FORWARDED_FOR = "true"
DEFAULT_ERROR_MESSAGE_BLOCKED = "Access from your IP address is blocked"
DEFAULT_ERROR_MESSAGE_NOT_ALLOWED = "Access from your IP address is not allowed"

# Time restriction keys
TIMEZONE = "timezone"
ALLOWED_DAYS = "allowed-days"
START_TIME = "start-time"
END_TIME = "end-time"
ERROR_MESSAGE = "error-message"

DEFAULT_ERROR_MESSAGE = "Access is not allowed at this time"

MULTIVALUED_SEPARATOR = "##"
_SPLIT_PATTERN = re.compile(r"##|[\r\n,]+")


def read_ip_rules(config: Mapping[str, str]) -> List[str]:
    """Rebuild the ordered rule list from a configuration map.

    Raises ConfigurationError when a rule value is not text.
    """
    rules: List[str] = []

    index = 0
    while True:
        key = f"{IP_RULES}{MULTIVALUED_SEPARATOR}{index}"
        value = _text_value(config, key)
        if value is None or not value.strip():
            break
        rules.append(value.strip())
        index += 1

    if rules:
        logger.debug("Read multivalued IP rules", count=len(rules))
        return rules

    single_value = _text_value(config, IP_RULES)
    if single_value and single_value.strip():
        rules = [rule.strip() for rule in _SPLIT_PATTERN.split(single_value) if rule.strip()]
        logger.debug("Read delimited IP rules", count=len(rules))

    return rules


def _text_value(config: Mapping[str, str], key: str) -> Optional[str]:
    value = config.get(key)
    if value is not None and not isinstance(value, str):
        raise ConfigurationError(
            f"Configuration value for {key} must be text",
            {"key": key, "type": type(value).__name__}
        )
    return value


def find_invalid_rules(rules: List[str]) -> List[str]:
    """Return rule tokens that will never match anything.

    Unsigned tokens and tokens whose pattern is not a dotted-quad address or
    CIDR network are reported. They are still passed to the evaluator, which
    ignores or fails to match them.
    """
    invalid = []
    for token in rules:
        rule = Rule.from_token(token)
        if rule is None or not is_valid_rule(rule.pattern):
            invalid.append(token)
    return invalid


def parse_boolean(value: Any) -> bool:
    """Host-style boolean: only the text ``true`` (any case) is true."""
    if isinstance(value, bool):
        return value
    if value is None:
        return False
    return str(value).lower() == "true"


class IPRestrictionConfig(BaseModel):
    """Validated IP restriction settings."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore", frozen=True)

    rules: List[str] = Field(default_factory=list, description="Ordered rule tokens")
    check_x_forwarded_for: bool = Field(True, alias=CHECK_X_FORWARDED_FOR)
    error_message_blocked: str = Field(DEFAULT_ERROR_MESSAGE_BLOCKED, alias=ERROR_MESSAGE_BLOCKED)
    error_message_not_allowed: str = Field(DEFAULT_ERROR_MESSAGE_NOT_ALLOWED, alias=ERROR_MESSAGE_NOT_ALLOWED)

    @field_validator("check_x_forwarded_for", mode="before")
    @classmethod
    def _parse_flag(cls, value: Any) -> bool:
        return parse_boolean(value)

    @classmethod
    def from_map(cls, config: Mapping[str, str], settings: Optional[ServiceConfig] = None) -> "IPRestrictionConfig":
        values: Dict[str, Any] = dict(config)
        if CHECK_X_FORWARDED_FOR not in values and settings is not None:
            values[CHECK_X_FORWARDED_FOR] = settings.check_x_forwarded_for
        values["rules"] = read_ip_rules(config)
        return cls.model_validate(values)

    def error_message(self, explicit_deny: bool) -> str:
        return self.error_message_blocked if explicit_deny else self.error_message_not_allowed


class TimeRestrictionConfig(BaseModel):
    """Validated time restriction settings."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore", frozen=True)

    timezone: str = Field(DEFAULT_TIMEZONE, alias=TIMEZONE)
    allowed_days: str = Field(DEFAULT_ALLOWED_DAYS, alias=ALLOWED_DAYS)
    start_time: str = Field(DEFAULT_START_TIME, alias=START_TIME)
    end_time: str = Field(DEFAULT_END_TIME, alias=END_TIME)
    error_message: str = Field(DEFAULT_ERROR_MESSAGE, alias=ERROR_MESSAGE)

    @classmethod
    def from_map(cls, config: Mapping[str, str], settings: Optional[ServiceConfig] = None) -> "TimeRestrictionConfig":
        values: Dict[str, Any] = dict(config)
        if TIMEZONE not in values and settings is not None:
            values[TIMEZONE] = settings.default_timezone
        return cls.model_validate(values)

    def to_schedule(self) -> Schedule:
        return Schedule.from_text(
            timezone_name=self.timezone,
            allowed_days=self.allowed_days,
            start_time=self.start_time,
            end_time=self.end_time,
        )
