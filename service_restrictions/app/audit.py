"""
Audit observer for restriction decisions.

The evaluators never log. Authenticators hand every outcome to a
RestrictionAuditor, which writes the structured log line, bumps the
decision counters and, for denials, builds the event the host attaches to
its security log.
"""

from datetime import datetime, timezone
from typing import Dict, List, Optional

from pydantic import BaseModel, Field

from shared.errors import AccessLayerException
from shared.logging import get_logger
from shared.metrics import MetricsCollector, get_metrics_collector
from .ip.models import MatchOutcome
from .schedule.models import Schedule, ScheduleOutcome

# Event detail keys
EVENT_DETAIL_CLIENT_IP = "client_ip"
EVENT_DETAIL_MATCHED_RULE = "matched_rule"
EVENT_DETAIL_RULE_TYPE = "rule_type"
EVENT_DETAIL_ALL_RULES = "all_rules"
EVENT_DETAIL_X_FORWARDED_FOR = "x_forwarded_for"
EVENT_DETAIL_REASON = "reason"
EVENT_DETAIL_ALLOWED_DAYS = "allowed_days"
EVENT_DETAIL_ALLOWED_TIME_RANGE = "allowed_time_range"
EVENT_DETAIL_CURRENT_DAY = "current_day"
EVENT_DETAIL_CURRENT_TIME = "current_time"
EVENT_DETAIL_TIMEZONE = "timezone"

ERROR_NOT_ALLOWED = "not_allowed"

RESTRICTION_IP = "ip"
RESTRICTION_TIME = "time"


class AuditEvent(BaseModel):
    """Security event describing a refused authentication attempt."""

    event_type: str = "LOGIN_ERROR"
    error: str = ERROR_NOT_ALLOWED
    restriction: str
    username: Optional[str] = None
    details: Dict[str, str] = Field(default_factory=dict)
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))


class RestrictionAuditor:
    """Logs and counts restriction decisions.

    Without ``metrics`` the auditor builds a collector with no registry, so
    its counters are never exported. Pass a collector bound to the registry
    the host scrapes.
    """

    def __init__(self, metrics: Optional[MetricsCollector] = None, enable_metrics: bool = True):
        self.logger = get_logger("restrictions.audit")
        self.metrics = metrics or get_metrics_collector("restrictions")
        self.enable_metrics = enable_metrics

    def record_ip_decision(
        self,
        client_ip: str,
        outcome: MatchOutcome,
        rules: List[str],
        forwarded_for: Optional[str] = None,
        username: Optional[str] = None
    ) -> Optional[AuditEvent]:
        """Record an IP decision; returns an event only for denials."""
        self._count(RESTRICTION_IP, outcome.allowed, outcome.reason.value)

        if outcome.allowed:
            self.logger.debug(
                "IP allowed",
                client_ip=client_ip,
                matched_rule=outcome.matched_rule_text,
                reason=outcome.reason.value
            )
            return None

        details = {
            EVENT_DETAIL_CLIENT_IP: client_ip,
            EVENT_DETAIL_MATCHED_RULE: outcome.matched_rule_text,
            EVENT_DETAIL_RULE_TYPE: outcome.rule_type.value,
            EVENT_DETAIL_ALL_RULES: ", ".join(rules),
            EVENT_DETAIL_REASON: outcome.reason.description,
        }
        if forwarded_for:
            details[EVENT_DETAIL_X_FORWARDED_FOR] = forwarded_for

        self.logger.info("IP blocked", **details)

        return AuditEvent(restriction=RESTRICTION_IP, username=username, details=details)

    def record_schedule_decision(
        self,
        outcome: ScheduleOutcome,
        schedule: Schedule,
        username: Optional[str] = None
    ) -> Optional[AuditEvent]:
        """Record a schedule decision; returns an event only for denials."""
        self._count(RESTRICTION_TIME, outcome.allowed, outcome.reason.value)

        current_day = outcome.current_day.name if outcome.current_day is not None else ""
        current_time = outcome.current_time.isoformat(timespec="seconds") if outcome.current_time else ""

        if outcome.allowed:
            self.logger.debug(
                "Access granted within schedule",
                username=username,
                current_day=current_day,
                current_time=current_time,
                timezone=schedule.timezone_name
            )
            return None

        details = {
            EVENT_DETAIL_REASON: outcome.reason.description or "",
            EVENT_DETAIL_ALLOWED_DAYS: schedule.allowed_day_names,
            EVENT_DETAIL_ALLOWED_TIME_RANGE: schedule.time_range,
            EVENT_DETAIL_CURRENT_DAY: current_day,
            EVENT_DETAIL_CURRENT_TIME: current_time,
            EVENT_DETAIL_TIMEZONE: schedule.timezone_name,
        }

        self.logger.info("Access denied outside schedule", username=username, **details)

        return AuditEvent(restriction=RESTRICTION_TIME, username=username, details=details)

    def record_fail_open(self, restriction: str, error: AccessLayerException):
        """Record an attempt granted because the restriction could not be enforced."""
        self.logger.error(
            "Restriction not enforced, allowing access",
            restriction=restriction,
            error_code=error.code,
            error=error.message,
            details=error.details
        )
        if self.enable_metrics:
            self.metrics.increment_counter(
                "restriction_fail_open_total",
                restriction=restriction,
                cause=error.code
            )
            self.metrics.record_error(error.code)

    def _count(self, restriction: str, allowed: bool, reason: str):
        if self.enable_metrics:
            self.metrics.increment_counter(
                "restriction_checks_total",
                restriction=restriction,
                decision="allow" if allowed else "deny",
                reason=reason
            )
