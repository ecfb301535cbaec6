"""
Restriction authenticators.

Each authenticator runs as one step of the host's login flow. It reads its
configuration map, asks the matching evaluator for a verdict and turns the
verdict into an AuthenticationDecision. When a restriction cannot be
enforced (no client address, broken timezone or time bounds) access is
granted rather than locking every user out.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Callable, Mapping, Optional

from pydantic import ValidationError

from shared.config import ServiceConfig, get_config
from shared.errors import AccessLayerException, ConfigurationError, UnresolvedAddressError
from shared.logging import get_logger, request_context
from .audit import AuditEvent, RestrictionAuditor, RESTRICTION_IP, RESTRICTION_TIME
from .client import X_FORWARDED_FOR, get_header, resolve_client_ip
from .config import IPRestrictionConfig, TimeRestrictionConfig, find_invalid_rules
from .ip.engine import RuleSetEvaluator
from .providers import IP_RESTRICTION_PROVIDER, TIME_RESTRICTION_PROVIDER, ProviderMetadata
from .schedule.evaluator import ScheduleEvaluator
from .schedule.models import invalid_day_names

FORBIDDEN = 403


@dataclass
class AuthenticationRequest:
    """What the host knows about one authentication attempt."""
    remote_addr: Optional[str] = None
    headers: Mapping[str, str] = field(default_factory=dict)
    username: Optional[str] = None
    request_id: Optional[str] = None


@dataclass
class AuthenticationDecision:
    """Verdict handed back to the host's login flow."""
    success: bool
    error_message: Optional[str] = None
    status_code: Optional[int] = None
    event: Optional[AuditEvent] = None

    @classmethod
    def allow(cls) -> "AuthenticationDecision":
        return cls(success=True)

    @classmethod
    def deny(cls, error_message: str, event: Optional[AuditEvent] = None) -> "AuthenticationDecision":
        return cls(success=False, error_message=error_message, status_code=FORBIDDEN, event=event)


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class _RestrictionAuthenticator:
    """Common wiring for restriction authenticators."""

    metadata: ProviderMetadata

    def __init__(
        self,
        settings: Optional[ServiceConfig] = None,
        auditor: Optional[RestrictionAuditor] = None
    ):
        self.settings = settings or get_config()
        self.auditor = auditor or RestrictionAuditor(enable_metrics=self.settings.enable_metrics)

    @property
    def provider_id(self) -> str:
        return self.metadata.provider_id

    @property
    def requires_user(self) -> bool:
        return self.metadata.requires_user

    def _fail_open(self, restriction: str, error: AccessLayerException) -> AuthenticationDecision:
        self.auditor.record_fail_open(restriction, error)
        return AuthenticationDecision.allow()


class IPRestrictionAuthenticator(_RestrictionAuthenticator):
    """Checks the client address against allow/deny rules before login."""

    metadata = IP_RESTRICTION_PROVIDER

    def __init__(
        self,
        settings: Optional[ServiceConfig] = None,
        auditor: Optional[RestrictionAuditor] = None,
        evaluator: Optional[RuleSetEvaluator] = None
    ):
        super().__init__(settings, auditor)
        self.evaluator = evaluator or RuleSetEvaluator()
        self.logger = get_logger("restrictions.ip_authenticator")

    def authenticate(
        self,
        request: AuthenticationRequest,
        config: Optional[Mapping[str, str]]
    ) -> AuthenticationDecision:
        """Decide whether the request's client address may proceed."""
        with request_context(request.request_id, request.username):
            if config is None:
                self.logger.debug("IP restriction has no configuration, allowing access")
                return AuthenticationDecision.allow()

            try:
                ip_config = IPRestrictionConfig.from_map(config, self.settings)
            except ValidationError as e:
                return self._fail_open(
                    RESTRICTION_IP,
                    ConfigurationError("Invalid IP restriction configuration", {"errors": str(e)})
                )
            except ConfigurationError as e:
                return self._fail_open(RESTRICTION_IP, e)

            try:
                client_ip = resolve_client_ip(
                    request.remote_addr,
                    request.headers,
                    ip_config.check_x_forwarded_for
                )
            except UnresolvedAddressError as e:
                return self._fail_open(RESTRICTION_IP, e)

            log = self.logger.bind(client_ip=client_ip)

            if not ip_config.rules:
                log.debug("No IP rules configured, allowing access")
                return AuthenticationDecision.allow()

            invalid = find_invalid_rules(ip_config.rules)
            if invalid:
                log.warning("IP rules will never match", rules=invalid)

            outcome = self.evaluator.evaluate(client_ip, ip_config.rules)
            event = self.auditor.record_ip_decision(
                client_ip,
                outcome,
                ip_config.rules,
                forwarded_for=get_header(request.headers, X_FORWARDED_FOR),
                username=request.username
            )

            if outcome.allowed:
                return AuthenticationDecision.allow()

            return AuthenticationDecision.deny(ip_config.error_message(outcome.explicit_deny), event)


class TimeRestrictionAuthenticator(_RestrictionAuthenticator):
    """Refuses login outside the configured days and hours."""

    metadata = TIME_RESTRICTION_PROVIDER

    def __init__(
        self,
        settings: Optional[ServiceConfig] = None,
        auditor: Optional[RestrictionAuditor] = None,
        evaluator: Optional[ScheduleEvaluator] = None,
        clock: Callable[[], datetime] = utc_now
    ):
        super().__init__(settings, auditor)
        self.evaluator = evaluator or ScheduleEvaluator()
        self.clock = clock
        self.logger = get_logger("restrictions.time_authenticator")

    def authenticate(
        self,
        request: AuthenticationRequest,
        config: Optional[Mapping[str, str]]
    ) -> AuthenticationDecision:
        """Decide whether the attempt falls inside the allowed window."""
        with request_context(request.request_id, request.username):
            if config is None:
                self.logger.warning("Time restriction has no configuration, allowing access")
                return AuthenticationDecision.allow()

            try:
                time_config = TimeRestrictionConfig.from_map(config, self.settings)
            except ValidationError as e:
                return self._fail_open(
                    RESTRICTION_TIME,
                    ConfigurationError("Invalid time restriction configuration", {"errors": str(e)})
                )

            invalid = invalid_day_names(time_config.allowed_days)
            if invalid:
                self.logger.warning("Invalid day of week", days=invalid)

            schedule = time_config.to_schedule()

            try:
                outcome = self.evaluator.evaluate(self.clock(), schedule)
            except ConfigurationError as e:
                return self._fail_open(RESTRICTION_TIME, e)

            event = self.auditor.record_schedule_decision(outcome, schedule, username=request.username)

            if outcome.allowed:
                return AuthenticationDecision.allow()

            return AuthenticationDecision.deny(time_config.error_message, event)
