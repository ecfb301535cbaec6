"""
Restrictions service package.

Exposes the IP and time restriction authenticators together with the
pure evaluators they are built on.

The host owns process-wide setup. Call ``shared.logging.configure_logging``
once at start-up; until then structlog's default console output is used.
Counters are only exported when the authenticators share an auditor built
on a registered collector, for example::

    from prometheus_client import REGISTRY
    from shared.metrics import get_metrics_collector

    auditor = RestrictionAuditor(metrics=get_metrics_collector("restrictions", REGISTRY))
    ip_authenticator = IPRestrictionAuthenticator(auditor=auditor)
    time_authenticator = TimeRestrictionAuthenticator(auditor=auditor)

An auditor created without a collector still counts, but into metrics that
no registry exposes.
"""

from .audit import RestrictionAuditor
from .authenticators import (
    AuthenticationRequest,
    AuthenticationDecision,
    IPRestrictionAuthenticator,
    TimeRestrictionAuthenticator,
)
from .ip import RuleSetEvaluator, MatchOutcome, Rule, RuleReason
from .schedule import ScheduleEvaluator, Schedule, ScheduleOutcome, ScheduleReason

__all__ = [
    "RestrictionAuditor",
    "AuthenticationRequest",
    "AuthenticationDecision",
    "IPRestrictionAuthenticator",
    "TimeRestrictionAuthenticator",
    "RuleSetEvaluator",
    "MatchOutcome",
    "Rule",
    "RuleReason",
    "ScheduleEvaluator",
    "Schedule",
    "ScheduleOutcome",
    "ScheduleReason",
]
