"""
IP restriction package.

Decides whether a client address passes an administrator's allow/deny
list. Rules are ``+`` (allow) or ``-`` (deny) followed by an IPv4 address
or CIDR network.

Modules of interest:
- models: Rule, MatchOutcome and the reason/rule-type enums.
- matcher: Single-pattern matching (literal address or CIDR containment).
- engine: Deny-first, two-pass evaluation over a full rule list.

Nothing in this package logs or performs I/O; callers report outcomes.
"""

from .models import Rule, RuleSign, RuleType, RuleReason, MatchOutcome
from .matcher import matches_rule, matches_cidr, is_valid_ipv4, is_valid_cidr, is_valid_rule
from .engine import RuleSetEvaluator

__all__ = [
    "Rule",
    "RuleSign",
    "RuleType",
    "RuleReason",
    "MatchOutcome",
    "matches_rule",
    "matches_cidr",
    "is_valid_ipv4",
    "is_valid_cidr",
    "is_valid_rule",
    "RuleSetEvaluator",
]
