"""
Rule-set evaluation for IP restrictions.
"""

from typing import Iterable, List, Optional, Sequence

from .matcher import matches_rule
from .models import Rule, RuleSign, RuleReason, MatchOutcome


class RuleSetEvaluator:
    """Applies deny-first precedence across an ordered list of rule tokens.

    Deny rules are checked before any allow rule, so an address matching
    both is denied no matter where each rule sits in the list. The presence
    of a single allow rule turns the list into an allowlist: addresses
    matching nothing are then refused.

    Tokens without a ``+`` or ``-`` prefix are ignored. The evaluator holds
    no state and is safe to share between threads.
    """

    def evaluate(self, candidate: str, rules: Sequence[str]) -> MatchOutcome:
        """Evaluate a client address against rule tokens."""
        tokens = _normalize(rules)
        has_allow_rules = False

        # First pass: explicit deny rules
        for token in tokens:
            if token.startswith(RuleSign.DENY.value):
                rule = _split(token)
                if matches_rule(candidate, rule.pattern):
                    return MatchOutcome(
                        allowed=False,
                        explicit_deny=True,
                        matched_rule=rule,
                        reason=RuleReason.BLOCKED
                    )
            elif token.startswith(RuleSign.ALLOW.value):
                has_allow_rules = True

        # Second pass: allow rules
        for token in tokens:
            if token.startswith(RuleSign.ALLOW.value):
                rule = _split(token)
                if matches_rule(candidate, rule.pattern):
                    return MatchOutcome(
                        allowed=True,
                        explicit_deny=False,
                        matched_rule=rule,
                        reason=RuleReason.ALLOWED
                    )

        if has_allow_rules:
            return MatchOutcome(
                allowed=False,
                explicit_deny=False,
                reason=RuleReason.NOT_IN_ALLOW_LIST
            )

        return MatchOutcome(
            allowed=True,
            explicit_deny=False,
            reason=RuleReason.NO_RESTRICTIONS
        )


def _normalize(rules: Optional[Iterable[str]]) -> List[str]:
    if not rules:
        return []
    return [token.strip() for token in rules if token and token.strip()]


def _split(token: str) -> Rule:
    # A bare sign still counts as a rule of that kind; its empty pattern never matches.
    return Rule(sign=RuleSign(token[0]), pattern=token[1:].strip())

