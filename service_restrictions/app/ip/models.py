"""
IP rule data models for the Restrictions Service.
"""

from typing import Optional
from dataclasses import dataclass
from enum import Enum

from shared.errors import MalformedRuleError


class RuleSign(str, Enum):
    """Rule sign prefixes."""
    ALLOW = "+"
    DENY = "-"


class RuleType(str, Enum):
    """Rule classification attached to audit events."""
    ALLOW = "ALLOW"
    DENY = "DENY"
    NO_MATCH = "NO_MATCH"


class RuleReason(str, Enum):
    """Machine-readable reason for an IP decision."""
    BLOCKED = "blocked"
    ALLOWED = "allowed"
    NOT_IN_ALLOW_LIST = "not_in_allow_list"
    NO_RESTRICTIONS = "no_restrictions"

    @property
    def description(self) -> str:
        return _REASON_DESCRIPTIONS[self]


_REASON_DESCRIPTIONS = {
    RuleReason.BLOCKED: "IP Restriction: IP address is explicitly blocked",
    RuleReason.ALLOWED: "Allowed",
    RuleReason.NOT_IN_ALLOW_LIST: "IP Restriction: IP address is not in allowed list",
    RuleReason.NO_RESTRICTIONS: "No restrictions",
}


@dataclass(frozen=True)
class Rule:
    """A signed address rule such as ``+10.0.0.0/8`` or ``-192.168.0.5``."""
    sign: RuleSign
    pattern: str

    @classmethod
    def parse(cls, token: str) -> "Rule":
        """Parse a rule token.

        Raises MalformedRuleError when the token has no sign or no pattern.
        The pattern itself is not validated here; an unparseable pattern
        simply never matches.
        """
        text = (token or "").strip()
        if not text:
            raise MalformedRuleError(token, "Empty rule")

        try:
            sign = RuleSign(text[0])
        except ValueError:
            raise MalformedRuleError(token, "Rule must start with '+' or '-'")

        pattern = text[1:].strip()
        if not pattern:
            raise MalformedRuleError(token, "Rule has no address pattern")

        return cls(sign=sign, pattern=pattern)

    @classmethod
    def from_token(cls, token: str) -> Optional["Rule"]:
        """Parse a rule token, returning None when it has no recognised sign."""
        try:
            return cls.parse(token)
        except MalformedRuleError:
            return None

    @property
    def is_allow(self) -> bool:
        return self.sign is RuleSign.ALLOW

    def __str__(self) -> str:
        return f"{self.sign.value}{self.pattern}"


@dataclass(frozen=True)
class MatchOutcome:
    """Result of evaluating a client address against a rule list."""
    allowed: bool
    explicit_deny: bool
    reason: RuleReason
    matched_rule: Optional[Rule] = None

    @property
    def rule_type(self) -> RuleType:
        if self.explicit_deny:
            return RuleType.DENY
        if self.matched_rule is not None and self.matched_rule.is_allow:
            return RuleType.ALLOW
        return RuleType.NO_MATCH

    @property
    def matched_rule_text(self) -> str:
        return str(self.matched_rule) if self.matched_rule is not None else "none"
