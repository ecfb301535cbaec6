"""
Address matching for IP restriction rules.

A rule pattern is either a single IPv4 address, compared as literal text,
or an IPv4 network in CIDR form, compared numerically. Nothing here raises
to the caller: a pattern that cannot be understood is a pattern that does
not match.
"""

import ipaddress
import re
from typing import Optional, Tuple

from shared.errors import MalformedRuleError

IPV4_PATTERN = re.compile(
    r"^((25[0-5]|(2[0-4]|1\d|[1-9]|)\d)\.?\b){4}$"
)

CIDR_PATTERN = re.compile(
    r"^((25[0-5]|(2[0-4]|1\d|[1-9]|)\d)\.?\b){4}/([0-9]|[1-2][0-9]|3[0-2])$"
)

_PREFIX_PATTERN = re.compile(r"[+-]?[0-9]+")

FULL_MASK = 0xFFFFFFFF


def matches_rule(client_ip: Optional[str], pattern: Optional[str]) -> bool:
    """Check whether ``client_ip`` satisfies a single rule pattern.

    CIDR patterns (anything containing ``/``) test network containment.
    Other patterns are compared with plain string equality, so
    ``10.0.0.01`` does not match ``10.0.0.1``.
    """
    if client_ip is None or pattern is None:
        return False

    pattern = pattern.strip()
    if not pattern:
        return False

    if "/" in pattern:
        return matches_cidr(client_ip, pattern)

    return client_ip == pattern


def matches_cidr(ip_address: str, cidr: str) -> bool:
    """Check whether an IPv4 address lies inside a CIDR network."""
    try:
        network_int, mask = parse_cidr(cidr)
        ip_int = ipv4_to_int(ip_address)
    except MalformedRuleError:
        return False

    return (ip_int & mask) == (network_int & mask)


def parse_cidr(cidr: str) -> Tuple[int, int]:
    """Split a CIDR literal into its network integer and 32-bit mask."""
    parts = cidr.split("/")
    if len(parts) != 2:
        raise MalformedRuleError(cidr, "Invalid CIDR format")

    network_address, prefix_text = parts
    if not _PREFIX_PATTERN.fullmatch(prefix_text):
        raise MalformedRuleError(cidr, "Invalid CIDR prefix length")

    prefix_length = int(prefix_text)
    if prefix_length < 0 or prefix_length > 32:
        raise MalformedRuleError(cidr, "CIDR prefix length out of range")

    return ipv4_to_int(network_address), prefix_mask(prefix_length)


def prefix_mask(prefix_length: int) -> int:
    # Shifting by 32 leaves nothing, so /0 matches every address.
    return (FULL_MASK << (32 - prefix_length)) & FULL_MASK


def ipv4_to_int(address: str) -> int:
    """Interpret an IPv4 literal as a big-endian 32-bit integer."""
    try:
        parsed = ipaddress.ip_address(address)
    except ValueError:
        raise MalformedRuleError(address, "Unparseable address")

    if not isinstance(parsed, ipaddress.IPv4Address):
        raise MalformedRuleError(address, "Not an IPv4 address")

    return int(parsed)


def is_valid_ipv4(ip: Optional[str]) -> bool:
    """Validate if a string is a dotted-quad IPv4 address."""
    if ip is None or not ip.strip():
        return False
    return IPV4_PATTERN.match(ip.strip()) is not None


def is_valid_cidr(cidr: Optional[str]) -> bool:
    """Validate if a string is IPv4 CIDR notation."""
    if cidr is None or not cidr.strip():
        return False
    return CIDR_PATTERN.match(cidr.strip()) is not None


def is_valid_rule(rule: Optional[str]) -> bool:
    """Validate a rule pattern (sign already removed)."""
    if rule is None or not rule.strip():
        return False

    rule = rule.strip()
    if "/" in rule:
        return is_valid_cidr(rule)
    return is_valid_ipv4(rule)
