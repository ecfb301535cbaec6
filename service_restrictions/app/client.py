"""
Client address resolution for the Restrictions Service.
"""

from typing import Mapping, Optional

from shared.errors import UnresolvedAddressError
from shared.logging import get_logger

logger = get_logger("restrictions.client")

X_FORWARDED_FOR = "X-Forwarded-For"


def get_header(headers: Optional[Mapping[str, str]], name: str) -> Optional[str]:
    """Case-insensitive header lookup."""
    if not headers:
        return None

    value = headers.get(name)
    if value is not None:
        return value

    lowered = name.lower()
    for key, candidate in headers.items():
        if key.lower() == lowered:
            return candidate
    return None


def extract_forwarded_ip(forwarded_for: Optional[str]) -> Optional[str]:
    """Return the first hop of an X-Forwarded-For value (the original client)."""
    if forwarded_for is None or not forwarded_for.strip():
        return None

    first = forwarded_for.split(",")[0].strip()
    return first or None


def resolve_client_ip(
    remote_addr: Optional[str],
    headers: Optional[Mapping[str, str]] = None,
    check_x_forwarded_for: bool = True
) -> str:
    """Determine the effective client address for a request.

    Prefers the first X-Forwarded-For hop when enabled, falling back to the
    connection's remote address. Raises UnresolvedAddressError when neither
    yields an address.
    """
    client_ip = None

    if check_x_forwarded_for:
        forwarded_for = get_header(headers, X_FORWARDED_FOR)
        client_ip = extract_forwarded_ip(forwarded_for)
        logger.debug(
            "Checked forwarded header",
            x_forwarded_for=forwarded_for,
            extracted_ip=client_ip
        )

    if not client_ip:
        client_ip = remote_addr
        logger.debug("Using remote address as client IP", remote_addr=remote_addr)

    if not client_ip:
        raise UnresolvedAddressError(details={"remote_addr": remote_addr})

    return client_ip
