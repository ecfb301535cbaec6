"""
Shared error handling for the Access Restrictions layer.
"""

from typing import Dict, Any, Optional
from pydantic import BaseModel, Field

from opentelemetry import trace


class ErrorResponse(BaseModel):
    """Standard error response format."""

    trace_id: Optional[str] = None
    code: str
    message: str
    details: Dict[str, Any] = Field(default_factory=dict)


class AccessLayerException(Exception):
    """Base exception for Access Restrictions components."""

    def __init__(self, code: str, message: str, details: Optional[Dict[str, Any]] = None):
        self.code = code
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def to_response(self) -> ErrorResponse:
        """Convert to error response."""
        # Get trace ID from current span
        trace_id = None
        current_span = trace.get_current_span()
        if current_span and current_span.is_recording():
            span_context = current_span.get_span_context()
            if span_context.trace_id != 0:
                trace_id = f"{span_context.trace_id:032x}"

        return ErrorResponse(
            trace_id=trace_id,
            code=self.code,
            message=self.message,
            details=self.details
        )


class MalformedRuleError(AccessLayerException):
    """A single address rule could not be parsed."""

    def __init__(self, rule: str, message: str = "Malformed rule", details: Optional[Dict[str, Any]] = None):
        details = dict(details or {})
        details.setdefault("rule", rule)
        super().__init__("MALFORMED_RULE", f"{message}: {rule!r}", details)
        self.rule = rule


class ConfigurationError(AccessLayerException):
    """Restriction configuration is unusable (timezone, time of day)."""

    def __init__(self, message: str = "Invalid restriction configuration", details: Optional[Dict[str, Any]] = None):
        super().__init__("CONFIGURATION_ERROR", message, details)


class UnresolvedAddressError(AccessLayerException):
    """No client address could be determined for the request."""

    def __init__(self, message: str = "Could not determine client IP address", details: Optional[Dict[str, Any]] = None):
        super().__init__("UNRESOLVED_ADDRESS", message, details)
