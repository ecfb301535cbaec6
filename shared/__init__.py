"""
Shared utilities for the Access Restrictions layer.

This package aggregates common building blocks consumed by the
restriction service:

- config: Service configuration via pydantic-settings
- logging: Structured logging with trace correlation
- metrics: Prometheus metrics helpers
- errors: Canonical error types and responses

Any cross-service logic should live here to avoid import cycles. Do not
import from service_* packages into shared/.
"""
