"""
Shared metrics configuration for the Access Restrictions layer.
"""

from typing import Dict, Any, Optional
import threading

from prometheus_client import Counter, Info, CollectorRegistry


class MetricsCollector:
    """Centralized metrics collector for services.

    Metrics are registered only in the registry passed in. Without one they
    still count but are not exported.
    """

    def __init__(self, service_name: str, registry: Optional[CollectorRegistry] = None):
        self.service_name = service_name
        self.registry = registry
        self._metrics: Dict[str, Any] = {}
        self._lock = threading.Lock()
        self._setup_metrics()

    def _setup_metrics(self):
        """Set up common metrics for the service."""

        # Service info
        self._metrics["service_info"] = Info(
            "service_info",
            "Service information",
            registry=self.registry
        )
        self._metrics["service_info"].info({
            "service": self.service_name,
            "version": "1.0.0"
        })

        # Error metrics
        self._metrics["errors_total"] = Counter(
            "errors_total",
            "Total errors",
            ["error_type", "service"],
            registry=self.registry
        )

        if self.service_name == "restrictions":
            self._setup_restriction_metrics()

    def _setup_restriction_metrics(self):
        """Set up restriction-specific metrics."""
        self._metrics["restriction_checks_total"] = Counter(
            "restriction_checks_total",
            "Total restriction decisions",
            ["restriction", "decision", "reason"],
            registry=self.registry
        )

        self._metrics["restriction_fail_open_total"] = Counter(
            "restriction_fail_open_total",
            "Total attempts granted because a restriction could not be enforced",
            ["restriction", "cause"],
            registry=self.registry
        )

    def record_error(self, error_type: str, service: Optional[str] = None):
        """Record error metrics."""
        service_name = service or self.service_name
        self._metrics["errors_total"].labels(error_type=error_type, service=service_name).inc()

    def increment_counter(self, metric_name: str, **labels):
        """Increment a counter metric."""
        with self._lock:
            if metric_name in self._metrics:
                self._metrics[metric_name].labels(**labels).inc()


def get_metrics_collector(service_name: str, registry: Optional[CollectorRegistry] = None) -> MetricsCollector:
    """Get a metrics collector for a service."""
    return MetricsCollector(service_name, registry)
