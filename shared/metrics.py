"""
Shared metrics configuration for the properties cache service.
"""

from prometheus_client import Counter, Histogram, Gauge, Info, CollectorRegistry
from typing import Dict, Any, Optional
import time


class MetricsCollector:
    """Centralized metrics collector for services.

    Each collector owns its own registry unless one is passed in, so several
    service instances (as in tests) never collide on metric names.
    """

    def __init__(self, service_name: str, registry: Optional[CollectorRegistry] = None):
        self.service_name = service_name
        self.registry = registry if registry is not None else CollectorRegistry()
        self._metrics: Dict[str, Any] = {}
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

        # HTTP metrics
        self._metrics["http_requests_total"] = Counter(
            "http_requests_total",
            "Total HTTP requests",
            ["method", "endpoint", "status_code"],
            registry=self.registry
        )

        self._metrics["http_request_duration_seconds"] = Histogram(
            "http_request_duration_seconds",
            "HTTP request duration in seconds",
            ["method", "endpoint"],
            registry=self.registry
        )

        # Health check metrics
        self._metrics["health_check_total"] = Counter(
            "health_check_total",
            "Total health check requests",
            ["status"],
            registry=self.registry
        )

        # Error metrics
        self._metrics["errors_total"] = Counter(
            "errors_total",
            "Total errors",
            ["error_type", "service"],
            registry=self.registry
        )

        if self.service_name == "properties":
            self._setup_properties_metrics()

    def _setup_properties_metrics(self):
        """Set up refresher and snapshot metrics."""
        self._metrics["property_refresh_total"] = Counter(
            "property_refresh_total",
            "Total property refresh cycles",
            ["outcome"],
            registry=self.registry
        )

        self._metrics["property_refresh_duration_seconds"] = Histogram(
            "property_refresh_duration_seconds",
            "Property refresh cycle duration in seconds",
            registry=self.registry
        )

        self._metrics["property_records_dropped_total"] = Counter(
            "property_records_dropped_total",
            "Upstream records dropped because they failed to decode",
            registry=self.registry
        )

        self._metrics["property_snapshot_size"] = Gauge(
            "property_snapshot_size",
            "Number of properties in the served snapshot",
            registry=self.registry
        )

        self._metrics["property_snapshot_last_success_timestamp"] = Gauge(
            "property_snapshot_last_success_timestamp",
            "Unix time of the last successful snapshot replace",
            registry=self.registry
        )

    def record_http_request(self, method: str, endpoint: str, status_code: int, duration: float):
        """Record HTTP request metrics."""
        self._metrics["http_requests_total"].labels(
            method=method,
            endpoint=endpoint,
            status_code=str(status_code)
        ).inc()

        self._metrics["http_request_duration_seconds"].labels(
            method=method,
            endpoint=endpoint
        ).observe(duration)

    def record_health_check(self, status: str):
        """Record health check metrics."""
        self._metrics["health_check_total"].labels(status=status).inc()

    def record_error(self, error_type: str, service: Optional[str] = None):
        """Record error metrics."""
        service_name = service or self.service_name
        self._metrics["errors_total"].labels(error_type=error_type, service=service_name).inc()

    def record_refresh(self, outcome: str, duration: float, dropped: int = 0):
        """Record the result of one refresh cycle."""
        self.increment_counter("property_refresh_total", outcome=outcome)
        self.observe_histogram("property_refresh_duration_seconds", duration)
        if dropped and "property_records_dropped_total" in self._metrics:
            self._metrics["property_records_dropped_total"].inc(dropped)

    def record_snapshot(self, size: int):
        """Record a successful snapshot replace."""
        self.set_gauge("property_snapshot_size", size)
        self.set_gauge("property_snapshot_last_success_timestamp", time.time())

    def increment_counter(self, metric_name: str, **labels):
        """Increment a counter metric."""
        metric = self._metrics.get(metric_name)
        if metric is not None:
            (metric.labels(**labels) if labels else metric).inc()

    def set_gauge(self, metric_name: str, value: float, **labels):
        """Set a gauge metric value."""
        metric = self._metrics.get(metric_name)
        if metric is not None:
            (metric.labels(**labels) if labels else metric).set(value)

    def observe_histogram(self, metric_name: str, value: float, **labels):
        """Observe a histogram metric."""
        metric = self._metrics.get(metric_name)
        if metric is not None:
            (metric.labels(**labels) if labels else metric).observe(value)


def get_metrics_collector(service_name: str, registry: Optional[CollectorRegistry] = None) -> MetricsCollector:
    """Get a metrics collector for a service."""
    return MetricsCollector(service_name, registry)
