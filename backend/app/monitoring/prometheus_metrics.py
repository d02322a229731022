"""
Prometheus metrics module for SkillBridge.

HTTP request metrics are fed by PrometheusMiddleware, service operation
metrics by the @measure_operation decorator, and booking/enrollment outcome
counters by the scheduling services. Everything lives in a dedicated
registry exposed at /metrics.
"""

from typing import Optional, cast

from prometheus_client import (
    CONTENT_TYPE_LATEST,
    CollectorRegistry,
    Counter,
    Gauge,
    Histogram,
    generate_latest,
)

from ..core.constants import METRICS_NAMESPACE

# Custom registry so repeated app construction in tests does not collide with the default one
REGISTRY = CollectorRegistry()

http_request_duration_seconds = Histogram(
    f"{METRICS_NAMESPACE}_http_request_duration_seconds",
    "HTTP request duration in seconds",
    ["method", "endpoint", "status_code"],
    registry=REGISTRY,
    buckets=(0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0),
)

http_requests_total = Counter(
    f"{METRICS_NAMESPACE}_http_requests_total",
    "Total number of HTTP requests",
    ["method", "endpoint", "status_code"],
    registry=REGISTRY,
)

http_requests_in_progress = Gauge(
    f"{METRICS_NAMESPACE}_http_requests_in_progress",
    "Number of HTTP requests currently being processed",
    ["method", "endpoint"],
    registry=REGISTRY,
)

service_operation_duration_seconds = Histogram(
    f"{METRICS_NAMESPACE}_service_operation_duration_seconds",
    "Service operation duration in seconds",
    ["service", "operation"],
    registry=REGISTRY,
    buckets=(0.001, 0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5),
)

service_operations_total = Counter(
    f"{METRICS_NAMESPACE}_service_operations_total",
    "Total number of service operations",
    ["service", "operation", "status"],
    registry=REGISTRY,
)

errors_total = Counter(
    f"{METRICS_NAMESPACE}_errors_total",
    "Total number of errors",
    ["service", "operation", "error_type"],
    registry=REGISTRY,
)

# Scheduling outcomes: created | conflict | rescheduled | status:<target> | feedback
booking_events_total = Counter(
    f"{METRICS_NAMESPACE}_booking_events_total",
    "Booking lifecycle events by kind and outcome",
    ["kind", "outcome"],
    registry=REGISTRY,
)

enrollment_events_total = Counter(
    f"{METRICS_NAMESPACE}_enrollment_events_total",
    "Enrollment lifecycle events by outcome",
    ["outcome"],
    registry=REGISTRY,
)

rating_recompute_failures_total = Counter(
    f"{METRICS_NAMESPACE}_rating_recompute_failures_total",
    "Rating aggregate recomputations that failed",
    ["target"],
    registry=REGISTRY,
)


class PrometheusMetrics:
    """Manages Prometheus metrics collection and exposure."""

    @staticmethod
    def record_http_request(method: str, endpoint: str, duration: float, status_code: int) -> None:
        """Record HTTP request metrics."""
        labels = {"method": method, "endpoint": endpoint, "status_code": str(status_code)}

        http_request_duration_seconds.labels(**labels).observe(duration)
        http_requests_total.labels(**labels).inc()

    @staticmethod
    def track_http_request_start(method: str, endpoint: str) -> None:
        http_requests_in_progress.labels(method=method, endpoint=endpoint).inc()

    @staticmethod
    def track_http_request_end(method: str, endpoint: str) -> None:
        http_requests_in_progress.labels(method=method, endpoint=endpoint).dec()

    @staticmethod
    def record_service_operation(
        service: str,
        operation: str,
        duration: float,
        status: str = "success",
        error_type: Optional[str] = None,
    ) -> None:
        """
        Record service operation metrics from @measure_operation decorator.

        Args:
            service: Service name (e.g., 'BookingService')
            operation: Operation/method name (e.g., 'create_booking')
            duration: Operation duration in seconds
            status: Operation status ('success' or 'error')
            error_type: Type of error if status is 'error'
        """
        service_operation_duration_seconds.labels(service=service, operation=operation).observe(
            duration
        )
        service_operations_total.labels(service=service, operation=operation, status=status).inc()

        if status == "error" and error_type:
            errors_total.labels(service=service, operation=operation, error_type=error_type).inc()

    @staticmethod
    def record_booking_event(kind: str, outcome: str) -> None:
        booking_events_total.labels(kind=kind, outcome=outcome).inc()

    @staticmethod
    def record_enrollment_event(outcome: str) -> None:
        enrollment_events_total.labels(outcome=outcome).inc()

    @staticmethod
    def record_rating_failure(target: str) -> None:
        rating_recompute_failures_total.labels(target=target).inc()

    @staticmethod
    def get_metrics() -> bytes:
        """Generate Prometheus metrics in exposition format."""
        return cast(bytes, generate_latest(REGISTRY))

    @staticmethod
    def get_content_type() -> str:
        return cast(str, CONTENT_TYPE_LATEST)


# Singleton instance
prometheus_metrics = PrometheusMetrics()
