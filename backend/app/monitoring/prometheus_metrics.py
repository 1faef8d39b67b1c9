"""
Prometheus metrics module for PeerLearn.

Exposes the timings gathered by @measure_operation plus a few booking
domain counters on a private registry.
"""

from typing import Optional, cast

from prometheus_client import (
    CONTENT_TYPE_LATEST,
    CollectorRegistry,
    Counter,
    Histogram,
    generate_latest,
)

# Custom registry so tests and multiple app instances don't collide with the default one
REGISTRY = CollectorRegistry()

service_operation_duration_seconds = Histogram(
    "peerlearn_service_operation_duration_seconds",
    "Service operation duration in seconds",
    ["service", "operation"],
    registry=REGISTRY,
    buckets=(0.001, 0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5),
)

service_operations_total = Counter(
    "peerlearn_service_operations_total",
    "Total number of service operations",
    ["service", "operation", "status"],
    registry=REGISTRY,
)

errors_total = Counter(
    "peerlearn_errors_total",
    "Total number of errors",
    ["service", "operation", "error_type"],
    registry=REGISTRY,
)

booking_lock_total = Counter(
    "peerlearn_booking_lock_total",
    "Per-teacher booking lock attempts by action and outcome",
    ["action", "outcome"],
    registry=REGISTRY,
)

bookings_created_total = Counter(
    "peerlearn_bookings_created_total",
    "Bookings successfully created",
    registry=REGISTRY,
)

booking_status_changes_total = Counter(
    "peerlearn_booking_status_changes_total",
    "Booking status transitions applied",
    ["from_status", "to_status"],
    registry=REGISTRY,
)

coins_transferred_total = Counter(
    "peerlearn_coins_transferred_total",
    "Coins moved between wallets",
    ["kind"],
    registry=REGISTRY,
)


class PrometheusMetrics:
    """Manages Prometheus metrics collection and exposure."""

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
    def record_booking_lock(action: str, outcome: str) -> None:
        booking_lock_total.labels(action=action, outcome=outcome).inc()

    @staticmethod
    def record_booking_created() -> None:
        bookings_created_total.inc()

    @staticmethod
    def record_status_change(from_status: str, to_status: str) -> None:
        booking_status_changes_total.labels(from_status=from_status, to_status=to_status).inc()

    @staticmethod
    def record_coins(kind: str, amount: float) -> None:
        """kind is one of debit, credit, refund."""
        if amount > 0:
            coins_transferred_total.labels(kind=kind).inc(amount)

    @staticmethod
    def get_metrics() -> bytes:
        """Generate Prometheus metrics in exposition format."""
        return cast(bytes, generate_latest(REGISTRY))

    @staticmethod
    def get_content_type() -> str:
        """Get the content type for Prometheus metrics."""
        return cast(str, CONTENT_TYPE_LATEST)


prometheus_metrics = PrometheusMetrics()
