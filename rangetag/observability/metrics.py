"""
Prometheus metrics for rangetag

Counts validated records and failing fields, and times each record. All
series live on a library-private registry so embedding applications keep
their own default registry clean.
"""
from prometheus_client import (
    CollectorRegistry,
    Counter,
    Histogram,
    generate_latest,
)


REGISTRY = CollectorRegistry()


# =======================
# VALIDATION METRICS
# =======================

records_validated_total = Counter(
    name="rangetag_records_validated_total",
    documentation="Total number of records validated",
    labelnames=["record_type", "status"],  # status: passed, failed, error
    registry=REGISTRY,
)

field_failures_total = Counter(
    name="rangetag_field_failures_total",
    documentation="Total number of field-level validation failures",
    labelnames=["record_type", "field_name", "reason"],
    registry=REGISTRY,
)

annotation_errors_total = Counter(
    name="rangetag_annotation_errors_total",
    documentation="Total number of fatal annotation errors (broken interval declarations)",
    labelnames=["error_type"],
    registry=REGISTRY,
)

validation_duration_seconds = Histogram(
    name="rangetag_validation_duration_seconds",
    documentation="Time spent validating a single record in seconds",
    labelnames=["record_type"],
    buckets=[0.00005, 0.0001, 0.0005, 0.001, 0.005, 0.01, 0.05, 0.1],
    registry=REGISTRY,
)


# =======================
# RECORDING
# =======================

def time_validation(record_type: str):
    """Context manager observing one record's validation time."""
    return validation_duration_seconds.labels(record_type=record_type).time()


def record_verdict(record_type: str, passed: bool, failures: list[tuple[str, str]]) -> None:
    """
    Record the outcome of validating one record.

    Args:
        record_type: Name of the validated record type
        passed: Whether every field passed
        failures: (field_name, reason) pairs of the failed fields
    """
    status = "passed" if passed else "failed"
    records_validated_total.labels(record_type=record_type, status=status).inc()
    for field_name, reason in failures:
        field_failures_total.labels(record_type=record_type, field_name=field_name, reason=reason).inc()


def record_annotation_error(record_type: str, error_type: str) -> None:
    """Count a record aborted by a broken declaration."""
    records_validated_total.labels(record_type=record_type, status="error").inc()
    annotation_errors_total.labels(error_type=error_type).inc()


def generate_metrics() -> bytes:
    """Prometheus text exposition of the rangetag registry."""
    return generate_latest(REGISTRY)
