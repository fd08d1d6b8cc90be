"""
Metrics instrumentation for observability.
Exposes Prometheus-compatible metrics at /metrics endpoint.
"""

from prometheus_client import Counter, Histogram, generate_latest, CONTENT_TYPE_LATEST
from fastapi import Response

# Admission metrics
admission_requests = Counter(
    'room_admission_requests_total',
    'Total room admission decisions',
    ['outcome']  # already_admitted, admitted, room_full, room_not_found
)

admission_latency = Histogram(
    'room_admission_latency_seconds',
    'Latency of the atomic admission round trip',
    buckets=[0.0005, 0.001, 0.0025, 0.005, 0.01, 0.025, 0.05, 0.1, 0.25]
)

admission_retries = Counter(
    'room_admission_retries_total',
    'Optimistic admission retries caused by concurrent writes'
)

# Re-validation metrics
token_validations = Counter(
    'room_token_validations_total',
    'Room token re-validation results',
    ['result']  # valid, invalid, missing
)

# Store metrics
redis_connection_errors = Counter(
    'redis_connection_errors_total',
    'Redis errors surfaced as store unavailability'
)


def metrics_endpoint() -> Response:
    """
    Prometheus metrics endpoint.

    Usage:
        @app.get("/metrics")
        def metrics():
            return metrics_endpoint()
    """
    return Response(
        content=generate_latest(),
        media_type=CONTENT_TYPE_LATEST
    )


def record_admission(outcome: str):
    """Record an admission outcome."""
    admission_requests.labels(outcome=outcome).inc()


def record_token_validation(result: str):
    """Record token re-validation. Result: valid, invalid, missing"""
    token_validations.labels(result=result).inc()
