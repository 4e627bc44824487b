"""Prometheus metrics for the LMS request core.

Metrics include:

- Idempotency gate decisions by result and status code
- Size of response bodies captured for replay
- Pages served by the query pipeline, per resource

Examples:
    Recording a replayed request::

        from lms_core.observability.metrics import record_request

        record_request(result="replay", status_code=201)

    Recording a served page::

        from lms_core.observability.metrics import record_page

        record_page(resource="courses")
"""

from prometheus_client import Counter, Histogram

# Labels: result (passthrough, rejected, replay, stored, not_cached), status_code
requests_total = Counter(
    "lms_idempotency_requests_total",
    "Total number of requests handled by the idempotency gate",
    ["result", "status_code"],
)

cached_body_bytes = Histogram(
    "lms_idempotency_cached_body_bytes",
    "Size in bytes of response bodies stored for replay",
    buckets=[
        64,
        256,
        1024,
        4096,
        16384,
        65536,
        262144,
        1048576,
    ],
)

pages_total = Counter(
    "lms_query_pages_total",
    "Total number of pages produced by the query pipeline",
    ["resource"],
)


def record_request(result: str, status_code: int) -> None:
    """Record one gate decision.

    Args:
        result: passthrough, rejected, replay, stored or not_cached
        status_code: HTTP status code returned to the client
    """
    requests_total.labels(result=result, status_code=str(status_code)).inc()


def record_cached_body(size_bytes: int) -> None:
    """Record the size of a body stored for replay."""
    cached_body_bytes.observe(size_bytes)


def record_page(resource: str) -> None:
    """Record one page served for ``resource``."""
    pages_total.labels(resource=resource).inc()
