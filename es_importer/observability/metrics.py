"""
Prometheus metrics collection for es-importer

A one-shot import has no scrape window, so metrics are collected on a
private registry and written out at the end of the run (--metrics-file)
in the Prometheus text format, ready for a node_exporter textfile collector.
"""
import time
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator

from prometheus_client import CollectorRegistry, Counter, Histogram, generate_latest


# Private registry; only importer metrics are exported
REGISTRY = CollectorRegistry()


# =======================
# UPLOAD METRICS
# =======================

documents_uploaded_total = Counter(
    name="importer_documents_uploaded_total",
    documentation="Total number of documents included in dispatched bulk payloads",
    labelnames=["index"],
    registry=REGISTRY,
)

bulk_requests_total = Counter(
    name="importer_bulk_requests_total",
    documentation="Total number of bulk requests sent",
    labelnames=["index", "status"],  # status: success, rejected, failure
    registry=REGISTRY,
)

bulk_request_duration_seconds = Histogram(
    name="importer_bulk_request_duration_seconds",
    documentation="Time spent on one bulk request (connect, send, drain)",
    labelnames=["index"],
    buckets=[0.01, 0.05, 0.1, 0.5, 1.0, 2.0, 5.0, 10.0, 30.0, 60.0],
    registry=REGISTRY,
)

batch_size_documents = Histogram(
    name="importer_batch_size_documents",
    documentation="Number of documents in each bulk payload",
    labelnames=["index"],
    buckets=[1, 10, 50, 100, 500, 1000, 5000, 10000],
    registry=REGISTRY,
)

# =======================
# ERROR METRICS
# =======================

probe_failures_total = Counter(
    name="importer_probe_failures_total",
    documentation="Total number of failed liveness probes",
    labelnames=["host"],
    registry=REGISTRY,
)


# =======================
# HELPERS
# =======================

def generate_metrics() -> bytes:
    """Render every importer metric in the Prometheus text exposition format."""
    return generate_latest(REGISTRY)


def write_metrics(path: str | Path) -> Path:
    """
    Write the current snapshot to a file, creating parent directories

    Args:
        path: Destination, e.g. a textfile collector's *.prom file

    Returns:
        The path written
    """
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(generate_metrics())
    return path


@contextmanager
def track_duration(histogram: Histogram, **labels) -> Iterator[None]:
    """
    Observe the wall time of a block, whether or not it raises

    Usage:
        with track_duration(bulk_request_duration_seconds, index="people"):
            transport.post_bulk(path, payload)
    """
    started = time.monotonic()
    try:
        yield
    finally:
        histogram.labels(**labels).observe(time.monotonic() - started)


def increment_counter(counter: Counter, value: float = 1.0, **labels) -> None:
    counter.labels(**labels).inc(value)


def observe_histogram(histogram: Histogram, value: float, **labels) -> None:
    histogram.labels(**labels).observe(value)


def record_bulk_request(index: str, document_count: int, status: str) -> None:
    """
    Record the outcome of one bulk request.

    Failed requests are counted, but their documents are not, since the
    payload never reached the cluster in full.

    Args:
        index: Target index name
        document_count: Documents in the payload
        status: "success", "rejected" or "failure"
    """
    increment_counter(bulk_requests_total, 1, index=index, status=status)
    if status != "failure":
        increment_counter(documents_uploaded_total, document_count, index=index)
        observe_histogram(batch_size_documents, document_count, index=index)
