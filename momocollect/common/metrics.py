"""Prometheus metric definitions for the collection workflow."""

from prometheus_client import Counter, Histogram, start_http_server


collection_requests_total = Counter(
    "collection_requests_total",
    "Collection requests sent to the gateway",
    ["service", "result"],
)
poll_rounds_total = Counter(
    "poll_rounds_total",
    "Status poll rounds by classification",
    ["service", "classification"],
)
transaction_outcomes_total = Counter(
    "transaction_outcomes_total",
    "Terminal transaction outcomes",
    ["service", "state"],
)
poll_duration_seconds = Histogram(
    "poll_duration_seconds",
    "Seconds spent polling a transaction until a terminal state",
    ["service", "state"],
)


def serve_metrics(port: int) -> None:
    """Expose all registered metrics on a background HTTP endpoint."""

    start_http_server(port)
