"""Prometheus metrics for insight sources, remote failures and latency"""

from prometheus_client import Counter, Histogram

# Insight metrics
insight_counter = Counter(
    "insight_requests_total",
    "Insights generated",
    ["source"],  # LOCAL | REMOTE | REMOTE_DEGRADED
)

health_score_histogram = Histogram(
    "vividpulse_health_score",
    "Distribution of returned health scores",
    buckets=[20, 50, 80, 100],
)

# Remote provider metrics
remote_latency_histogram = Histogram(
    "remote_insight_latency_seconds",
    "Remote insight provider response time",
    ["provider"],
    buckets=[0.25, 0.5, 1.0, 2.5, 5.0, 10.0, 15.0],
)

remote_failure_counter = Counter(
    "remote_insight_failures_total",
    "Failed remote augmentation attempts",
    ["failure"],
)

# Service health
request_duration_histogram = Histogram(
    "http_request_duration_seconds",
    "HTTP request latency",
    ["method", "endpoint", "status"],
)


def record_insight(source: str, health_score: int, failure: str | None = None) -> None:
    """Record which path produced the insight and why the remote step failed, if it did"""
    insight_counter.labels(source=source).inc()
    health_score_histogram.observe(health_score)

    if failure is not None:
        remote_failure_counter.labels(failure=failure).inc()
