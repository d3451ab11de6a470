"""Prometheus metrics for monitoring recommendation outcomes, amounts, and AI calls"""

from typing import Optional

from prometheus_client import Counter, Histogram

# Recommendation metrics
recommendation_counter = Counter(
    "credit_recommendation_total",
    "Total loan recommendations served",
    ["outcome"],  # approve | conditional | reject
)

recommended_amount_bucket_counter = Counter(
    "credit_recommended_amount_bucket",
    "Recommended credit increments by bucket",
    ["bucket"],  # none, $0-$1000, $1000-$3000, $3000+
)

# AI endpoint metrics
ai_latency_histogram = Histogram(
    "ai_request_latency_seconds",
    "AI completion response time",
    ["operation"],
    buckets=[0.5, 1.0, 2.5, 5.0, 10.0, 20.0, 30.0, 60.0],
)

ai_failure_counter = Counter(
    "ai_request_failures_total",
    "Failed AI completion calls",
    ["operation"],
)

profile_fallback_counter = Counter(
    "profile_generation_fallback_total",
    "Profile generations served from the local generator",
)

# Service health
request_duration_histogram = Histogram(
    "http_request_duration_seconds",
    "HTTP request latency",
    ["method", "endpoint", "status"],
)


def record_recommendation(outcome: str, recommended_amount: Optional[float]) -> None:
    """Record recommendation metrics for monitoring approval mix and amount distribution"""
    recommendation_counter.labels(outcome=outcome).inc()

    if recommended_amount is None:
        bucket = "none"
    elif recommended_amount <= 1_000:
        bucket = "$0-$1000"
    elif recommended_amount <= 3_000:
        bucket = "$1000-$3000"
    else:
        bucket = "$3000+"

    recommended_amount_bucket_counter.labels(bucket=bucket).inc()
