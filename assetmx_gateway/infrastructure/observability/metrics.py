"""Prometheus metrics for monitoring quote volume, eligibility outcomes, and rate reloads"""

from prometheus_client import Counter, Histogram

# Quote metrics
quote_counter = Counter(
    "assetmx_quote_total",
    "Total quotes issued",
    ["asset_type"],
)

quote_rejected_counter = Counter(
    "assetmx_quote_rejected_total",
    "Quote requests rejected as out of bounds",
    ["field"],
)

# Eligibility metrics
eligibility_counter = Counter(
    "assetmx_eligibility_total",
    "Full eligibility checks run",
    ["outcome"],  # eligible | ineligible
)

eligibility_rule_failures_counter = Counter(
    "assetmx_eligibility_rule_failures_total",
    "Hard eligibility rule failures",
    ["rule"],
)

# Rate store metrics
rate_reload_failures_counter = Counter(
    "assetmx_rate_reload_failures_total",
    "Failed rate snapshot reloads",
)

# Webhook metrics
webhook_latency_histogram = Histogram(
    "webhook_latency_seconds",
    "Lead webhook response time",
    buckets=[0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0],
)

webhook_failure_counter = Counter(
    "webhook_failures_total",
    "Failed webhook deliveries",
)

# Service health
request_duration_histogram = Histogram(
    "http_request_duration_seconds",
    "HTTP request latency",
    ["method", "endpoint", "status"],
)


def record_quote(asset_type: str) -> None:
    quote_counter.labels(asset_type=asset_type).inc()


def record_eligibility(passed: bool, failed_rules: list[str]) -> None:
    """Record gate outcome and which hard rules declined it"""
    outcome = "eligible" if passed else "ineligible"
    eligibility_counter.labels(outcome=outcome).inc()

    for rule in failed_rules:
        eligibility_rule_failures_counter.labels(rule=rule).inc()
