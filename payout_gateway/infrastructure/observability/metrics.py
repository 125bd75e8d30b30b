"""Prometheus metrics for payouts, bank-directory resolution and upstream health"""

from prometheus_client import Counter, Histogram

# Payout metrics
payout_counter = Counter(
    "payout_submissions_total",
    "Payout submissions forwarded to payOS",
    ["outcome"],  # succeeded | pending_or_failed | rejected
)

# Bank directory metrics
bank_directory_resolution_counter = Counter(
    "bank_directory_resolutions_total",
    "Bank directory lookups by where the data came from",
    ["directory", "source"],  # bankcodes | listing ; cache | remote | fallback
)

bank_candidate_failure_counter = Counter(
    "bank_candidate_failures_total",
    "Failed bank-code candidate endpoint requests",
    ["candidate"],
)

# Upstream metrics
upstream_error_counter = Counter(
    "upstream_errors_total",
    "Failed calls to upstream services",
    ["operation"],
)

# Service health
request_duration_histogram = Histogram(
    "http_request_duration_seconds",
    "HTTP request latency",
    ["method", "endpoint", "status"],
)


def record_payout(succeeded: bool) -> None:
    """Record the outcome of a payout forwarded to payOS"""
    payout_counter.labels(outcome="succeeded" if succeeded else "pending_or_failed").inc()


def record_directory_source(directory: str, source: str) -> None:
    bank_directory_resolution_counter.labels(directory=directory, source=source).inc()
