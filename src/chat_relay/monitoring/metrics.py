"""Custom Prometheus metrics for Chat Relay.

Exposed at /metrics alongside the HTTP metrics from
prometheus-fastapi-instrumentator. Worth alerting on:
- retries_total{kind="overloaded"} (upstream capacity problems)
- chat_requests_total{status="overloaded"} (clients told to come back later)
"""

from prometheus_client import Counter, Histogram

# === Upstream Metrics ===

upstream_attempts_total = Counter(
    "upstream_attempts_total",
    "Upstream generateContent calls by outcome",
    ["outcome"],
)
"""
Labels:
- outcome: success, or the ErrorKind value of the failure
"""

upstream_latency_seconds = Histogram(
    "upstream_latency_seconds",
    "Latency of a single upstream generateContent call",
    buckets=(0.25, 0.5, 1.0, 2.5, 5.0, 10.0, 20.0, 30.0, 60.0),
)

# === Retry Metrics ===

retries_total = Counter(
    "retries_total",
    "Retries scheduled by the retry engine, by error kind",
    ["kind"],
)

# === Request Metrics ===

chat_requests_total = Counter(
    "chat_requests_total",
    "Chat relay requests by final status",
    ["status"],
)
"""
Labels:
- status: success, or the ErrorKind value the request ended with
"""
