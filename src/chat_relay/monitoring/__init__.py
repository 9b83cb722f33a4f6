"""Prometheus metrics for Chat Relay."""

from chat_relay.monitoring.metrics import (
    chat_requests_total,
    retries_total,
    upstream_attempts_total,
    upstream_latency_seconds,
)

__all__ = [
    "chat_requests_total",
    "retries_total",
    "upstream_attempts_total",
    "upstream_latency_seconds",
]
