"""Prometheus metrics for tool execution and model calls."""

from __future__ import annotations

from prometheus_client import Counter, Histogram, start_http_server

# One increment per guarded attempt: success, timeout or error
TOOL_ATTEMPTS = Counter(
    "agent_chat_tool_attempts_total",
    "Tool execution attempts",
    ["tool_name", "outcome"],
)

# Final disposition of a wrapped tool call
TOOL_EXECUTIONS = Counter(
    "agent_chat_tool_executions_total",
    "Total wrapped tool executions",
    ["tool_name", "status"],
)

LLM_LATENCY = Histogram(
    "agent_chat_llm_latency_seconds",
    "LLM request duration in seconds",
    ["provider"],
    buckets=(0.5, 1.0, 2.0, 5.0, 10.0, 30.0),
)


def start_metrics_server(port: int = 9090) -> None:
    """Start Prometheus HTTP server for scraping. Call from main when enabled."""
    start_http_server(port)


def record_tool_attempt(tool_name: str, outcome: str) -> None:
    TOOL_ATTEMPTS.labels(tool_name=tool_name, outcome=outcome).inc()


def record_tool_execution(tool_name: str, status: str) -> None:
    TOOL_EXECUTIONS.labels(tool_name=tool_name, status=status).inc()


def record_llm_latency(provider: str, duration_seconds: float) -> None:
    LLM_LATENCY.labels(provider=provider).observe(duration_seconds)
