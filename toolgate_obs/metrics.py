"""
Prometheus Metrics Registration.

Custom metrics for tool execution outcomes and upstream calls.
"""

from prometheus_client import Counter, Histogram

# ============================================================================
# COUNTERS
# ============================================================================

tool_executions_total = Counter(
    "toolgate_tool_executions_total",
    "Total tool executions",
    ["tool_id", "outcome"],  # success, setup_needed, error
)

tool_execution_errors_total = Counter(
    "toolgate_tool_execution_errors_total",
    "Tool executions that ended in an error outcome",
    ["tool_id", "kind"],
)

upstream_requests_total = Counter(
    "toolgate_upstream_requests_total",
    "Outbound API calls made on behalf of tools",
    ["tool_id", "status_class"],  # 2xx, 3xx, 4xx, 5xx, unreachable
)

# ============================================================================
# HISTOGRAMS
# ============================================================================

tool_execution_duration = Histogram(
    "toolgate_tool_execution_duration_seconds",
    "Tool execution duration",
    ["tool_id"],
    buckets=(0.05, 0.1, 0.5, 1.0, 2.0, 5.0, 10.0, 30.0, 120.0),
)


def status_class(status_code: int | None) -> str:
    """Bucket an HTTP status code for the upstream request counter."""
    if status_code is None:
        return "unreachable"
    return f"{status_code // 100}xx"
