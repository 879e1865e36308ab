"""
Prometheus Metrics Endpoint.

Exposes /metrics for Prometheus scraping.
"""

from fastapi import APIRouter, Response
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest

# Registers the tool collectors with the default registry
from toolgate_obs import metrics as _tool_metrics  # noqa: F401

router = APIRouter()


@router.get("/metrics")
async def metrics():
    """
    Prometheus metrics endpoint.

    Example metrics:
    ```
    # HELP toolgate_tool_executions_total Total tool executions
    # TYPE toolgate_tool_executions_total counter
    toolgate_tool_executions_total{tool_id="send_email",outcome="success"} 15.0
    ```

    Returns:
        Prometheus text format metrics
    """
    return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)
