"""
Toolgate FastAPI Application.

Main API server providing:
- /tools: Tool catalog and execution endpoints
- /healthz, /readyz: Health checks
- /metrics: Prometheus metrics
"""

__all__ = ["app"]
