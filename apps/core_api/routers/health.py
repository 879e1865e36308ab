"""
Health Check Endpoints.

- GET /healthz: Liveness probe (API running)
- GET /readyz: Readiness probe (tool service wired, collaborators configured)
"""

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse

from toolgate_config.settings import Settings

from apps.core_api.deps import get_app_settings

router = APIRouter()


@router.get("/healthz")
async def healthz():
    """
    Liveness probe - is the API process running?

    Returns 200 OK if server is alive.
    """
    return {"status": "healthy", "service": "toolgate-api"}


@router.get("/readyz")
async def readyz(request: Request, settings: Settings = Depends(get_app_settings)):
    """
    Readiness probe - is the API ready to serve traffic?

    Unconfigured collaborators are reported but do not fail the probe:
    tools that need them return collaborator errors, other tools still run.

    Returns:
        200 OK if the tool service is initialized
        503 Service Unavailable otherwise
    """
    checks = {
        "tool_service": "ok" if getattr(request.app.state, "tool_service", None) else "failed",
        "secret_service": "configured" if settings.SECRET_SERVICE_URL else "not_configured",
        "tool_auth_service": "configured" if settings.TOOL_AUTH_SERVICE_URL else "not_configured",
    }

    if checks["tool_service"] != "ok":
        return JSONResponse(status_code=503, content={"status": "unhealthy", "checks": checks})
    return {"status": "ready", "checks": checks}
