"""
Toolgate FastAPI Application Entry Point.

This module initializes the FastAPI application with:
- CORS middleware
- OpenTelemetry instrumentation (when enabled)
- Request ID injection and request logging
- Lifespan context management (catalog, collaborator clients, transport)
- Router mounting
"""

from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from opentelemetry.instrumentation.fastapi import FastAPIInstrumentor

from toolgate_config.settings import get_settings
from toolgate_obs.logging import get_logger, setup_logging
from toolgate_obs.tracing import setup_tracing
from toolgate_tools.catalog import JsonFileToolCatalog
from toolgate_tools.clients import SecretServiceClient, ToolAuthServiceClient
from toolgate_tools.engine import ToolExecutionEngine
from toolgate_tools.service import ToolService
from toolgate_tools.transport import HttpxTransport

from apps.core_api.middleware import RequestIDMiddleware, RequestLoggingMiddleware
from apps.core_api.routers import health, metrics, tools

settings = get_settings()

setup_logging(settings)
tracing_enabled = setup_tracing(settings)

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Application lifespan context manager.

    Handles:
    - Tool catalog initialization
    - Secret service and tool auth service clients
    - Outbound HTTP transport (closed on shutdown)
    """
    # Re-read so tests can point the app at a temporary catalog
    current = get_settings()

    logger.info(
        "api_starting",
        environment=current.ENVIRONMENT,
        catalog_path=current.TOOL_CATALOG_PATH,
    )

    transport = HttpxTransport()
    engine = ToolExecutionEngine(
        secret_store=SecretServiceClient(
            current.SECRET_SERVICE_URL,
            api_key=current.SECRET_SERVICE_API_KEY,
            timeout_seconds=current.COLLABORATOR_TIMEOUT_SECONDS,
        ),
        oauth_backend=ToolAuthServiceClient(
            current.TOOL_AUTH_SERVICE_URL,
            api_key=current.TOOL_AUTH_SERVICE_API_KEY,
            timeout_seconds=current.COLLABORATOR_TIMEOUT_SECONDS,
        ),
        transport=transport,
        http_timeout=current.TOOL_HTTP_TIMEOUT_SECONDS,
    )
    app.state.tool_service = ToolService(JsonFileToolCatalog(current.TOOL_CATALOG_PATH), engine)

    tool_count = len(await app.state.tool_service.list_available_tools())
    logger.info("api_ready", tool_count=tool_count)

    yield

    logger.info("api_shutting_down")
    await transport.aclose()
    app.state.tool_service = None


# Initialize FastAPI application
app = FastAPI(
    title="Toolgate API",
    description="Declarative external tool execution service",
    version="0.1.0",
    docs_url="/docs",
    redoc_url="/redoc",
    openapi_url="/openapi.json",
    lifespan=lifespan,
)

# ============================================================================
# MIDDLEWARE
# ============================================================================

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.API_CORS_ORIGINS.split(",") if settings.API_CORS_ORIGINS else ["*"],
    allow_methods=["*"],
    allow_headers=["*"],
    expose_headers=["X-Request-ID"],
)

app.add_middleware(RequestLoggingMiddleware)

# Added last so it runs first and request logs carry the request id
app.add_middleware(RequestIDMiddleware)

if tracing_enabled:
    FastAPIInstrumentor.instrument_app(app)

# ============================================================================
# EXCEPTION HANDLERS
# ============================================================================


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    """Global exception handler for unhandled exceptions."""
    logger.error(
        "unhandled_exception",
        path=request.url.path,
        error_type=type(exc).__name__,
        exc_info=exc,
    )

    return JSONResponse(
        status_code=500,
        content={
            "success": False,
            "error": "An unexpected error occurred.",
            "request_id": getattr(request.state, "request_id", None),
        },
    )


# ============================================================================
# ROUTERS
# ============================================================================

app.include_router(tools.router, prefix="/tools", tags=["tools"])

# Health and metrics
app.include_router(health.router, prefix="", tags=["health"])
app.include_router(metrics.router, prefix="", tags=["metrics"])


# ============================================================================
# ROOT ENDPOINT
# ============================================================================


@app.get("/", tags=["root"])
async def root():
    """
    Root endpoint - API information.

    Returns:
        API metadata and available endpoints
    """
    return {
        "name": "Toolgate API",
        "version": "0.1.0",
        "docs": "/docs",
        "health": "/healthz",
        "metrics": "/metrics",
        "endpoints": {
            "list_tools": "GET /tools",
            "tool_detail": "GET /tools/{id}",
            "add_tool": "POST /tools",
            "execute_tool": "POST /tools/{id}/execute",
        },
    }


if __name__ == "__main__":
    import uvicorn

    # Development server (auto-reload enabled)
    uvicorn.run(
        "apps.core_api.main:app",
        host=settings.API_HOST,
        port=settings.API_PORT,
        reload=True,
        log_level="info",
    )
