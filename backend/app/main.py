"""FastAPI application: the main entrypoint for Channel Grouper."""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from datetime import UTC, datetime

from loguru import logger

from backend.app.config import VERSION, settings
from backend.app.log import setup_logging

setup_logging()

# ---------------------------------------------------------------------------
# Now import everything else (after logging is configured)
# ---------------------------------------------------------------------------

from fastapi import FastAPI, Request  # noqa: E402
from fastapi.middleware.cors import CORSMiddleware  # noqa: E402
from fastapi.responses import JSONResponse  # noqa: E402
from starlette.exceptions import HTTPException as StarletteHTTPException  # noqa: E402
from starlette.routing import Route  # noqa: E402

from backend.app.api.channels import router as channels_router  # noqa: E402
from backend.app.api.groups import router as groups_router  # noqa: E402
from backend.app.api.slack import router as slack_router  # noqa: E402
from backend.app.api.suggestions import router as suggestions_router  # noqa: E402
from backend.app.errors import ChannelGrouperError  # noqa: E402
from backend.app.services.channel_grouper import build_service  # noqa: E402
from backend.mcp_server import bind_service  # noqa: E402
from backend.mcp_server import mcp as mcp_server  # noqa: E402

# Create the MCP Starlette app once (needed for lifespan composition)
# path="/" means the MCP endpoint is at the root of this Starlette sub-app,
# which we expose at /mcp below.
mcp_starlette = mcp_server.http_app(path="/", transport="streamable-http")


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    # One service (and one group store) per process, shared with the MCP tools
    service = build_service(settings)
    app.state.grouper = service
    bind_service(service)
    logger.info(
        "Channel Grouper started | slack={} | saved_groups={}",
        "configured" if settings.slack_configured else "not configured",
        service.saved_groups_enabled,
    )
    # Run the MCP app's lifespan alongside ours
    async with mcp_starlette.router.lifespan_context(app):
        yield
    bind_service(None)


app = FastAPI(
    title="Slack Channel Grouper",
    description="Group Slack channels using regex patterns",
    version=VERSION,
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["GET", "POST", "DELETE", "OPTIONS"],
    allow_headers=["Content-Type", "X-API-Key"],
)


# --- Exception handlers ---


@app.exception_handler(ChannelGrouperError)
async def _grouper_error_handler(request: Request, exc: ChannelGrouperError) -> JSONResponse:
    """Map service errors onto their HTTP status with the error envelope."""
    logger.warning("{} on {} {}: {}", type(exc).__name__, request.method, request.url.path, exc.message)
    return JSONResponse(
        status_code=exc.status_code,
        content={"success": False, "error": exc.message},
    )


@app.exception_handler(StarletteHTTPException)
async def _http_error_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content={"success": False, "error": str(exc.detail)},
        headers=exc.headers,
    )


@app.exception_handler(Exception)
async def _unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Catch unhandled exceptions and return a clean JSON 500 instead of a stack trace."""
    logger.exception("Unhandled exception on {} {}", request.method, request.url.path)
    return JSONResponse(
        status_code=500,
        content={"success": False, "error": "Internal server error"},
    )


# Include routers
app.include_router(channels_router, prefix="/api")
app.include_router(groups_router, prefix="/api")
app.include_router(suggestions_router, prefix="/api")
app.include_router(slack_router)  # /slack/* (Slack request URLs, no /api prefix)

# Register the MCP endpoint as a Starlette Route at /mcp.
# A direct Route matches /mcp exactly; a mount at "/mcp" would only match /mcp/.
_mcp_handler = mcp_starlette.routes[0].app  # StreamableHTTPASGIApp
app.routes.append(Route("/mcp", endpoint=_mcp_handler))


# --- Health check & index ---


@app.get("/api/health")
async def health() -> dict:
    return {
        "status": "healthy",
        "timestamp": datetime.now(UTC).isoformat(),
        "version": VERSION,
        "services": {
            "api": "running",
            "slack": "configured" if settings.slack_configured else "not configured",
            "saved_groups": "enabled" if settings.saved_groups_enabled else "disabled",
        },
    }


@app.get("/")
async def index(request: Request) -> dict:
    base_url = str(request.base_url).rstrip("/")
    return {
        "name": "Slack Channel Grouper",
        "version": VERSION,
        "description": "Groups Slack channels using regex patterns",
        "endpoints": {
            "health": f"{base_url}/api/health",
            "channels": f"{base_url}/api/channels",
            "group": f"{base_url}/api/channels/group",
            "groups": f"{base_url}/api/groups/{{user_id}}",
            "suggestions": f"{base_url}/api/suggestions",
            "documentation": f"{base_url}/docs",
            "mcp": f"{base_url}/mcp",
            "slack": {
                "commands": f"{base_url}/slack/commands",
                "interactive": f"{base_url}/slack/interactive",
            },
        },
        "authentication": {
            "api": "Include X-API-Key header or api_key query parameter",
            "slack": "Requests are verified with SLACK_SIGNING_SECRET",
        },
    }
