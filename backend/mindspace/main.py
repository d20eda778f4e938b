"""MindSpace Server - Entry point.

Runs the MCP server and the insights API over HTTP.
Uses Starlette with the MCP HTTP app for maximum compatibility.
"""

import logging
import os
from datetime import date

import uvicorn
from starlette.applications import Starlette
from starlette.middleware import Middleware
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.middleware.cors import CORSMiddleware
from starlette.requests import Request
from starlette.responses import JSONResponse
from starlette.routing import Mount, Route

from .core.models import UserProfile
from .core.reports import TimeRange
from .shell import service
from .shell.auth import RegistrationError, authenticate, register
from .shell.mcp_server import current_user_id, get_firestore_client, mcp


logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)

DEFAULT_CORS_ORIGINS = "https://mindspace.app,http://localhost:3000"


def cors_origins() -> list[str]:
    """Allowed CORS origins from CORS_ORIGINS (comma separated)."""
    raw = os.environ.get("CORS_ORIGINS", DEFAULT_CORS_ORIGINS)
    return [origin.strip() for origin in raw.split(",") if origin.strip()]


# ==================== Route Handlers ====================


async def health_check(request: Request) -> JSONResponse:
    """Health check endpoint for Cloud Run."""
    return JSONResponse({"status": "healthy", "service": "mindspace"})


def _caller(request: Request) -> UserProfile | None:
    return authenticate(get_firestore_client(), request.headers.get("Authorization", ""))


def _unauthorized() -> JSONResponse:
    return JSONResponse({"error": "Authentication required"}, status_code=401)


async def register_user(request: Request) -> JSONResponse:
    """Create a MindSpace profile and return its API key.

    Body: {"name": "...", "email": "..."}
    """
    try:
        body = await request.json()
    except ValueError:
        body = None
    if not isinstance(body, dict):
        return JSONResponse({"error": "Expected a JSON object"}, status_code=400)

    try:
        api_key, profile = register(get_firestore_client(), body.get("name"), body.get("email"))
    except ValueError as e:
        return JSONResponse({"error": str(e)}, status_code=400)
    except RegistrationError as e:
        logger.error("Registration failed: %s", str(e))
        return JSONResponse({"error": "Registration failed."}, status_code=500)

    base_url = os.environ.get("BASE_URL", "http://localhost:8080")
    return JSONResponse({
        "api_key": api_key,
        "name": profile.name,
        "message": f"Welcome, {profile.name}! Save your API key - it won't be shown again.",
        "mcp_url": f"{base_url}/mcp",
    })


async def get_profile(request: Request) -> JSONResponse:
    """Profile of the key holder; also how clients check a stored key."""
    profile = _caller(request)
    if profile is None:
        return _unauthorized()
    return JSONResponse({
        "name": profile.name,
        "email": profile.email,
        "createdAt": profile.created_at.isoformat(),
    })


async def get_insights(request: Request) -> JSONResponse:
    """Insights report for the chart components.

    Query params:
        range: 1m, 3m (default), 6m or 1y
    """
    profile = _caller(request)
    if profile is None:
        return _unauthorized()

    try:
        time_range = TimeRange(request.query_params.get("range", TimeRange.THREE_MONTHS.value))
    except ValueError:
        return JSONResponse(
            {"error": "Invalid range. Use 1m, 3m, 6m or 1y."}, status_code=400
        )

    try:
        report = service.load_insights(
            get_firestore_client(), profile.user_id, time_range, date.today()
        )
    except Exception as e:
        logger.error("Insights failed: %s", str(e))
        return JSONResponse({"error": "Failed to analyze mood data."}, status_code=500)

    return JSONResponse(report)


# ==================== Auth Middleware ====================


class AuthMiddleware(BaseHTTPMiddleware):
    """Bind the key holder's user id for MCP tool calls.

    Unauthenticated MCP calls still reach the tools, which refuse them.
    """

    async def dispatch(self, request: Request, call_next):
        if request.url.path.startswith("/mcp"):
            profile = _caller(request)
            if profile is not None:
                current_user_id.set(profile.user_id)

        return await call_next(request)


# ==================== Create ASGI App ====================


def create_app() -> Starlette:
    """Create the Starlette application with MCP at root.

    The MCP streamable_http_app() handles /mcp/ internally when mounted at root.
    We use its lifespan context to ensure proper initialization.
    """
    mcp_app = mcp.streamable_http_app()

    # Custom routes first, then MCP app at root
    routes = [
        Route("/health", health_check, methods=["GET"]),
        Route("/auth/register", register_user, methods=["POST"]),
        Route("/api/profile", get_profile, methods=["GET"]),
        Route("/api/insights", get_insights, methods=["GET"]),
        Mount("/", app=mcp_app),
    ]

    app = Starlette(
        routes=routes,
        middleware=[
            Middleware(
                CORSMiddleware,
                allow_origins=cors_origins(),
                allow_methods=["GET", "POST", "OPTIONS"],
                allow_headers=["*"],
            ),
            Middleware(AuthMiddleware),
        ],
        lifespan=mcp_app.router.lifespan_context,
    )

    return app


# Create app at module level for Cloud Run
app = create_app()


def main() -> None:
    """Run the server."""
    port = int(os.environ.get("PORT", 8080))
    host = os.environ.get("HOST", "0.0.0.0")

    logger.info("Starting MindSpace server on %s:%d", host, port)

    uvicorn.run(app, host=host, port=port)


if __name__ == "__main__":
    main()
