"""
api/main.py -- FastAPI application entry point for Teamboard.

Run with:      uvicorn asgi:app --reload
               python asgi.py

Middleware stack (outermost to innermost):
  1. CORSMiddleware   -- adds CORS headers for the configured browser origins
  2. log_requests     -- one access-log line per request with latency

Lifespan builds the shared, read-only collaborators once (settings, token
service, stores) and hangs them on app.state; shutdown closes the stores.
"""

from __future__ import annotations

import logging
import time
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, PlainTextResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from api.models import ErrorItem, ErrorList, HealthResponse, MessageResponse
from api.routes.posts import router as posts_router
from api.routes.teams import router as teams_router
from auth.store import TeamStore
from auth.tokens import TokenService
from core.config import get_settings
from core.errors import AppError, InternalError
from posts.store import PostStore

API_VERSION = "0.1.0"

_settings = get_settings()

# ---------------------------------------------------------------------------
# Logging
# ---------------------------------------------------------------------------

logging.basicConfig(
    level=_settings.log_level.upper(),
    format="%(asctime)s %(levelname)-5s %(name)s %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
)
logger = logging.getLogger("teamboard.api")

# Client-facing messages for request fields that fail validation, keyed by
# field name. Fields not listed fall back to pydantic's own message.
_FIELD_MESSAGES: dict[str, str] = {
    "name": "Please enter the name of the soccer team",
    "city": "Please enter the city of the soccer team",
    "players": "Please enter number of players, must be at least 13",
    "secret": "Please enter a valid secret",
    "title": "Title text is required",
    "body": "Body text is required",
}


# ---------------------------------------------------------------------------
# Lifespan
# ---------------------------------------------------------------------------


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Create the process-wide collaborators on startup, close them on shutdown.

    Everything stored on app.state here is read-only once the server accepts
    requests, so handlers share it without locking.
    """
    logger.info("Teamboard API starting up")
    app.state.settings = _settings
    app.state.tokens = TokenService(_settings)
    app.state.teams = TeamStore(_settings.database_url)
    app.state.posts = PostStore(_settings.database_url)
    logger.info("Stores initialized (token ttl=%ds)", _settings.token_expire_seconds)

    yield

    app.state.teams.close()
    app.state.posts.close()
    logger.info("Teamboard API shutdown complete")


# ---------------------------------------------------------------------------
# App instantiation
# ---------------------------------------------------------------------------

app = FastAPI(
    title="Teamboard API",
    description="Team registration, token authentication and team-owned posts.",
    version=API_VERSION,
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=_settings.cors_origins,
    allow_methods=["GET", "POST", "PUT", "DELETE"],
    allow_headers=["Content-Type", "Authorization", "x-auth-token"],
    max_age=3600,
)


@app.middleware("http")
async def log_requests(request: Request, call_next):
    start = time.perf_counter()
    response = await call_next(request)
    ms = (time.perf_counter() - start) * 1000
    logger.info(
        "%s %s %d %.1fms %s",
        request.method,
        request.url.path,
        response.status_code,
        ms,
        request.client.host if request.client else "unknown",
    )
    return response


# ---------------------------------------------------------------------------
# Router registration
# ---------------------------------------------------------------------------

app.include_router(teams_router, prefix="/api", tags=["Teams"])
app.include_router(posts_router, prefix="/api", tags=["Posts"])


# ---------------------------------------------------------------------------
# Exception handlers
#
# Route code raises core.errors types; the handlers below are the only place
# responses for failures are built.
# ---------------------------------------------------------------------------


@app.exception_handler(AppError)
async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Return 422 with one {msg, param, location} entry per invalid field."""
    items: list[ErrorItem] = []
    seen: set[tuple] = set()
    for error in exc.errors():
        loc = tuple(error.get("loc", ()))
        if loc in seen:
            continue
        seen.add(loc)
        location = str(loc[0]) if loc else None
        param = str(loc[-1]) if len(loc) > 1 else None
        msg = _FIELD_MESSAGES.get(param or "", error.get("msg", "Invalid value"))
        items.append(ErrorItem(msg=msg, param=param, location=location))
    return JSONResponse(status_code=422, content=ErrorList(errors=items).model_dump())


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    """Unknown routes and wrong methods get the same {msg} body as everything else."""
    return JSONResponse(
        status_code=exc.status_code,
        content=MessageResponse(msg=str(exc.detail)).model_dump(),
        headers=getattr(exc, "headers", None),
    )


@app.exception_handler(Exception)
async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Catch-all handler for unexpected server errors.

    The raw exception goes to the log only, never to the response body.
    """
    logger.exception("Unhandled exception on %s %s", request.method, request.url.path)
    error = InternalError()
    return JSONResponse(status_code=error.status_code, content=error.to_dict())


# ---------------------------------------------------------------------------
# Liveness endpoints
# ---------------------------------------------------------------------------


@app.get("/", response_class=PlainTextResponse, include_in_schema=False)
async def root() -> str:
    return "http get request sent to root api endpoint"


@app.get("/api/", response_class=PlainTextResponse, include_in_schema=False)
async def api_root() -> str:
    return "http get request sent to api"


@app.get("/api/health", tags=["Health"])
async def health() -> HealthResponse:
    """Return API liveness and current version."""
    return HealthResponse(version=API_VERSION)
