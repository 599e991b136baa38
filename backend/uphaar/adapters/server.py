"""
Uphaar Backend: Long-Running Server Binding
===========================================

What:  Binds the Dispatcher to a FastAPI application served by uvicorn.
How:   The core matcher is authoritative. FastAPI registers ONE catch-all
       route (/{path:path}, all five methods); the endpoint converts the
       Starlette request into an HttpRequest, runs the Dispatcher, and
       converts the HttpResponse back. No per-route FastAPI routing exists,
       so this binding matches exactly like the serverless one.

Application Architecture:
    ┌────────────────────────────────────────────────────────┐
    │                     FastAPI App                        │
    │                                                        │
    │  Middleware Chain:                                     │
    │  ┌────────────┐  ┌────────────┐  ┌──────────────────┐  │
    │  │ Request ID │→ │ Access Log │→ │ CORS (preflight) │  │
    │  └────────────┘  └────────────┘  └──────────────────┘  │
    │                                                        │
    │  Route:  /{path:path}  →  Dispatcher  →  Route Table   │
    └────────────────────────────────────────────────────────┘

Lifecycle:
    Startup:
    1. Initialize logging
    2. Validate configuration (logged, not fatal)
    3. Build the AppContext and Dispatcher unless one was injected
    Shutdown:
    1. Close the context (verifier HTTP client, store connection pool)
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.responses import Response

from uphaar import __version__
from uphaar.config import Settings, settings as default_settings
from uphaar.context import AppContext, build_context
from uphaar.http.cors import CorsPolicy
from uphaar.http.types import (
    HTTP_METHODS,
    HttpRequest,
    HttpResponse,
    collect_headers,
    decode_body,
    error_response,
)
from uphaar.logs import request_id_var, setup_logging
from uphaar.middleware.cors import CorsMiddleware
from uphaar.middleware.logging import RequestLoggingMiddleware
from uphaar.middleware.request_id import RequestIDMiddleware
from uphaar.routes.registry import build_dispatcher
from uphaar.routing.dispatcher import INTERNAL_SERVER_ERROR, ROUTE_NOT_FOUND

logger = logging.getLogger(__name__)


# ── Request / Response translation ────────────────────────────────────────

async def to_http_request(request: Request) -> HttpRequest:
    # scope["path"]: percent-decoded by the server, query string excluded
    raw_body = await request.body()
    return HttpRequest(
        method=request.method,
        path=request.scope["path"] or "/",
        headers=collect_headers(request.headers.items()),
        body=decode_body(raw_body),
        query=dict(request.query_params),
    )


def to_starlette_response(response: HttpResponse) -> Response:
    if response.body is None:
        return Response(status_code=response.status_code, headers=response.headers)
    try:
        return JSONResponse(
            content=response.body,
            status_code=response.status_code,
            headers=response.headers,
        )
    except (TypeError, ValueError):
        logger.exception("[%s] Response body is not serializable as JSON", request_id_var.get(""))
        return JSONResponse(content={"error": INTERNAL_SERVER_ERROR}, status_code=500)


# ── Application Factory ───────────────────────────────────────────────────

def create_app(
    context: Optional[AppContext] = None,
    settings: Optional[Settings] = None,
) -> FastAPI:
    """
    Build the FastAPI application.

    An injected context is used as is and left open on shutdown (the caller
    owns it); otherwise the lifespan builds one from settings and closes it.
    """
    settings = settings or (context.settings if context else default_settings)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
        # ── Startup ───────────────────────────────────────────────────────
        setup_logging(settings.log_level)
        logger.info("=" * 60)
        logger.info("Uphaar API starting up...")

        try:
            settings.validate_required_for_production()
        except ValueError as e:
            logger.error("Configuration error: %s", str(e))
            logger.error("Authenticated routes will treat every caller as anonymous.")

        owned = app.state.context is None
        if owned:
            app.state.context = build_context(settings)
            app.state.dispatcher = build_dispatcher(app.state.context)

        logger.info("%d routes registered", len(app.state.dispatcher.routes))
        logger.info("Server ready at http://%s:%d", settings.backend_host, settings.backend_port)
        logger.info("=" * 60)

        yield

        # ── Shutdown ──────────────────────────────────────────────────────
        logger.info("Uphaar API shutting down...")
        if owned:
            await app.state.context.aclose()
            app.state.context = None
            app.state.dispatcher = None
        logger.info("Shutdown complete.")

    app = FastAPI(
        title="Uphaar API",
        description="Gift-sharing marketplace: list, browse and claim free or low-cost items.",
        version=__version__,
        docs_url=None,
        redoc_url=None,
        openapi_url=None,
        lifespan=lifespan,
    )
    app.state.context = context
    app.state.dispatcher = build_dispatcher(context) if context is not None else None

    # ── Register Middleware ───────────────────────────────────────────────
    # Last added runs first: RequestID → Access Log → CORS → endpoint
    app.add_middleware(CorsMiddleware, policy=CorsPolicy.from_settings(settings))
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(RequestIDMiddleware)

    # ── Catch-all Route ───────────────────────────────────────────────────
    @app.api_route("/{path:path}", methods=list(HTTP_METHODS), include_in_schema=False)
    async def dispatch(request: Request) -> Response:
        response = await app.state.dispatcher.dispatch(await to_http_request(request))
        return to_starlette_response(response)

    # ── Starlette routing errors ──────────────────────────────────────────
    # Methods outside HTTP_METHODS never reach the catch-all; they get the
    # Dispatcher's unmatched answer, as on the serverless binding
    @app.exception_handler(StarletteHTTPException)
    async def routing_error(request: Request, exc: StarletteHTTPException) -> Response:
        if exc.status_code in (404, 405):
            return to_starlette_response(error_response(404, ROUTE_NOT_FOUND))
        return to_starlette_response(error_response(exc.status_code, str(exc.detail)))

    return app
