"""
Uphaar Backend: Access Log Middleware
=====================================

What:  Times each request and hands the result to logs.log_access().
How:   Runs inside RequestIDMiddleware, so the line carries the request id.
       GET /health is skipped (health checks hit it every few seconds).
"""

import time

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from uphaar.logs import log_access


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        if request.url.path == "/health":
            return await call_next(request)

        started = time.perf_counter()
        response = await call_next(request)
        log_access(
            request.method,
            request.url.path,
            response.status_code,
            (time.perf_counter() - started) * 1000,
            request.client.host if request.client else "unknown",
        )
        return response
