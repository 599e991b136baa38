"""
Uphaar Backend: Request ID Middleware
=====================================

What:  Gives every request a short correlation id and echoes it back.
How:   Uses the client's X-Request-ID when present, otherwise a fresh uuid
       prefix; stores it in request_id_var and request.state, and sets the
       X-Request-ID response header.
When:  Outermost middleware (runs before all other processing).
"""

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from uphaar.logs import new_request_id, request_id_var


class RequestIDMiddleware(BaseHTTPMiddleware):
    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        rid = request.headers.get("X-Request-ID") or new_request_id()

        token = request_id_var.set(rid)
        request.state.request_id = rid
        try:
            response = await call_next(request)
        finally:
            request_id_var.reset(token)

        response.headers["X-Request-ID"] = rid
        return response
