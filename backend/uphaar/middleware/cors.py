"""
CORS middleware for the server binding.

Applies the same CorsPolicy as the serverless handler: OPTIONS requests are
answered here with an empty 204 and never reach the Dispatcher; every other
response gets the policy headers.
"""

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response
from starlette.types import ASGIApp

from uphaar.http.cors import CorsPolicy


class CorsMiddleware(BaseHTTPMiddleware):
    def __init__(self, app: ASGIApp, policy: CorsPolicy):
        super().__init__(app)
        self.policy = policy

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        origin = request.headers.get("origin")

        if request.method == "OPTIONS":
            preflight = self.policy.preflight(origin)
            return Response(status_code=preflight.status_code, headers=preflight.headers)

        response = await call_next(request)
        response.headers.update(self.policy.headers_for(origin))
        return response
