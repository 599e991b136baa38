"""
Uphaar Backend: Dispatcher
==========================

What:  Runs one HttpRequest through the Route Table and returns an HttpResponse.
How:   A fixed sequence per request, identical for every host binding:

    Received ──(no route)──────────────────────────────→ Unmatched  → 404
        │
        └─(first route in table order)─→ Matched (params filled)
                                            │
                          requires_auth? ───┤
                            yes: Authentication Hook → Authenticated | Anonymous
                            no:  skip                → Anonymous
                                            │
                                            └→ handler → Handled → Responded

    Any exception along the way → Errored → 500 {"error": "Internal server error"};
    the cause is logged with its traceback, never returned.

The Dispatcher does NOT reject anonymous calls to requires_auth routes; it only
guarantees the hook ran. Handlers answer 401 themselves.
"""

import logging
from dataclasses import replace

from uphaar.auth.hook import authenticate
from uphaar.auth.verifier import TokenVerifier
from uphaar.http.types import HttpRequest, HttpResponse, error_response
from uphaar.logs import request_id_var
from uphaar.routing.table import RouteTable

logger = logging.getLogger(__name__)

ROUTE_NOT_FOUND = "Route not found"
INTERNAL_SERVER_ERROR = "Internal server error"


class Dispatcher:
    """Owns the Route Table for the lifetime of the process."""

    def __init__(self, routes: RouteTable, verifier: TokenVerifier):
        self.routes = routes
        self.verifier = verifier

    async def dispatch(self, request: HttpRequest) -> HttpResponse:
        rid = request_id_var.get("")
        method, path = request.method, request.path
        try:
            resolved = self.routes.resolve(method, path)
            if resolved is None:
                logger.info("[%s] No route for %s %s", rid, method, path)
                return error_response(404, ROUTE_NOT_FOUND)

            route, params = resolved
            logger.debug("[%s] %s %s → %s", rid, method, path, route)
            request = replace(request, params=params)

            if route.requires_auth:
                request = await authenticate(request, self.verifier)

            response = await route.handler(request)
            if not isinstance(response, HttpResponse):
                raise TypeError(
                    f"Handler for {route} returned {type(response).__name__}, expected HttpResponse"
                )
            return response

        except Exception:
            logger.exception("[%s] Unhandled error on %s %s", rid, method, path)
            return error_response(500, INTERNAL_SERVER_ERROR)
