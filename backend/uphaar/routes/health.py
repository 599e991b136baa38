"""
Uphaar Backend: Health Check Route
==================================

What:  Liveness check for load balancers and container health checks.
How:   Always 200 while the process can dispatch; it touches neither the
       Record Store nor the identity provider.
Who:   GET /health on both host bindings. The access log skips it.
"""

from datetime import datetime, timezone

from uphaar.http.types import HttpRequest, HttpResponse, json_response


async def health_check(request: HttpRequest) -> HttpResponse:
    return json_response(
        {"status": "ok", "timestamp": datetime.now(timezone.utc).isoformat()}
    )
