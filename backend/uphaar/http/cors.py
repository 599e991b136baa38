"""
Uphaar Backend: CORS Policy
===========================

What:  The single CORS policy applied by both host bindings.
How:   Fixed allow-methods and allow-headers lists, credentials always enabled,
       and the request Origin echoed back only when it is on the configured
       allow-list. Preflight (OPTIONS) requests are answered with an empty 204
       before any route is consulted.
Who:   CorsMiddleware (server binding) and ServerlessHandler.
"""

from typing import Dict, Iterable, Optional, Tuple

from uphaar.config import Settings
from uphaar.http.types import HttpResponse

ALLOWED_METHODS: Tuple[str, ...] = ("GET", "POST", "PUT", "DELETE", "PATCH", "OPTIONS")
ALLOWED_HEADERS: Tuple[str, ...] = ("Content-Type", "Authorization")


class CorsPolicy:
    """
    Allow-list CORS policy.

    An origin not on the list gets no Access-Control-Allow-Origin header, which
    makes the browser reject the response; the request itself is still served.
    """

    def __init__(self, allowed_origins: Iterable[str]):
        self.allowed_origins = frozenset(o.strip() for o in allowed_origins if o.strip())

    @classmethod
    def from_settings(cls, settings: Settings) -> "CorsPolicy":
        return cls(settings.cors_origins_list)

    def is_allowed(self, origin: Optional[str]) -> bool:
        return bool(origin) and origin in self.allowed_origins

    def headers_for(self, origin: Optional[str]) -> Dict[str, str]:
        headers = {
            "Access-Control-Allow-Methods": ", ".join(ALLOWED_METHODS),
            "Access-Control-Allow-Headers": ", ".join(ALLOWED_HEADERS),
            "Access-Control-Allow-Credentials": "true",
        }
        if self.is_allowed(origin):
            headers["Access-Control-Allow-Origin"] = origin
            headers["Vary"] = "Origin"
        return headers

    def preflight(self, origin: Optional[str]) -> HttpResponse:
        """Empty 204 carrying the CORS headers."""
        return HttpResponse(status_code=204, body=None, headers=self.headers_for(origin))
