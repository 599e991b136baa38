"""
Uphaar Backend: Request/Response Model
======================================

What:  The normalized shapes every host adapter produces and consumes.
How:   Adapters translate their native request into an HttpRequest before
       dispatch and emit the returned HttpResponse through their own mechanism.
       Only structural shape is handled here; validation belongs to handlers.

Lifecycle of an HttpRequest:
    adapter builds it (params empty, user None)
    → Dispatcher fills params once, after a successful match
    → Authentication Hook may fill user (requires_auth routes only)
    → handler reads it
Each step produces a new value via dataclasses.replace(); nothing is shared
across requests.
"""

import json
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Literal, Mapping, Optional, Tuple, Union

from uphaar.auth.identity import Identity

HttpMethod = Literal["GET", "POST", "PUT", "DELETE", "PATCH"]
HTTP_METHODS: Tuple[str, ...] = ("GET", "POST", "PUT", "DELETE", "PATCH")

HeaderValue = Union[str, List[str]]


@dataclass(frozen=True)
class HttpRequest:
    """
    Adapter-independent HTTP request.

    path is the request path exactly as the host delivered it, without the
    query string; it is never re-parsed as a URL, so "//a/b" stays two
    segments. The query string arrives already split into query.

    Header names are lower-cased by the adapters; a header that appeared more
    than once holds a list of values.
    """

    method: str
    path: str
    headers: Dict[str, HeaderValue] = field(default_factory=dict)
    body: Any = None
    params: Dict[str, str] = field(default_factory=dict)
    query: Dict[str, str] = field(default_factory=dict)
    user: Optional[Identity] = None

    def header(self, name: str, default: Optional[str] = None) -> Optional[str]:
        """Case-insensitive header lookup; the first value wins for repeated headers."""
        wanted = name.lower()
        for key, value in self.headers.items():
            if key.lower() != wanted:
                continue
            if isinstance(value, list):
                return value[0] if value else default
            return value
        return default


@dataclass
class HttpResponse:
    """Adapter-independent HTTP response. A None body is emitted as an empty body."""

    status_code: int
    body: Any = None
    headers: Optional[Dict[str, str]] = None


def json_response(
    body: Any,
    status_code: int = 200,
    headers: Optional[Dict[str, str]] = None,
) -> HttpResponse:
    return HttpResponse(status_code=status_code, body=body, headers=headers)


def error_response(status_code: int, message: str) -> HttpResponse:
    """Every error body has the shape {"error": message}."""
    return HttpResponse(status_code=status_code, body={"error": message})


def collect_headers(pairs: Iterable[Tuple[str, str]]) -> Dict[str, HeaderValue]:
    """
    Fold (name, value) pairs into the HttpRequest header mapping.

    Names are lower-cased; a name seen twice becomes a list in arrival order.
    """
    headers: Dict[str, HeaderValue] = {}
    for name, value in pairs:
        key = name.lower()
        if key not in headers:
            headers[key] = value
            continue
        existing = headers[key]
        if isinstance(existing, list):
            existing.append(value)
        else:
            headers[key] = [existing, value]
    return headers


def _reject_constant(name: str) -> Any:
    raise ValueError(f"{name} is not valid JSON")


def decode_body(raw: Union[bytes, str, None]) -> Any:
    """
    Turn a raw transport body into the HttpRequest body.

    Empty → None, valid JSON → the parsed value, anything else → the text.
    NaN and Infinity are not JSON, so a body using them stays text.
    """
    if raw is None:
        return None
    text = raw.decode("utf-8", errors="replace") if isinstance(raw, bytes) else raw
    if not text.strip():
        return None
    try:
        return json.loads(text, parse_constant=_reject_constant)
    except ValueError:
        return text


def first_value(headers: Mapping[str, HeaderValue], name: str) -> Optional[str]:
    """Single-valued view of a (lower-cased) header mapping."""
    value = headers.get(name.lower())
    if isinstance(value, list):
        return value[0] if value else None
    return value


def encode_json(body: Any) -> str:
    """Strict JSON text for a response body; raises ValueError for NaN/Infinity."""
    return json.dumps(body, allow_nan=False)
