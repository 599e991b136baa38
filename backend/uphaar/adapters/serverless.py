"""
Uphaar Backend: Serverless Single-Entry Binding
===============================================

What:  Binds the Dispatcher to a function platform that delivers every request
       to one entry point (API Gateway proxy events on AWS Lambda).
How:   No native router exists here, so the Route Table is the only matcher.
       Per event:
           1. set request_id_var (event request id, X-Request-ID, or fresh)
           2. OPTIONS → empty 204 with CORS headers, no dispatch
           3. event → HttpRequest → Dispatcher → HttpResponse
           4. HttpResponse → {"statusCode", "headers", "body"} with CORS headers

Accepted event shapes:
    v1 (REST API):  httpMethod, path, headers, multiValueHeaders,
                    queryStringParameters, body, isBase64Encoded
    v2 (HTTP API):  requestContext.http.method, rawPath, rawQueryString,
                    headers, queryStringParameters, body, isBase64Encoded
"""

import asyncio
import base64
import logging
import time
from typing import Any, Dict, Iterator, Optional, Tuple
from urllib.parse import parse_qsl

from uphaar.context import AppContext
from uphaar.http.cors import CorsPolicy
from uphaar.http.types import (
    HttpRequest,
    HttpResponse,
    collect_headers,
    decode_body,
    encode_json,
    error_response,
    first_value,
)
from uphaar.logs import log_access, new_request_id, request_id_var
from uphaar.routes.registry import build_dispatcher
from uphaar.routing.dispatcher import INTERNAL_SERVER_ERROR, Dispatcher

logger = logging.getLogger(__name__)


def _header_pairs(event: Dict[str, Any]) -> Iterator[Tuple[str, str]]:
    multi = event.get("multiValueHeaders") or {}
    if multi:
        for name, values in multi.items():
            for value in values or []:
                yield name, value
        return
    for name, value in (event.get("headers") or {}).items():
        if value is not None:
            yield name, value


def _method(event: Dict[str, Any]) -> str:
    http = (event.get("requestContext") or {}).get("http") or {}
    return str(http.get("method") or event.get("httpMethod") or "GET").upper()


def _source_ip(event: Dict[str, Any]) -> str:
    request_context = event.get("requestContext") or {}
    http = request_context.get("http") or {}
    identity = request_context.get("identity") or {}
    return http.get("sourceIp") or identity.get("sourceIp") or "unknown"


def _raw_body(event: Dict[str, Any]) -> Optional[bytes]:
    body = event.get("body")
    if body is None:
        return None
    if event.get("isBase64Encoded"):
        return base64.b64decode(body)
    return body.encode("utf-8")


def _query(event: Dict[str, Any]) -> Dict[str, str]:
    parameters = event.get("queryStringParameters")
    if parameters:
        return {key: value for key, value in parameters.items() if value is not None}
    # v2 events may carry only the raw string
    return dict(parse_qsl(event.get("rawQueryString") or "", keep_blank_values=True))


def event_to_request(event: Dict[str, Any]) -> HttpRequest:
    return HttpRequest(
        method=_method(event),
        path=event.get("rawPath") or event.get("path") or "/",
        headers=collect_headers(_header_pairs(event)),
        body=decode_body(_raw_body(event)),
        query=_query(event),
    )


class ServerlessHandler:
    """
    Callable entry point: handler(event, context) -> proxy response dict.

    Keeps one event loop for the life of the execution environment, so the
    verifier's key cache and the store's connections survive across
    invocations.
    """

    def __init__(self, dispatcher: Dispatcher, cors: CorsPolicy):
        self.dispatcher = dispatcher
        self.cors = cors
        self._loop: Optional[asyncio.AbstractEventLoop] = None

    @classmethod
    def from_context(cls, context: AppContext) -> "ServerlessHandler":
        return cls(build_dispatcher(context), CorsPolicy.from_settings(context.settings))

    def _to_proxy_response(
        self, response: HttpResponse, origin: Optional[str], rid: str
    ) -> Dict[str, Any]:
        headers = dict(self.cors.headers_for(origin))
        status_code = response.status_code
        body = ""
        if response.body is not None:
            headers["Content-Type"] = "application/json"
            try:
                body = encode_json(response.body)
            except (TypeError, ValueError):
                logger.exception("[%s] Response body is not serializable as JSON", rid)
                status_code = 500
                body = encode_json({"error": INTERNAL_SERVER_ERROR})
        headers.update(response.headers or {})
        headers["X-Request-ID"] = rid
        return {"statusCode": status_code, "headers": headers, "body": body}

    async def handle(self, event: Dict[str, Any]) -> Dict[str, Any]:
        start_time = time.perf_counter()
        headers = collect_headers(_header_pairs(event))
        origin = first_value(headers, "origin")
        rid = (
            (event.get("requestContext") or {}).get("requestId")
            or first_value(headers, "x-request-id")
            or new_request_id()
        )
        token = request_id_var.set(rid)
        try:
            method = _method(event)
            if method == "OPTIONS":
                return self._to_proxy_response(self.cors.preflight(origin), origin, rid)

            try:
                request = event_to_request(event)
            except (ValueError, TypeError, AttributeError):
                logger.exception("[%s] Malformed event", rid)
                response = error_response(500, INTERNAL_SERVER_ERROR)
            else:
                response = await self.dispatcher.dispatch(request)
                if request.path != "/health":
                    log_access(
                        request.method,
                        request.path,
                        response.status_code,
                        (time.perf_counter() - start_time) * 1000,
                        _source_ip(event),
                    )

            return self._to_proxy_response(response, origin, rid)
        finally:
            request_id_var.reset(token)

    def __call__(self, event: Dict[str, Any], context: Any = None) -> Dict[str, Any]:
        if self._loop is None or self._loop.is_closed():
            self._loop = asyncio.new_event_loop()
        return self._loop.run_until_complete(self.handle(event))
