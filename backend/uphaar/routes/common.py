"""
Shared plumbing for route handlers.

api_handler() is the per-route error wrapper: it converts application
exceptions into {"error": ...} responses so that expected failures never
cross the Dispatcher. Anything that is not an UphaarError is left to the
Dispatcher's generic 500.
"""

import functools
import logging
from typing import Any, Awaitable, Callable, Optional, Tuple, Type, TypeVar

from pydantic import BaseModel, ValidationError

from uphaar.auth.identity import Identity
from uphaar.exceptions import BadRequestError, UnauthorizedError, UphaarError
from uphaar.http.types import HttpRequest, HttpResponse, error_response
from uphaar.logs import request_id_var

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)
HandlerFunc = Callable[..., Awaitable[HttpResponse]]


def api_handler(failure_message: str) -> Callable[[HandlerFunc], HandlerFunc]:
    """
    Decorate a handler with the route's error mapping.

    4xx exceptions answer with their own message. 5xx exceptions are logged
    with their context and answer with failure_message ("Failed to fetch
    items", ...), never the internal message.
    """

    def decorator(func: HandlerFunc) -> HandlerFunc:
        @functools.wraps(func)
        async def wrapper(*args: Any, **kwargs: Any) -> HttpResponse:
            try:
                return await func(*args, **kwargs)
            except UphaarError as e:
                rid = request_id_var.get("")
                if e.status_code >= 500:
                    logger.error(
                        "[%s] %s: %s | Context: %s", rid, failure_message, e.message, e.context
                    )
                    return error_response(500, failure_message)
                logger.warning("[%s] %d %s %s", rid, e.status_code, e.message, e.context)
                return error_response(e.status_code, e.message)

        return wrapper

    return decorator


def require_identity(request: HttpRequest) -> Identity:
    """The authenticated caller, or UnauthorizedError for an anonymous request."""
    if request.user is None or not request.user.uid:
        raise UnauthorizedError()
    return request.user


def _first_error(error: ValidationError) -> Tuple[Optional[str], str]:
    """(dotted field location or None, readable message) of the first failure."""
    first = error.errors()[0]
    location = ".".join(str(part) for part in first.get("loc", ())) or None
    msg = first.get("msg", "Invalid request")
    return location, (f"Invalid {location}: {msg}" if location else msg)


def parse_body(
    model: Type[ModelT],
    request: HttpRequest,
    message: Optional[str] = None,
) -> ModelT:
    """
    Validate the request body against model.

    A missing body validates as {}; a body that is not a JSON object, or fails
    validation, raises BadRequestError (with message when given).
    """
    body = request.body if request.body is not None else {}
    if not isinstance(body, dict):
        raise BadRequestError(message or "Request body must be a JSON object")
    try:
        return model.model_validate(body)
    except ValidationError as e:
        location, description = _first_error(e)
        raise BadRequestError(
            message or description, field=location, context={"errors": e.error_count()}
        ) from e
