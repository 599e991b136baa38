"""
Uphaar Backend: Custom Exception Hierarchy
==========================================

What:  Application-specific exceptions, each carrying the HTTP status it maps to.
How:   Services and collaborators raise these. The route wrapper in
       routes/common.py converts them into {"error": message} responses, so a
       handler in the Route Table never throws for an expected failure.
       Anything else escapes to the Dispatcher and becomes a generic 500.

Exception Hierarchy:
    UphaarError (base)
    ├── BadRequestError          → 400 (missing or malformed input)
    ├── InvalidStateError        → 400 (business-rule violation)
    ├── UnauthorizedError        → 401 (no authenticated identity)
    ├── ForbiddenError           → 403 (authenticated but not entitled)
    ├── NotFoundError            → 404
    ├── RecordStoreError         → 500 (document store failure)
    │   └── PreconditionFailedError  (conditional update lost a race)
    └── TokenVerificationError   → 401 (bearer token rejected)
"""

from typing import Any, Dict, Optional


class UphaarError(Exception):
    """
    Base exception for all application errors.

    Attributes:
        message:  User-facing error description (safe to return in API response)
        context:  Additional debug info (logged but NOT returned to client)
    """

    status_code: int = 500

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)


class BadRequestError(UphaarError):
    """Client input is missing or fails validation."""

    status_code = 400

    def __init__(
        self,
        message: str = "Invalid request",
        field: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        if field:
            ctx["field"] = field
        super().__init__(message=message, context=ctx)
        self.field = field


class InvalidStateError(UphaarError):
    """
    The request is well-formed but the record's state forbids it.

    Examples: claiming an item that is no longer available, claiming your own
    item, completing an item twice.
    """

    status_code = 400


class UnauthorizedError(UphaarError):
    """The route needs an authenticated identity and the request has none."""

    status_code = 401

    def __init__(
        self,
        message: str = "Authentication required",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class ForbiddenError(UphaarError):
    """Authenticated, but the caller does not own the record."""

    status_code = 403


class NotFoundError(UphaarError):
    """
    A requested record does not exist.

    The message is "<Resource> not found", e.g. "Item not found".
    """

    status_code = 404

    def __init__(
        self,
        resource: str = "resource",
        resource_id: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        ctx["resource"] = resource
        if resource_id:
            ctx["resource_id"] = resource_id
        super().__init__(message=f"{resource.capitalize()} not found", context=ctx)
        self.resource = resource
        self.resource_id = resource_id


class RecordStoreError(UphaarError):
    """
    A Record Store operation failed.

    The message never reaches the client: the route wrapper answers with the
    route's own failure message and logs this one with its context.
    """

    status_code = 500

    def __init__(
        self,
        message: str = "A storage error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class TokenVerificationError(UphaarError):
    """The identity provider rejected a bearer token (malformed, expired, wrong audience)."""

    status_code = 401

    def __init__(
        self,
        message: str = "Invalid token",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class PreconditionFailedError(RecordStoreError):
    """
    A conditional update found the document changed since it was read.

    Raised by RecordStore.update() when the stored document no longer matches
    `expect`; services turn it into the business-rule error that applies.
    """

    def __init__(
        self,
        message: str = "Document no longer matches the update precondition",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)
