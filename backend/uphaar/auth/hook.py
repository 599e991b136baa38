"""
Authentication Hook.

Run by the Dispatcher before the handler of every requires_auth route. It
never fails the request: whatever goes wrong while reading or verifying the
token, the request stays anonymous (user=None) and the handler decides whether
that is acceptable.
"""

import logging
from dataclasses import replace
from typing import Optional

from uphaar.auth.verifier import TokenVerifier
from uphaar.exceptions import TokenVerificationError
from uphaar.http.types import HttpRequest

logger = logging.getLogger(__name__)

BEARER_PREFIX = "Bearer "


def extract_bearer_token(request: HttpRequest) -> Optional[str]:
    """Token from `Authorization: Bearer <token>`; any other shape is None."""
    header = request.header("authorization")
    if not header or not header.startswith(BEARER_PREFIX):
        return None
    token = header[len(BEARER_PREFIX):].strip()
    return token or None


async def authenticate(request: HttpRequest, verifier: TokenVerifier) -> HttpRequest:
    token = extract_bearer_token(request)
    if token is None:
        logger.debug("No bearer token on %s %s", request.method, request.path)
        return request

    try:
        identity = await verifier.verify(token)
    except TokenVerificationError as e:
        logger.warning(
            "Token verification failed for %s %s (token %s...): %s %s",
            request.method,
            request.path,
            token[:10],
            e.message,
            e.context,
        )
        return request
    except Exception:
        logger.exception(
            "Token verifier failed for %s %s; continuing anonymous", request.method, request.path
        )
        return request

    logger.debug("Authenticated %s for %s %s", identity.uid, request.method, request.path)
    return replace(request, user=identity)
