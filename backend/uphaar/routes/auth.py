"""
Handlers for /auth.

POST /auth/verify is public: the token travels in the body ({"idToken": ...})
instead of the Authorization header, and a rejected token is a 401 here
rather than an anonymous request.
"""

from uphaar.auth.verifier import TokenVerifier
from uphaar.exceptions import TokenVerificationError
from uphaar.http.types import HttpRequest, HttpResponse, json_response
from uphaar.routes.common import api_handler, parse_body, require_identity
from uphaar.schemas.user import TokenVerifyRequest


class AuthHandlers:
    def __init__(self, verifier: TokenVerifier):
        self.verifier = verifier

    @api_handler("Failed to verify token")
    async def verify_token(self, request: HttpRequest) -> HttpResponse:
        payload = parse_body(TokenVerifyRequest, request, message="ID token is required")
        try:
            identity = await self.verifier.verify(payload.id_token)
        except TokenVerificationError as e:
            raise TokenVerificationError("Invalid token", context=e.context) from e
        return json_response(
            {
                "uid": identity.uid,
                "email": identity.email,
                "displayName": identity.name,
                "photoURL": identity.picture,
            }
        )

    @api_handler("Server error")
    async def me(self, request: HttpRequest) -> HttpResponse:
        user = require_identity(request)
        return json_response({"user": user.to_dict()})
