"""Handlers for the /users routes."""

from uphaar.http.types import HttpRequest, HttpResponse, json_response
from uphaar.routes.common import api_handler, parse_body, require_identity
from uphaar.schemas.user import ProfileUpdate
from uphaar.services.user_service import UserService


class UserHandlers:
    def __init__(self, users: UserService):
        self.users = users

    @api_handler("Failed to fetch user profile")
    async def get_public_profile(self, request: HttpRequest) -> HttpResponse:
        profile = await self.users.get_public_profile(request.params["uid"])
        return json_response({"profile": profile})

    @api_handler("Failed to fetch user profile")
    async def get_own_profile(self, request: HttpRequest) -> HttpResponse:
        user = require_identity(request)
        return json_response({"profile": await self.users.get_own_profile(user)})

    @api_handler("Failed to create/update user profile")
    async def ensure_profile(self, request: HttpRequest) -> HttpResponse:
        user = require_identity(request)
        profile, is_new = await self.users.ensure_profile(user)
        return json_response({"profile": profile, "isNew": is_new})

    @api_handler("Failed to update user profile")
    async def update_profile(self, request: HttpRequest) -> HttpResponse:
        user = require_identity(request)
        payload = parse_body(ProfileUpdate, request)
        return json_response({"profile": await self.users.update_profile(user, payload)})

    @api_handler("Failed to fetch user statistics")
    async def get_own_stats(self, request: HttpRequest) -> HttpResponse:
        user = require_identity(request)
        return json_response({"stats": await self.users.get_stats(user.uid)})

    @api_handler("Failed to fetch user statistics")
    async def get_stats(self, request: HttpRequest) -> HttpResponse:
        return json_response({"stats": await self.users.get_stats(request.params["uid"])})
