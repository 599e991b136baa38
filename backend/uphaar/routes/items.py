"""
Uphaar Backend: Item Routes
===========================

What:  Handlers for every /items route.
How:   Each handler pulls its params, body and identity out of the HttpRequest,
       calls ItemService, and wraps the result: {"items": [...]}, {"item": ...},
       or {"item": ..., "message": ...} for the state transitions.
Who:   Registered in routes/registry.py. The authenticated handlers are on
       requires_auth routes, so the Authentication Hook has already run; they
       still answer 401 themselves when the request is anonymous.
"""

from uphaar.http.types import HttpRequest, HttpResponse, json_response
from uphaar.routes.common import api_handler, parse_body, require_identity
from uphaar.schemas.item import CompleteItemRequest, ItemCreate, ItemUpdate
from uphaar.services.item_service import ItemService


class ItemHandlers:
    def __init__(self, items: ItemService):
        self.items = items

    @api_handler("Failed to fetch items")
    async def list_items(self, request: HttpRequest) -> HttpResponse:
        return json_response({"items": await self.items.list_available()})

    @api_handler("Failed to fetch user items")
    async def list_my_items(self, request: HttpRequest) -> HttpResponse:
        user = require_identity(request)
        return json_response({"items": await self.items.list_by_owner(user.uid)})

    @api_handler("Failed to fetch user items")
    async def list_user_items(self, request: HttpRequest) -> HttpResponse:
        return json_response({"items": await self.items.list_by_owner(request.params["userId"])})

    @api_handler("Failed to fetch item")
    async def get_item(self, request: HttpRequest) -> HttpResponse:
        return json_response({"item": await self.items.get(request.params["id"])})

    @api_handler("Failed to create item")
    async def create_item(self, request: HttpRequest) -> HttpResponse:
        user = require_identity(request)
        payload = parse_body(ItemCreate, request)
        return json_response({"item": await self.items.create(user, payload)})

    @api_handler("Failed to update item")
    async def update_item(self, request: HttpRequest) -> HttpResponse:
        user = require_identity(request)
        payload = parse_body(ItemUpdate, request)
        item = await self.items.update(request.params["id"], user, payload)
        return json_response({"item": item})

    @api_handler("Failed to delete item")
    async def delete_item(self, request: HttpRequest) -> HttpResponse:
        user = require_identity(request)
        await self.items.delete(request.params["id"], user)
        return json_response({"success": True, "message": "Item deleted successfully"})

    @api_handler("Failed to claim item")
    async def claim_item(self, request: HttpRequest) -> HttpResponse:
        user = require_identity(request)
        item = await self.items.claim(request.params["id"], user)
        return json_response({"item": item, "message": "Item claimed successfully"})

    @api_handler("Failed to complete item")
    async def complete_item(self, request: HttpRequest) -> HttpResponse:
        user = require_identity(request)
        payload = parse_body(CompleteItemRequest, request)
        item = await self.items.complete(request.params["id"], user, payload)
        return json_response({"item": item, "message": "Item marked as completed successfully"})

    @api_handler("Failed to mark item as given away")
    async def mark_given(self, request: HttpRequest) -> HttpResponse:
        user = require_identity(request)
        item = await self.items.mark_given(request.params["id"], user)
        return json_response({"item": item, "message": "Item marked as given away successfully"})
