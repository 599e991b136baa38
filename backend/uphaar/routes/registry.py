"""
Uphaar Backend: Route Declarations
==================================

The static, ordered Route Table. Order is the tie-break when two patterns
can match the same path, so literal segments are declared before captures
in the same position:

    GET /items/user          before  GET /items/:id
    GET /items/user/:userId  (three segments, never competes with /items/:id)
    GET /users/profile       before  GET /users/:uid
    GET /users/stats         before  GET /users/:uid
"""

from typing import List

from uphaar.context import AppContext
from uphaar.routes.auth import AuthHandlers
from uphaar.routes.health import health_check
from uphaar.routes.items import ItemHandlers
from uphaar.routes.users import UserHandlers
from uphaar.routing.dispatcher import Dispatcher
from uphaar.routing.table import RouteDefinition, RouteTable


def route_definitions(context: AppContext) -> List[RouteDefinition]:
    auth = AuthHandlers(context.verifier)
    items = ItemHandlers(context.items)
    users = UserHandlers(context.users)

    return [
        RouteDefinition("GET", "/health", health_check),

        # ── Auth ──────────────────────────────────────────────────────────
        RouteDefinition("POST", "/auth/verify", auth.verify_token),
        RouteDefinition("GET", "/auth/me", auth.me, requires_auth=True),

        # ── Items ─────────────────────────────────────────────────────────
        RouteDefinition("GET", "/items", items.list_items),
        RouteDefinition("GET", "/items/user", items.list_my_items, requires_auth=True),
        RouteDefinition("GET", "/items/user/:userId", items.list_user_items),
        RouteDefinition("GET", "/items/:id", items.get_item),
        RouteDefinition("POST", "/items", items.create_item, requires_auth=True),
        RouteDefinition("PUT", "/items/:id", items.update_item, requires_auth=True),
        RouteDefinition("DELETE", "/items/:id", items.delete_item, requires_auth=True),
        RouteDefinition("POST", "/items/:id/claim", items.claim_item, requires_auth=True),
        RouteDefinition("POST", "/items/:id/complete", items.complete_item, requires_auth=True),
        RouteDefinition("POST", "/items/:id/given", items.mark_given, requires_auth=True),

        # ── Users ─────────────────────────────────────────────────────────
        RouteDefinition("GET", "/users/profile", users.get_own_profile, requires_auth=True),
        RouteDefinition("POST", "/users/profile", users.ensure_profile, requires_auth=True),
        RouteDefinition("PUT", "/users/profile", users.update_profile, requires_auth=True),
        RouteDefinition("GET", "/users/stats", users.get_own_stats, requires_auth=True),
        RouteDefinition("GET", "/users/stats/:uid", users.get_stats),
        RouteDefinition("GET", "/users/:uid", users.get_public_profile),
    ]


def build_route_table(context: AppContext) -> RouteTable:
    return RouteTable(route_definitions(context))


def build_dispatcher(context: AppContext) -> Dispatcher:
    return Dispatcher(build_route_table(context), context.verifier)
