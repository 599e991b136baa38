"""
Uphaar Backend: Route Table
===========================

What:  The ordered, immutable list of routes the Dispatcher selects from.
How:   Built once at startup from static declarations (see routes/registry.py).
       Selection returns the FIRST route, in declaration order, whose method
       equals the request method and whose pattern matches the path, so a
       literal route such as GET /items/user must be declared before the
       capture route GET /items/:id that would otherwise swallow it.

Construction-time checks:
    - method is one of GET/POST/PUT/DELETE/PATCH
    - pattern starts with "/"
    - every capture segment has a non-empty name ("/items/:" is rejected)
    - capture names are unique within a pattern
"""

from dataclasses import dataclass
from typing import Awaitable, Callable, Dict, Iterable, Iterator, NamedTuple, Optional, Tuple

from uphaar.http.types import HTTP_METHODS, HttpRequest, HttpResponse
from uphaar.routing.matcher import match_path, split_path

Handler = Callable[[HttpRequest], Awaitable[HttpResponse]]


@dataclass(frozen=True)
class RouteDefinition:
    method: str
    pattern: str
    handler: Handler
    requires_auth: bool = False

    def __str__(self) -> str:
        return f"{self.method} {self.pattern}"


class ResolvedRoute(NamedTuple):
    route: RouteDefinition
    params: Dict[str, str]


def _validate(route: RouteDefinition) -> None:
    if route.method not in HTTP_METHODS:
        raise ValueError(f"Unsupported method {route.method!r} for route {route.pattern!r}")
    if not route.pattern.startswith("/"):
        raise ValueError(f"Route pattern must start with '/': {route.pattern!r}")

    seen = set()
    for segment in split_path(route.pattern):
        if not segment.startswith(":"):
            continue
        name = segment[1:]
        if not name:
            raise ValueError(f"Empty capture name in route pattern {route.pattern!r}")
        if name in seen:
            raise ValueError(f"Duplicate capture name {name!r} in route pattern {route.pattern!r}")
        seen.add(name)


class RouteTable:
    """Immutable ordered sequence of RouteDefinition entries."""

    def __init__(self, routes: Iterable[RouteDefinition]):
        routes = tuple(routes)
        for route in routes:
            _validate(route)
        self._routes: Tuple[RouteDefinition, ...] = routes

    def resolve(self, method: str, path: str) -> Optional[ResolvedRoute]:
        """First route (in table order) matching method and path, or None."""
        for route in self._routes:
            if route.method != method:
                continue
            result = match_path(path, route.pattern)
            if result.matched:
                return ResolvedRoute(route, result.params)
        return None

    @property
    def routes(self) -> Tuple[RouteDefinition, ...]:
        return self._routes

    def __iter__(self) -> Iterator[RouteDefinition]:
        return iter(self._routes)

    def __len__(self) -> int:
        return len(self._routes)
