"""
Aino Router - first-match-wins routing over a static route table.

Features:
- Declaration order decides between competing routes
- Named segments bound to ``path_params``
- Per-route middleware run by ``handle_route``
- Named routes and path/URL reversal

Matching and running a route are separate middleware so other work (such as
merging params or checking CSRF tokens) can happen in between::

    routes = [
        get("/orders", orders.index, name="orders"),
        get("/orders/:id", [orders.authorize, orders.show], name="order"),
        post("/orders", orders.create),
    ]

    middleware = [
        request.common(),
        lambda context: bind_routes(context, routes),
        match_route,
        request.params,
        handle_route,
    ]
"""

import logging
from typing import Any, Dict, Iterable, Iterator, List, Optional, Tuple
from dataclasses import dataclass

from aino.exceptions import AinoError, RouteNotFoundError
from aino.http.context import Context
from aino.http.response import response_body, response_header, response_status
from aino.middleware.pipeline import reduce
from aino.middleware.request import canonical_method
from aino.routing.route import Route

logger = logging.getLogger(__name__)


@dataclass
class RouteMatch:
    """Route match result"""
    route: Route
    path_params: Dict[str, str]


def _flatten_routes(routes: Iterable[Any]) -> Iterator[Route]:
    for entry in routes:
        if isinstance(entry, (list, tuple)):
            yield from _flatten_routes(entry)
        elif isinstance(entry, Route):
            yield entry
        else:
            raise TypeError(f"Expected a Route, got {entry!r}")


class Router:
    """
    Immutable route table.

    Routes are bucketed by (method, segment count) to prune candidates; each
    bucket keeps declaration order, so the first matching route still wins.
    """

    def __init__(self, routes: Iterable[Any] = ()):
        self.routes: Tuple[Route, ...] = tuple(_flatten_routes(routes))
        self.named_routes: Dict[str, Route] = {}
        self._index: Dict[Tuple[str, int], List[Route]] = {}

        for route in self.routes:
            key = (str(route.method), len(route.segments))
            self._index.setdefault(key, []).append(route)

            if route.name:
                if route.name in self.named_routes:
                    raise ValueError(f"Duplicate route name {route.name!r}")
                self.named_routes[route.name] = route

    def __iter__(self) -> Iterator[Route]:
        return iter(self.routes)

    def __len__(self) -> int:
        return len(self.routes)

    def match(self, method: Any, path: List[str]) -> Optional[RouteMatch]:
        """Find the first declared route matching method and path segments"""
        key = (str(canonical_method(method)), len(path))

        for route in self._index.get(key, ()):
            path_params = route.match(method, path)
            if path_params is not None:
                return RouteMatch(route=route, path_params=path_params)
        return None

    def get_route_by_name(self, name: str) -> Route:
        """Get route by name."""
        try:
            return self.named_routes[name]
        except KeyError:
            raise RouteNotFoundError(name) from None

    def path_for(self, name: str, params: Optional[Dict[str, Any]] = None) -> str:
        """Reverse a named route into a path"""
        return self.get_route_by_name(name).build_path(params)

    def url_for(
        self,
        name: str,
        params: Optional[Dict[str, Any]] = None,
        scheme: str = "http",
        host: str = "localhost",
        port: Optional[int] = None
    ) -> str:
        """Reverse a named route into an absolute URL"""
        path = self.path_for(name, params)
        authority = host if port is None else f"{host}:{port}"
        return f"{scheme}://{authority}{path}"

    def get_stats(self) -> Dict[str, Any]:
        """Get router statistics."""
        return {
            "total_routes": len(self.routes),
            "named_routes": len(self.named_routes),
            "buckets": len(self._index),
        }


def bind_routes(context: Context, routes: Any) -> Context:
    """Store the route table on ``context.routes``"""
    context.routes = routes if isinstance(routes, Router) else Router(routes)
    return context


routes = bind_routes


def _router(context: Context) -> Router:
    if context.routes is None:
        raise AinoError("No routes bound to the context. Run aino.routing.bind_routes first")
    return context.routes


def match_route(context: Context) -> Context:
    """
    Match the request against the bound routes.

    On a match, sets ``path_params`` and ``route_middleware``. Otherwise
    sets a 404 response and halts the pipeline.
    """
    route_match = _router(context).match(context.method, context.path or [])

    if route_match is None:
        logger.debug(f"No route for {context.method} /{'/'.join(context.path or [])}")
        context.halt = True
        response_status(context, 404)
        response_header(context, "Content-Type", "text/html")
        return response_body(context, "Not found")

    logger.debug(f"Matched route {route_match.route}")
    context.path_params = route_match.path_params
    context.route_middleware = list(route_match.route.middleware)
    return context


def handle_route(context: Context) -> Context:
    """Run the middleware of the route found by ``match_route``, if any"""
    if context.route_middleware is None:
        return context
    return reduce(context, context.route_middleware)


def path_for(context: Context, name: str, params: Optional[Dict[str, Any]] = None, **kwargs: Any) -> str:
    """
    Path of a named route.

    >>> path_for(context, "order", id=1, preview=True)
    '/orders/1?preview=true'
    """
    return _router(context).path_for(name, {**(params or {}), **kwargs})


def url_for(context: Context, name: str, params: Optional[Dict[str, Any]] = None, **kwargs: Any) -> str:
    """Absolute URL of a named route, using the context's scheme, host and port"""
    request = context.request
    host = context.host or (request.host if request else None)
    if not host:
        raise AinoError("Cannot build a URL without a host on the context")

    return _router(context).url_for(
        name,
        {**(params or {}), **kwargs},
        scheme=context.scheme or (request.scheme if request else "http"),
        host=host,
        port=context.port,
    )


__all__ = [
    'Router', 'RouteMatch', 'bind_routes', 'routes', 'match_route',
    'handle_route', 'path_for', 'url_for'
]
