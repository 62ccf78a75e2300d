"""
Aino Routing System
Route declaration, first-match-wins matching and reverse routing.
"""

from aino.routing.route import Route, Param, compile_path, check_path, get, post, put, patch, delete
from aino.routing.router import (
    Router,
    RouteMatch,
    bind_routes,
    routes,
    match_route,
    handle_route,
    path_for,
    url_for,
)

__all__ = [
    'Route', 'Param', 'compile_path', 'check_path',
    'get', 'post', 'put', 'patch', 'delete',
    'Router', 'RouteMatch', 'bind_routes', 'routes', 'match_route',
    'handle_route', 'path_for', 'url_for'
]
