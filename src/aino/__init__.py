"""
Aino - a middleware-pipeline Python web framework

Every request is one mutable context flowing through a flat, ordered list
of plain functions. Routing, sessions, flash messages and CSRF protection
are ordinary middleware composed into that list.

Features:
- Middleware reducer with halting and ``ignore_halt`` entries
- First-match-wins router with named routes and URL reversal
- Signed and AES-GCM encrypted cookie sessions
- One-shot flash messages
- CSRF token checks for unsafe methods
- ASGI adapter served by Hypercorn

Example:
    >>> from aino import Application, Server, reduce, ignore_halt, session, html
    >>> from aino.middleware import request
    >>> from aino.routing import get, bind_routes, match_route, handle_route
    >>>
    >>> routes = [get("/", lambda context: html(context, "Hello, World!"))]
    >>>
    >>> def handle(context):
    ...     return reduce(context, [
    ...         request.common(),
    ...         lambda context: bind_routes(context, routes),
    ...         match_route,
    ...         handle_route,
    ...     ])
    >>>
    >>> app = Application(handle)
    >>>
    >>> if __name__ == '__main__':
    ...     Server(app).run()
"""

__version__ = "0.1.0"
__author__ = "Aino Team"

# Core
from aino.config import AppConfig, ConfigPresets, get_config_from_environment
from aino.exceptions import AinoError
from aino.http import Context, Request, HTTPMethod, html, text, redirect
from aino.middleware import reduce, ignore_halt

# Routing
from aino.routing import Router, bind_routes, match_route, handle_route, path_for, url_for

# Sessions and security
from aino import session
from aino.session import flash
from aino.security import csrf

# Server
from aino.server import Application, Server, handle

__all__ = [
    '__version__',
    'AppConfig', 'ConfigPresets', 'get_config_from_environment', 'AinoError',
    'Context', 'Request', 'HTTPMethod', 'html', 'text', 'redirect',
    'reduce', 'ignore_halt',
    'Router', 'bind_routes', 'match_route', 'handle_route', 'path_for', 'url_for',
    'session', 'flash', 'csrf',
    'Application', 'Server', 'handle',
]
