"""
Request entry point.

Turns an inbound ``Request`` into a fresh ``Context``, runs the application
handler and hands the (status, headers, body) triple back to the host. This
is the only place where exceptions from middleware are caught: they are
logged and become a generic 500 response.
"""

import html
import logging
import time
import traceback
from typing import Any, Optional

from aino.config import AppConfig
from aino.http.context import Context, Request
from aino.http.response import ResponseTriple, to_response
from aino.middleware.pipeline import reduce

logger = logging.getLogger(__name__)


def create_context(request: Request, config: Optional[AppConfig] = None) -> Context:
    """Create the context for one request, carrying the public URL settings"""
    if config is None:
        return Context.from_request(request, scheme=request.scheme, host=request.host, port=request.port)

    return Context.from_request(
        request,
        scheme=config.server.url_scheme,
        host=config.server.public_host,
        port=config.server.public_port,
        environment=config.environment,
        config=config,
    )


def run_handler(handler: Any, context: Context) -> Context:
    """
    Run an application handler.

    A handler is an object with a ``handle(context)`` method, a middleware
    tree (list), or a plain ``Context -> Context`` callable.
    """
    if hasattr(handler, 'handle'):
        return handler.handle(context)
    if isinstance(handler, list):
        return reduce(context, handler)
    return handler(context)


def error_response(debug: bool = False) -> ResponseTriple:
    body = "<h1>Internal Server Error</h1>"
    if debug:
        body += f"\n<pre>{html.escape(traceback.format_exc())}</pre>"
    return 500, [("Content-Type", "text/html")], body


def _elapsed(started: float) -> str:
    microseconds = (time.perf_counter() - started) * 1_000_000
    if microseconds > 1_000:
        return f"{microseconds / 1_000:.1f}ms"
    return f"{microseconds:.0f}μs"


def handle(request: Request, handler: Any, config: Optional[AppConfig] = None) -> ResponseTriple:
    """Process one request end to end"""
    started = time.perf_counter()

    try:
        context = run_handler(handler, create_context(request, config))
        status, headers, body = to_response(context)
    except Exception:
        logger.exception(f"Error handling {request.method} {request.path}")
        status, headers, body = error_response(debug=bool(config and config.debug))

    logger.info(f"{request.method} {request.path} {status} complete in {_elapsed(started)}")
    return status, headers, body


__all__ = ['create_context', 'run_handler', 'error_response', 'handle']
