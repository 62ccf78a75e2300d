"""
Aino ASGI Application

Binds an Aino handler to any ASGI server. Each HTTP request is read in
full, converted into a ``Request`` and processed on a worker thread with a
context of its own; the resulting triple is sent back as ASGI messages.

Example:
    routes = [get("/", index)]

    def handle(context):
        return reduce(context, [
            request.common(),
            lambda context: bind_routes(context, routes),
            match_route,
            handle_route,
        ])

    app = Application(handle)
"""

import asyncio
import logging
from typing import Any, Callable, Dict, List, Optional, Tuple
from urllib.parse import quote

from aino.config import AppConfig
from aino.http.context import Request
from aino.server.handler import handle

logger = logging.getLogger(__name__)

Scope = Dict[str, Any]
Receive = Callable[[], Any]
Send = Callable[[Dict[str, Any]], Any]


def _split_host(value: str) -> Tuple[str, Optional[int]]:
    host, sep, port = value.rpartition(":")
    if sep and host and port.isdigit():
        return host, int(port)
    return value, None


class Application:
    """
    ASGI application wrapping an Aino handler.

    Attributes:
        handler: object with ``handle(context)``, a middleware list, or a
            ``Context -> Context`` callable
        config (Optional[AppConfig]): Application configuration
    """

    def __init__(self, handler: Any, config: Optional[AppConfig] = None):
        self.handler = handler
        self.config = config

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] == "lifespan":
            await self._lifespan(receive, send)
            return

        if scope["type"] != "http":
            raise NotImplementedError(f"Unsupported ASGI scope type {scope['type']!r}")

        request = await self.build_request(scope, receive)

        loop = asyncio.get_running_loop()
        status, headers, body = await loop.run_in_executor(None, handle, request, self.handler, self.config)

        await send({
            "type": "http.response.start",
            "status": status,
            "headers": [(name.encode("latin-1"), value.encode("latin-1")) for name, value in headers],
        })
        await send({
            "type": "http.response.body",
            "body": body.encode("utf-8") if isinstance(body, str) else bytes(body),
        })

    async def build_request(self, scope: Scope, receive: Receive) -> Request:
        """Convert an ASGI HTTP scope and its body messages into a ``Request``"""
        chunks: List[bytes] = []
        more_body = True
        while more_body:
            message = await receive()
            if message["type"] == "http.disconnect":
                break
            chunks.append(message.get("body", b""))
            more_body = message.get("more_body", False)

        headers = [(name.decode("latin-1"), value.decode("latin-1")) for name, value in scope.get("headers", [])]

        # Some clients send the query string along in raw_path
        raw_path = scope.get("raw_path")
        if raw_path:
            path = raw_path.split(b"?", 1)[0].decode("latin-1")
        else:
            path = quote(scope.get("path", "/"))

        host, port = None, None
        server = scope.get("server")
        if server:
            host, port = server[0], server[1]
        host_headers = [value for name, value in headers if name.lower() == "host"]
        if host_headers:
            host, header_port = _split_host(host_headers[0])
            port = header_port if header_port is not None else port

        return Request(
            method=scope.get("method", "GET"),
            path=path,
            headers=headers,
            query_string=scope.get("query_string", b"").decode("latin-1"),
            body=b"".join(chunks),
            scheme=scope.get("scheme", "http"),
            host=host,
            port=port,
            client=tuple(scope["client"]) if scope.get("client") else None,
        )

    async def _lifespan(self, receive: Receive, send: Send) -> None:
        while True:
            message = await receive()
            if message["type"] == "lifespan.startup":
                logger.info("Application startup complete")
                await send({"type": "lifespan.startup.complete"})
            elif message["type"] == "lifespan.shutdown":
                logger.info("Application shutdown complete")
                await send({"type": "lifespan.shutdown.complete"})
                return


__all__ = ['Application']
