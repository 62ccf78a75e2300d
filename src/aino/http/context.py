"""
Request and Context models.

The context is the per-request record threaded through every middleware.
Well-known fields are typed attributes; application data goes into the
``assigns`` bag, reachable with item access::

    context["current_user"] = user
    context.get("current_user")
"""

from typing import Any, Dict, List, Optional, Tuple, Union
from dataclasses import dataclass, field, fields
from enum import Enum


class HTTPMethod(str, Enum):
    """Canonical, lower-cased HTTP verbs"""
    GET = "get"
    HEAD = "head"
    POST = "post"
    PUT = "put"
    PATCH = "patch"
    DELETE = "delete"
    OPTIONS = "options"
    TRACE = "trace"
    CONNECT = "connect"

    def __str__(self) -> str:
        return self.value

    # Same hash as the plain verb, so "post" and HTTPMethod.POST are interchangeable keys
    def __hash__(self) -> int:
        return str.__hash__(self)


Header = Tuple[str, str]


@dataclass
class Request:
    """Inbound request as handed over by the host server"""
    method: str = "GET"
    path: str = "/"
    headers: List[Header] = field(default_factory=list)
    query_string: str = ""
    body: Union[str, bytes] = b""
    scheme: str = "http"
    host: Optional[str] = None
    port: Optional[int] = None
    client: Optional[Tuple[str, int]] = None
    # Host-specific metadata (connection handles etc.), opaque to the core
    private: Dict[str, Any] = field(default_factory=dict)

    def text(self) -> str:
        """Body decoded as UTF-8"""
        if isinstance(self.body, bytes):
            return self.body.decode("utf-8", errors="replace")
        return self.body or ""


RESPONSE_KEYS = ("response_status", "response_headers", "response_body")


@dataclass
class Context:
    """
    Mutable envelope flowing through the middleware pipeline.

    Fields are grouped by the component that fills them in:

    - entry point: request, scheme, host, port, environment, config
    - request normalizer: method, path, headers, cookies, query_params,
      parsed_body, params
    - router: routes, path_params, route_middleware
    - session layer: session_config, session, session_updated, flash
    - any middleware: halt and the response triple
    """
    request: Optional[Request] = None

    # Set by the entry point, used when building absolute URLs
    scheme: Optional[str] = None
    host: Optional[str] = None
    port: Optional[int] = None
    environment: Optional[str] = None
    config: Any = None

    method: Optional[Union[HTTPMethod, str]] = None
    path: Optional[List[str]] = None
    headers: Optional[List[Header]] = None
    cookies: Optional[Dict[str, str]] = None
    query_params: Optional[Dict[str, Any]] = None
    parsed_body: Any = None
    params: Optional[Dict[str, Any]] = None

    routes: Any = None
    path_params: Optional[Dict[str, str]] = None
    route_middleware: Optional[List[Any]] = None

    session_config: Any = None
    session: Optional[Dict[str, Any]] = None
    session_updated: bool = False
    flash: Optional[Dict[str, str]] = None

    halt: bool = False
    response_status: Optional[int] = None
    response_headers: Optional[List[Header]] = None
    response_body: Optional[Union[str, bytes]] = None

    assigns: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_request(cls, request: Request, **values: Any) -> 'Context':
        """Create a fresh context for an inbound request"""
        return cls(request=request, **values)

    def missing_response_keys(self) -> List[str]:
        """Names of response fields that have not been set"""
        return [key for key in RESPONSE_KEYS if getattr(self, key) is None]

    def get(self, key: str, default: Any = None) -> Any:
        return self.assigns.get(key, default)

    def __getitem__(self, key: str) -> Any:
        return self.assigns[key]

    def __setitem__(self, key: str, value: Any) -> None:
        self.assigns[key] = value

    def __delitem__(self, key: str) -> None:
        del self.assigns[key]

    def __contains__(self, key: str) -> bool:
        return key in self.assigns

    def to_dict(self) -> Dict[str, Any]:
        """Shallow snapshot of every field, handy for debugging"""
        return {f.name: getattr(self, f.name) for f in fields(self)}


__all__ = ['HTTPMethod', 'Request', 'Context', 'Header', 'RESPONSE_KEYS']
