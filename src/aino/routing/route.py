"""
Route classes for the Aino routing system.
"""

from typing import Any, Dict, List, Optional, Sequence, Tuple, Union
from dataclasses import dataclass, field
from urllib.parse import quote, urlencode

from aino.exceptions import MissingRouteParameterError
from aino.http.context import HTTPMethod
from aino.middleware.request import canonical_method


@dataclass(frozen=True)
class Param:
    """Named placeholder segment, written ``:name`` in a route pattern"""
    name: str

    def __str__(self) -> str:
        return f":{self.name}"


Segment = Union[str, Param]


def compile_path(pattern: str) -> Tuple[Segment, ...]:
    """
    Split a route pattern into segments.

    Empty segments are discarded and ``:name`` segments become ``Param``.

    >>> compile_path("/orders/:id")
    ('orders', Param(name='id'))
    """
    segments: List[Segment] = []
    for part in pattern.split("/"):
        if not part:
            continue
        segments.append(Param(part[1:]) if part.startswith(":") else part)
    return tuple(segments)


def check_path(path: Sequence[str], segments: Sequence[Segment]) -> Optional[Dict[str, str]]:
    """
    Pair request segments with pattern segments.

    Returns the bound path params, or None when the segment counts differ
    or a literal segment does not match exactly.
    """
    if len(path) != len(segments):
        return None

    path_params: Dict[str, str] = {}
    for value, segment in zip(path, segments):
        if isinstance(segment, Param):
            path_params[segment.name] = value
        elif value != segment:
            return None
    return path_params


def _query_value(value: Any) -> Any:
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (list, tuple)):
        return [_query_value(item) for item in value]
    return value


@dataclass(frozen=True)
class Route:
    """
    Immutable matching rule.

    Built once from the static route table through the verb helpers
    (``get``, ``post``, ...) and never changed afterwards.
    """
    method: Union[HTTPMethod, str]
    path: str
    segments: Tuple[Segment, ...]
    middleware: Tuple[Any, ...] = field(default_factory=tuple)
    name: Optional[str] = None

    @property
    def param_names(self) -> List[str]:
        return [segment.name for segment in self.segments if isinstance(segment, Param)]

    def match(self, method: Any, path: Sequence[str]) -> Optional[Dict[str, str]]:
        """Path params if this route accepts the method and path, else None"""
        if canonical_method(method) != self.method:
            return None
        return check_path(path, self.segments)

    def build_path(self, params: Optional[Dict[str, Any]] = None) -> str:
        """
        Substitute params into the pattern.

        Params consumed by named segments fill them in; the remaining ones
        are appended as a query string.
        """
        params = dict(params or {})

        parts: List[str] = []
        for segment in self.segments:
            if isinstance(segment, Param):
                if segment.name not in params:
                    raise MissingRouteParameterError(self.name or self.path, segment.name)
                parts.append(quote(str(params.pop(segment.name)), safe=""))
            else:
                parts.append(segment)

        path = "/" + "/".join(parts)
        if params:
            query = [(key, _query_value(value)) for key, value in params.items()]
            path = f"{path}?{urlencode(query, doseq=True)}"
        return path

    def __str__(self) -> str:
        return f"{str(self.method).upper()} {self.path}"


def route(method: Any, path: str, middleware: Any, name: Optional[str] = None) -> Route:
    """
    Create a route.

    ``middleware`` is a single middleware, a ``(middleware, options)`` pair,
    or a (possibly nested) list of them.
    """
    if not isinstance(middleware, list):
        middleware = [middleware]

    return Route(
        method=canonical_method(method),
        path=path,
        segments=compile_path(path),
        middleware=tuple(middleware),
        name=name,
    )


def get(path: str, middleware: Any, name: Optional[str] = None) -> Route:
    """Create a GET route"""
    return route(HTTPMethod.GET, path, middleware, name)


def post(path: str, middleware: Any, name: Optional[str] = None) -> Route:
    """Create a POST route"""
    return route(HTTPMethod.POST, path, middleware, name)


def put(path: str, middleware: Any, name: Optional[str] = None) -> Route:
    """Create a PUT route"""
    return route(HTTPMethod.PUT, path, middleware, name)


def patch(path: str, middleware: Any, name: Optional[str] = None) -> Route:
    """Create a PATCH route"""
    return route(HTTPMethod.PATCH, path, middleware, name)


def delete(path: str, middleware: Any, name: Optional[str] = None) -> Route:
    """Create a DELETE route"""
    return route(HTTPMethod.DELETE, path, middleware, name)


__all__ = [
    'Param', 'Segment', 'Route', 'compile_path', 'check_path', 'route',
    'get', 'post', 'put', 'patch', 'delete'
]
