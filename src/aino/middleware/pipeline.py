"""
Pipeline reducer.

A middleware is a function ``Context -> Context``. A middleware tree is a
list whose entries are middleware, nested lists of middleware, or middleware
paired with options::

    middleware = [
        request.common(),
        session_middleware,
        (log_request, {"ignore_halt": True}),
        ignore_halt(session.encode),
    ]

    context = reduce(context, middleware)

The tree is walked depth-first, left to right. Once a middleware sets
``context.halt`` the remaining entries are skipped, except those flagged
with ``ignore_halt``.
"""

from typing import Any, Callable, Dict, Iterable, Iterator, List, Tuple, Union
from dataclasses import dataclass

from aino.http.context import Context

Middleware = Callable[[Context], Context]
MiddlewareTree = Union[Middleware, 'MiddlewareEntry', Tuple[Middleware, Dict[str, Any]], List[Any]]


@dataclass(frozen=True)
class MiddlewareEntry:
    """A middleware together with its per-entry options"""
    middleware: Middleware
    ignore_halt: bool = False

    def __call__(self, context: Context) -> Context:
        return self.middleware(context)


def ignore_halt(middleware: Middleware) -> MiddlewareEntry:
    """Mark a middleware to run even after the pipeline was halted"""
    return MiddlewareEntry(middleware, ignore_halt=True)


def _name(middleware: Any) -> str:
    return getattr(middleware, '__qualname__', None) or repr(middleware)


def flatten(tree: Iterable[Any]) -> Iterator[MiddlewareEntry]:
    """Yield the entries of a middleware tree in execution order"""
    for entry in tree:
        if isinstance(entry, list):
            yield from flatten(entry)
        elif isinstance(entry, MiddlewareEntry):
            yield entry
        elif isinstance(entry, tuple):
            middleware, options = entry
            unknown = set(options) - {"ignore_halt"}
            if unknown:
                raise ValueError(f"Unknown middleware options {sorted(unknown)} for {_name(middleware)}")
            yield MiddlewareEntry(middleware, ignore_halt=bool(options.get("ignore_halt", False)))
        elif callable(entry):
            yield MiddlewareEntry(entry)
        else:
            raise TypeError(f"Middleware must be callable, got {entry!r}")


def reduce(context: Context, tree: MiddlewareTree) -> Context:
    """
    Fold a context over a middleware tree.

    Exceptions raised by middleware are not caught here; the request entry
    point turns them into a 500 response.
    """
    if not isinstance(tree, list):
        tree = [tree]

    for entry in flatten(tree):
        if context.halt and not entry.ignore_halt:
            continue

        result = entry.middleware(context)
        if not isinstance(result, Context):
            raise TypeError(
                f"Middleware {_name(entry.middleware)} returned {type(result).__name__}, "
                "expected the context"
            )
        context = result

    return context


__all__ = ['Middleware', 'MiddlewareTree', 'MiddlewareEntry', 'ignore_halt', 'flatten', 'reduce']
