"""
Request normalizer.

Small middleware that turn the raw ``Request`` into context fields. Use
``common()`` to get them in their working order::

    middleware = [
        request.common(),
        ...
    ]

Every function here is total except for wiring mistakes: malformed bodies
leave ``parsed_body`` unset instead of raising.
"""

import json
import logging
from typing import Any, Dict, List, Union
from urllib.parse import unquote

from aino.http.context import Context, HTTPMethod
from aino.middleware.params import parse_query_string
from aino.middleware.pipeline import Middleware

logger = logging.getLogger(__name__)

# Methods whose body is parsed
BODY_METHODS = {HTTPMethod.POST, HTTPMethod.PUT, HTTPMethod.PATCH}

# Values of the ``_method`` body field that may replace a POST
OVERRIDABLE_METHODS = {
    "delete": HTTPMethod.DELETE,
    "patch": HTTPMethod.PATCH,
    "put": HTTPMethod.PUT,
}

FORM_CONTENT_TYPE = "application/x-www-form-urlencoded"
JSON_CONTENT_TYPE = "application/json"


def common() -> List[Middleware]:
    """
    Middleware that process low level request data.

    Processes the method, path, headers, query parameters, request body,
    the ``_method`` override and cookies, in that order.
    """
    return [
        method,
        path,
        headers,
        query_params,
        request_body,
        adjust_method,
        cookies,
    ]


def canonical_method(raw: Any) -> Union[HTTPMethod, str]:
    """Lower-case a verb, mapping known ones onto ``HTTPMethod``"""
    lowered = str(getattr(raw, 'value', raw)).lower()
    try:
        return HTTPMethod(lowered)
    except ValueError:
        return lowered


def request_header(context: Context, name: str) -> List[str]:
    """All values of a request header, matched case-insensitively"""
    name = name.lower()
    if context.headers is not None:
        pairs = context.headers
    else:
        pairs = [(header.lower(), value) for header, value in context.request.headers]
    return [value for header, value in pairs if header == name]


def method(context: Context) -> Context:
    """Store the canonical request method on ``context.method``"""
    context.method = canonical_method(context.request.method)
    return context


def path(context: Context) -> Context:
    """
    Store the request path as a list of segments on ``context.path``.

    ``"/orders/10"`` becomes ``["orders", "10"]``; empty segments are dropped
    and each segment is percent-decoded.
    """
    raw_path = context.request.path
    if isinstance(raw_path, (list, tuple)):
        context.path = list(raw_path)
    else:
        context.path = [unquote(segment) for segment in (raw_path or "").split("/") if segment]
    return context


def headers(context: Context) -> Context:
    """Lower-case header names, keeping values and order"""
    context.headers = [(header.lower(), value) for header, value in context.request.headers]
    return context


def query_params(context: Context) -> Context:
    """Parse the query string onto ``context.query_params``"""
    query = context.request.query_string or ""
    if isinstance(query, bytes):
        query = query.decode("latin-1")
    context.query_params = parse_query_string(query)
    return context


def _content_type(context: Context) -> str:
    values = request_header(context, "content-type")
    if not values:
        return ""
    return values[0].split(";", 1)[0].strip().lower()


def request_body(context: Context) -> Context:
    """
    Parse the request body onto ``context.parsed_body``.

    Only runs for methods that carry a body. Handles
    ``application/x-www-form-urlencoded`` and ``application/json``; any other
    content type, or a body that fails to parse, leaves ``parsed_body`` unset.
    """
    if context.method not in BODY_METHODS:
        return context

    content_type = _content_type(context)

    if content_type == FORM_CONTENT_TYPE:
        context.parsed_body = parse_query_string(context.request.text())
    elif content_type == JSON_CONTENT_TYPE:
        try:
            context.parsed_body = json.loads(context.request.text())
        except (ValueError, RecursionError) as e:
            logger.debug(f"Ignoring unparsable JSON body: {e}")
    else:
        logger.debug(f"No body parser for content type {content_type!r}")

    return context


def cookies(context: Context) -> Context:
    """
    Parse ``Cookie`` headers into ``context.cookies``.

    Defaults to an empty mapping when the header is absent.
    """
    parsed: Dict[str, str] = {}

    for header in request_header(context, "cookie"):
        for cookie in header.split(";"):
            if not cookie.strip():
                continue
            name, _, value = cookie.partition("=")
            parsed[name.strip()] = value.strip()

    context.cookies = parsed
    return context


def adjust_method(context: Context) -> Context:
    """
    Let a POST body field ``_method`` replace the request method.

    Browsers cannot send DELETE/PUT/PATCH from forms. Must run after
    ``request_body``. Values other than delete, patch and put are ignored.
    """
    if context.method != HTTPMethod.POST or not isinstance(context.parsed_body, dict):
        return context

    override = context.parsed_body.get("_method")
    if isinstance(override, str) and override in OVERRIDABLE_METHODS:
        context.method = OVERRIDABLE_METHODS[override]

    return context


def params(context: Context) -> Context:
    """
    Merge path params, query params and the parsed body into ``context.params``.

    Keys are stringified. On conflicts path params win over query params,
    which win over the body. Sources that are not mappings are skipped.
    """
    merged: Dict[str, Any] = {}

    for provider in (context.parsed_body, context.query_params, context.path_params):
        if isinstance(provider, dict):
            merged.update({str(key): value for key, value in provider.items()})

    context.params = merged
    return context


__all__ = [
    'BODY_METHODS', 'common', 'canonical_method', 'request_header', 'method',
    'path', 'headers', 'query_params', 'request_body', 'cookies',
    'adjust_method', 'params'
]
