"""
Aino response helpers.

Middleware build the outgoing response by filling in three context fields:
``response_status``, ``response_headers`` (an ordered list of name/value
pairs, duplicates allowed) and ``response_body``. The helpers below set them
and return the context so they compose inside middleware.
"""

from typing import List, Optional, Tuple, Union

from aino.exceptions import IncompleteResponseError
from aino.http.context import Context, Header


# Reason phrases for the status codes Aino itself produces or logs
STATUS_CODES = {
    200: "OK",
    201: "Created",
    204: "No Content",
    301: "Moved Permanently",
    302: "Found",
    303: "See Other",
    304: "Not Modified",
    307: "Temporary Redirect",
    308: "Permanent Redirect",
    400: "Bad Request",
    401: "Unauthorized",
    403: "Forbidden",
    404: "Not Found",
    405: "Method Not Allowed",
    422: "Unprocessable Entity",
    500: "Internal Server Error",
}

ResponseTriple = Tuple[int, List[Header], Union[str, bytes]]


def response_status(context: Context, status: int) -> Context:
    context.response_status = status
    return context


def response_header(context: Context, name: str, value: str) -> Context:
    """Append a header, keeping any earlier header with the same name"""
    headers = list(context.response_headers or [])
    headers.append((name, value))
    context.response_headers = headers
    return context


def response_headers(context: Context, headers: List[Header]) -> Context:
    """Replace every response header"""
    context.response_headers = list(headers)
    return context


def response_body(context: Context, body: Union[str, bytes]) -> Context:
    context.response_body = body
    return context


def html(context: Context, body: Union[str, bytes], status: Optional[int] = None) -> Context:
    if status is not None:
        response_status(context, status)
    response_header(context, "Content-Type", "text/html")
    return response_body(context, body)


def text(context: Context, body: Union[str, bytes], status: Optional[int] = None) -> Context:
    if status is not None:
        response_status(context, status)
    response_header(context, "Content-Type", "text/plain")
    return response_body(context, body)


def redirect(context: Context, url: str, status: int = 302) -> Context:
    response_status(context, status)
    response_header(context, "Content-Type", "text/html")
    response_header(context, "Location", url)
    return response_body(context, "Redirecting...")


def format_cookie(
    name: str,
    value: str,
    path: str = "/",
    http_only: bool = True,
    secure: bool = False,
    same_site: Optional[str] = None
) -> str:
    """Render a ``Set-Cookie`` header value"""
    cookie_parts = [f"{name}={value}"]

    if http_only:
        cookie_parts.append("HttpOnly")
    if path:
        cookie_parts.append(f"Path={path}")
    if secure:
        cookie_parts.append("Secure")
    if same_site:
        cookie_parts.append(f"SameSite={same_site}")

    return "; ".join(cookie_parts)


def to_response(context: Context) -> ResponseTriple:
    """
    Extract the (status, headers, body) triple from a finished context.

    Raises:
        IncompleteResponseError: if any of the three fields is missing
    """
    missing_keys = context.missing_response_keys()
    if missing_keys:
        raise IncompleteResponseError(missing_keys)

    return context.response_status, list(context.response_headers), context.response_body


__all__ = [
    'STATUS_CODES', 'ResponseTriple', 'response_status', 'response_header',
    'response_headers', 'response_body', 'html', 'text', 'redirect',
    'format_cookie', 'to_response'
]
