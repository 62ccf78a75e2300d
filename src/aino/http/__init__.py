"""
Aino HTTP primitives: the request/context model and response helpers.
"""

from aino.http.context import Context, Request, HTTPMethod, Header
from aino.http.response import (
    STATUS_CODES,
    response_status,
    response_header,
    response_headers,
    response_body,
    html,
    text,
    redirect,
    format_cookie,
    to_response,
)

__all__ = [
    'Context', 'Request', 'HTTPMethod', 'Header', 'STATUS_CODES',
    'response_status', 'response_header', 'response_headers', 'response_body',
    'html', 'text', 'redirect', 'format_cookie', 'to_response'
]
