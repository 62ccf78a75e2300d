"""
CSRF (Cross-Site Request Forgery) protection.

A random token lives in the session; unsafe requests must echo it back in
the ``csrf_token`` body field::

    middleware = [
        request.common(),
        lambda context: session.config(context, storage),
        session.decode,
        csrf.check,
        csrf.set,
        ...
    ]

Forms embed it with ``csrf.get_token(context)``.
"""

import hmac
import logging
import secrets
from typing import Optional

from aino.exceptions import CSRFTokenMissingError, SessionNotLoadedError
from aino.http.context import Context
from aino.http.response import response_body, response_header, response_status

logger = logging.getLogger(__name__)

CSRF_KEY = "csrf_token"
TOKEN_BYTES = 32
SAFE_METHODS = {"get", "head", "options", "trace"}


def generate_token() -> str:
    """32 random bytes, URL-safe base64 without padding"""
    return secrets.token_urlsafe(TOKEN_BYTES)


def set(context: Context) -> Context:
    """
    Store a CSRF token in the session unless one is already there.

    Must run after ``aino.session.decode``. A newly generated token marks the
    session updated so it is written to the cookie.
    """
    if context.session is None:
        raise SessionNotLoadedError("store a CSRF token")

    if context.session.get(CSRF_KEY):
        return context

    session = dict(context.session)
    session[CSRF_KEY] = generate_token()
    context.session = session
    context.session_updated = True
    return context


def _reject(context: Context, reason: str) -> Context:
    logger.debug(f"Rejecting {context.method} request: {reason}")
    context.halt = True
    response_status(context, 403)
    response_header(context, "Content-Type", "text/plain")
    return response_body(context, "CSRF token doesn't match")


def check(context: Context) -> Context:
    """
    Check the ``csrf_token`` body field against the session token.

    Safe methods pass untouched. Must run after ``aino.session.decode`` and
    the ``request_body`` middleware. Any missing piece or a mismatch halts
    with a 403.
    """
    if str(context.method) in SAFE_METHODS:
        return context

    if context.session is None:
        return _reject(context, "no session")

    expected: Optional[str] = context.session.get(CSRF_KEY)
    if not isinstance(expected, str) or not expected:
        return _reject(context, "no token in session")

    if not isinstance(context.parsed_body, dict):
        return _reject(context, "no parsed body")

    actual = context.parsed_body.get(CSRF_KEY)
    if not isinstance(actual, str) or not actual:
        return _reject(context, "no token in request")

    if not hmac.compare_digest(expected.encode("utf-8"), actual.encode("utf-8")):
        return _reject(context, "token mismatch")

    return context


def get_token(context: Context) -> str:
    """
    The session's CSRF token, for embedding in forms.

    Raises:
        CSRFTokenMissingError: if there is no session or no token in it
    """
    if context.session is None:
        raise CSRFTokenMissingError("session is not loaded")

    token = context.session.get(CSRF_KEY)
    if not token:
        raise CSRFTokenMissingError("session has no token")
    return token


__all__ = ['CSRF_KEY', 'SAFE_METHODS', 'generate_token', 'set', 'check', 'get_token']
