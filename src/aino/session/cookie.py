"""
Session storage in signed cookies.

The session travels as plain JSON in ``_aino_session`` next to
``_aino_session_signature``, a base64 HMAC-SHA256 of the JSON followed by
the salt. Data whose signature does not match is ignored.
"""

import base64
import hashlib
import hmac
import logging
from dataclasses import dataclass
from typing import Optional, Union

from aino.http.context import Context
from aino.session.storage import (
    SESSION_COOKIE,
    SIGNATURE_COOKIE,
    SessionStorage,
    dump_session,
    load_session,
    to_bytes,
)

logger = logging.getLogger(__name__)


@dataclass
class SignedCookieStorage(SessionStorage):
    """Session implementation using signed cookies as the storage"""
    key: Union[str, bytes]
    salt: Union[str, bytes] = ""
    cookie_name: str = SESSION_COOKIE
    signature_cookie_name: str = SIGNATURE_COOKIE
    path: str = "/"
    secure: bool = False
    same_site: Optional[str] = None

    def __repr__(self) -> str:
        return f"SignedCookieStorage(cookie_name={self.cookie_name!r})"

    def signature(self, data: Union[str, bytes]) -> str:
        mac = hmac.new(to_bytes(self.key), to_bytes(data) + to_bytes(self.salt), hashlib.sha256)
        return base64.b64encode(mac.digest()).decode("ascii")

    def decode(self, context: Context) -> Context:
        """
        Parse session data from cookies.

        Must run after the ``cookies`` middleware. A missing cookie, a bad
        signature or invalid JSON all give an empty session.
        """
        cookies = context.cookies or {}
        data = cookies.get(self.cookie_name)

        if data is None:
            context.session = {}
            return context

        provided = to_bytes(cookies.get(self.signature_cookie_name, ""))
        expected = to_bytes(self.signature(data))

        if not hmac.compare_digest(provided, expected):
            logger.debug("Session signature mismatch, starting an empty session")
            context.session = {}
            return context

        context.session = load_session(data)
        return context

    def encode(self, context: Context) -> Context:
        """Append the session and signature ``Set-Cookie`` headers"""
        if not isinstance(context.session, dict):
            return context

        data = dump_session(context.session)
        self.set_cookie(context, self.cookie_name, data)
        return self.set_cookie(context, self.signature_cookie_name, self.signature(data))


__all__ = ['SignedCookieStorage']
