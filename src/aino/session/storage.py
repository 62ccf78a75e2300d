"""
Pluggable session storage.

A storage object is both the configuration and the codec for one way of
carrying session data: ``decode`` reads it from the request and must set
``context.session``; ``encode`` writes it back as response headers. The
client cookie is the only store, so nothing is kept server-side.
"""

import json
import logging
from abc import ABC, abstractmethod
from datetime import datetime, timezone
from typing import Any, Dict, Optional, Union

from aino.http.context import Context
from aino.http.response import format_cookie, response_header

logger = logging.getLogger(__name__)

SESSION_COOKIE = "_aino_session"
SIGNATURE_COOKIE = "_aino_session_signature"

# Key stamped into every encoded session
TIMESTAMP_KEY = "t"


def to_bytes(value: Union[str, bytes]) -> bytes:
    return value.encode("utf-8") if isinstance(value, str) else value


def load_session(data: Union[str, bytes]) -> Dict[str, Any]:
    """Parse session JSON, falling back to an empty session"""
    try:
        session = json.loads(data)
    except ValueError as e:
        logger.debug(f"Discarding session data that is not valid JSON: {e}")
        return {}

    if not isinstance(session, dict):
        logger.debug("Discarding session data that is not a JSON object")
        return {}
    return session


def dump_session(session: Dict[str, Any]) -> str:
    """
    Serialize a session, stamping the encode time into the copy.

    Semicolons are written as JSON escapes so the text can sit unquoted in a
    cookie value.
    """
    stamped = dict(session)
    stamped[TIMESTAMP_KEY] = datetime.now(timezone.utc).isoformat()
    return json.dumps(stamped, separators=(",", ":")).replace(";", "\\u003b")


class SessionStorage(ABC):
    """Abstract session storage"""

    path: str = "/"
    secure: bool = False
    same_site: Optional[str] = None

    @abstractmethod
    def decode(self, context: Context) -> Context:
        """Read session data from the request into ``context.session``"""

    @abstractmethod
    def encode(self, context: Context) -> Context:
        """Append the headers carrying ``context.session`` to the response"""

    def set_cookie(self, context: Context, name: str, value: str) -> Context:
        cookie = format_cookie(name, value, path=self.path, secure=self.secure, same_site=self.same_site)
        return response_header(context, "Set-Cookie", cookie)


__all__ = [
    'SESSION_COOKIE', 'SIGNATURE_COOKIE', 'TIMESTAMP_KEY', 'SessionStorage',
    'load_session', 'dump_session', 'to_bytes'
]
