"""
Session Management for Aino

Session data is decoded from the request once, changed through ``put``,
``delete`` and ``clear`` (which mark it dirty), and encoded back into the
response only when it changed::

    storage = SignedCookieStorage(key="secret", salt="salt")

    middleware = [
        request.common(),
        lambda context: session.config(context, storage),
        session.decode,
        flash.load,
        ...
        ignore_halt(session.encode),
    ]

Values must be JSON-serializable.
"""

import base64
import binascii
import logging
from typing import Any

from aino.config import SessionBackend, SessionConfig
from aino.exceptions import AinoError, SessionNotLoadedError
from aino.http.context import Context
from aino.session.storage import SessionStorage
from aino.session.cookie import SignedCookieStorage
from aino.session.encrypted_cookie import EncryptedCookieStorage

logger = logging.getLogger(__name__)


def storage_from_config(session_config: SessionConfig) -> SessionStorage:
    """Build the storage selected by the configuration"""
    attributes = dict(
        path=session_config.cookie_path,
        secure=session_config.secure,
        same_site=session_config.same_site,
    )

    if session_config.backend == SessionBackend.ENCRYPTED_COOKIE:
        if not session_config.encryption_key:
            raise ValueError("SESSION_ENCRYPTION_KEY is required for encrypted cookie sessions")
        try:
            key = base64.b64decode(session_config.encryption_key, validate=True)
        except binascii.Error:
            raise ValueError("SESSION_ENCRYPTION_KEY must be base64 encoded") from None
        return EncryptedCookieStorage(key=key, **attributes)

    return SignedCookieStorage(key=session_config.secret_key, salt=session_config.salt, **attributes)


def config(context: Context, storage: SessionStorage) -> Context:
    """Put the session storage used by ``decode`` and ``encode`` on the context"""
    context.session_config = storage
    return context


def decode(context: Context) -> Context:
    """
    Decode session data onto ``context.session``.

    Requires ``config`` and the ``cookies`` middleware to have run.
    """
    if context.session_config is None:
        raise AinoError("No session storage configured. Run aino.session.config first")
    return context.session_config.decode(context)


def encode(context: Context) -> Context:
    """Write the session into response headers, only if it was updated"""
    if not context.session_updated:
        return context
    if context.session_config is None:
        raise AinoError("No session storage configured. Run aino.session.config first")
    return context.session_config.encode(context)


def get(context: Context, key: str, default: Any = None) -> Any:
    if context.session is None:
        raise SessionNotLoadedError("read values from it")
    return context.session.get(key, default)


def put(context: Context, key: str, value: Any) -> Context:
    """Set a session value and mark the session updated"""
    if context.session is None:
        raise SessionNotLoadedError("put values in it")

    session = dict(context.session)
    session[key] = value
    context.session = session
    context.session_updated = True
    return context


def delete(context: Context, key: str) -> Context:
    """Remove a session value, keeping the rest of the session intact"""
    if context.session is None:
        raise SessionNotLoadedError("remove values from it")

    session = dict(context.session)
    session.pop(key, None)
    context.session = session
    context.session_updated = True
    return context


def clear(context: Context) -> Context:
    """Reset the session to an empty mapping"""
    context.session = {}
    context.session_updated = True
    return context


__all__ = [
    'SessionStorage', 'SignedCookieStorage', 'EncryptedCookieStorage',
    'storage_from_config', 'config', 'decode', 'encode', 'get', 'put',
    'delete', 'clear'
]
