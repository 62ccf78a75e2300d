"""
Flash messages: one-shot strings kept in the session.

Primarily to display notices on the next page load, e.g. "Success!" after
a POST. ``load`` moves them out of the session, so they show exactly once.
"""

import logging
from typing import Optional

from aino import session
from aino.exceptions import FlashNotLoadedError, SessionNotLoadedError
from aino.http.context import Context

logger = logging.getLogger(__name__)

FLASH_KEY = "aino_flash"


def put(context: Context, key: str, value: str) -> Context:
    """
    Set a flash message for the next request.

    Must run after ``aino.session.decode``.
    """
    if context.session is None:
        raise SessionNotLoadedError("set flash messages")
    if not isinstance(value, str):
        raise TypeError(f"Flash messages must be strings, got {type(value).__name__}")

    messages = dict(context.session.get(FLASH_KEY) or {})
    messages[str(key)] = value
    return session.put(context, FLASH_KEY, messages)


def get(context: Context, key: str) -> Optional[str]:
    """Fetch a loaded flash message"""
    if context.flash is None:
        raise FlashNotLoadedError()
    return context.flash.get(str(key))


def load(context: Context) -> Context:
    """
    Move flash messages from the session onto ``context.flash``.

    Must run after ``aino.session.decode``.
    """
    if context.session is None:
        raise SessionNotLoadedError("load flash messages")

    if FLASH_KEY not in context.session:
        context.flash = {}
        return context

    messages = context.session[FLASH_KEY]
    session.delete(context, FLASH_KEY)
    context.flash = messages if isinstance(messages, dict) else {}
    logger.debug(f"Loaded {len(context.flash)} flash message(s)")
    return context


__all__ = ['FLASH_KEY', 'put', 'get', 'load']
