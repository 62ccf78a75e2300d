"""
Unit tests for flash messages
"""
import pytest

from aino import session
from aino.exceptions import FlashNotLoadedError, SessionNotLoadedError
from aino.http.context import Context
from aino.session import flash


@pytest.mark.unit
class TestFlash:
    """Test flash messages"""

    def test_put(self):
        context = flash.put(Context(session={}), "notice", "Saved!")
        assert context.session == {flash.FLASH_KEY: {"notice": "Saved!"}}
        assert context.session_updated

    def test_put_keeps_other_messages(self):
        context = flash.put(Context(session={}), "notice", "Saved!")
        context = flash.put(context, "error", "But slowly")
        assert context.session[flash.FLASH_KEY] == {"notice": "Saved!", "error": "But slowly"}

    def test_put_requires_session(self):
        with pytest.raises(SessionNotLoadedError):
            flash.put(Context(), "notice", "Saved!")

    def test_put_requires_string(self):
        with pytest.raises(TypeError):
            flash.put(Context(session={}), "count", 3)

    def test_load_moves_messages(self):
        context = Context(session={"user_id": 1, flash.FLASH_KEY: {"notice": "Saved!"}})
        context = flash.load(context)
        assert context.flash == {"notice": "Saved!"}
        assert context.session == {"user_id": 1}
        assert context.session_updated
        assert flash.get(context, "notice") == "Saved!"
        assert flash.get(context, "missing") is None

    def test_load_without_messages(self):
        context = flash.load(Context(session={"user_id": 1}))
        assert context.flash == {}
        assert not context.session_updated

    def test_load_requires_session(self):
        with pytest.raises(SessionNotLoadedError):
            flash.load(Context())

    def test_get_requires_load(self):
        with pytest.raises(FlashNotLoadedError, match="flash.load"):
            flash.get(Context(session={}), "notice")

    def test_shown_once(self, signed_storage, make_context, cookies_from):
        """A message set in one request is readable in the next and gone after"""
        def run(cookies, *steps):
            context = session.decode(session.config(make_context(cookies=cookies), signed_storage))
            context = flash.load(context)
            for step in steps:
                context = step(context)
            session.encode(context)
            return context, cookies_from(context.response_headers or [])

        first, cookies = run(None, lambda context: flash.put(context, "notice", "Order created"))
        assert first.flash == {}

        second, cookies = run(cookies)
        assert second.flash == {"notice": "Order created"}

        third, _ = run(cookies)
        assert third.flash == {}

    def test_message_with_semicolon_keeps_session(self, signed_storage, make_context, cookies_from):
        context = session.config(Context(session={"csrf_token": "abc"}), signed_storage)
        context = session.encode(flash.put(context, "notice", "Saved; thanks"))

        context = session.decode(session.config(make_context(cookies=cookies_from(context.response_headers)), signed_storage))
        context = flash.load(context)
        assert context.session.get("csrf_token") == "abc"
        assert context.flash == {"notice": "Saved; thanks"}
