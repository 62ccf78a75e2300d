"""
Security tests for CSRF protection
"""
import pytest

from aino.exceptions import CSRFTokenMissingError, SessionNotLoadedError
from aino.http.context import Context
from aino.security import csrf

FORM = ("Content-Type", "application/x-www-form-urlencoded")


def post_form(make_context, body, session=None):
    context = make_context(method="POST", path="/orders", headers=[FORM], body=body)
    context.session = session
    return context


def assert_rejected(context):
    assert context.halt
    assert context.response_status == 403
    assert context.response_headers == [("Content-Type", "text/plain")]
    assert context.response_body == "CSRF token doesn't match"


@pytest.mark.security
class TestCSRFToken:
    """Test token generation"""

    def test_token_shape(self):
        token = csrf.generate_token()
        assert len(token) == 43
        assert "=" not in token

    def test_tokens_are_unique(self):
        assert len({csrf.generate_token() for _ in range(50)}) == 50

    def test_set_generates_token(self):
        context = csrf.set(Context(session={}))
        assert context.session[csrf.CSRF_KEY]
        assert context.session_updated

    def test_set_is_idempotent(self):
        context = csrf.set(Context(session={}))
        token = context.session[csrf.CSRF_KEY]

        context.session_updated = False
        context = csrf.set(context)
        assert context.session[csrf.CSRF_KEY] == token
        assert not context.session_updated

    def test_set_keeps_existing_session_data(self):
        context = csrf.set(Context(session={"user_id": 1}))
        assert context.session["user_id"] == 1

    def test_set_requires_session(self):
        with pytest.raises(SessionNotLoadedError):
            csrf.set(Context())

    def test_get_token(self):
        context = csrf.set(Context(session={}))
        assert csrf.get_token(context) == context.session[csrf.CSRF_KEY]

    def test_get_token_fails_closed(self):
        with pytest.raises(CSRFTokenMissingError):
            csrf.get_token(Context())
        with pytest.raises(CSRFTokenMissingError):
            csrf.get_token(Context(session={}))


@pytest.mark.security
class TestCSRFCheck:
    """Test token checking"""

    @pytest.mark.parametrize("method", ["GET", "HEAD", "OPTIONS", "TRACE"])
    def test_safe_methods_bypass(self, make_context, method):
        context = csrf.check(make_context(method=method))
        assert not context.halt
        assert context.response_status is None

    def test_matching_token(self, make_context):
        token = csrf.generate_token()
        context = csrf.check(post_form(make_context, f"csrf_token={token}&name=x", {csrf.CSRF_KEY: token}))
        assert not context.halt
        assert context.response_status is None

    def test_mismatched_token(self, make_context):
        token = csrf.generate_token()
        other = csrf.generate_token()
        assert_rejected(csrf.check(post_form(make_context, f"csrf_token={other}", {csrf.CSRF_KEY: token})))

    def test_missing_request_token(self, make_context):
        token = csrf.generate_token()
        assert_rejected(csrf.check(post_form(make_context, "name=x", {csrf.CSRF_KEY: token})))

    def test_empty_request_token(self, make_context):
        token = csrf.generate_token()
        assert_rejected(csrf.check(post_form(make_context, "csrf_token=", {csrf.CSRF_KEY: token})))

    def test_missing_session_token(self, make_context):
        assert_rejected(csrf.check(post_form(make_context, "csrf_token=abc", {})))

    def test_missing_session(self, make_context):
        assert_rejected(csrf.check(post_form(make_context, "csrf_token=abc", None)))

    def test_non_form_body(self, make_context):
        token = csrf.generate_token()
        context = make_context(method="POST", headers=[("Content-Type", "text/plain")], body=token.encode())
        context.session = {csrf.CSRF_KEY: token}
        assert_rejected(csrf.check(context))

    def test_overridden_delete_is_checked(self, make_context):
        token = csrf.generate_token()
        context = post_form(make_context, "_method=delete", {csrf.CSRF_KEY: token})
        assert context.method == "delete"
        assert_rejected(csrf.check(context))

    def test_array_token_rejected(self, make_context):
        token = csrf.generate_token()
        context = post_form(make_context, f"csrf_token[]={token}", {csrf.CSRF_KEY: token})
        assert_rejected(csrf.check(context))
