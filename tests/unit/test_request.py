"""
Unit tests for the request normalizer
"""
import json

import pytest

from aino.http.context import Context, HTTPMethod, Request
from aino.middleware import request
from aino.middleware.pipeline import reduce

FORM = ("Content-Type", "application/x-www-form-urlencoded")
JSON = ("Content-Type", "application/json")


@pytest.mark.unit
class TestMethodAndPath:
    """Test method and path normalization"""

    def test_method_is_lowercased(self, make_context):
        context = make_context(method="GET")
        assert context.method == HTTPMethod.GET
        assert context.method == "get"
        assert str(context.method) == "get"

    def test_unknown_method_is_kept(self, make_context):
        context = make_context(method="PROPFIND")
        assert context.method == "propfind"

    def test_path_segments(self, make_context):
        assert make_context(path="/orders/10").path == ["orders", "10"]

    def test_root_path(self, make_context):
        assert make_context(path="/").path == []

    def test_empty_segments_dropped(self, make_context):
        assert make_context(path="//orders///10/").path == ["orders", "10"]

    def test_segments_are_percent_decoded(self, make_context):
        assert make_context(path="/files/a%2Fb/hello%20world").path == ["files", "a/b", "hello world"]

    def test_list_path(self):
        context = request.path(Context(request=Request(path=["orders", "1"])))
        assert context.path == ["orders", "1"]


@pytest.mark.unit
class TestHeadersAndCookies:
    """Test header and cookie normalization"""

    def test_header_names_lowercased(self, make_context):
        context = make_context(headers=[("X-Request-Id", "abc"), ("Accept", "text/html")])
        assert context.headers == [("x-request-id", "abc"), ("accept", "text/html")]

    def test_request_header_lookup(self, make_context):
        context = make_context(headers=[("X-Tag", "a"), ("x-tag", "b")])
        assert request.request_header(context, "X-TAG") == ["a", "b"]
        assert request.request_header(context, "missing") == []

    def test_request_header_before_normalization(self):
        context = Context(request=Request(headers=[("Content-Type", "text/plain")]))
        assert request.request_header(context, "content-type") == ["text/plain"]

    def test_cookies(self, make_context):
        context = make_context(headers=[("Cookie", "a=1; b = two ;c=x=y")])
        assert context.cookies == {"a": "1", "b": "two", "c": "x=y"}

    def test_multiple_cookie_headers(self, make_context):
        context = make_context(headers=[("Cookie", "a=1"), ("Cookie", "b=2")])
        assert context.cookies == {"a": "1", "b": "2"}

    def test_no_cookies(self, make_context):
        assert make_context().cookies == {}


@pytest.mark.unit
class TestQueryAndBody:
    """Test query and body parsing"""

    def test_query_params(self, make_context):
        context = make_context(query_string="a[]=1&a[]=2&b[x]=3")
        assert context.query_params == {"a": ["1", "2"], "b": {"x": "3"}}

    def test_bytes_query(self, make_context):
        assert make_context(query_string=b"page=2").query_params == {"page": "2"}

    def test_form_body(self, make_context):
        context = make_context(method="POST", headers=[FORM], body=b"user[name]=Ada&tags[]=x")
        assert context.parsed_body == {"user": {"name": "Ada"}, "tags": ["x"]}

    def test_form_body_with_charset(self, make_context):
        headers = [("Content-Type", "application/x-www-form-urlencoded; charset=utf-8")]
        context = make_context(method="PUT", headers=headers, body="name=caf%C3%A9")
        assert context.parsed_body == {"name": "café"}

    def test_json_body(self, make_context):
        payload = {"order": {"items": [1, 2]}, "note": None}
        context = make_context(method="PATCH", headers=[JSON], body=json.dumps(payload).encode())
        assert context.parsed_body == payload

    def test_invalid_json_leaves_body_unset(self, make_context):
        context = make_context(method="POST", headers=[JSON], body=b"{not json")
        assert context.parsed_body is None

    def test_deeply_nested_json_leaves_body_unset(self, make_context):
        body = b"[" * 100000 + b"]" * 100000
        context = make_context(method="POST", headers=[JSON], body=body)
        assert context.parsed_body is None

    def test_unknown_content_type(self, make_context):
        context = make_context(method="POST", headers=[("Content-Type", "text/plain")], body=b"a=1")
        assert context.parsed_body is None

    def test_get_body_is_ignored(self, make_context):
        context = make_context(method="GET", headers=[FORM], body=b"a=1")
        assert context.parsed_body is None

    def test_delete_body_is_ignored(self, make_context):
        context = make_context(method="DELETE", headers=[FORM], body=b"a=1")
        assert context.parsed_body is None


@pytest.mark.unit
class TestMethodOverride:
    """Test the _method override"""

    def test_post_becomes_delete(self, make_context):
        context = make_context(method="POST", path="/orders", headers=[FORM], body=b"name=value&_method=delete")
        assert context.method == HTTPMethod.DELETE
        assert context.parsed_body == {"name": "value", "_method": "delete"}

    @pytest.mark.parametrize("override", ["put", "patch"])
    def test_other_overrides(self, make_context, override):
        context = make_context(method="POST", headers=[FORM], body=f"_method={override}".encode())
        assert context.method == override

    @pytest.mark.parametrize("override", ["get", "DELETE", "connect", ""])
    def test_unsupported_overrides_ignored(self, make_context, override):
        context = make_context(method="POST", headers=[FORM], body=f"_method={override}".encode())
        assert context.method == HTTPMethod.POST

    def test_override_only_for_post(self, make_context):
        context = make_context(method="PUT", headers=[FORM], body=b"_method=delete")
        assert context.method == HTTPMethod.PUT


@pytest.mark.unit
class TestParams:
    """Test params merging"""

    def test_precedence(self, make_context):
        context = make_context(method="POST", query_string="id=query&page=2", headers=[FORM], body=b"id=body&name=x")
        context.path_params = {"id": "path"}
        context = request.params(context)
        assert context.params == {"id": "path", "page": "2", "name": "x"}

    def test_missing_sources(self):
        assert request.params(Context()).params == {}

    def test_non_mapping_body_skipped(self, make_context):
        context = make_context(method="POST", headers=[JSON], body=b"[1, 2]")
        assert request.params(context).params == {}

    def test_common_order(self):
        names = [middleware.__name__ for middleware in request.common()]
        assert names == ["method", "path", "headers", "query_params", "request_body", "adjust_method", "cookies"]

    def test_common_is_reducible(self):
        context = reduce(Context(request=Request(method="HEAD", path="/a")), request.common())
        assert context.method == HTTPMethod.HEAD
        assert context.path == ["a"]
