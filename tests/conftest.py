"""
Aino Test Configuration and Fixtures
"""
import base64
import os

import pytest
from faker import Faker

from aino.config import ConfigPresets
from aino.http.context import Context, Request
from aino.middleware.pipeline import reduce
from aino.middleware.request import common
from aino.session import EncryptedCookieStorage, SignedCookieStorage


@pytest.fixture
def faker():
    """Faker instance for generating test data."""
    return Faker()


@pytest.fixture
def config():
    """Test application configuration."""
    return ConfigPresets.testing()


@pytest.fixture
def make_request():
    """Factory for inbound requests."""
    def factory(method="GET", path="/", headers=None, query_string="", body=b"", cookies=None):
        headers = list(headers or [])
        if cookies:
            headers.append(("Cookie", "; ".join(f"{name}={value}" for name, value in cookies.items())))
        return Request(
            method=method,
            path=path,
            headers=headers,
            query_string=query_string,
            body=body,
            host="testserver",
            port=80,
        )
    return factory


@pytest.fixture
def make_context(make_request):
    """Factory for contexts that already went through the request normalizer."""
    def factory(*args, **kwargs):
        context = Context.from_request(make_request(*args, **kwargs), scheme="http", host="testserver", port=80)
        return reduce(context, common())
    return factory


@pytest.fixture
def signed_storage():
    """Signed cookie session storage."""
    return SignedCookieStorage(key="test-secret-key", salt="test-salt")


@pytest.fixture
def encryption_key():
    """Random 256-bit key."""
    return os.urandom(32)


@pytest.fixture
def encrypted_storage(encryption_key):
    """Encrypted cookie session storage."""
    return EncryptedCookieStorage(key=encryption_key)


@pytest.fixture
def encoded_encryption_key(encryption_key):
    """The encryption key as found in the environment."""
    return base64.b64encode(encryption_key).decode("ascii")


def set_cookies(headers):
    """Turn ``Set-Cookie`` response headers into a cookie mapping."""
    cookies = {}
    for name, value in headers:
        if name.lower() == "set-cookie":
            pair = value.split(";", 1)[0]
            cookie_name, _, cookie_value = pair.partition("=")
            cookies[cookie_name] = cookie_value
    return cookies


@pytest.fixture
def cookies_from():
    """Helper extracting cookies from response headers."""
    return set_cookies


# Custom markers
def pytest_configure(config):
    """Configure pytest with custom markers."""
    config.addinivalue_line("markers", "unit: Unit tests")
    config.addinivalue_line("markers", "integration: Integration tests")
    config.addinivalue_line("markers", "security: Security tests")
