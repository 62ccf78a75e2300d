"""
Unit tests for Aino configuration
"""
import pytest

from aino.config import (
    PLACEHOLDER_SECRET_KEY,
    AppConfig,
    ConfigPresets,
    ServerConfig,
    SessionBackend,
    SessionConfig,
    get_config_from_environment,
)


@pytest.mark.unit
class TestAppConfig:
    """Test configuration classes"""

    def test_placeholder_key_rejected_outside_debug(self):
        with pytest.raises(ValueError, match="SECRET_KEY"):
            AppConfig(debug=False, session=SessionConfig(secret_key=PLACEHOLDER_SECRET_KEY))

    def test_placeholder_key_allowed_in_debug(self):
        config = AppConfig(debug=True, session=SessionConfig(secret_key=PLACEHOLDER_SECRET_KEY))
        assert config.session.secret_key == PLACEHOLDER_SECRET_KEY

    def test_host_and_port(self):
        config = AppConfig(debug=True, server=ServerConfig(host="0.0.0.0", port=8080))
        assert config.host == "0.0.0.0"
        assert config.port == 8080

    def test_public_address_defaults_to_bind_address(self):
        server = ServerConfig(host="127.0.0.1", port=3000, url_host=None, url_port=None)
        assert server.public_host == "127.0.0.1"
        assert server.public_port == 3000

    def test_public_address_override(self):
        server = ServerConfig(host="0.0.0.0", port=3000, url_host="example.com", url_port=443)
        assert server.public_host == "example.com"
        assert server.public_port == 443

    def test_session_backend_values(self):
        assert SessionBackend("signed_cookie") is SessionBackend.SIGNED_COOKIE
        assert SessionBackend("encrypted_cookie") is SessionBackend.ENCRYPTED_COOKIE


@pytest.mark.unit
class TestConfigPresets:
    """Test configuration presets"""

    def test_development(self):
        config = ConfigPresets.development()
        assert config.debug
        assert config.environment == "development"
        assert config.logging.level == "DEBUG"

    def test_testing(self):
        config = ConfigPresets.testing()
        assert config.environment == "testing"
        assert config.session.secret_key == "test-secret-key"
        assert config.server.public_host == "testserver"
        assert config.server.public_port == 80

    @pytest.mark.parametrize("env, expected", [
        ("testing", "testing"),
        ("development", "development"),
        ("anything-else", "development"),
    ])
    def test_from_environment(self, monkeypatch, env, expected):
        monkeypatch.setenv("AINO_ENV", env)
        assert get_config_from_environment().environment == expected
