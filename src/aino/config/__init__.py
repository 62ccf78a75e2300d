"""
Aino Configuration System

This module provides configuration management for Aino applications,
read from environment variables with presets per environment.
"""

import os
from typing import Optional
from dataclasses import dataclass, field
from enum import Enum


class SessionBackend(str, Enum):
    SIGNED_COOKIE = "signed_cookie"
    ENCRYPTED_COOKIE = "encrypted_cookie"


PLACEHOLDER_SECRET_KEY = 'your-secret-key-here'


@dataclass
class SessionConfig:
    """Session storage configuration"""
    backend: SessionBackend = field(default_factory=lambda: SessionBackend(os.getenv('SESSION_BACKEND', 'signed_cookie')))
    secret_key: str = os.getenv('SECRET_KEY', PLACEHOLDER_SECRET_KEY)
    salt: str = os.getenv('SESSION_SALT', 'aino-session')
    # base64 of exactly 32 bytes, only used by the encrypted backend
    encryption_key: Optional[str] = os.getenv('SESSION_ENCRYPTION_KEY')
    cookie_path: str = os.getenv('SESSION_COOKIE_PATH', '/')
    secure: bool = os.getenv('SESSION_SECURE', 'False').lower() == 'true'
    same_site: Optional[str] = os.getenv('SESSION_SAME_SITE')


@dataclass
class ServerConfig:
    """Server configuration"""
    host: str = os.getenv('HOST', '127.0.0.1')
    port: int = int(os.getenv('PORT', '3000'))
    # Public address used for absolute URLs, defaults to the bind address
    url_scheme: str = os.getenv('URL_SCHEME', 'http')
    url_host: Optional[str] = os.getenv('URL_HOST')
    url_port: Optional[int] = int(os.getenv('URL_PORT')) if os.getenv('URL_PORT') else None
    access_log: bool = os.getenv('ACCESS_LOG', 'True').lower() == 'true'
    debug: bool = os.getenv('DEBUG', 'False').lower() == 'true'

    @property
    def public_host(self) -> str:
        return self.url_host or self.host

    @property
    def public_port(self) -> int:
        return self.url_port if self.url_port is not None else self.port


@dataclass
class LoggingConfig:
    """Logging configuration"""
    level: str = os.getenv('LOG_LEVEL', 'INFO')


@dataclass
class AppConfig:
    """Main application configuration"""
    debug: bool = os.getenv('DEBUG', 'False').lower() == 'true'
    environment: str = os.getenv('AINO_ENV', 'development')

    session: SessionConfig = field(default_factory=SessionConfig)
    server: ServerConfig = field(default_factory=ServerConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    def __post_init__(self):
        """Validate configuration after initialization"""
        if not self.debug and self.session.secret_key == PLACEHOLDER_SECRET_KEY:
            raise ValueError("SECRET_KEY must be set in production environment")

    @property
    def host(self) -> str:
        return self.server.host

    @property
    def port(self) -> int:
        return self.server.port


class ConfigPresets:
    """Configuration presets for different environments"""

    @staticmethod
    def development() -> AppConfig:
        """Development configuration"""
        return AppConfig(
            debug=True,
            environment='development',
            session=SessionConfig(secret_key='dev-secret-key-change-in-production'),
            server=ServerConfig(host='127.0.0.1', port=3000, debug=True),
            logging=LoggingConfig(level='DEBUG'),
        )

    @staticmethod
    def production() -> AppConfig:
        """Production configuration"""
        return AppConfig(
            debug=False,
            environment='production',
            server=ServerConfig(host='0.0.0.0', debug=False),
            logging=LoggingConfig(level='WARNING'),
        )

    @staticmethod
    def testing() -> AppConfig:
        """Testing configuration"""
        return AppConfig(
            debug=True,
            environment='testing',
            session=SessionConfig(secret_key='test-secret-key', salt='test-salt'),
            server=ServerConfig(host='127.0.0.1', port=0, url_host='testserver', url_port=80, debug=True),
            logging=LoggingConfig(level='ERROR'),
        )


def get_config_from_environment() -> AppConfig:
    """Get configuration based on environment"""
    env = os.getenv('AINO_ENV', 'development').lower()

    if env == 'production':
        return ConfigPresets.production()
    elif env == 'testing':
        return ConfigPresets.testing()
    else:
        return ConfigPresets.development()


__all__ = [
    'AppConfig', 'SessionConfig', 'ServerConfig', 'LoggingConfig',
    'SessionBackend', 'ConfigPresets', 'get_config_from_environment',
    'PLACEHOLDER_SECRET_KEY'
]
