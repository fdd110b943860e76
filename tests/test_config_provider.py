"""
Tests for environment configuration and the session factory.
"""

import base64
import os
from unittest.mock import patch

import pytest

from conftest import KEY_32
from sessionx.config.provider import EnvConfigProvider, parse_secret_key
from sessionx.modules.session import ConfigError, SameSite
from sessionx.modules.session.factory import SessionFactory
from sessionx.modules.storage import InMemoryStore, RedisStore


class TestParseSecretKey:
    def test_raw_text(self):
        assert parse_secret_key("0123456789abcdef") == b"0123456789abcdef"

    def test_base64(self):
        encoded = base64.b64encode(KEY_32).decode()
        assert parse_secret_key(f"base64:{encoded}") == KEY_32

    def test_hex(self):
        assert parse_secret_key("hex:" + "ab" * 24) == bytes([0xAB]) * 24

    @pytest.mark.parametrize("value", ["base64:***", "hex:zz"])
    def test_invalid_encoding(self, value):
        with pytest.raises(ValueError, match="SESSION_SECRET_KEY"):
            parse_secret_key(value)


class TestEnvConfigProvider:
    def test_missing_secret_key(self):
        with patch.dict(os.environ, {}, clear=True):
            with pytest.raises(ValueError, match="SESSION_SECRET_KEY"):
                EnvConfigProvider().get_session_config()

    def test_session_defaults(self):
        with patch.dict(os.environ, {"SESSION_SECRET_KEY": KEY_32.decode()}, clear=True):
            config = EnvConfigProvider().get_session_config()

        assert config.secret_key == KEY_32
        assert config.cookie_name == "sessionx"
        assert config.max_age == 86400
        assert config.path == "/"
        assert config.domain is None
        assert config.secure is True
        assert config.http_only is True
        assert config.same_site is SameSite.LAX
        assert config.rotation_interval == 900

    def test_session_overrides(self):
        env = {
            "SESSION_SECRET_KEY": KEY_32.decode(),
            "SESSION_COOKIE_NAME": "sid",
            "SESSION_MAX_AGE": "600",
            "SESSION_COOKIE_PATH": "/app",
            "SESSION_COOKIE_DOMAIN": "example.com",
            "SECURE_COOKIES": "false",
            "SESSION_SAME_SITE": "strict",
            "SESSION_ROTATION_INTERVAL": "0",
        }
        with patch.dict(os.environ, env, clear=True):
            config = EnvConfigProvider().get_session_config()

        assert config.cookie_name == "sid"
        assert config.max_age == 600
        assert config.path == "/app"
        assert config.domain == "example.com"
        assert config.secure is False
        assert config.same_site is SameSite.STRICT
        assert config.rotation_interval == 0

    def test_invalid_same_site(self):
        env = {"SESSION_SECRET_KEY": KEY_32.decode(), "SESSION_SAME_SITE": "bogus"}
        with patch.dict(os.environ, env, clear=True):
            with pytest.raises(ConfigError):
                EnvConfigProvider().get_session_config()

    def test_store_defaults_follow_max_age(self):
        with patch.dict(os.environ, {"SESSION_MAX_AGE": "1200"}, clear=True):
            store = EnvConfigProvider().get_store_config()

        assert store.backend == "cookie"
        assert store.prefix == "sessionx:"
        assert store.ttl == 1200
        assert store.is_remote is False

    def test_unknown_store_backend(self):
        with patch.dict(os.environ, {"SESSION_STORE": "memcached"}, clear=True):
            with pytest.raises(ValueError, match="SESSION_STORE"):
                EnvConfigProvider().get_store_config()

    def test_redis_port_in_tcp_form(self):
        env = {"REDIS_HOST": "redis", "REDIS_PORT": "tcp://10.0.0.5:6380", "REDIS_DB": "2"}
        with patch.dict(os.environ, env, clear=True):
            redis_config = EnvConfigProvider().get_redis_config()

        assert redis_config.port == 6380
        assert redis_config.url == "redis://redis:6380/2"
        assert redis_config.password is None

    def test_api_config(self):
        with patch.dict(os.environ, {"LOG_LEVEL": "debug"}, clear=True):
            api = EnvConfigProvider().get_api_config()

        assert api.port == 8080
        assert api.host == "0.0.0.0"
        assert api.log_level == "DEBUG"


class TestSessionFactory:
    def env(self, **extra):
        return {"SESSION_SECRET_KEY": KEY_32.decode(), **extra}

    def test_cookie_backend(self):
        with patch.dict(os.environ, self.env(), clear=True):
            manager = SessionFactory.build(EnvConfigProvider())

        assert manager.store is None

    def test_memory_backend(self):
        with patch.dict(os.environ, self.env(SESSION_STORE="memory", SESSION_STORE_TTL="60"), clear=True):
            manager = SessionFactory.build(EnvConfigProvider())

        assert isinstance(manager.store, InMemoryStore)
        assert manager.store.ttl == 60

    def test_redis_backend(self, mock_redis):
        env = self.env(SESSION_STORE="redis", SESSION_STORE_PREFIX="app:sess:")
        with patch.dict(os.environ, env, clear=True):
            manager = SessionFactory.build(EnvConfigProvider(), mock_redis)

        assert isinstance(manager.store, RedisStore)
        assert manager.store.prefix == "app:sess:"
        assert manager.store.redis is mock_redis

    def test_redis_backend_requires_client(self):
        with patch.dict(os.environ, self.env(SESSION_STORE="redis"), clear=True):
            with pytest.raises(ValueError, match="Redis client"):
                SessionFactory.build(EnvConfigProvider())

    def test_invalid_key_length(self):
        with patch.dict(os.environ, {"SESSION_SECRET_KEY": "too-short"}, clear=True):
            with pytest.raises(ConfigError):
                SessionFactory.build(EnvConfigProvider())
