"""Configuration provider following Black Box Design principles."""
import base64
import binascii
import os
from dataclasses import dataclass
from typing import Optional, Protocol

from ..modules.session.config import SessionConfig

STORE_BACKENDS = ("cookie", "memory", "redis")


@dataclass
class StoreConfig:
    """Session store configuration."""
    backend: str
    prefix: str
    ttl: int

    @property
    def is_remote(self) -> bool:
        return self.backend == "redis"


@dataclass
class RedisConfig:
    """Redis connection configuration."""
    host: str
    port: int
    db: int
    password: Optional[str]

    @property
    def url(self) -> str:
        # Password is passed separately to avoid URL encoding issues
        return f"redis://{self.host}:{self.port}/{self.db}"


@dataclass
class APIConfig:
    """API configuration."""
    port: int
    host: str
    log_level: str


class ConfigProvider(Protocol):
    """Protocol for configuration providers."""

    def get_session_config(self) -> SessionConfig:
        """Get session configuration."""
        ...

    def get_store_config(self) -> StoreConfig:
        """Get session store configuration."""
        ...

    def get_redis_config(self) -> RedisConfig:
        """Get Redis configuration."""
        ...

    def get_api_config(self) -> APIConfig:
        """Get API configuration."""
        ...


def _env_bool(name: str, default: str) -> bool:
    return os.getenv(name, default).lower() == "true"


def parse_secret_key(value: str) -> bytes:
    """
    Decode a secret key from its environment representation.

    ``base64:<data>`` and ``hex:<data>`` select an encoding, anything else is
    taken as raw UTF-8 text.

    Example:
        >>> len(parse_secret_key("hex:" + "00" * 16))
        16
    """
    try:
        if value.startswith("base64:"):
            return base64.b64decode(value[len("base64:"):], validate=True)
        if value.startswith("hex:"):
            return bytes.fromhex(value[len("hex:"):])
    except (binascii.Error, ValueError) as e:
        raise ValueError(f"SESSION_SECRET_KEY could not be decoded: {e}") from e
    return value.encode("utf-8")


class EnvConfigProvider:
    """Environment-based configuration provider."""

    def get_session_config(self) -> SessionConfig:
        """Get session configuration from environment variables."""
        # Secret key is required - no default for security
        secret_key = os.getenv("SESSION_SECRET_KEY")
        if not secret_key:
            raise ValueError(
                "SESSION_SECRET_KEY environment variable must be set. "
                "Use 16, 24 or 32 bytes of text, or a base64:/hex: encoded key. "
                "Example: hex:$(openssl rand -hex 32)"
            )

        return SessionConfig(
            secret_key=parse_secret_key(secret_key),
            cookie_name=os.getenv("SESSION_COOKIE_NAME", "sessionx"),
            max_age=int(os.getenv("SESSION_MAX_AGE", "86400")),
            path=os.getenv("SESSION_COOKIE_PATH", "/"),
            domain=os.getenv("SESSION_COOKIE_DOMAIN") or None,
            # For development, allow insecure cookies over HTTP
            secure=_env_bool("SECURE_COOKIES", "true"),
            http_only=_env_bool("SESSION_HTTP_ONLY", "true"),
            same_site=os.getenv("SESSION_SAME_SITE", "Lax"),
            rotation_interval=int(os.getenv("SESSION_ROTATION_INTERVAL", "900")),
        )

    def get_store_config(self) -> StoreConfig:
        """Get session store configuration from environment variables."""
        backend = os.getenv("SESSION_STORE", "cookie").lower()
        if backend not in STORE_BACKENDS:
            raise ValueError(
                f"SESSION_STORE must be one of {', '.join(STORE_BACKENDS)}, got {backend!r}"
            )

        # Store TTL defaults to the session max age
        default_ttl = os.getenv("SESSION_MAX_AGE", "86400")
        return StoreConfig(
            backend=backend,
            prefix=os.getenv("SESSION_STORE_PREFIX", "sessionx:"),
            ttl=int(os.getenv("SESSION_STORE_TTL", default_ttl)),
        )

    def get_redis_config(self) -> RedisConfig:
        """Get Redis configuration from environment variables."""
        # Parse Redis port (might be in tcp://host:port format from K8s)
        redis_port_env = os.getenv("REDIS_PORT", "6379")
        if redis_port_env.startswith("tcp://"):
            redis_port = int(redis_port_env.split(":")[-1])
        else:
            redis_port = int(redis_port_env)

        return RedisConfig(
            host=os.getenv("REDIS_HOST", "localhost"),
            port=redis_port,
            db=int(os.getenv("REDIS_DB", "0")),
            password=os.getenv("REDIS_PASSWORD"),
        )

    def get_api_config(self) -> APIConfig:
        """Get API configuration from environment variables."""
        return APIConfig(
            port=int(os.getenv("API_PORT", "8080")),
            host=os.getenv("API_HOST", "0.0.0.0"),
            log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
        )
