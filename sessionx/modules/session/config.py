"""Session configuration."""

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any, Optional, Union

from .errors import ConfigError

VALID_KEY_LENGTHS = (16, 24, 32)


class SameSite(str, Enum):
    """SameSite cookie policy."""

    LAX = "Lax"
    STRICT = "Strict"
    NONE = "None"

    @classmethod
    def _missing_(cls, value):
        if isinstance(value, str):
            for member in cls:
                if member.value.lower() == value.lower():
                    return member
        return None


@dataclass(frozen=True)
class SessionConfig:
    """
    Immutable session policy, built once at startup and shared by all requests.

    Durations are in seconds. A ``max_age`` or ``rotation_interval`` of zero
    disables expiry or rotation respectively.
    """

    secret_key: bytes = field(repr=False)
    cookie_name: str = "sessionx"
    max_age: int = 24 * 60 * 60
    path: str = "/"
    domain: Optional[str] = None
    secure: bool = True
    http_only: bool = True
    same_site: SameSite = SameSite.LAX
    rotation_interval: int = 15 * 60
    store: Optional[Any] = field(default=None, repr=False, compare=False)

    def __post_init__(self):
        if isinstance(self.secret_key, str):
            object.__setattr__(self, "secret_key", self.secret_key.encode("utf-8"))
        try:
            object.__setattr__(self, "same_site", SameSite(self.same_site))
        except ValueError as e:
            raise ConfigError(
                "config", f"unsupported same-site policy {self.same_site!r}", e
            ) from e

    def with_options(self, **overrides) -> "SessionConfig":
        """Return a copy with the given fields replaced."""
        return replace(self, **overrides)


def default_config(secret_key: Union[bytes, str], **overrides) -> SessionConfig:
    """Production defaults: secure, http-only, Lax cookies living for one day."""
    return SessionConfig(secret_key=secret_key, **overrides)


def dev_config(secret_key: Union[bytes, str], **overrides) -> SessionConfig:
    """Same as ``default_config`` but allows cookies over plain HTTP."""
    overrides.setdefault("secure", False)
    return SessionConfig(secret_key=secret_key, **overrides)
