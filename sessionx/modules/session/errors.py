"""Session error taxonomy.

Every failure raised by the session module is a ``SessionError`` carrying a
closed ``ErrorKind``, the operation that failed and the underlying cause.
Callers can match either on the subclass or structurally on ``kind``.
"""

from enum import Enum
from typing import Optional


class ErrorKind(str, Enum):
    """Kinds of session failures."""

    CONFIG = "config"
    ENCRYPTION = "encryption"
    DECRYPTION = "decryption"
    SERIALIZATION = "serialization"
    STORE_NOT_FOUND = "store_not_found"
    STORE = "store"


class SessionError(Exception):
    """Base error for all session operations."""

    kind: ErrorKind = ErrorKind.STORE

    def __init__(self, op: str, message: str, cause: Optional[BaseException] = None):
        super().__init__(message)
        self.op = op
        self.message = message
        self.cause = cause

    def __str__(self) -> str:
        if self.cause is not None:
            return f"session {self.op}: {self.message}: {self.cause}"
        return f"session {self.op}: {self.message}"


class ConfigError(SessionError):
    """Invalid configuration, fatal at manager construction."""

    kind = ErrorKind.CONFIG


class EncryptionError(SessionError):
    kind = ErrorKind.ENCRYPTION


class DecryptionError(SessionError):
    kind = ErrorKind.DECRYPTION


class SerializationError(SessionError):
    kind = ErrorKind.SERIALIZATION


class StoreNotFound(SessionError):
    """The store has no entry for the requested session id."""

    kind = ErrorKind.STORE_NOT_FOUND


class StoreError(SessionError):
    """The store backend failed."""

    kind = ErrorKind.STORE


__all__ = [
    "ErrorKind",
    "SessionError",
    "ConfigError",
    "EncryptionError",
    "DecryptionError",
    "SerializationError",
    "StoreNotFound",
    "StoreError",
]
