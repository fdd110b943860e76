"""
Session Module - Black Box Interface

Purpose: Encrypted, cookie-carried session state
Interface: SessionManager.load(), save(), rotate(), destroy(), should_rotate()
Hidden: AES-GCM framing, payload encoding, identifier generation

Works without any server-side storage; plug in a store from the storage
module to keep only the session identifier in the cookie.
"""

from .config import SameSite, SessionConfig, default_config, dev_config
from .errors import (
    ConfigError,
    DecryptionError,
    EncryptionError,
    ErrorKind,
    SerializationError,
    SessionError,
    StoreError,
    StoreNotFound,
)
from .manager import CookieDirective, SessionManager
from .session import FLASH_KEY, Session

__all__ = [
    "SessionManager",
    "CookieDirective",
    "Session",
    "FLASH_KEY",
    "SessionConfig",
    "SameSite",
    "default_config",
    "dev_config",
    "ErrorKind",
    "SessionError",
    "ConfigError",
    "EncryptionError",
    "DecryptionError",
    "SerializationError",
    "StoreNotFound",
    "StoreError",
]
