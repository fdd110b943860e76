"""
Storage Module - Black Box Interface

Purpose: Optional server-side persistence for session state
Interface: load(), save(), delete() keyed by session id
Hidden: Redis specifics, key layout, serialization, expiry

Any backend implementing SessionStore can be handed to the session
configuration without affecting other modules.
"""

from .interfaces import SessionStore
from .memory import InMemoryStore
from .redis_store import RedisStore

__all__ = ["SessionStore", "InMemoryStore", "RedisStore"]
