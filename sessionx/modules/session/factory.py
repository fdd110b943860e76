"""
Session Factory.

Composition root for the session stack:
- Reads session and store settings from a config provider
- Builds the configured store backend
- Returns a ready SessionManager
"""

import logging
from typing import Any, Optional

from ...config.provider import ConfigProvider
from ..storage import InMemoryStore, RedisStore, SessionStore
from .manager import SessionManager

logger = logging.getLogger(__name__)


class SessionFactory:
    """Factory for building the session manager from configuration."""

    @staticmethod
    def build_store(config_provider: ConfigProvider, redis_client: Optional[Any] = None) -> Optional[SessionStore]:
        """
        Build the store backend selected by configuration.

        Args:
            config_provider: Configuration provider
            redis_client: Async Redis client, required for the redis backend

        Returns:
            Store instance, or None when sessions live entirely in the cookie
        """
        store_config = config_provider.get_store_config()

        if store_config.backend == "redis":
            if redis_client is None:
                raise ValueError("SESSION_STORE=redis requires a Redis client")
            logger.info(f"Using Redis session store (prefix={store_config.prefix})")
            return RedisStore(redis_client, prefix=store_config.prefix, ttl=store_config.ttl)

        if store_config.backend == "memory":
            logger.info("Using in-memory session store")
            return InMemoryStore(ttl=store_config.ttl)

        logger.info("Using cookie-embedded sessions (no store)")
        return None

    @staticmethod
    def build(config_provider: ConfigProvider, redis_client: Optional[Any] = None) -> SessionManager:
        """
        Build the session manager.

        Raises:
            ConfigError: If the configured secret key has an invalid length
        """
        session_config = config_provider.get_session_config()
        store = SessionFactory.build_store(config_provider, redis_client)
        if store is not None:
            session_config = session_config.with_options(store=store)
        return SessionManager(session_config)
