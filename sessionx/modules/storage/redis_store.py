import logging
from typing import NoReturn

import redis.asyncio as aioredis
from pydantic import ValidationError
from redis import ConnectionError as RedisConnectionError
from redis import RedisError

from ..session.errors import SerializationError, StoreError, StoreNotFound
from ..session.session import Session

logger = logging.getLogger(__name__)

DEFAULT_PREFIX = "sessionx:"
DEFAULT_TTL = 24 * 60 * 60


class RedisStore:
    def __init__(self, redis_client: aioredis.Redis, prefix: str = DEFAULT_PREFIX, ttl: int = DEFAULT_TTL):
        """
        Initialize the Redis store with an async Redis client.

        Args:
            redis_client: Async Redis client
            prefix: Key prefix for session records
            ttl: Record lifetime in seconds (0 disables expiry)
        """
        self.redis = redis_client
        self.prefix = prefix or DEFAULT_PREFIX
        self.ttl = ttl

    def _key(self, session_id: str) -> str:
        return f"{self.prefix}{session_id}"

    def _handle_redis_error(self, operation: str, session_id: str, error: Exception) -> NoReturn:
        """Centralized error handling for Redis operations."""
        if isinstance(error, RedisConnectionError):
            logger.error(f"Redis connection failed during {operation} for session {session_id[:6]}...: {error}")
            raise StoreError(operation, "store connection error", error) from error
        logger.error(f"Redis error during {operation} for session {session_id[:6]}...: {error}")
        raise StoreError(operation, "store error", error) from error

    async def load(self, session_id: str) -> Session:
        try:
            data = await self.redis.get(self._key(session_id))
        except RedisError as e:
            self._handle_redis_error("load", session_id, e)

        if data is None:
            raise StoreNotFound("load", "session not found")

        try:
            return Session.model_validate_json(data)
        except ValidationError as e:
            logger.error(f"Invalid session data format for session {session_id[:6]}...")
            raise SerializationError("load", "invalid session data", e) from e

    async def save(self, session: Session) -> None:
        payload = session.model_dump_json()
        try:
            if self.ttl and self.ttl > 0:
                await self.redis.setex(self._key(session.id), self.ttl, payload)
            else:
                await self.redis.set(self._key(session.id), payload)
            logger.debug(f"Session {session.id[:6]}... saved")
        except RedisError as e:
            self._handle_redis_error("save", session.id, e)

    async def delete(self, session_id: str) -> None:
        try:
            deleted = await self.redis.delete(self._key(session_id))
        except RedisError as e:
            self._handle_redis_error("delete", session_id, e)

        if not deleted:
            logger.debug(f"Session {session_id[:6]}... was already absent")

    async def close(self) -> None:
        await self.redis.close()
