"""
Session manager.

Loads sessions from inbound cookie values, saves them back into outbound
cookie directives, and rotates identifiers. The read path is fail-open: any
problem with an inbound cookie yields a fresh anonymous session. The write
path raises ``SessionError`` subclasses to the caller.
"""

import json
import logging
import secrets
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from typing import Callable, Optional

from pydantic import ValidationError
from pydantic_core import PydanticSerializationError

from .cipher import SessionCipher
from .config import SameSite, SessionConfig
from .errors import (
    DecryptionError,
    ErrorKind,
    SerializationError,
    SessionError,
    StoreError,
)
from .session import Session

logger = logging.getLogger(__name__)

ID_ENTROPY_BYTES = 16
EXPIRED_COOKIE_DATE = "Thu, 01 Jan 1970 00:00:00 GMT"


@dataclass(frozen=True)
class CookieDirective:
    """An outbound ``Set-Cookie`` instruction."""

    name: str
    value: str
    path: str = "/"
    domain: Optional[str] = None
    max_age: Optional[int] = None
    secure: bool = True
    http_only: bool = True
    same_site: SameSite = SameSite.LAX
    expires: Optional[str] = None

    def to_header(self) -> str:
        """Render the value of a ``Set-Cookie`` header."""
        parts = [f"{self.name}={self.value}", f"Path={self.path}"]
        if self.domain:
            parts.append(f"Domain={self.domain}")
        if self.max_age is not None:
            parts.append(f"Max-Age={self.max_age}")
        if self.expires:
            parts.append(f"Expires={self.expires}")
        if self.secure:
            parts.append("Secure")
        if self.http_only:
            parts.append("HttpOnly")
        parts.append(f"SameSite={self.same_site.value}")
        return "; ".join(parts)


def _utcnow() -> datetime:
    return datetime.now(UTC)


class SessionManager:
    """
    Orchestrates load, save, rotate and destroy for one configuration.

    The manager holds no per-session state and may be shared by any number
    of concurrent requests.
    """

    def __init__(self, config: SessionConfig, clock: Optional[Callable[[], datetime]] = None):
        """
        Initialize session manager.

        Args:
            config: Session configuration
            clock: Optional callable returning the current aware UTC datetime

        Raises:
            ConfigError: If the secret key is not 16, 24, or 32 bytes
        """
        self.config = config
        self._cipher = SessionCipher(config.secret_key)
        self._now = clock or _utcnow

        if config.same_site is SameSite.NONE and not config.secure:
            logger.warning("SameSite=None without Secure will be rejected by browsers")

    @property
    def store(self):
        return self.config.store

    def new_id(self) -> str:
        return secrets.token_urlsafe(ID_ENTROPY_BYTES)

    def new(self) -> Session:
        """Mint a fresh, empty session."""
        now = self._now()
        return Session(id=self.new_id(), data={}, created_at=now, updated_at=now, rotated_at=now)

    def is_expired(self, session: Session) -> bool:
        max_age = self.config.max_age
        if max_age <= 0:
            return False
        return self._now() - session.updated_at > timedelta(seconds=max_age)

    def should_rotate(self, session: Session) -> bool:
        """Whether the rotation interval has elapsed since the last rotation."""
        interval = self.config.rotation_interval
        if interval <= 0:
            return False
        return self._now() - session.rotated_at >= timedelta(seconds=interval)

    async def load(self, cookie_value: Optional[str]) -> Session:
        """
        Restore the session carried by an inbound cookie value.

        Never raises: a missing, malformed, tampered or expired cookie (and,
        in store mode, any store failure) yields a fresh session instead.
        """
        if not cookie_value:
            return self.new()

        try:
            payload = self._cipher.decrypt(cookie_value)
        except DecryptionError as e:
            logger.debug(f"Discarding undecryptable session cookie: {e.message}")
            return self.new()

        if self.store is not None:
            session = await self._load_from_store(payload)
        else:
            session = self._deserialize(payload)

        if session is None:
            return self.new()

        if self.is_expired(session):
            logger.debug(f"Session {session.id[:6]}... expired, starting a new one")
            return self.new()

        return session

    async def _load_from_store(self, payload: bytes) -> Optional[Session]:
        try:
            session_id = payload.decode("utf-8")
        except UnicodeDecodeError:
            logger.debug("Discarding session cookie with a non-text identifier")
            return None

        try:
            session = await self.store.load(session_id)
        except SessionError as e:
            if e.kind is ErrorKind.STORE_NOT_FOUND:
                logger.debug(f"Session {session_id[:6]}... not found in store")
            else:
                logger.warning(f"Store failed loading session {session_id[:6]}...: {e}")
            return None
        except Exception as e:
            logger.warning(f"Unexpected store error loading session {session_id[:6]}...: {e}")
            return None

        if session.id != session_id:
            logger.warning(f"Store returned a mismatched record for session {session_id[:6]}...")
            return None
        return session

    def _deserialize(self, payload: bytes) -> Optional[Session]:
        try:
            return Session.model_validate_json(payload)
        except ValidationError as e:
            logger.debug(f"Discarding session cookie with invalid payload ({e.error_count()} errors)")
            return None

    def serialize(self, session: Session) -> bytes:
        """Canonical JSON encoding of a session."""
        try:
            # NaN and Infinity have no JSON spelling
            json.dumps(session.data, allow_nan=False)
            document = session.model_dump(mode="json")
            return json.dumps(document, sort_keys=True, separators=(",", ":"), allow_nan=False).encode("utf-8")
        except (PydanticSerializationError, TypeError, ValueError) as e:
            raise SerializationError("save", "failed to marshal session data", e) from e

    async def save(self, session: Session) -> CookieDirective:
        """
        Persist the session and build the outbound cookie.

        Refreshes ``updated_at``. Without a store the whole session is
        encrypted into the cookie; with a store the session is written there
        and the cookie carries only the encrypted identifier.

        Raises:
            SerializationError: If the data bag is not JSON-compatible
            EncryptionError: If sealing the payload fails
            StoreError: If the store write fails
        """
        session.updated_at = self._now()

        if self.store is not None:
            # Validate the payload before handing it to the store
            self.serialize(session)
            try:
                await self.store.save(session)
            except SessionError:
                raise
            except Exception as e:
                raise StoreError("save", "failed to persist session", e) from e
            plaintext = session.id.encode("utf-8")
        else:
            plaintext = self.serialize(session)

        token = self._cipher.encrypt(plaintext)
        max_age = self.config.max_age if self.config.max_age > 0 else None
        return self._directive(token, max_age=max_age)

    def rotate(self, session: Session) -> None:
        """
        Give the session a new identifier and stamp ``rotated_at``.

        Only mutates the in-memory session; call ``save`` afterwards so the
        new identifier reaches the client (and the store).
        """
        old_id = session.id
        session.id = self.new_id()
        session.rotated_at = self._now()
        logger.debug(f"Rotated session {old_id[:6]}... -> {session.id[:6]}...")

    async def destroy(self, session: Optional[Session] = None) -> CookieDirective:
        """
        Build a cookie-clearing directive and drop the store entry if any.

        Raises:
            StoreError: If the store delete fails
        """
        if self.store is not None and session is not None:
            try:
                await self.store.delete(session.id)
            except SessionError:
                raise
            except Exception as e:
                raise StoreError("destroy", "failed to delete session", e) from e

        return self._directive("", max_age=0, expires=EXPIRED_COOKIE_DATE)

    def _directive(self, value: str, max_age: Optional[int], expires: Optional[str] = None) -> CookieDirective:
        cfg = self.config
        return CookieDirective(
            name=cfg.cookie_name,
            value=value,
            path=cfg.path,
            domain=cfg.domain,
            max_age=max_age,
            secure=cfg.secure,
            http_only=cfg.http_only,
            same_site=cfg.same_site,
            expires=expires,
        )
