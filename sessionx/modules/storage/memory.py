"""In-process session store."""

import logging
from datetime import UTC, datetime, timedelta
from typing import Callable, Dict, Optional, Tuple

from pydantic import ValidationError

from ..session.errors import SerializationError, StoreNotFound
from ..session.session import Session

logger = logging.getLogger(__name__)


class InMemoryStore:
    """
    Dictionary-backed store for single-process deployments and tests.

    Records are kept serialized, so every load returns an independent copy
    and no two requests ever share a live Session object. Expired records
    are evicted on load and swept in bulk on save.
    """

    def __init__(self, ttl: Optional[int] = None, clock: Optional[Callable[[], datetime]] = None):
        """
        Initialize in-memory store.

        Args:
            ttl: Seconds an entry lives after its last save (None or 0 keeps it forever)
            clock: Optional callable returning the current aware UTC datetime
        """
        self.ttl = ttl
        self._now = clock or (lambda: datetime.now(UTC))
        self._records: Dict[str, Tuple[str, datetime]] = {}
        self._last_sweep: Optional[datetime] = None

    def __len__(self) -> int:
        return len(self._records)

    def _is_stale(self, saved_at: datetime, now: datetime) -> bool:
        return bool(self.ttl) and now - saved_at > timedelta(seconds=self.ttl)

    def _sweep(self, now: datetime) -> None:
        """Drop every expired record, at most once per TTL window."""
        if not self.ttl:
            return
        if self._last_sweep is not None and now - self._last_sweep < timedelta(seconds=self.ttl):
            return
        self._last_sweep = now

        stale = [sid for sid, (_, saved_at) in self._records.items() if self._is_stale(saved_at, now)]
        for sid in stale:
            del self._records[sid]
        if stale:
            logger.debug(f"Swept {len(stale)} expired sessions")

    async def load(self, session_id: str) -> Session:
        record = self._records.get(session_id)
        if record is None:
            raise StoreNotFound("load", "session not found")

        payload, saved_at = record
        if self._is_stale(saved_at, self._now()):
            self._records.pop(session_id, None)
            logger.debug(f"Evicted expired session {session_id[:6]}...")
            raise StoreNotFound("load", "session not found")

        try:
            return Session.model_validate_json(payload)
        except ValidationError as e:
            raise SerializationError("load", "invalid session data", e) from e

    async def save(self, session: Session) -> None:
        now = self._now()
        self._sweep(now)
        self._records[session.id] = (session.model_dump_json(), now)

    async def delete(self, session_id: str) -> None:
        self._records.pop(session_id, None)
