"""Session store interface following Black Box Design principles."""

from typing import Protocol

from ..session.session import Session


class SessionStore(Protocol):
    """Protocol for session persistence backends keyed by session id."""

    async def load(self, session_id: str) -> Session:
        """
        Load a session.

        Raises:
            StoreNotFound: If no session is stored under the id
            SerializationError: If the stored record is not a valid session
            StoreError: If the backend fails
        """
        ...

    async def save(self, session: Session) -> None:
        """Persist a session under its id, replacing any previous record."""
        ...

    async def delete(self, session_id: str) -> None:
        """Remove a session. Deleting a missing id is not an error."""
        ...
