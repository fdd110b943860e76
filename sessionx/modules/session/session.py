"""Session entity and the flash message sub-protocol."""

from datetime import UTC, datetime
from typing import Any, Dict, Iterator, List, Optional, Tuple

from pydantic import BaseModel, Field, field_validator

# Reserved data key holding pending flash messages
FLASH_KEY = "_flashes"


class Session(BaseModel):
    """
    Per-visitor session state.

    ``data`` is a JSON-compatible bag of values. Flash messages are kept in
    the same bag under ``FLASH_KEY`` so they travel with the cookie, but the
    accessor methods below never expose that key.
    """

    id: str = Field(..., min_length=1, description="Opaque random session identifier")
    data: Dict[str, Any] = Field(default_factory=dict, description="Per-visitor data bag")
    created_at: datetime = Field(..., frozen=True, description="When the session was minted")
    updated_at: datetime = Field(..., description="When the session was last saved")
    rotated_at: datetime = Field(..., description="When the identifier was last rotated")

    @field_validator("created_at", "updated_at", "rotated_at")
    @classmethod
    def ensure_utc(cls, v: datetime) -> datetime:
        """Treat naive timestamps as UTC."""
        if v.tzinfo is None:
            return v.replace(tzinfo=UTC)
        return v

    # Data access

    def get(self, key: str, default: Any = None) -> Any:
        if key == FLASH_KEY:
            return default
        return self.data.get(key, default)

    def set(self, key: str, value: Any) -> None:
        if key == FLASH_KEY:
            raise KeyError(f"{FLASH_KEY} is reserved for flash messages")
        self.data[key] = value

    def delete(self, key: str) -> None:
        """Remove a key; missing keys are ignored."""
        if key == FLASH_KEY:
            raise KeyError(f"{FLASH_KEY} is reserved for flash messages")
        self.data.pop(key, None)

    def clear(self) -> None:
        """Drop all user data. Pending flash messages are kept."""
        flashes = self.data.get(FLASH_KEY)
        self.data.clear()
        if isinstance(flashes, dict) and flashes:
            self.data[FLASH_KEY] = flashes

    def keys(self) -> List[str]:
        return [k for k in self.data if k != FLASH_KEY]

    def items(self) -> Iterator[Tuple[str, Any]]:
        return ((k, v) for k, v in self.data.items() if k != FLASH_KEY)

    def __contains__(self, key: object) -> bool:
        return key != FLASH_KEY and key in self.data

    # Typed accessors: (value, ok) where ok is False on absence or type mismatch

    def _typed(self, key: str, types: Tuple[type, ...]) -> Tuple[Any, bool]:
        if key == FLASH_KEY or key not in self.data:
            return None, False
        value = self.data[key]
        # bool is a subclass of int; only accept it when asked for explicitly
        if isinstance(value, bool) and bool not in types:
            return None, False
        if not isinstance(value, types):
            return None, False
        return value, True

    def get_string(self, key: str) -> Tuple[Optional[str], bool]:
        return self._typed(key, (str,))

    def get_bool(self, key: str) -> Tuple[Optional[bool], bool]:
        return self._typed(key, (bool,))

    def get_int(self, key: str) -> Tuple[Optional[int], bool]:
        return self._typed(key, (int,))

    def get_float(self, key: str) -> Tuple[Optional[float], bool]:
        value, ok = self._typed(key, (int, float))
        if not ok:
            return None, False
        return float(value), True

    def get_list(self, key: str) -> Tuple[Optional[List[Any]], bool]:
        return self._typed(key, (list,))

    def get_dict(self, key: str) -> Tuple[Optional[Dict[str, Any]], bool]:
        return self._typed(key, (dict,))

    # Flash messages

    def _flashes(self) -> Optional[Dict[str, Any]]:
        flashes = self.data.get(FLASH_KEY)
        return flashes if isinstance(flashes, dict) else None

    def add_flash(self, category: str, message: Any) -> None:
        """Queue a flash message; a second call for the same category overwrites it."""
        flashes = self._flashes()
        if flashes is None:
            flashes = {}
            self.data[FLASH_KEY] = flashes
        flashes[category] = message

    def get_flash(self, category: str) -> Tuple[Any, bool]:
        """
        Consume a single flash message.

        Returns:
            Tuple of (message, found). The message is removed from the session,
            and the reserved key disappears once no flashes remain.
        """
        flashes = self._flashes()
        if flashes is None or category not in flashes:
            return None, False

        message = flashes.pop(category)
        if not flashes:
            del self.data[FLASH_KEY]
        return message, True

    def get_flashes(self) -> Dict[str, Any]:
        """Consume and return every pending flash message."""
        flashes = self._flashes()
        self.data.pop(FLASH_KEY, None)
        return dict(flashes) if flashes else {}

    def has_flash(self, category: str) -> bool:
        flashes = self._flashes()
        return flashes is not None and category in flashes
