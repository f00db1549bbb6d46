"""Shared protocol for key/value storage backends."""

from typing import Optional, Protocol


class KeyValueStore(Protocol):
    """Protocol for durable string key/value storage."""

    def get(self, key: str) -> Optional[str]:
        """Return the stored value, or None when the key is absent."""

    def set(self, key: str, value: str) -> None:
        """Store a value, replacing any previous one."""

    def delete(self, key: str) -> None:
        """Remove a key without raising if it is absent."""
