"""In-memory key/value store, intended for development and tests."""

from typing import Dict, Optional

import structlog

from skycast.storage.base import KeyValueStore

logger = structlog.get_logger(__name__)


class InMemoryKeyValueStore(KeyValueStore):
    """Non-durable store backed by a dict."""

    def __init__(self, initial: Optional[Dict[str, str]] = None) -> None:
        logger.debug("Initializing InMemoryKeyValueStore")
        self._values: Dict[str, str] = dict(initial or {})

    def get(self, key: str) -> Optional[str]:
        return self._values.get(key)

    def set(self, key: str, value: str) -> None:
        self._values[key] = value

    def delete(self, key: str) -> None:
        self._values.pop(key, None)

    def clear(self) -> None:
        """Clear all stored values."""
        self._values.clear()
