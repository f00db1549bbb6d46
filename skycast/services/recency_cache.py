import json
from typing import List

import structlog

from skycast.storage.base import KeyValueStore

logger = structlog.get_logger(__name__)

RECENT_SEARCHES_KEY = "skycast_recent_searches"
DEFAULT_MAX_ENTRIES = 5


class RecencyCache:
    """
    Most-recent-first list of unique location names, persisted as a JSON array.

    Re-adding a name moves it to the front; the list never grows past
    ``max_entries``.
    """

    def __init__(self, store: KeyValueStore, max_entries: int = DEFAULT_MAX_ENTRIES, key: str = RECENT_SEARCHES_KEY):
        self.store = store
        self.max_entries = max_entries
        self.key = key
        self._entries: List[str] = self._load()

    @property
    def entries(self) -> List[str]:
        return list(self._entries)

    def _load(self) -> List[str]:
        raw = self.store.get(self.key)
        if not raw:
            return []
        try:
            data = json.loads(raw)
        except json.JSONDecodeError:
            logger.warning("Discarding unreadable recent searches", key=self.key)
            return []
        if not isinstance(data, list):
            logger.warning("Discarding recent searches that are not a list", key=self.key)
            return []

        entries: List[str] = []
        for item in data:
            if isinstance(item, str) and item and item not in entries:
                entries.append(item)
        return entries[: self.max_entries]

    def add(self, name: str) -> List[str]:
        """
        Move ``name`` to the front and persist.

        Returns:
            The updated entries

        Raises:
            StorageError: If the store cannot be written; the entries stay unchanged
        """
        name = (name or "").strip()
        if not name:
            return self.entries

        entries = ([name] + [entry for entry in self._entries if entry != name])[: self.max_entries]
        self.store.set(self.key, json.dumps(entries))
        self._entries = entries
        logger.debug("Recent searches updated", entries=self._entries)
        return self.entries
