"""Key/value storage backends."""

from skycast.storage.base import KeyValueStore
from skycast.storage.factory import build_store
from skycast.storage.file import JsonFileKeyValueStore
from skycast.storage.memory import InMemoryKeyValueStore

__all__ = [
    "KeyValueStore",
    "build_store",
    "JsonFileKeyValueStore",
    "InMemoryKeyValueStore",
]
