"""Factory helpers for choosing a key/value store at startup."""

from typing import Optional

import structlog

from skycast.config.config import Config, config as default_config
from skycast.storage.base import KeyValueStore
from skycast.storage.file import JsonFileKeyValueStore
from skycast.storage.memory import InMemoryKeyValueStore

logger = structlog.get_logger(__name__)


def build_store(settings: Optional[Config] = None) -> KeyValueStore:
    """Instantiate the configured key/value store."""
    settings = settings or default_config

    if settings.storage_backend == "memory":
        logger.info("Using in-memory key/value store")
        return InMemoryKeyValueStore()

    path = settings.get_storage_path()
    logger.info("Using JSON file key/value store", path=str(path))
    return JsonFileKeyValueStore(path)
