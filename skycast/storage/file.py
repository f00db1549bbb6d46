"""JSON-file backed key/value store that survives restarts."""

import json
from pathlib import Path
from typing import Dict, Optional

import structlog

from skycast.exceptions.storage import StorageError
from skycast.storage.base import KeyValueStore

logger = structlog.get_logger(__name__)


class JsonFileKeyValueStore(KeyValueStore):
    """
    Durable store that keeps every key in a single JSON object on disk.

    The file is read on every access and rewritten on every change, so
    several processes sharing the file see each other's last write.
    """

    def __init__(self, path: Path) -> None:
        self.path = Path(path)
        logger.debug("Initializing JsonFileKeyValueStore", path=str(self.path))

    def _load(self) -> Dict[str, str]:
        if not self.path.exists():
            return {}
        try:
            data = json.loads(self.path.read_text(encoding="utf-8") or "{}")
        except json.JSONDecodeError as e:
            logger.warning("Storage file is corrupt, starting empty", path=str(self.path), error=str(e))
            return {}
        except OSError as e:
            raise StorageError(f"Failed to read storage file {self.path}: {str(e)}")

        if not isinstance(data, dict):
            logger.warning("Storage file does not hold an object, starting empty", path=str(self.path))
            return {}
        return {str(k): str(v) for k, v in data.items()}

    def _dump(self, values: Dict[str, str]) -> None:
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            tmp_path = self.path.with_suffix(self.path.suffix + ".tmp")
            tmp_path.write_text(json.dumps(values, indent=2), encoding="utf-8")
            tmp_path.replace(self.path)
        except OSError as e:
            raise StorageError(f"Failed to write storage file {self.path}: {str(e)}")

    def get(self, key: str) -> Optional[str]:
        return self._load().get(key)

    def set(self, key: str, value: str) -> None:
        values = self._load()
        values[key] = value
        self._dump(values)

    def delete(self, key: str) -> None:
        values = self._load()
        if values.pop(key, None) is not None:
            self._dump(values)
