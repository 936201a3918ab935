import abc
import os
import re
from typing import Dict, Optional

from packages.mockdy_core.logging import get_logger

logger = get_logger("mockdy_storage.kv_store")

_SAFE_KEY = re.compile(r"^[A-Za-z0-9_.-]+$")


class KeyValueStore(abc.ABC):
    """
    Abstract string key-value storage (browser localStorage semantics).
    """
    @abc.abstractmethod
    def get_item(self, key: str) -> Optional[str]:
        pass

    @abc.abstractmethod
    def set_item(self, key: str, value: str) -> None:
        pass

    @abc.abstractmethod
    def remove_item(self, key: str) -> None:
        pass


class MemoryKeyValueStore(KeyValueStore):
    """
    In-Memory implementation. Used for testing.
    """
    def __init__(self):
        self._store: Dict[str, str] = {}

    def get_item(self, key: str) -> Optional[str]:
        return self._store.get(key)

    def set_item(self, key: str, value: str) -> None:
        self._store[key] = value

    def remove_item(self, key: str) -> None:
        self._store.pop(key, None)


class JsonFileKeyValueStore(KeyValueStore):
    """
    File-based implementation. One file per key: {base_dir}/{key}.json
    One base directory corresponds to one browser profile.
    """
    def __init__(self, base_dir: str):
        self.base_dir = base_dir
        self._ensure_dir()

    def _ensure_dir(self):
        if not os.path.exists(self.base_dir):
            try:
                os.makedirs(self.base_dir, exist_ok=True)
            except OSError as e:
                logger.error(f"Failed to create directory {self.base_dir}: {e}")

    def _path(self, key: str) -> str:
        if not _SAFE_KEY.match(key):
            raise ValueError(f"Invalid storage key: {key!r}")
        return os.path.join(self.base_dir, f"{key}.json")

    def get_item(self, key: str) -> Optional[str]:
        path = self._path(key)
        if not os.path.exists(path):
            return None
        with open(path, "r", encoding="utf-8") as f:
            return f.read()

    def set_item(self, key: str, value: str) -> None:
        self._ensure_dir()
        path = self._path(key)
        # Write-then-rename so a crash never leaves a half-written record
        tmp_path = f"{path}.tmp"
        with open(tmp_path, "w", encoding="utf-8") as f:
            f.write(value)
        os.replace(tmp_path, path)

    def remove_item(self, key: str) -> None:
        path = self._path(key)
        if os.path.exists(path):
            os.remove(path)
