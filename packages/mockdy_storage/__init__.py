from .kv_store import KeyValueStore, MemoryKeyValueStore, JsonFileKeyValueStore
from .repository import SessionRepository, ConnectionRepository
from .local_repo import (
    LocalSessionRepository,
    LocalConnectionRepository,
    STORAGE_KEY,
    NOTION_CONNECTION_KEY,
)

__all__ = [
    "KeyValueStore",
    "MemoryKeyValueStore",
    "JsonFileKeyValueStore",
    "SessionRepository",
    "ConnectionRepository",
    "LocalSessionRepository",
    "LocalConnectionRepository",
    "STORAGE_KEY",
    "NOTION_CONNECTION_KEY",
]
