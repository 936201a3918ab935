import json
from typing import Any, List, Optional

from pydantic import ValidationError

from packages.mockdy_core.logging import get_logger
from packages.mockdy_dto.notion import NotionConnection
from packages.mockdy_dto.session import StoredSession
from packages.mockdy_storage.kv_store import KeyValueStore
from packages.mockdy_storage.repository import ConnectionRepository, SessionRepository

logger = get_logger("mockdy_storage.local_repo")

STORAGE_KEY = "mockdy_history_v1"
NOTION_CONNECTION_KEY = "mockdy_notion_connection_v1"


class LocalSessionRepository(SessionRepository):
    """
    Session list kept as one JSON-encoded record under a fixed key.
    An unreadable record degrades to an empty list. Entries that fail
    validation are skipped on read but kept on write, so one bad entry
    never costs the rest of the history.
    Write errors are logged and dropped.
    """
    def __init__(self, store: KeyValueStore, key: str = STORAGE_KEY):
        self.store = store
        self.key = key

    def get_all(self) -> List[StoredSession]:
        sessions = []
        for index, item in enumerate(self._load_raw()):
            try:
                sessions.append(StoredSession.model_validate(item))
            except ValidationError as e:
                logger.warning(f"Skipping invalid stored session at index {index}: {e.error_count()} error(s)")
        return sessions

    def find_by_id(self, session_id: str) -> Optional[StoredSession]:
        for session in self.get_all():
            if session.id == session_id:
                return session
        return None

    def save(self, session: StoredSession) -> None:
        items = [session.to_json_dict(), *self._load_raw()]
        self._write(items, "save session")
        logger.info(f"Saved session {session.id} ({session.type.value}). Total: {len(items)}")

    def delete(self, session_id: str) -> None:
        items = self._load_raw()
        remaining = [i for i in items if not (isinstance(i, dict) and i.get("id") == session_id)]
        if len(remaining) == len(items):
            logger.debug(f"Delete skipped, session {session_id} not found")
            return
        self._write(remaining, "delete session")
        logger.info(f"Deleted session {session_id}")

    def _load_raw(self) -> List[Any]:
        try:
            raw = self.store.get_item(self.key)
            if not raw:
                return []
            items = json.loads(raw)
        except (OSError, ValueError) as e:
            logger.error(f"Failed to load history: {e}")
            return []
        if not isinstance(items, list):
            logger.error(f"Failed to load history: expected a list, got {type(items).__name__}")
            return []
        return items

    def _write(self, items: List[Any], action: str) -> None:
        try:
            self.store.set_item(self.key, json.dumps(items, ensure_ascii=False))
        except (OSError, TypeError, ValueError) as e:
            logger.error(f"Failed to {action}: {e}")


class LocalConnectionRepository(ConnectionRepository):
    """
    Single connection record under a fixed key.
    """
    def __init__(self, store: KeyValueStore, key: str = NOTION_CONNECTION_KEY):
        self.store = store
        self.key = key

    def get(self) -> Optional[NotionConnection]:
        try:
            raw = self.store.get_item(self.key)
            if not raw:
                return None
            return NotionConnection.model_validate(json.loads(raw))
        except (OSError, ValueError, ValidationError) as e:
            logger.error(f"Failed to load Notion connection: {e}")
            return None

    def save(self, connection: NotionConnection) -> None:
        try:
            self.store.set_item(self.key, json.dumps(connection.to_json_dict(), ensure_ascii=False))
        except (OSError, TypeError, ValueError) as e:
            logger.error(f"Failed to save Notion connection: {e}")

    def clear(self) -> None:
        try:
            self.store.remove_item(self.key)
        except OSError as e:
            logger.error(f"Failed to clear Notion connection: {e}")
