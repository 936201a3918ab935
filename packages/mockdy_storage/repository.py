from abc import ABC, abstractmethod
from typing import List, Optional

from packages.mockdy_dto.notion import NotionConnection
from packages.mockdy_dto.session import StoredSession


class SessionRepository(ABC):
    """
    Interface for the local list of completed interview sessions.
    Ordered most-recent-first.
    """
    @abstractmethod
    def get_all(self) -> List[StoredSession]:
        """Return all sessions, newest first. Never raises."""
        pass

    @abstractmethod
    def find_by_id(self, session_id: str) -> Optional[StoredSession]:
        pass

    @abstractmethod
    def save(self, session: StoredSession) -> None:
        """Prepend a new session to the front of the list."""
        pass

    @abstractmethod
    def delete(self, session_id: str) -> None:
        """Remove exactly one session by id. No-op if absent."""
        pass


class ConnectionRepository(ABC):
    """
    Interface for the single "current connection" record.
    Backends (local file, memory, encrypted store) are swappable behind it.
    """
    @abstractmethod
    def get(self) -> Optional[NotionConnection]:
        """Return the stored connection or None. Never raises."""
        pass

    @abstractmethod
    def save(self, connection: NotionConnection) -> None:
        """Overwrite the record wholesale."""
        pass

    @abstractmethod
    def clear(self) -> None:
        """Remove the record entirely."""
        pass

    def is_configured(self) -> bool:
        connection = self.get()
        return bool(connection and connection.is_configured)
