from typing import Optional

from packages.mockdy_core.errors import InputError
from packages.mockdy_core.logging import get_logger
from packages.mockdy_dto.notion import NotionConnection
from packages.mockdy_notion.oauth import NotionOAuthService
from packages.mockdy_storage.repository import ConnectionRepository

logger = get_logger("mockdy_service.connection")


class NotionConnectionService:
    """
    Owns the local Notion connection record: OAuth completion,
    target database selection and disconnect.
    """
    def __init__(self, connection_repo: ConnectionRepository, oauth_service: NotionOAuthService):
        self.connection_repo = connection_repo
        self.oauth_service = oauth_service

    def get(self) -> Optional[NotionConnection]:
        return self.connection_repo.get()

    async def complete_auth(self, code: str) -> NotionConnection:
        """
        Called when Notion redirects back with ?code=...
        Exchanges the code and replaces the stored connection.
        """
        payload = await self.oauth_service.exchange_code(code)
        if not payload.get("access_token"):
            raise InputError("Failed to exchange Notion authorization code", status_code=502)

        connection = NotionConnection.from_token_payload(payload)
        # Keep a previously pasted database id when the new grant carries none
        previous = self.connection_repo.get()
        if connection.database_id is None and previous is not None and previous.database_id:
            connection = connection.model_copy(update={"database_id": previous.database_id})

        self.connection_repo.save(connection)
        logger.info(f"Connected to Notion workspace: {connection.workspace_name or connection.workspace_id}")
        return connection

    def save_database_id(self, database_id: Optional[str]) -> NotionConnection:
        trimmed = (database_id or "").strip()
        if not trimmed:
            raise InputError("Please paste a Notion database ID.")

        current = self.connection_repo.get()
        if current is None:
            updated = NotionConnection(access_token="", database_id=trimmed)
        else:
            updated = current.model_copy(update={"database_id": trimmed})
        self.connection_repo.save(updated)
        logger.info("Saved Notion database ID. Future reports will be sent there.")
        return updated

    def disconnect(self) -> None:
        self.connection_repo.clear()
        logger.info("Notion connection cleared")
