from typing import Optional

from packages.mockdy_core.errors import MockdyBaseError, SessionExpiredError
from packages.mockdy_core.logging import get_logger
from packages.mockdy_dto.notion import NotionConnection, ProxyResponse, ReportResult
from packages.mockdy_dto.session import StoredSession
from packages.mockdy_notion.oauth import NotionOAuthService
from packages.mockdy_notion.page_builder import NotionPageBuilder
from packages.mockdy_notion.proxy import NotionPagesProxy
from packages.mockdy_storage.repository import ConnectionRepository

logger = get_logger("mockdy_notion.writer")

NOT_CONNECTED = "Notion workspace not connected. Please connect your workspace first."
NO_DATABASE = "Notion database ID not configured. Please paste your database ID in settings."


class NotionReportWriter:
    """
    Pushes a completed session to the user's Notion database.

    On 401 the stored refresh token is used exactly once; if that fails too,
    the local connection is cleared and a "session expired" failure is returned.
    Never raises: every outcome is a ReportResult.
    """
    def __init__(
        self,
        connection_repo: ConnectionRepository,
        oauth_service: NotionOAuthService,
        pages_proxy: NotionPagesProxy,
    ):
        self.connection_repo = connection_repo
        self.oauth_service = oauth_service
        self.pages_proxy = pages_proxy

    async def write(self, session: StoredSession, connection: Optional[NotionConnection] = None) -> ReportResult:
        connection = connection or self.connection_repo.get()

        if not connection or not connection.access_token:
            logger.warning("Notion workspace not connected. User must complete OAuth flow.")
            return ReportResult(success=False, error=NOT_CONNECTED)
        if not connection.database_id:
            logger.warning("Notion database ID not configured. User must provide a database ID.")
            return ReportResult(success=False, error=NO_DATABASE)

        try:
            body = NotionPageBuilder.build(session, connection.database_id)
            response = await self.pages_proxy.create_page(connection.access_token, body)

            if response.status_code == 401:
                logger.info("Access token expired, attempting to refresh...")
                response = await self._retry_after_refresh(connection, body)

            if not response.ok:
                message = _error_message(response)
                logger.error(f"Notion API error. Status: {response.status_code}, Message: {message}")
                return ReportResult(success=False, error=message)

            page_id = response.body.get("id") if isinstance(response.body, dict) else None
            logger.info(f"Session {session.id} saved to Notion: {page_id}")
            return ReportResult(success=True, page_id=page_id)

        except SessionExpiredError as e:
            self.connection_repo.clear()
            return ReportResult(success=False, error=e.message)
        except MockdyBaseError as e:
            logger.error(f"Error saving to Notion: {e}")
            return ReportResult(success=False, error=e.message)
        except Exception as e:
            logger.exception("Error saving to Notion")
            return ReportResult(success=False, error=str(e) or "Unknown error")

    async def _retry_after_refresh(self, connection: NotionConnection, body: dict) -> ProxyResponse:
        if not connection.refresh_token:
            # No refresh token available, user needs to reconnect
            logger.warning("No refresh token stored, clearing Notion connection")
            raise SessionExpiredError()

        try:
            payload = await self.oauth_service.refresh_token(connection.refresh_token)
            refreshed = connection.refreshed(payload)
        except Exception as e:
            # Refresh token expired or invalid - log out user
            logger.error(f"Token refresh failed, logging out user: {e}")
            raise SessionExpiredError() from e

        self.connection_repo.save(refreshed)
        response = await self.pages_proxy.create_page(refreshed.access_token, body)
        if response.status_code == 401:
            logger.error("Notion rejected the refreshed access token, clearing connection")
            raise SessionExpiredError()
        return response


def _error_message(response: ProxyResponse) -> str:
    if isinstance(response.body, dict):
        message = response.body.get("message") or response.body.get("error")
        if isinstance(message, str) and message:
            return message
    return "Failed to save to Notion"
