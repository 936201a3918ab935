from typing import Any, Optional

import httpx

from packages.mockdy_core.config import MockdyConfig
from packages.mockdy_core.errors import InputError, UpstreamError
from packages.mockdy_core.logging import get_logger
from packages.mockdy_dto.notion import ProxyResponse

logger = get_logger("mockdy_notion.proxy")


class NotionPagesProxy:
    """
    Forwards page-creation requests to the Notion API with a caller-supplied
    bearer token. No server secret is involved here.

    Authorization failures are not interpreted: the status is passed through
    and the caller decides what to do (see NotionReportWriter).
    """
    def __init__(self, config: MockdyConfig, transport: Optional[httpx.AsyncBaseTransport] = None):
        self.config = config
        self._transport = transport

    @property
    def pages_url(self) -> str:
        return f"{self.config.NOTION_API_BASE.rstrip('/')}/pages"

    async def create_page(self, bearer_token: Optional[str], payload: Any) -> ProxyResponse:
        if not bearer_token:
            raise InputError("Missing bearer token", status_code=401)

        headers = {
            "Accept": "application/json",
            "Content-Type": "application/json",
            "Notion-Version": self.config.NOTION_VERSION,
            "Authorization": f"Bearer {bearer_token}",
        }
        try:
            async with httpx.AsyncClient(transport=self._transport, timeout=self.config.NOTION_TIMEOUT_SEC) as client:
                response = await client.post(self.pages_url, headers=headers, json=payload or {})
        except httpx.HTTPError as e:
            logger.exception("[Notion Proxy] Unexpected error calling Notion API")
            raise UpstreamError(
                500, {"error": "Unexpected error calling Notion API"}, message="Unexpected error calling Notion API"
            ) from e

        try:
            body = response.json()
        except ValueError:
            body = {"message": response.text}

        if response.is_error:
            logger.error(f"[Notion Proxy] Error from Notion API. Status: {response.status_code}, Body: {body}")
        else:
            logger.info(f"[Notion Proxy] Page created: {body.get('id') if isinstance(body, dict) else None}")
        return ProxyResponse(status_code=response.status_code, body=body)


def parse_bearer(authorization: Optional[str]) -> Optional[str]:
    """
    Extract the token from an `Authorization: Bearer <token>` header value.
    Returns None when the header is absent or carries no token.
    """
    if not authorization:
        return None
    scheme, _, token = authorization.strip().partition(" ")
    if scheme.lower() != "bearer":
        return None
    return token.strip() or None
