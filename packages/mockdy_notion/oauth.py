import base64
from typing import Any, Optional
from urllib.parse import parse_qsl, urlencode, urlsplit, urlunsplit

import httpx

from packages.mockdy_core.config import MockdyConfig
from packages.mockdy_core.errors import ConfigurationError, InputError, UpstreamError
from packages.mockdy_core.logging import get_logger

logger = get_logger("mockdy_notion.oauth")


class NotionOAuthService:
    """
    Server side of the Notion public-integration OAuth flow.

    Responsibilities:
    - Build the authorization URL from server-held client credentials
    - Exchange an authorization code for an access/refresh token pair
    - Refresh an access token

    The client secret only ever leaves the process inside the Basic auth header
    sent to Notion. It is never part of a returned payload.

    @see https://developers.notion.com/docs/authorization
    """
    OWNER = "workspace"

    def __init__(self, config: MockdyConfig, transport: Optional[httpx.AsyncBaseTransport] = None):
        self.config = config
        self._transport = transport

    # ------------------------------------------------------------------
    # A. Authorization URL
    # ------------------------------------------------------------------
    def build_authorization_url(self) -> str:
        if not self.config.OAUTH_CLIENT_ID or not self.config.OAUTH_REDIRECT_URI:
            logger.error("Notion OAuth not configured (missing OAUTH_CLIENT_ID or OAUTH_REDIRECT_URI)")
            raise ConfigurationError(
                "Notion OAuth not configured on server (missing OAUTH_CLIENT_ID or OAUTH_REDIRECT_URI)"
            )

        parts = urlsplit(self.config.NOTION_AUTH_URL)
        managed = {"client_id", "response_type", "redirect_uri", "owner"}
        query = [(k, v) for k, v in parse_qsl(parts.query, keep_blank_values=True) if k not in managed]
        query += [
            ("client_id", self.config.OAUTH_CLIENT_ID),
            ("response_type", "code"),
            ("redirect_uri", self.config.OAUTH_REDIRECT_URI),
            # Workspace-level token, as for Notion public integrations
            ("owner", self.OWNER),
        ]
        return urlunsplit((parts.scheme, parts.netloc, parts.path, urlencode(query), parts.fragment))

    # ------------------------------------------------------------------
    # B. Token exchange / refresh
    # ------------------------------------------------------------------
    async def exchange_code(self, code: Any) -> dict:
        """
        Exchange a one-time authorization code for tokens.
        Returns Notion's token payload (access_token, refresh_token, workspace info, ...).
        """
        if not (self.config.OAUTH_CLIENT_ID and self.config.OAUTH_CLIENT_SECRET and self.config.OAUTH_REDIRECT_URI):
            logger.error("Notion OAuth not configured (missing client credentials or redirect URI)")
            raise ConfigurationError(
                "Notion OAuth not configured on server "
                "(missing OAUTH_CLIENT_ID, OAUTH_CLIENT_SECRET, or OAUTH_REDIRECT_URI)"
            )
        if not code or not isinstance(code, str):
            raise InputError("Missing `code` in request body")

        response = await self._post_token(
            {
                "grant_type": "authorization_code",
                "code": code,
                "redirect_uri": self.config.OAUTH_REDIRECT_URI,
            },
            failure_message="Unexpected error during Notion token exchange",
        )
        data = _json_or_text(response)
        if response.is_error:
            logger.error(f"[Notion OAuth] Token exchange failed. Status: {response.status_code}, Error: {data}")
            # Forward Notion's error body verbatim
            raise UpstreamError(response.status_code, data)

        logger.info("[Notion OAuth] Token exchange succeeded")
        return self._scrub_secret(data)

    async def refresh_token(self, refresh_token: Any) -> dict:
        """
        Exchange a refresh token for a new access/refresh token pair.
        @see https://developers.notion.com/docs/authorization#step-6-refreshing-an-access-token
        """
        if not (self.config.OAUTH_CLIENT_ID and self.config.OAUTH_CLIENT_SECRET):
            logger.error("[Notion OAuth] Missing required environment variables")
            raise ConfigurationError(
                "Notion OAuth not configured. Missing OAUTH_CLIENT_ID or OAUTH_CLIENT_SECRET"
            )
        if not refresh_token or not isinstance(refresh_token, str):
            raise InputError("Missing or invalid `refresh_token` in request body")

        response = await self._post_token(
            {"grant_type": "refresh_token", "refresh_token": refresh_token},
            failure_message="Unexpected error during Notion token refresh",
        )
        data = _json_or_text(response)
        if response.is_error:
            logger.error(f"[Notion OAuth] Token refresh failed. Status: {response.status_code}, Error: {data}")
            body = {"error": data.get("error") or "Failed to refresh access token"}
            if data.get("error_description"):
                body["error_description"] = data["error_description"]
            raise UpstreamError(response.status_code, body)

        logger.info("[Notion OAuth] Token refresh succeeded")
        return self._scrub_secret(data)

    async def _post_token(self, payload: dict, failure_message: str) -> httpx.Response:
        headers = {
            "Accept": "application/json",
            "Content-Type": "application/json",
            "Authorization": f"Basic {self._basic_credentials()}",
        }
        try:
            async with httpx.AsyncClient(transport=self._transport, timeout=self.config.NOTION_TIMEOUT_SEC) as client:
                return await client.post(self.config.NOTION_TOKEN_URL, headers=headers, json=payload)
        except httpx.HTTPError as e:
            logger.exception(f"[Notion OAuth] {failure_message}")
            raise UpstreamError(500, {"error": failure_message}, message=failure_message) from e

    def _basic_credentials(self) -> str:
        raw = f"{self.config.OAUTH_CLIENT_ID}:{self.config.OAUTH_CLIENT_SECRET}"
        return base64.b64encode(raw.encode("utf-8")).decode("ascii")

    def _scrub_secret(self, data: dict) -> dict:
        secret = self.config.OAUTH_CLIENT_SECRET
        return {k: v for k, v in data.items() if not (secret and v == secret)}


def _json_or_text(response: httpx.Response) -> dict:
    try:
        data = response.json()
    except ValueError:
        return {"error": response.text or f"HTTP {response.status_code}"}
    if not isinstance(data, dict):
        return {"error": str(data)}
    return data
