from typing import Optional
from urllib.parse import parse_qsl, urlencode, urlsplit, urlunsplit

from fastapi import APIRouter, Body, Depends, Request, status
from fastapi.responses import RedirectResponse

from packages.mockdy_core.config import MockdyConfig
from packages.mockdy_core.errors import MockdyBaseError
from packages.mockdy_core.logging import get_logger
from packages.mockdy_notion.oauth import NotionOAuthService
from packages.mockdy_service.connection_service import NotionConnectionService
from MOCKDY.api.dependencies import get_config, get_connection_service, get_oauth_service
from MOCKDY.api.schemas import AuthorizationUrlResponse, TokenExchangeRequest, TokenRefreshRequest

router = APIRouter()
callback_router = APIRouter()
logger = get_logger("MOCKDY.api.notion_oauth")

# Query params consumed by the OAuth round-trip, never forwarded to the app
OAUTH_QUERY_PARAMS = {"code", "notion_oauth", "state"}


@router.get("/url", response_model=AuthorizationUrlResponse)
def get_authorization_url(oauth: NotionOAuthService = Depends(get_oauth_service)):
    """
    Return the Notion authorization URL built from server-held client credentials.
    500 {error} when OAuth is not configured.
    """
    return AuthorizationUrlResponse(url=oauth.build_authorization_url())


@router.post("/token")
async def exchange_token(
    request: Optional[TokenExchangeRequest] = Body(None),
    oauth: NotionOAuthService = Depends(get_oauth_service)
):
    """
    Exchange an authorization code for tokens.
    Provider errors are passed through with the provider status.
    A missing body is treated like a missing code.
    """
    return await oauth.exchange_code(request.code if request else None)


@router.post("/refresh")
async def refresh_token(
    request: Optional[TokenRefreshRequest] = Body(None),
    oauth: NotionOAuthService = Depends(get_oauth_service)
):
    return await oauth.refresh_token(request.refresh_token if request else None)


@callback_router.get("/oauth/callback")
async def oauth_callback(
    request: Request,
    config: MockdyConfig = Depends(get_config),
    service: NotionConnectionService = Depends(get_connection_service)
):
    """
    Redirect target registered with Notion.
    Completes the flow server-side, then sends the user back to the app
    with the OAuth query params removed.
    """
    code = request.query_params.get("code")
    outcome = None
    if not code:
        logger.warning(f"OAuth callback without code. error={request.query_params.get('error')}")
        outcome = "error"
    else:
        try:
            await service.complete_auth(code)
        except MockdyBaseError as e:
            logger.error(f"Failed to complete Notion OAuth: {e}")
            outcome = "error"

    return RedirectResponse(
        url=build_return_url(config.APP_ORIGIN, request.query_params.multi_items(), outcome),
        status_code=status.HTTP_303_SEE_OTHER,
    )


def build_return_url(app_origin: str, incoming, outcome=None) -> str:
    parts = urlsplit(app_origin)
    query = [(k, v) for k, v in parse_qsl(parts.query, keep_blank_values=True) if k not in OAUTH_QUERY_PARAMS]
    query += [(k, v) for k, v in incoming if k not in OAUTH_QUERY_PARAMS and k != "error"]
    if outcome:
        query.append(("notion_oauth", outcome))
    return urlunsplit((parts.scheme, parts.netloc, parts.path, urlencode(query), parts.fragment))
