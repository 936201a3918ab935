from typing import Any, Dict, Optional

from fastapi import APIRouter, Body, Depends, Header
from fastapi.responses import JSONResponse

from packages.mockdy_notion.proxy import NotionPagesProxy, parse_bearer
from MOCKDY.api.dependencies import get_pages_proxy

router = APIRouter()


@router.post("/pages")
async def create_page(
    payload: Optional[Dict[str, Any]] = Body(None),
    authorization: Optional[str] = Header(None),
    proxy: NotionPagesProxy = Depends(get_pages_proxy)
):
    """
    Forward a page-creation request to Notion with the caller's bearer token.
    401 {error} without token. Provider status and body are returned verbatim.
    """
    response = await proxy.create_page(parse_bearer(authorization), payload)
    return JSONResponse(status_code=response.status_code, content=response.body)
