from fastapi import Request
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from packages.mockdy_core.errors import MockdyBaseError, UpstreamError
from packages.mockdy_core.logging import get_logger

logger = get_logger("MOCKDY.error_handler")


async def mockdy_exception_handler(request: Request, exc: MockdyBaseError) -> JSONResponse:
    """MockdyBaseError를 {"error": message} 형태의 응답으로 변환함."""

    # 5xx 에러는 로그에 예외 정보를 포함함
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed ({exc.code}): {exc.message}", exc_info=exc)
    else:
        logger.warning(f"{request.method} {request.url.path} rejected ({exc.code}): {exc.message}")

    return JSONResponse(status_code=exc.status_code, content={"error": exc.message})


async def upstream_exception_handler(request: Request, exc: UpstreamError) -> JSONResponse:
    """Provider status and body are forwarded unchanged."""
    logger.warning(f"{request.method} {request.url.path} upstream error {exc.status_code}: {exc.body}")
    content = exc.body if exc.body is not None else {"error": exc.message}
    return JSONResponse(status_code=exc.status_code, content=content)


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": exc.detail},
        headers=getattr(exc, "headers", None),
    )
