import os
import logging
import logging.handlers
from contextlib import asynccontextmanager
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from starlette.exceptions import HTTPException as StarletteHTTPException

# Core imports
from packages.mockdy_core.config import MockdyConfig
from packages.mockdy_core.logging import get_logger, LOG_DIR, LOG_FORMAT, LOG_DATEFMT
from packages.mockdy_core.errors import MockdyBaseError, UpstreamError

# API Routers
from MOCKDY.api.health import router as health_router
from MOCKDY.api.notion_oauth import router as notion_oauth_router, callback_router as oauth_callback_router
from MOCKDY.api.notion_proxy import router as notion_proxy_router
from MOCKDY.api.connection import router as connection_router
from MOCKDY.api.interviews import router as interviews_router
from MOCKDY.api.history import router as history_router
from MOCKDY.api.error_handler import (
    mockdy_exception_handler,
    upstream_exception_handler,
    http_exception_handler,
)

# Configuration Load
config = MockdyConfig.load()
logger = get_logger("MOCKDY.main")

def setup_runtime_logging():
    """
    Configure runtime logging to logs/runtime/.
    Adds a file handler specifically for runtime logs.
    """
    log_dir = os.path.join(LOG_DIR, "runtime")
    os.makedirs(log_dir, exist_ok=True)

    log_file = os.path.join(log_dir, "runtime.log")
    root_logger = logging.getLogger()
    if any(getattr(h, "baseFilename", None) == os.path.abspath(log_file) for h in root_logger.handlers):
        return

    file_handler = logging.handlers.TimedRotatingFileHandler(
        filename=log_file,
        when="midnight",
        interval=1,
        backupCount=30,
        encoding="utf-8"
    )
    file_handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=LOG_DATEFMT))
    file_handler.setLevel(logging.INFO)

    # Attach to root logger to capture all events including uvicorn
    root_logger.addHandler(file_handler)

@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup
    setup_runtime_logging()
    logger.info(f"Starting {config.PROJECT_NAME} v{config.VERSION}...")
    if not config.OAUTH_CLIENT_ID or not config.OAUTH_CLIENT_SECRET:
        logger.warning("Notion OAuth client credentials are not configured. Notion sync is disabled.")

    yield

    # Shutdown
    logger.info("Server shutting down...")

def create_app() -> FastAPI:
    app = FastAPI(
        title=config.PROJECT_NAME,
        version=config.VERSION,
        lifespan=lifespan,
        docs_url="/docs",       # Dev only
        redoc_url=None
    )

    # Middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],    # Allow all for now (Dev)
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Exception handlers (most specific first)
    app.add_exception_handler(UpstreamError, upstream_exception_handler)
    app.add_exception_handler(MockdyBaseError, mockdy_exception_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)

    # Routers
    app.include_router(notion_oauth_router, prefix="/api/notion-oauth", tags=["Notion OAuth"])
    app.include_router(notion_proxy_router, prefix="/api/notion", tags=["Notion Proxy"])
    app.include_router(oauth_callback_router, prefix="", tags=["Notion OAuth"])
    app.include_router(health_router, prefix="/api/v1", tags=["Status"])
    app.include_router(interviews_router, prefix="/api/v1/interviews", tags=["Interview"])
    app.include_router(history_router, prefix="/api/v1/history", tags=["History"])
    app.include_router(connection_router, prefix="/api/v1/notion", tags=["Notion Connection"])

    return app

app = create_app()

if __name__ == "__main__":
    import uvicorn
    uvicorn.run("MOCKDY.main:app", host="0.0.0.0", port=8000, reload=True)
