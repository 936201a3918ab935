from .oauth import NotionOAuthService
from .proxy import NotionPagesProxy, parse_bearer
from .page_builder import NotionPageBuilder, truncate, generate_title
from .writer import NotionReportWriter

__all__ = [
    "NotionOAuthService",
    "NotionPagesProxy",
    "parse_bearer",
    "NotionPageBuilder",
    "truncate",
    "generate_title",
    "NotionReportWriter",
]
