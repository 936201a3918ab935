from .interview_service import InterviewService
from .connection_service import NotionConnectionService

__all__ = ["InterviewService", "NotionConnectionService"]
