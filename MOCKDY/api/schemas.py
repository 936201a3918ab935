from typing import Any, List, Optional

from pydantic import BaseModel, Field

from packages.mockdy_core.dto import BaseDTO
from packages.mockdy_dto.notion import NotionConnection
from packages.mockdy_dto.session import FeedbackData, InterviewType, Message, ProblemInfo, StoredSession
from packages.mockdy_session.dto import InterviewContext

# --- Request Schemas ---

class TokenExchangeRequest(BaseModel):
    # Any: validated by the service so a non-string code yields 400, not 422
    code: Any = None

class TokenRefreshRequest(BaseModel):
    refresh_token: Any = None

class InterviewCreateRequest(BaseDTO):
    type: InterviewType
    difficulty: Optional[str] = Field(None, description="Easy | Medium | Hard (technical only)")

class MessageRequest(BaseDTO):
    text: str

class NotesUpdateRequest(BaseDTO):
    code_or_notes: str = ""

class DatabaseIdRequest(BaseDTO):
    database_id: Optional[str] = None

# --- Response Schemas ---

class AuthorizationUrlResponse(BaseModel):
    url: str

class InterviewResponse(BaseDTO):
    id: str
    type: InterviewType
    phase: str
    interviewer_name: Optional[str] = None
    messages: List[Message] = []
    code_or_notes: str = ""
    problem_info: Optional[ProblemInfo] = None
    is_sending: bool = False
    feedback: Optional[FeedbackData] = None
    stored_session_id: Optional[str] = None
    created_at: int

    @classmethod
    def from_context(cls, context: InterviewContext) -> "InterviewResponse":
        return cls(
            id=context.interview_id,
            type=context.type,
            phase=context.phase.value,
            interviewer_name=context.interviewer_name,
            messages=list(context.messages),
            code_or_notes=context.code_or_notes,
            problem_info=context.problem_info,
            is_sending=context.is_sending,
            feedback=context.feedback,
            stored_session_id=context.stored_session_id,
            created_at=context.created_at,
        )

class InterviewEndResponse(BaseDTO):
    session: StoredSession
    feedback: FeedbackData

class ConnectionResponse(BaseDTO):
    """
    Connection view for the UI. Tokens never leave the server.
    """
    connected: bool = False
    configured: bool = False
    workspace_id: Optional[str] = None
    workspace_name: Optional[str] = None
    workspace_icon: Optional[str] = None
    bot_id: Optional[str] = None
    database_id: Optional[str] = None
    has_refresh_token: bool = False

    @classmethod
    def from_connection(cls, connection: Optional[NotionConnection]) -> "ConnectionResponse":
        if connection is None:
            return cls()
        return cls(
            connected=bool(connection.access_token),
            configured=connection.is_configured,
            workspace_id=connection.workspace_id,
            workspace_name=connection.workspace_name,
            workspace_icon=connection.workspace_icon,
            bot_id=connection.bot_id,
            database_id=connection.database_id,
            has_refresh_token=bool(connection.refresh_token),
        )
