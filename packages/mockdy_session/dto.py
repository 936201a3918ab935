import time
import uuid
from dataclasses import dataclass, field
from typing import List, Optional

from packages.mockdy_dto.session import FeedbackData, InterviewType, Message, ProblemInfo
from packages.mockdy_providers.llm.base import IChatSession
from .state import InterviewPhase, InterviewStateMachine


def now_ms() -> int:
    return int(time.time() * 1000)


@dataclass
class InterviewContext:
    """
    Runtime context of one interview (hot state, in memory).
    Holds the live chat handle, so it is never persisted as-is.
    """
    type: InterviewType
    interview_id: str = field(default_factory=lambda: str(uuid.uuid4()))
    machine: InterviewStateMachine = field(default_factory=InterviewStateMachine)
    messages: List[Message] = field(default_factory=list)
    code_or_notes: str = ""
    problem_info: Optional[ProblemInfo] = None
    interviewer_name: Optional[str] = None
    chat: Optional[IChatSession] = field(default=None, repr=False)
    is_sending: bool = False
    feedback: Optional[FeedbackData] = None
    stored_session_id: Optional[str] = None
    created_at: int = field(default_factory=now_ms)

    @property
    def phase(self) -> InterviewPhase:
        return self.machine.phase
