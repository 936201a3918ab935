from enum import Enum
from typing import List, Literal, Optional

from pydantic import ConfigDict, Field, field_validator

from packages.mockdy_core.dto import BaseDTO


class InterviewType(str, Enum):
    TECHNICAL = "TECHNICAL"
    BEHAVIORAL = "BEHAVIORAL"
    SYSTEM_DESIGN = "SYSTEM_DESIGN"


class Message(BaseDTO):
    """
    One transcript entry. Append-only within a session.
    """
    role: Literal["user", "model"]
    text: str
    timestamp: int = Field(..., description="Epoch milliseconds")


class ProblemInfo(BaseDTO):
    """
    Problem chosen for a technical interview. Immutable once chosen.
    """
    model_config = ConfigDict(frozen=True)

    id: int
    name: str
    difficulty: Literal["Easy", "Medium", "Hard"]
    category: str


class FeedbackData(BaseDTO):
    """
    Grading result, produced once per session.
    """
    model_config = ConfigDict(frozen=True)

    score: int = Field(..., description="Overall score (0-100)")
    summary: str
    strengths: List[str] = Field(default_factory=list)
    weaknesses: List[str] = Field(default_factory=list)
    optimal_solution: str

    @field_validator("score", mode="before")
    @classmethod
    def _clamp_score(cls, value):
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise ValueError("score must be a number")
        # Clamp score to 0-100 just in case
        return max(0, min(100, int(round(value))))

    @classmethod
    def fallback(cls) -> "FeedbackData":
        return cls(
            score=0,
            summary="Failed to generate detailed feedback. Please try again.",
            strengths=[],
            weaknesses=[],
            optimal_solution="N/A",
        )


class StoredSession(BaseDTO):
    """
    A completed interview as kept in the local session list.
    Created at interview end and never mutated afterwards.
    """
    id: str
    timestamp: int = Field(..., description="Epoch milliseconds")
    type: InterviewType
    messages: List[Message] = Field(default_factory=list)
    code_or_notes: str = ""
    feedback: FeedbackData
    problem_info: Optional[ProblemInfo] = None
