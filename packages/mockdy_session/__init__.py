from .state import InterviewPhase, InterviewEvent, InterviewStateMachine, TRANSITIONS
from .dto import InterviewContext
from .engine import InterviewSessionEngine
from .stream import ReplyStream

__all__ = [
    "InterviewPhase",
    "InterviewEvent",
    "InterviewStateMachine",
    "TRANSITIONS",
    "InterviewContext",
    "InterviewSessionEngine",
    "ReplyStream",
]
