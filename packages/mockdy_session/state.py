from enum import Enum
from typing import Dict, Optional, Tuple

from packages.mockdy_core.errors import InvalidTransitionError


class InterviewPhase(str, Enum):
    """
    Interview UI phase.
    """
    IDLE = "IDLE"
    LOADING = "LOADING"        # Waiting for greeting or grading
    ACTIVE = "ACTIVE"          # Conversation in progress
    FEEDBACK = "FEEDBACK"      # Grading result shown right after the interview
    REVIEWING = "REVIEWING"    # Looking at a stored session


class InterviewEvent(str, Enum):
    START = "START"      # User picked an interview type
    READY = "READY"      # Greeting received
    FAIL = "FAIL"        # Loading step failed
    END = "END"          # User ended the interview, grading starts
    GRADED = "GRADED"    # Feedback available, session stored
    REVIEW = "REVIEW"    # Open a stored session
    RESET = "RESET"      # Back to home


P, E = InterviewPhase, InterviewEvent

# (phase, event) -> next phase. None: back to the phase held before LOADING.
TRANSITIONS: Dict[Tuple[InterviewPhase, InterviewEvent], Optional[InterviewPhase]] = {
    (P.IDLE, E.START): P.LOADING,
    (P.IDLE, E.REVIEW): P.REVIEWING,
    (P.LOADING, E.READY): P.ACTIVE,
    (P.LOADING, E.GRADED): P.FEEDBACK,
    (P.LOADING, E.FAIL): None,
    (P.ACTIVE, E.END): P.LOADING,
    (P.ACTIVE, E.RESET): P.IDLE,
    (P.FEEDBACK, E.REVIEW): P.REVIEWING,
    (P.FEEDBACK, E.RESET): P.IDLE,
    (P.REVIEWING, E.RESET): P.IDLE,
}


class InterviewStateMachine:
    """
    Explicit replacement for ad hoc isActive/isLoading flags.
    """
    def __init__(self, phase: InterviewPhase = InterviewPhase.IDLE):
        self.phase = phase
        self._before_loading: InterviewPhase = InterviewPhase.IDLE

    def can(self, event: InterviewEvent) -> bool:
        return (self.phase, event) in TRANSITIONS

    def fire(self, event: InterviewEvent) -> InterviewPhase:
        key = (self.phase, event)
        if key not in TRANSITIONS:
            raise InvalidTransitionError(self.phase.value, event.value)

        target = TRANSITIONS[key]
        if target is None:
            target = self._before_loading
        if target == InterviewPhase.LOADING:
            self._before_loading = self.phase
        self.phase = target
        return self.phase
