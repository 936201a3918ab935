import uuid

from packages.mockdy_core.errors import InputError, InvalidTransitionError, SessionBusyError
from packages.mockdy_core.logging import get_logger
from packages.mockdy_dto.session import FeedbackData, Message, StoredSession
from .dto import InterviewContext, now_ms
from .repository import InterviewStateRepository
from .state import InterviewEvent, InterviewPhase

logger = get_logger("mockdy_session.engine")

CONNECTION_INTERRUPTED = "⚠️ Error: Connection interrupted. Please try again."


class InterviewSessionEngine:
    """
    Core Logic for one Interview Session.
    Applies state transitions to the context and commits it to hot storage.
    Talks to no external service; InterviewService drives the model calls.
    """
    def __init__(self, context: InterviewContext, state_repo: InterviewStateRepository):
        self.context = context
        self.state_repo = state_repo

    @property
    def interview_id(self) -> str:
        return self.context.interview_id

    # ------------------------------------------------------------------
    # Start
    # ------------------------------------------------------------------
    def begin_start(self):
        """IDLE -> LOADING while the greeting streams in."""
        self._fire(InterviewEvent.START)
        self._commit_state()

    def activate(self, greeting: str):
        """LOADING -> ACTIVE with the greeting as first model message."""
        self.context.messages.append(Message(role="model", text=greeting, timestamp=now_ms()))
        self._fire(InterviewEvent.READY)
        logger.info(f"Interview {self.interview_id} ({self.context.type.value}) is active")
        self._commit_state()

    def fail_loading(self):
        self._fire(InterviewEvent.FAIL)
        self._commit_state()

    # ------------------------------------------------------------------
    # Conversation
    # ------------------------------------------------------------------
    def begin_reply(self, user_text: str):
        """
        Append the user turn and lock the interview until the reply completes.
        FAIL-FAST: a second send while a reply is streaming is rejected.
        """
        self._require_phase(InterviewPhase.ACTIVE, "SEND")
        if self.context.is_sending:
            raise SessionBusyError(self.interview_id)
        if not user_text or not user_text.strip():
            raise InputError("Message text must not be empty")

        self.context.messages.append(Message(role="user", text=user_text, timestamp=now_ms()))
        self.context.is_sending = True
        self._commit_state()

    def finish_reply(self, text: str, error: BaseException | None = None):
        if text:
            self.context.messages.append(Message(role="model", text=text, timestamp=now_ms()))
        if error is not None:
            logger.error(f"Chat error in interview {self.interview_id}: {error}")
            self.context.messages.append(Message(role="model", text=CONNECTION_INTERRUPTED, timestamp=now_ms()))
        self.context.is_sending = False
        if self.state_repo.get_state(self.interview_id) is not self.context:
            # Abandoned while the reply was streaming; do not bring it back
            logger.debug(f"Interview {self.interview_id} was discarded before its reply completed")
            return
        self._commit_state()

    def update_notes(self, code_or_notes: str):
        self._require_phase(InterviewPhase.ACTIVE, "UPDATE_NOTES")
        self.context.code_or_notes = code_or_notes
        self._commit_state()

    # ------------------------------------------------------------------
    # End / grading
    # ------------------------------------------------------------------
    def begin_grading(self):
        if self.context.is_sending:
            raise SessionBusyError(self.interview_id)
        self._fire(InterviewEvent.END)
        self._commit_state()

    def build_stored_session(self, feedback: FeedbackData) -> StoredSession:
        return StoredSession(
            id=str(uuid.uuid4()),
            timestamp=now_ms(),
            type=self.context.type,
            messages=list(self.context.messages),
            code_or_notes=self.context.code_or_notes,
            feedback=feedback,
            problem_info=self.context.problem_info,
        )

    def complete(self, feedback: FeedbackData, stored_session_id: str):
        self.context.feedback = feedback
        self.context.stored_session_id = stored_session_id
        self._fire(InterviewEvent.GRADED)
        # Chat handle is no longer needed
        self.context.chat = None
        logger.info(f"Interview {self.interview_id} graded. Score: {feedback.score}, Stored as: {stored_session_id}")
        self._commit_state()

    def review(self):
        self._fire(InterviewEvent.REVIEW)
        self._commit_state()

    def reset(self):
        """Back to home. The interview is dropped from hot storage."""
        self._fire(InterviewEvent.RESET)
        self.context.chat = None
        self.state_repo.remove_state(self.interview_id)
        logger.info(f"Interview {self.interview_id} reset")

    # ------------------------------------------------------------------
    def _fire(self, event: InterviewEvent):
        before = self.context.phase
        after = self.context.machine.fire(event)
        logger.debug(f"Interview {self.interview_id}: {before.value} --{event.value}--> {after.value}")

    def _require_phase(self, phase: InterviewPhase, action: str):
        if self.context.phase != phase:
            raise InvalidTransitionError(self.context.phase.value, action)

    def _commit_state(self):
        """Save context to Hot Storage."""
        self.state_repo.save_state(self.context)
