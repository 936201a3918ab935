import time
from typing import Callable, Dict, List, Optional

from packages.mockdy_core.logging import get_logger
from packages.mockdy_session.dto import InterviewContext
from packages.mockdy_session.repository import InterviewStateRepository
from packages.mockdy_session.state import InterviewPhase

logger = get_logger("mockdy_session.memory_repo")

FINISHED_PHASES = (InterviewPhase.FEEDBACK, InterviewPhase.REVIEWING)


class MemoryInterviewRepository(InterviewStateRepository):
    """
    In-Memory implementation of InterviewStateRepository.
    Chat handles are live objects, so in-progress interviews only live in process memory.
    Graded interviews are already in the session history and are evicted
    `finished_ttl_sec` after they were graded.
    """
    def __init__(self, finished_ttl_sec: float = 3600.0, clock: Callable[[], float] = time.monotonic):
        self._store: Dict[str, InterviewContext] = {}
        self._finished_at: Dict[str, float] = {}
        self.finished_ttl_sec = finished_ttl_sec
        self._clock = clock

    def save_state(self, context: InterviewContext) -> None:
        self._evict_expired()
        self._store[context.interview_id] = context
        if context.phase in FINISHED_PHASES:
            self._finished_at.setdefault(context.interview_id, self._clock())
        else:
            self._finished_at.pop(context.interview_id, None)

    def get_state(self, interview_id: str) -> Optional[InterviewContext]:
        self._evict_expired()
        return self._store.get(interview_id)

    def remove_state(self, interview_id: str) -> None:
        self._store.pop(interview_id, None)
        self._finished_at.pop(interview_id, None)

    def find_all(self) -> List[InterviewContext]:
        self._evict_expired()
        return list(self._store.values())

    def _evict_expired(self) -> None:
        deadline = self._clock() - self.finished_ttl_sec
        expired = [i for i, finished_at in self._finished_at.items() if finished_at <= deadline]
        for interview_id in expired:
            self.remove_state(interview_id)
            logger.debug(f"Evicted finished interview {interview_id}")
