from abc import ABC, abstractmethod
from typing import List, Optional

from .dto import InterviewContext


class InterviewStateRepository(ABC):
    """
    Interface for Hot State Storage of in-progress interviews.
    """
    @abstractmethod
    def save_state(self, context: InterviewContext) -> None:
        pass

    @abstractmethod
    def get_state(self, interview_id: str) -> Optional[InterviewContext]:
        pass

    @abstractmethod
    def remove_state(self, interview_id: str) -> None:
        pass

    @abstractmethod
    def find_all(self) -> List[InterviewContext]:
        pass
