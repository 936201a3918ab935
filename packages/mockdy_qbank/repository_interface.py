from abc import ABC, abstractmethod
from typing import List, Optional

from packages.mockdy_dto.session import ProblemInfo


class ProblemRepository(ABC):
    """
    Abstract Interface for the coding problem catalogue.
    """

    @abstractmethod
    def find_all(self) -> List[ProblemInfo]:
        pass

    @abstractmethod
    def find_by_id(self, problem_id: int) -> Optional[ProblemInfo]:
        pass

    def find_by_difficulty(self, difficulty: str) -> List[ProblemInfo]:
        return [p for p in self.find_all() if p.difficulty == difficulty]
