import json
import os
from typing import List, Optional

from pydantic import ValidationError

from packages.mockdy_core.logging import get_logger
from packages.mockdy_dto.session import ProblemInfo
from .repository_interface import ProblemRepository

logger = get_logger("mockdy_qbank.repository")

DEFAULT_PROBLEM_FILE = os.path.join(os.path.dirname(__file__), "data", "neetcode_150.json")


class JsonFileProblemRepository(ProblemRepository):
    """
    Read-only catalogue backed by a single JSON file (NeetCode 150 by default).
    Loaded lazily once and kept in memory.
    """

    def __init__(self, file_path: str = DEFAULT_PROBLEM_FILE):
        self.file_path = file_path
        self._problems: Optional[List[ProblemInfo]] = None

    def _load_all(self) -> List[ProblemInfo]:
        if self._problems is not None:
            return self._problems
        try:
            with open(self.file_path, 'r', encoding='utf-8') as f:
                data = json.load(f)
            self._problems = [ProblemInfo.model_validate(item) for item in data]
            logger.info(f"Loaded {len(self._problems)} problems from {self.file_path}")
        except (OSError, ValueError, ValidationError) as e:
            logger.error(f"Failed to load problems from {self.file_path}: {e}")
            self._problems = []
        return self._problems

    def find_all(self) -> List[ProblemInfo]:
        return list(self._load_all())

    def find_by_id(self, problem_id: int) -> Optional[ProblemInfo]:
        for p in self._load_all():
            if p.id == problem_id:
                return p
        return None
