import random
from typing import Optional

from packages.mockdy_core.errors import InputError
from packages.mockdy_dto.session import ProblemInfo
from .repository_interface import ProblemRepository

DIFFICULTIES = ("Easy", "Medium", "Hard")


class ProblemBankService:
    """
    Draws technical interview problems from the catalogue.
    """

    def __init__(self, repository: ProblemRepository, rng: Optional[random.Random] = None):
        self.repository = repository
        self.rng = rng or random.Random()

    def random_problem(self, difficulty: Optional[str] = None) -> ProblemInfo:
        if difficulty is not None and difficulty not in DIFFICULTIES:
            raise InputError(f"Unknown difficulty: {difficulty}. Expected one of {DIFFICULTIES}")

        candidates = (
            self.repository.find_by_difficulty(difficulty) if difficulty else self.repository.find_all()
        )
        if not candidates:
            raise InputError("Problem bank is empty", status_code=503)
        return self.rng.choice(candidates)
