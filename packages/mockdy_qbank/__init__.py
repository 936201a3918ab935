from .repository_interface import ProblemRepository
from .repository import JsonFileProblemRepository
from .service import ProblemBankService, DIFFICULTIES

__all__ = [
    "ProblemRepository",
    "JsonFileProblemRepository",
    "ProblemBankService",
    "DIFFICULTIES",
]
