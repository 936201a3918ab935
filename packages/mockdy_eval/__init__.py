from .grader import InterviewGrader, build_grading_prompt, parse_feedback
from .schema import FEEDBACK_SCHEMA

__all__ = ["InterviewGrader", "build_grading_prompt", "parse_feedback", "FEEDBACK_SCHEMA"]
