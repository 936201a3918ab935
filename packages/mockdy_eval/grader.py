import json
from typing import List

from pydantic import ValidationError

from packages.mockdy_core.errors import ParseError
from packages.mockdy_core.logging import get_logger
from packages.mockdy_dto.session import FeedbackData, InterviewType, Message
from packages.mockdy_eval.rubrics import GradingRubric
from packages.mockdy_eval.schema import FEEDBACK_SCHEMA
from packages.mockdy_providers.llm.base import ILLMProvider

logger = get_logger("mockdy_eval.grader")


def build_grading_prompt(messages: List[Message], code_or_notes: str, interview_type: InterviewType) -> str:
    transcript = "\n".join(f"{m.role.upper()}: {m.text}" for m in messages)
    context = (
        f"INTERVIEW TYPE: {interview_type.value}\n\n"
        f"TRANSCRIPT:\n{transcript}\n\n"
        f"USER NOTES/CODE:\n{code_or_notes}\n"
    )
    return f"{context}\n\n{GradingRubric.instructions_for(interview_type)}"


def parse_feedback(raw: str) -> FeedbackData:
    """
    Parse and validate the grading model output.
    Raises ParseError on non-JSON or schema-violating output.
    """
    if not raw or not raw.strip():
        raise ParseError("No JSON returned")
    try:
        data = json.loads(raw)
    except ValueError as e:
        raise ParseError(f"Grading output is not JSON: {e}") from e
    if not isinstance(data, dict):
        raise ParseError("Grading output is not a JSON object")

    missing = [k for k in FEEDBACK_SCHEMA["required"] if k not in data]
    if missing:
        raise ParseError("Grading output is missing required fields", details={"missing": missing})
    try:
        return FeedbackData.model_validate(data)
    except ValidationError as e:
        raise ParseError(f"Grading output violates schema: {e.error_count()} error(s)") from e


class InterviewGrader:
    """
    Sends the transcript and notes to the model and returns FeedbackData.
    Never raises: failures yield the zero-score fallback.
    """
    def __init__(self, llm: ILLMProvider):
        self.llm = llm

    async def grade(self, messages: List[Message], code_or_notes: str, interview_type: InterviewType) -> FeedbackData:
        prompt = build_grading_prompt(messages, code_or_notes, interview_type)
        try:
            response = await self.llm.generate_json(prompt, FEEDBACK_SCHEMA)
            feedback = parse_feedback(response.content)
            logger.info(f"Feedback generated. Type: {interview_type.value}, Score: {feedback.score}")
            return feedback
        except ParseError as e:
            logger.error(f"Feedback parsing failed: {e}")
        except Exception:
            logger.exception("Feedback generation failed")
        # Fallback in case of parsing error or API failure
        return FeedbackData.fallback()
