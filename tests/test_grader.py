import json
import unittest

from pydantic import ValidationError

from packages.mockdy_core.errors import ParseError
from packages.mockdy_dto.session import FeedbackData, InterviewType, Message
from packages.mockdy_eval.grader import InterviewGrader, build_grading_prompt, parse_feedback
from packages.mockdy_providers.llm.mock import DEFAULT_FEEDBACK, MockLLMProvider

MESSAGES = [
    Message(role="model", text="Solve Two Sum.", timestamp=1),
    Message(role="user", text="I'd use a hash map.", timestamp=2),
]


class TestParseFeedback(unittest.TestCase):

    def test_valid(self):
        feedback = parse_feedback(json.dumps(DEFAULT_FEEDBACK))
        self.assertEqual(feedback.score, 72)
        self.assertEqual(feedback.strengths[0], "Clarified constraints")

    def test_score_is_clamped(self):
        self.assertEqual(parse_feedback(json.dumps(dict(DEFAULT_FEEDBACK, score=140))).score, 100)
        self.assertEqual(parse_feedback(json.dumps(dict(DEFAULT_FEEDBACK, score=-5))).score, 0)

    def test_invalid_outputs_raise_parse_error(self):
        missing = dict(DEFAULT_FEEDBACK)
        del missing["optimalSolution"]
        for raw in ("", "not json", "[1, 2]", json.dumps(missing), json.dumps(dict(DEFAULT_FEEDBACK, score="high"))):
            with self.assertRaises(ParseError, msg=raw):
                parse_feedback(raw)

    def test_boolean_score_rejected(self):
        with self.assertRaises(ValidationError):
            FeedbackData(score=True, summary="s", optimal_solution="o")


class TestInterviewGrader(unittest.IsolatedAsyncioTestCase):

    async def test_grade_returns_model_feedback(self):
        llm = MockLLMProvider()
        feedback = await InterviewGrader(llm).grade(MESSAGES, "def two_sum(): pass", InterviewType.TECHNICAL)

        self.assertEqual(feedback.score, 72)
        prompt = llm.prompts[0]
        self.assertIn("INTERVIEW TYPE: TECHNICAL", prompt)
        self.assertIn("MODEL: Solve Two Sum.", prompt)
        self.assertIn("USER: I'd use a hash map.", prompt)
        self.assertIn("def two_sum(): pass", prompt)

    async def test_grading_failure_yields_fallback(self):
        feedback = await InterviewGrader(MockLLMProvider(fail_grading=True)).grade(MESSAGES, "", InterviewType.BEHAVIORAL)
        self.assertEqual(feedback, FeedbackData.fallback())
        self.assertEqual(feedback.score, 0)
        self.assertEqual(feedback.optimal_solution, "N/A")

    async def test_unparsable_output_yields_fallback(self):
        llm = MockLLMProvider(feedback_json="Sorry, I cannot grade this.")
        feedback = await InterviewGrader(llm).grade(MESSAGES, "", InterviewType.SYSTEM_DESIGN)
        self.assertEqual(feedback.summary, "Failed to generate detailed feedback. Please try again.")

    def test_prompt_uses_type_rubric(self):
        self.assertIn("STAR", build_grading_prompt(MESSAGES, "", InterviewType.BEHAVIORAL))
        self.assertIn("UMPIRE", build_grading_prompt(MESSAGES, "", InterviewType.TECHNICAL))


if __name__ == "__main__":
    unittest.main()
