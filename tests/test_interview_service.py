import random
import unittest
from typing import List, Optional
from unittest.mock import AsyncMock, MagicMock

from packages.mockdy_core.errors import (
    InputError,
    InterviewNotFoundError,
    InvalidTransitionError,
    SessionBusyError,
    UpstreamError,
)
from packages.mockdy_dto.notion import NotionConnection, ReportResult
from packages.mockdy_dto.session import InterviewType, ProblemInfo
from packages.mockdy_notion.page_builder import generate_title
from packages.mockdy_providers.llm.mock import MockLLMProvider
from packages.mockdy_qbank.repository_interface import ProblemRepository
from packages.mockdy_qbank.service import ProblemBankService
from packages.mockdy_service.interview_service import InterviewService
from packages.mockdy_session.engine import CONNECTION_INTERRUPTED
from packages.mockdy_session.infrastructure.memory_repo import MemoryInterviewRepository
from packages.mockdy_session.state import InterviewPhase
from packages.mockdy_storage import LocalConnectionRepository, LocalSessionRepository, MemoryKeyValueStore

TWO_SUM = ProblemInfo(id=1, name="Two Sum", difficulty="Easy", category="Arrays & Hashing")
GREETING = "Hi, I'm Alex. Given an array of integers, return indices of two numbers adding up to a target."


class SingleProblemRepository(ProblemRepository):
    def __init__(self, problems: List[ProblemInfo]):
        self.problems = problems

    def find_all(self) -> List[ProblemInfo]:
        return list(self.problems)

    def find_by_id(self, problem_id: int) -> Optional[ProblemInfo]:
        return next((p for p in self.problems if p.id == problem_id), None)


class TestInterviewService(unittest.IsolatedAsyncioTestCase):

    def setUp(self):
        self.store = MemoryKeyValueStore()
        self.state_repo = MemoryInterviewRepository()
        self.session_repo = LocalSessionRepository(self.store)
        self.connection_repo = LocalConnectionRepository(self.store)
        self.llm = MockLLMProvider(replies=[GREETING, "Good question. What is your approach?"])
        self.report_writer = MagicMock()
        self.report_writer.write = AsyncMock(return_value=ReportResult(success=True, page_id="page-1"))
        self.service = InterviewService(
            state_repo=self.state_repo,
            session_repo=self.session_repo,
            connection_repo=self.connection_repo,
            llm=self.llm,
            problem_bank=ProblemBankService(SingleProblemRepository([TWO_SUM])),
            report_writer=self.report_writer,
            rng=random.Random(7),
        )

    async def test_start_technical_interview(self):
        context = await self.service.start_interview(InterviewType.TECHNICAL)

        self.assertEqual(context.phase, InterviewPhase.ACTIVE)
        self.assertEqual(context.problem_info, TWO_SUM)
        self.assertEqual([m.role for m in context.messages], ["model"])
        self.assertEqual(context.messages[0].text, GREETING)
        self.assertIs(self.state_repo.get_state(context.interview_id), context)

        chat = self.llm.sessions[0]
        self.assertIn(f"Your name is {context.interviewer_name}", chat.system_instruction)
        self.assertIn("LeetCode #1", chat.received[0])

    async def test_behavioral_interview_has_no_problem(self):
        context = await self.service.start_interview(InterviewType.BEHAVIORAL, difficulty="Hard")
        self.assertIsNone(context.problem_info)
        self.assertIn("STAR", self.llm.sessions[0].system_instruction)

    async def test_unknown_difficulty_rejected_before_start(self):
        with self.assertRaises(InputError):
            await self.service.start_interview(InterviewType.TECHNICAL, difficulty="Impossible")
        self.assertEqual(self.state_repo.find_all(), [])
        self.assertEqual(self.llm.sessions, [])

    async def test_start_failure_drops_interview(self):
        self.llm.fail_chat = True
        with self.assertRaises(UpstreamError) as ctx:
            await self.service.start_interview(InterviewType.SYSTEM_DESIGN)
        self.assertEqual(ctx.exception.status_code, 502)
        self.assertEqual(self.state_repo.find_all(), [])

    async def test_send_message_streams_and_records_reply(self):
        context = await self.service.start_interview(InterviewType.TECHNICAL)

        stream = self.service.send_message(context.interview_id, "Can the array be empty?")
        self.assertTrue(context.is_sending)
        deltas = [d async for d in stream]

        self.assertEqual("".join(deltas), "Good question. What is your approach?")
        self.assertFalse(context.is_sending)
        self.assertEqual([m.role for m in context.messages], ["model", "user", "model"])
        self.assertEqual(context.messages[-1].text, "Good question. What is your approach?")

    async def test_concurrent_send_is_rejected(self):
        context = await self.service.start_interview(InterviewType.TECHNICAL)
        stream = self.service.send_message(context.interview_id, "First")

        with self.assertRaises(SessionBusyError):
            self.service.send_message(context.interview_id, "Second")
        with self.assertRaises(SessionBusyError):
            await self.service.end_interview(context.interview_id)

        await stream.__anext__()
        await stream.cancel()
        self.assertFalse(context.is_sending)
        self.assertEqual(context.messages[-1].text, "Good")

    async def test_abandon_during_reply_stays_discarded(self):
        context = await self.service.start_interview(InterviewType.TECHNICAL)
        stream = self.service.send_message(context.interview_id, "Can the array be empty?")

        await stream.__anext__()
        self.service.abandon(context.interview_id)
        await stream.collect()

        self.assertIsNone(self.state_repo.get_state(context.interview_id))
        with self.assertRaises(InterviewNotFoundError):
            self.service.get(context.interview_id)

    async def test_empty_message_rejected(self):
        context = await self.service.start_interview(InterviewType.TECHNICAL)
        with self.assertRaises(InputError):
            self.service.send_message(context.interview_id, "   ")
        self.assertFalse(context.is_sending)

    async def test_stream_failure_appends_interrupted_message(self):
        context = await self.service.start_interview(InterviewType.TECHNICAL)
        self.llm.fail_chat = True

        stream = self.service.send_message(context.interview_id, "Hello?")
        await stream.collect()

        self.assertIsNotNone(stream.error)
        self.assertEqual(context.messages[-1].text, CONNECTION_INTERRUPTED)
        self.assertFalse(context.is_sending)
        self.assertEqual(context.phase, InterviewPhase.ACTIVE)

    async def test_end_interview_grades_and_stores(self):
        context = await self.service.start_interview(InterviewType.TECHNICAL)
        self.service.update_notes(context.interview_id, "def two_sum(nums, target):\n    pass")

        stored = await self.service.end_interview(context.interview_id)

        self.assertEqual(context.phase, InterviewPhase.FEEDBACK)
        self.assertEqual(stored.feedback.score, 72)
        self.assertEqual(stored.code_or_notes, "def two_sum(nums, target):\n    pass")
        self.assertEqual(stored.problem_info, TWO_SUM)
        self.assertEqual(self.session_repo.get_all()[0].id, stored.id)
        self.assertEqual(context.stored_session_id, stored.id)
        self.assertEqual(generate_title(stored), "Mock Leetcode 1. Two Sum")

        with self.assertRaises(InvalidTransitionError):
            self.service.update_notes(context.interview_id, "late edit")

    async def test_grading_failure_still_stores_fallback(self):
        context = await self.service.start_interview(InterviewType.BEHAVIORAL)
        self.llm.fail_grading = True

        stored = await self.service.end_interview(context.interview_id)

        self.assertEqual(stored.feedback.score, 0)
        self.assertEqual(self.session_repo.find_by_id(stored.id).feedback.optimal_solution, "N/A")

    async def test_review_and_abandon(self):
        context = await self.service.start_interview(InterviewType.TECHNICAL)
        stored = await self.service.end_interview(context.interview_id)

        reviewed = self.service.review(context.interview_id)
        self.assertEqual(reviewed.id, stored.id)
        self.assertEqual(context.phase, InterviewPhase.REVIEWING)

        self.service.abandon(context.interview_id)
        with self.assertRaises(InterviewNotFoundError):
            self.service.get(context.interview_id)
        # Stored session outlives the interview
        self.assertIsNotNone(self.session_repo.find_by_id(stored.id))

    async def test_sync_report_only_when_configured(self):
        context = await self.service.start_interview(InterviewType.TECHNICAL)
        stored = await self.service.end_interview(context.interview_id)

        self.assertFalse(self.service.should_sync_report())
        self.assertIsNone(await self.service.sync_report(stored))
        self.report_writer.write.assert_not_called()

        self.connection_repo.save(NotionConnection(access_token="at", database_id="db"))
        result = await self.service.sync_report(stored)
        self.assertTrue(result.success)
        self.report_writer.write.assert_awaited_once_with(stored)


if __name__ == "__main__":
    unittest.main()
