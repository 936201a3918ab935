import random
from typing import Optional

from packages.mockdy_core.errors import InterviewNotFoundError, MockdyBaseError, UpstreamError
from packages.mockdy_core.logging import get_logger
from packages.mockdy_dto.notion import ReportResult
from packages.mockdy_dto.session import InterviewType, StoredSession
from packages.mockdy_eval.grader import InterviewGrader
from packages.mockdy_notion.writer import NotionReportWriter
from packages.mockdy_providers.llm.base import ILLMProvider
from packages.mockdy_qbank.service import ProblemBankService
from packages.mockdy_session.dto import InterviewContext
from packages.mockdy_session.engine import InterviewSessionEngine
from packages.mockdy_session.prompts import INTERVIEWER_NAMES, build_opening_prompt, build_system_instruction
from packages.mockdy_session.repository import InterviewStateRepository
from packages.mockdy_session.stream import ReplyStream
from packages.mockdy_storage.repository import ConnectionRepository, SessionRepository

logger = get_logger("mockdy_service.interview")

AI_UNAVAILABLE = "Failed to connect to AI. Please check your API key."


class InterviewService:
    """
    Application Service for interview sessions.
    Responsible for:
    1. Driving the model conversation (greeting, streamed replies)
    2. Grading and storing the finished session locally
    3. Mirroring the report to Notion (fire-and-forget, never blocks the local save)
    """
    def __init__(
        self,
        state_repo: InterviewStateRepository,
        session_repo: SessionRepository,
        connection_repo: ConnectionRepository,
        llm: ILLMProvider,
        problem_bank: ProblemBankService,
        report_writer: Optional[NotionReportWriter] = None,
        rng: Optional[random.Random] = None,
    ):
        self.state_repo = state_repo
        self.session_repo = session_repo
        self.connection_repo = connection_repo
        self.llm = llm
        self.grader = InterviewGrader(llm)
        self.problem_bank = problem_bank
        self.report_writer = report_writer
        self.rng = rng or random.Random()

    def get(self, interview_id: str) -> InterviewContext:
        context = self.state_repo.get_state(interview_id)
        if context is None:
            raise InterviewNotFoundError(interview_id)
        return context

    def _engine(self, interview_id: str) -> InterviewSessionEngine:
        return InterviewSessionEngine(self.get(interview_id), self.state_repo)

    async def start_interview(self, interview_type: InterviewType, difficulty: Optional[str] = None) -> InterviewContext:
        interviewer_name = self.rng.choice(INTERVIEWER_NAMES)
        problem = None
        if interview_type == InterviewType.TECHNICAL:
            problem = self.problem_bank.random_problem(difficulty)

        context = InterviewContext(type=interview_type, problem_info=problem, interviewer_name=interviewer_name)
        engine = InterviewSessionEngine(context, self.state_repo)
        engine.begin_start()
        logger.info(
            f"Starting interview {context.interview_id}. Type: {interview_type.value}, "
            f"Interviewer: {interviewer_name}, Problem: {problem.id if problem else None}"
        )

        try:
            context.chat = self.llm.start_chat(build_system_instruction(interview_type, interviewer_name))
            stream = ReplyStream(context.chat.send_message_stream(build_opening_prompt(interviewer_name, problem)))
            greeting = await stream.collect()
            if stream.error is not None:
                raise stream.error
            if not greeting:
                raise ValueError("Empty greeting from model")
        except Exception as e:
            logger.error(f"Failed to start interview {context.interview_id}: {e}")
            engine.fail_loading()
            self.state_repo.remove_state(context.interview_id)
            raise UpstreamError(502, {"error": AI_UNAVAILABLE}, message=AI_UNAVAILABLE) from e

        engine.activate(greeting)
        return context

    def send_message(self, interview_id: str, text: str) -> ReplyStream:
        """
        Append the user turn and return the streamed model reply.
        The reply is recorded when the stream completes, fails or is cancelled.
        """
        engine = self._engine(interview_id)
        engine.begin_reply(text)
        chat = engine.context.chat
        if chat is None:
            engine.finish_reply("", RuntimeError("Chat session is not available"))
            raise UpstreamError(502, {"error": AI_UNAVAILABLE}, message=AI_UNAVAILABLE)
        return ReplyStream(chat.send_message_stream(text), on_complete=engine.finish_reply)

    def update_notes(self, interview_id: str, code_or_notes: str) -> InterviewContext:
        engine = self._engine(interview_id)
        engine.update_notes(code_or_notes)
        return engine.context

    async def end_interview(self, interview_id: str) -> StoredSession:
        engine = self._engine(interview_id)
        engine.begin_grading()
        context = engine.context
        try:
            feedback = await self.grader.grade(context.messages, context.code_or_notes, context.type)
            stored = engine.build_stored_session(feedback)
            # Local save always happens, independent of remote sync
            self.session_repo.save(stored)
        except Exception:
            logger.exception(f"Error generating feedback for interview {interview_id}")
            engine.fail_loading()
            raise
        engine.complete(feedback, stored.id)
        return stored

    def review(self, interview_id: str) -> StoredSession:
        engine = self._engine(interview_id)
        stored_id = engine.context.stored_session_id
        stored = self.session_repo.find_by_id(stored_id) if stored_id else None
        if stored is None:
            raise InterviewNotFoundError(stored_id or interview_id)
        engine.review()
        return stored

    def abandon(self, interview_id: str) -> None:
        self._engine(interview_id).reset()

    # ------------------------------------------------------------------
    # Notion mirror
    # ------------------------------------------------------------------
    def should_sync_report(self) -> bool:
        return self.report_writer is not None and self.connection_repo.is_configured()

    async def sync_report(self, session: StoredSession) -> Optional[ReportResult]:
        """
        Push the report to Notion. Errors are logged, never raised.
        """
        if not self.should_sync_report():
            logger.debug(f"Notion not configured, skipping report for session {session.id}")
            return None
        try:
            result = await self.report_writer.write(session)
        except MockdyBaseError as e:
            logger.error(f"Failed to sync session {session.id} to Notion: {e}")
            return ReportResult(success=False, error=e.message)
        if result.success:
            logger.info(f"Session {session.id} synced to Notion")
        else:
            logger.warning(f"Failed to sync session {session.id} to Notion: {result.error}")
        return result
