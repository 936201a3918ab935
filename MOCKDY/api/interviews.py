from fastapi import APIRouter, BackgroundTasks, Depends, Response, status
from fastapi.responses import StreamingResponse

from packages.mockdy_core.logging import get_logger
from packages.mockdy_dto.session import StoredSession
from packages.mockdy_service.interview_service import InterviewService
from packages.mockdy_session.stream import ReplyStream
from MOCKDY.api.dependencies import get_interview_service
from MOCKDY.api.schemas import (
    InterviewCreateRequest,
    InterviewEndResponse,
    InterviewResponse,
    MessageRequest,
    NotesUpdateRequest,
)

# All routes are async: interview state is only touched from the event loop thread
router = APIRouter()
logger = get_logger("MOCKDY.api.interviews")


@router.post("", response_model=InterviewResponse, status_code=status.HTTP_201_CREATED)
async def start_interview(
    request: InterviewCreateRequest,
    service: InterviewService = Depends(get_interview_service)
):
    """
    Start a new interview. Returns once the interviewer greeting is complete.
    """
    context = await service.start_interview(request.type, request.difficulty)
    return InterviewResponse.from_context(context)


@router.get("/{interview_id}", response_model=InterviewResponse)
async def get_interview(
    interview_id: str,
    service: InterviewService = Depends(get_interview_service)
):
    return InterviewResponse.from_context(service.get(interview_id))


@router.delete("/{interview_id}", status_code=status.HTTP_204_NO_CONTENT)
async def abandon_interview(
    interview_id: str,
    service: InterviewService = Depends(get_interview_service)
):
    service.abandon(interview_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/{interview_id}/messages")
async def send_message(
    interview_id: str,
    request: MessageRequest,
    service: InterviewService = Depends(get_interview_service)
):
    """
    Send a user message and stream the interviewer reply as plain text deltas.
    FAIL-FAST: 423 while a previous reply is still streaming.
    """
    stream = service.send_message(interview_id, request.text)
    return StreamingResponse(_relay(stream), media_type="text/plain; charset=utf-8")


async def _relay(stream: ReplyStream):
    try:
        async for delta in stream:
            yield delta
    finally:
        # Client disconnect closes the generator; the partial reply is kept
        await stream.cancel()


@router.put("/{interview_id}/notes", response_model=InterviewResponse)
async def update_notes(
    interview_id: str,
    request: NotesUpdateRequest,
    service: InterviewService = Depends(get_interview_service)
):
    return InterviewResponse.from_context(service.update_notes(interview_id, request.code_or_notes))


@router.post("/{interview_id}/end", response_model=InterviewEndResponse)
async def end_interview(
    interview_id: str,
    background_tasks: BackgroundTasks,
    service: InterviewService = Depends(get_interview_service)
):
    """
    Grade and store the interview.
    The Notion report runs after the response is sent and never affects it.
    """
    stored = await service.end_interview(interview_id)
    if service.should_sync_report():
        background_tasks.add_task(service.sync_report, stored)
    return InterviewEndResponse(session=stored, feedback=stored.feedback)


@router.post("/{interview_id}/review", response_model=StoredSession)
async def review_interview(
    interview_id: str,
    service: InterviewService = Depends(get_interview_service)
):
    """
    Open the stored session of a graded interview.
    """
    return service.review(interview_id)
