from typing import List

from fastapi import APIRouter, Depends, HTTPException, Response, status

from packages.mockdy_dto.session import StoredSession
from packages.mockdy_storage.repository import SessionRepository
from MOCKDY.api.dependencies import get_session_repository

router = APIRouter()


@router.get("", response_model=List[StoredSession])
async def list_sessions(repository: SessionRepository = Depends(get_session_repository)):
    """
    List stored interview sessions, newest first.
    """
    return repository.get_all()


@router.get("/{session_id}", response_model=StoredSession)
async def get_session(
    session_id: str,
    repository: SessionRepository = Depends(get_session_repository)
):
    session = repository.find_by_id(session_id)
    if session is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Session not found")
    return session


@router.delete("/{session_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_session(
    session_id: str,
    repository: SessionRepository = Depends(get_session_repository)
):
    """
    Delete a stored session. Deleting an unknown id is a no-op.
    """
    repository.delete(session_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
