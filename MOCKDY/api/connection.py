from fastapi import APIRouter, Depends, Response, status

from packages.mockdy_service.connection_service import NotionConnectionService
from MOCKDY.api.dependencies import get_connection_service
from MOCKDY.api.schemas import ConnectionResponse, DatabaseIdRequest

router = APIRouter()


@router.get("/connection", response_model=ConnectionResponse)
async def get_connection(service: NotionConnectionService = Depends(get_connection_service)):
    """
    Current Notion connection (tokens redacted).
    """
    return ConnectionResponse.from_connection(service.get())


@router.put("/connection/database", response_model=ConnectionResponse)
async def save_database_id(
    request: DatabaseIdRequest,
    service: NotionConnectionService = Depends(get_connection_service)
):
    return ConnectionResponse.from_connection(service.save_database_id(request.database_id))


@router.delete("/connection", status_code=status.HTTP_204_NO_CONTENT)
async def disconnect(service: NotionConnectionService = Depends(get_connection_service)):
    service.disconnect()
    return Response(status_code=status.HTTP_204_NO_CONTENT)
