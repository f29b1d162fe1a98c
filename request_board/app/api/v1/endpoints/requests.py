"""
Request list endpoints for API v1.

These routes expose the ordered request list and its mutation API.
Viewers poll ``GET /requests`` every few seconds and replace their
local copy when it changed; every mutation is a single atomic call on
``RequestService``.  Service errors are translated into HTTP errors
here: ``ValidationError`` becomes 400 and ``NotFound`` becomes 404.
"""

from typing import List

from fastapi import APIRouter, BackgroundTasks, HTTPException, status

from request_board.app.schemas.request import (
    MessageResponse,
    PositionUpdate,
    ReorderRequest,
    RequestCreate,
    RequestCreated,
    RequestRead,
    StatusUpdate,
)
from request_board.app.services.notification_service import NotificationService
from request_board.app.services.request_service import RequestService
from request_board.errors import NotFound, ValidationError


router = APIRouter()


@router.get("/requests", response_model=List[RequestRead], tags=["requests"])
async def list_requests() -> List[RequestRead]:
    """Return every request in display order.

    Priority requests come first, then ascending sort position, then
    submission time.  The list is never paginated.
    """
    return await RequestService.list_requests()


@router.post(
    "/requests",
    response_model=RequestCreated,
    status_code=status.HTTP_201_CREATED,
    tags=["requests"],
)
async def create_request(
    request_in: RequestCreate,
    background_tasks: BackgroundTasks,
) -> RequestCreated:
    """Append a new pending request to the end of its tier.

    A chat notification is sent in the background once the response
    has been returned.
    """
    try:
        request_id = await RequestService.create_request(request_in)
    except ValidationError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=e.message) from e
    background_tasks.add_task(
        NotificationService.notify_new_request,
        request_in.text.strip(),
        request_in.submitted_by,
        request_in.priority,
        request_in.year,
        request_in.type,
    )
    return RequestCreated(id=request_id)


@router.put("/requests/reorder", response_model=MessageResponse, tags=["requests"])
async def reorder_requests(payload: ReorderRequest) -> MessageResponse:
    """Rewrite sort positions to match the submitted id order.

    Used after a drag and drop.  Unknown ids are ignored so a reorder
    that races a delete from another viewer still succeeds.
    """
    try:
        await RequestService.reorder(payload.ids)
    except ValidationError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=e.message) from e
    return MessageResponse(message="Request order updated successfully")


@router.put("/requests/{request_id}/status", response_model=MessageResponse, tags=["requests"])
async def update_status(request_id: int, payload: StatusUpdate) -> MessageResponse:
    """Set the workflow status of a request."""
    try:
        await RequestService.set_status(request_id, payload.status)
    except ValidationError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=e.message) from e
    except NotFound as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e)) from e
    return MessageResponse(message="Request status updated successfully")


@router.put("/requests/{request_id}/position", response_model=MessageResponse, tags=["requests"])
async def update_position(request_id: int, payload: PositionUpdate) -> MessageResponse:
    """Move a single request; siblings are not renumbered."""
    try:
        await RequestService.set_sort_position(request_id, payload.position)
    except ValidationError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=e.message) from e
    except NotFound as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e)) from e
    return MessageResponse(message="Request sort order updated successfully")


@router.delete("/requests/{request_id}", response_model=MessageResponse, tags=["requests"])
async def delete_request(request_id: int) -> MessageResponse:
    """Permanently delete a request."""
    try:
        await RequestService.delete_request(request_id)
    except NotFound as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e)) from e
    return MessageResponse(message="Request deleted successfully")
