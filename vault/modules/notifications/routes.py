from fastapi import APIRouter, Depends
from vault.core.context import RequestContext
from vault.core.dependencies import get_request_context
from vault.modules.notifications.schemas import NotificationResponse, NotificationPage, MarkAllReadResponse
from vault.modules.notifications.service import NotificationService
from typing import Optional

router = APIRouter(prefix="/notifications", tags=["notifications"])


def get_notification_service(ctx: RequestContext = Depends(get_request_context)) -> NotificationService:
    return NotificationService(ctx)


@router.get("", response_model=NotificationPage)
async def list_notifications(
    cursor: Optional[str] = None,
    page_size: Optional[int] = None,
    service: NotificationService = Depends(get_notification_service)
):
    """List the caller's notifications, newest first"""
    return service.list_notifications(cursor=cursor, page_size=page_size)


@router.post("/{notification_id}/read", response_model=NotificationResponse)
async def mark_notification_read(
    notification_id: str,
    service: NotificationService = Depends(get_notification_service)
):
    return service.mark_notification_read(notification_id)


@router.post("/read-all", response_model=MarkAllReadResponse)
async def mark_all_notifications_read(service: NotificationService = Depends(get_notification_service)):
    return MarkAllReadResponse(updated=service.mark_all_notifications_read())
