"""
Notification routes.
"""
from __future__ import annotations

import uuid

from fastapi import APIRouter, Query, status

from app.core.dependencies import AdminUser, CurrentUser, DBSession
from app.schemas.notification import (
    NotificationFilter,
    NotificationRead,
    NotificationSend,
    NotificationSendResult,
    NotificationTypeValue,
)
from app.schemas.pagination import PaginatedResponse
from app.services.notification_service import notification_service

router = APIRouter(prefix="/notifications", tags=["Notifications"])


@router.get(
    "",
    response_model=PaginatedResponse[NotificationRead],
    summary="List my notifications",
)
async def list_notifications(
    current_user: CurrentUser,
    db: DBSession,
    type: NotificationTypeValue | None = Query(default=None),
    q: str = Query(default="", max_length=200),
    days: int | None = Query(default=None, ge=1, le=3650),
    unread_only: bool = Query(default=False),
    page: int = Query(default=1, ge=1),
    size: int = Query(default=20, ge=1, le=100),
) -> PaginatedResponse[NotificationRead]:
    filters = NotificationFilter(
        type=type, q=q, days=days, unread_only=unread_only, page=page, size=size
    )
    notifications, total = await notification_service.list_for_user(
        db, user=current_user, filters=filters
    )
    return PaginatedResponse(
        items=[NotificationRead.model_validate(n) for n in notifications],
        total=total,
        page=page,
        size=size,
    )


@router.post(
    "",
    response_model=NotificationSendResult,
    status_code=status.HTTP_201_CREATED,
    summary="Send a notification to all users or to activity applicants",
)
async def send_notification(
    body: NotificationSend,
    current_user: CurrentUser,
    db: DBSession,
) -> NotificationSendResult:
    sent = await notification_service.send(db, payload=body, sender=current_user)
    return NotificationSendResult(sent=sent)


@router.put(
    "/read-all",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Mark all notifications as read",
)
async def mark_all_read(
    current_user: CurrentUser,
    db: DBSession,
) -> None:
    await notification_service.mark_all_read(db, user=current_user)


@router.put(
    "/{notification_id}/read",
    response_model=NotificationRead,
    summary="Mark a notification as read",
)
async def mark_as_read(
    notification_id: uuid.UUID,
    current_user: CurrentUser,
    db: DBSession,
) -> NotificationRead:
    notification = await notification_service.mark_read(
        db, notification_id=notification_id, user=current_user
    )
    return NotificationRead.model_validate(notification)


@router.delete(
    "/{notification_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete a notification (admin only)",
)
async def delete_notification(
    notification_id: uuid.UUID,
    _admin: AdminUser,
    db: DBSession,
) -> None:
    await notification_service.delete(db, notification_id=notification_id)
