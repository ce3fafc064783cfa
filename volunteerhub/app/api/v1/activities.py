"""
Activity routes.
Listing and detail are public for approved activities; creating needs an
account; moderation and deletion are admin only.
"""
from __future__ import annotations

import uuid
from typing import Annotated, Any

from fastapi import APIRouter, Body, Depends, Query, status

from app.core.config import settings
from app.core.dependencies import AdminUser, CurrentUser, DBSession, OptionalUser
from app.core.exceptions import ForbiddenError, ValidationError
from app.models.user import User
from app.schemas.activity import (
    ActivityCounts,
    ActivityFilter,
    ActivityRead,
    ActivityStatusValue,
    CategoryFilter,
    DateFilter,
    ModerationRequest,
)
from app.schemas.pagination import DataPage, Pagination
from app.services.activity_service import activity_service

router = APIRouter(prefix="/activities", tags=["Activities"])


def activity_filters(
    category: CategoryFilter = Query(default=""),
    status: ActivityStatusValue = Query(default="approved"),
    organizer_id: uuid.UUID | None = Query(default=None),
    date: DateFilter = Query(default="all"),
    q: str = Query(default="", max_length=200),
    page: int = Query(default=1, ge=1),
    page_size: int = Query(
        default=settings.ACTIVITIES_PAGE_SIZE, ge=1, le=settings.MAX_PAGE_SIZE
    ),
) -> ActivityFilter:
    return ActivityFilter(
        category=category,
        status=status,
        organizer_id=organizer_id,
        date=date,
        q=q,
        page=page,
        page_size=page_size,
    )


def _organizer_for(data: dict[str, Any], current_user: User) -> uuid.UUID:
    """The body may name an organizer; only admins can name someone else."""
    raw = data.get("user_id")
    if raw in (None, ""):
        return current_user.id
    try:
        requested = uuid.UUID(str(raw))
    except ValueError:
        raise ValidationError([{"field": "user_id", "message": "Invalid user id"}])
    if requested != current_user.id and not current_user.is_admin:
        raise ForbiddenError("You can only create activities for yourself")
    return requested


@router.get(
    "",
    response_model=DataPage[ActivityRead],
    summary="List activities with filters and pagination",
)
async def list_activities(
    filters: Annotated[ActivityFilter, Depends(activity_filters)],
    current_user: OptionalUser,
    db: DBSession,
    my: bool = Query(default=False, description="Only activities I organize"),
) -> DataPage[ActivityRead]:
    activities, total, pages = await activity_service.list_activities(
        db, filters=filters, current_user=current_user, my=my
    )
    return DataPage(
        data=[ActivityRead.model_validate(a) for a in activities],
        pagination=Pagination(
            page=filters.page,
            page_size=filters.page_size,
            total=total,
            total_pages=pages,
        ),
    )


@router.get(
    "/counts",
    response_model=ActivityCounts,
    summary="Number of activities per moderation status",
)
async def activity_counts(db: DBSession) -> ActivityCounts:
    return await activity_service.get_counts(db)


@router.get(
    "/{activity_id}",
    response_model=ActivityRead,
    summary="Get an activity by ID",
)
async def get_activity(
    activity_id: uuid.UUID,
    current_user: OptionalUser,
    db: DBSession,
) -> ActivityRead:
    activity = await activity_service.get_activity(
        db, activity_id=activity_id, current_user=current_user
    )
    return ActivityRead.model_validate(activity)


@router.post(
    "",
    response_model=ActivityRead,
    status_code=status.HTTP_201_CREATED,
    summary="Submit an activity for review",
)
async def create_activity(
    current_user: CurrentUser,
    db: DBSession,
    data: Annotated[dict[str, Any], Body()],
) -> ActivityRead:
    activity = await activity_service.create_activity(
        db, data=data, organizer_id=_organizer_for(data, current_user)
    )
    return ActivityRead.model_validate(activity)


@router.patch(
    "",
    response_model=ActivityRead,
    summary="Approve or reject an activity (admin only)",
)
async def moderate_activity(
    body: ModerationRequest,
    _admin: AdminUser,
    db: DBSession,
) -> ActivityRead:
    activity = await activity_service.moderate_activity(
        db, activity_id=body.activity_id, action=body.action
    )
    return ActivityRead.model_validate(activity)


@router.delete(
    "/{activity_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete an activity and its applications (admin only)",
)
async def delete_activity(
    activity_id: uuid.UUID,
    _admin: AdminUser,
    db: DBSession,
) -> None:
    await activity_service.delete_activity(db, activity_id=activity_id)
