"""
Admin-only dashboard routes.
"""
from __future__ import annotations

import logging
import uuid

from fastapi import APIRouter, Query
from pydantic import BaseModel

from app.core.dependencies import AdminUser, DBSession
from app.core.exceptions import BadRequestError, NotFoundError
from app.crud.application import crud_application
from app.crud.user import crud_user
from app.schemas.activity import ActivityCounts
from app.schemas.pagination import PaginatedResponse
from app.schemas.user import UserAdminUpdate, UserRead
from app.services.activity_service import activity_service

router = APIRouter(prefix="/admin", tags=["Admin"])

logger = logging.getLogger(__name__)


class AdminStats(BaseModel):
    total_users: int
    active_users: int
    activities: ActivityCounts
    total_applications: int


@router.get(
    "/stats",
    response_model=AdminStats,
    summary="Dashboard statistics",
)
async def get_stats(
    _admin: AdminUser,
    db: DBSession,
) -> AdminStats:
    total_users = await crud_user.get_count(db)
    active_users = await crud_user.get_count(db, is_active=True)

    return AdminStats(
        total_users=total_users,
        active_users=active_users,
        activities=await activity_service.get_counts(db),
        total_applications=await crud_application.count_all(db),
    )


@router.get(
    "/users",
    response_model=PaginatedResponse[UserRead],
    summary="Full user list (admin only)",
)
async def list_all_users(
    _admin: AdminUser,
    db: DBSession,
    page: int = Query(default=1, ge=1),
    size: int = Query(default=20, ge=1, le=100),
    include_inactive: bool = Query(default=True),
) -> PaginatedResponse[UserRead]:
    skip = (page - 1) * size
    users, total = await crud_user.list_users(
        db, skip=skip, limit=size, include_inactive=include_inactive
    )
    return PaginatedResponse(
        items=[UserRead.model_validate(u) for u in users],
        total=total,
        page=page,
        size=size,
    )


@router.patch(
    "/users/{user_id}",
    response_model=UserRead,
    summary="Change a user's role or active flag (admin only)",
)
async def admin_update_user(
    user_id: uuid.UUID,
    user_in: UserAdminUpdate,
    admin: AdminUser,
    db: DBSession,
) -> UserRead:
    user = await crud_user.get(db, user_id)
    if user is None:
        raise NotFoundError("User", str(user_id))
    if user.id == admin.id and (user_in.role == "user" or user_in.is_active is False):
        raise BadRequestError("Admins cannot demote or deactivate themselves")

    updated = await crud_user.update(db, db_obj=user, obj_in=user_in)
    logger.info(
        "Admin %s updated user %s: %s",
        admin.id,
        user_id,
        user_in.model_dump(exclude_unset=True, exclude_none=True),
    )
    return UserRead.model_validate(updated)
