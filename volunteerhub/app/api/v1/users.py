"""
User profile routes.
GET/PUT /users/me
"""
from __future__ import annotations

import logging

from fastapi import APIRouter

from app.core.dependencies import CurrentUser, DBSession
from app.crud.user import crud_user
from app.schemas.user import UserRead, UserUpdate

router = APIRouter(prefix="/users", tags=["Users"])

logger = logging.getLogger(__name__)


@router.get("/me", response_model=UserRead, summary="Get current user profile")
async def get_me(current_user: CurrentUser) -> UserRead:
    return UserRead.model_validate(current_user)


@router.put("/me", response_model=UserRead, summary="Update current user profile")
async def update_me(
    user_in: UserUpdate,
    current_user: CurrentUser,
    db: DBSession,
) -> UserRead:
    # Activities already created keep the organizer name they were created with
    updated = await crud_user.update(db, db_obj=current_user, obj_in=user_in)
    logger.info("User %s updated their profile", updated.id)
    return UserRead.model_validate(updated)
