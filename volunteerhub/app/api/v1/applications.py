"""
Application routes.
GET/POST/DELETE /applications
"""
from __future__ import annotations

import uuid

from fastapi import APIRouter, Body, Query, status

from app.core.dependencies import CurrentUser, DBSession
from app.core.exceptions import ForbiddenError
from app.models.activity import Activity
from app.models.user import User
from app.schemas.application import ApplicantList, ApplicationRequest, ApplicationResult
from app.services.application_service import application_service

router = APIRouter(prefix="/applications", tags=["Applications"])


def _acting_user_id(body: ApplicationRequest, current_user: User) -> uuid.UUID:
    if body.user_id is None or body.user_id == current_user.id:
        return current_user.id
    if not current_user.is_admin:
        raise ForbiddenError("You can only manage your own applications")
    return body.user_id


def _result(message: str, activity: Activity) -> ApplicationResult:
    return ApplicationResult(
        message=message,
        activity_id=activity.id,
        current_applicants=activity.current_applicants,
        max_applicants=activity.max_applicants,
    )


@router.get(
    "",
    response_model=ApplicantList,
    summary="List the applicants of an activity",
)
async def list_applicants(
    _user: CurrentUser,
    db: DBSession,
    activity_id: uuid.UUID = Query(...),
) -> ApplicantList:
    applicants = await application_service.list_applicants(db, activity_id=activity_id)
    return ApplicantList(data=applicants)


@router.post(
    "",
    response_model=ApplicationResult,
    status_code=status.HTTP_201_CREATED,
    summary="Apply to volunteer for an activity",
)
async def apply(
    body: ApplicationRequest,
    current_user: CurrentUser,
    db: DBSession,
) -> ApplicationResult:
    activity = await application_service.apply(
        db,
        activity_id=body.activity_id,
        user_id=_acting_user_id(body, current_user),
    )
    return _result("Application submitted", activity)


@router.delete(
    "",
    response_model=ApplicationResult,
    summary="Withdraw an application",
)
async def withdraw(
    current_user: CurrentUser,
    db: DBSession,
    body: ApplicationRequest = Body(...),
) -> ApplicationResult:
    activity = await application_service.withdraw(
        db,
        activity_id=body.activity_id,
        user_id=_acting_user_id(body, current_user),
    )
    return _result("Application withdrawn", activity)
