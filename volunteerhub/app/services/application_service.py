"""
Volunteer applications: apply, withdraw and the applicant list.
The seat counter on the activity only moves through the guarded updates
in crud_activity, inside the same transaction as the application row.
"""
from __future__ import annotations

import logging
import uuid

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import (
    CapacityExceededError,
    DuplicateApplicationError,
    NotApprovedError,
    NotFoundError,
    OrganizerCannotApplyError,
)
from app.crud.activity import crud_activity
from app.crud.application import crud_application
from app.crud.user import crud_user
from app.models.activity import Activity, ActivityStatus
from app.schemas.application import ApplicantRead
from app.services.notification_service import notification_service

logger = logging.getLogger(__name__)


class ApplicationService:

    async def apply(
        self,
        db: AsyncSession,
        *,
        activity_id: uuid.UUID,
        user_id: uuid.UUID,
    ) -> Activity:
        """
        Register user_id for the activity and return it with the new count.

        Checks run in a fixed order: missing activity, not approved, own
        activity, already applied, then the capacity-guarded increment.
        """
        activity = await crud_activity.get_for_update(db, activity_id)
        if activity is None:
            raise NotFoundError("Activity", str(activity_id))
        if activity.status != ActivityStatus.APPROVED:
            raise NotApprovedError()
        if activity.organizer_id == user_id:
            raise OrganizerCannotApplyError()

        existing = await crud_application.get_by_activity_and_user(
            db, activity_id=activity_id, user_id=user_id
        )
        if existing is not None:
            raise DuplicateApplicationError()

        if not await crud_activity.try_take_spot(db, activity_id=activity_id):
            raise CapacityExceededError()

        try:
            await crud_application.create_application(
                db, activity_id=activity_id, user_id=user_id
            )
        except IntegrityError as exc:
            # A concurrent request inserted the same pair first
            raise DuplicateApplicationError() from exc

        await db.refresh(activity)
        logger.info(
            "User %s applied to activity %s (%d/%d)",
            user_id,
            activity_id,
            activity.current_applicants,
            activity.max_applicants,
        )

        if activity.organizer_id is not None:
            applicant = await crud_user.get(db, user_id)
            await notification_service.notify_application_received(
                db,
                organizer_id=activity.organizer_id,
                activity_id=activity.id,
                activity_title=activity.title,
                applicant_name=applicant.name if applicant else "",
            )
        return activity

    async def withdraw(
        self,
        db: AsyncSession,
        *,
        activity_id: uuid.UUID,
        user_id: uuid.UUID,
    ) -> Activity:
        """Remove the application and free its seat. Returns the updated activity."""
        application = await crud_application.get_by_activity_and_user(
            db, activity_id=activity_id, user_id=user_id
        )
        if application is None:
            raise NotFoundError("Application")
        activity = await crud_activity.get_for_update(db, activity_id)
        if activity is None:
            raise NotFoundError("Activity", str(activity_id))

        await crud_application.remove(db, db_obj=application)
        await crud_activity.release_spot(db, activity_id=activity_id)
        await db.refresh(activity)
        logger.info("User %s withdrew from activity %s", user_id, activity_id)
        return activity

    async def list_applicants(
        self, db: AsyncSession, *, activity_id: uuid.UUID
    ) -> list[ApplicantRead]:
        activity = await crud_activity.get(db, activity_id)
        if activity is None:
            raise NotFoundError("Activity", str(activity_id))

        rows = await crud_application.list_applicants(db, activity_id=activity_id)
        return [
            ApplicantRead(
                id=application.id,
                activity_id=application.activity_id,
                user_id=application.user_id,
                applied_at=application.created_at,
                name=user.name,
                email=user.email,
            )
            for application, user in rows
        ]


application_service = ApplicationService()
