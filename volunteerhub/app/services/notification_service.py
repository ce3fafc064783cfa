"""
Notification fan-out service.
Writes in-app notices for moderation decisions, new applications and
announcements sent by admins or organizers.
"""
from __future__ import annotations

import logging
import uuid

from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import ForbiddenError, NotFoundError
from app.crud.activity import crud_activity
from app.crud.application import crud_application
from app.crud.notification import crud_notification
from app.crud.user import crud_user
from app.models.notification import Notification, NotificationType
from app.models.user import User
from app.schemas.notification import NotificationFilter, NotificationSend

logger = logging.getLogger(__name__)


class NotificationService:

    async def notify_user(
        self,
        db: AsyncSession,
        *,
        user_id: uuid.UUID,
        title: str,
        message: str,
        type: str = NotificationType.ACTIVITY_UPDATE,
        activity_id: uuid.UUID | None = None,
    ) -> Notification:
        notification = await crud_notification.create_notification(
            db,
            user_id=user_id,
            title=title,
            message=message,
            type=type,
            activity_id=activity_id,
        )
        logger.debug("Notification %s written for user %s", notification.id, user_id)
        return notification

    async def notify_activity_moderated(
        self,
        db: AsyncSession,
        *,
        organizer_id: uuid.UUID,
        activity_id: uuid.UUID,
        activity_title: str,
        status: str,
    ) -> None:
        await self.notify_user(
            db,
            user_id=organizer_id,
            title=f"Activity {status}",
            message=f"Your activity {activity_title!r} was {status} by a moderator.",
            activity_id=activity_id,
        )

    async def notify_application_received(
        self,
        db: AsyncSession,
        *,
        organizer_id: uuid.UUID,
        activity_id: uuid.UUID,
        activity_title: str,
        applicant_name: str,
    ) -> None:
        await self.notify_user(
            db,
            user_id=organizer_id,
            title="New application",
            message=f"{applicant_name or 'A volunteer'} applied to {activity_title!r}.",
            activity_id=activity_id,
        )

    async def send(
        self, db: AsyncSession, *, payload: NotificationSend, sender: User
    ) -> int:
        """
        Deliver one notice to many users. Broadcasts need an admin; targeted
        sends need an admin or the organizer of every listed activity.
        Returns the number of notices written.
        """
        if payload.target_all:
            if not sender.is_admin:
                raise ForbiddenError("Only admins can notify every user")
            recipients = await crud_user.list_active_ids(db)
            activity_id = None
        else:
            for activity_id in payload.activity_ids:
                activity = await crud_activity.get(db, activity_id)
                if activity is None:
                    raise NotFoundError("Activity", str(activity_id))
                if not sender.is_admin and activity.organizer_id != sender.id:
                    raise ForbiddenError("You can only notify applicants of your own activities")
            recipients = await crud_application.list_user_ids(
                db, activity_ids=payload.activity_ids
            )
            activity_id = payload.activity_ids[0] if len(payload.activity_ids) == 1 else None

        sent = await crud_notification.create_many(
            db,
            user_ids=recipients,
            title=payload.title,
            message=payload.message,
            type=payload.type,
            activity_id=activity_id,
        )
        logger.info(
            "User %s sent %r to %d recipient(s)", sender.id, payload.title, sent
        )
        return sent

    async def list_for_user(
        self, db: AsyncSession, *, user: User, filters: NotificationFilter
    ) -> tuple[list[Notification], int]:
        return await crud_notification.list_by_user(db, user_id=user.id, filters=filters)

    async def mark_read(
        self, db: AsyncSession, *, notification_id: uuid.UUID, user: User
    ) -> Notification:
        notification = await crud_notification.get_for_user(
            db, notification_id=notification_id, user_id=user.id
        )
        if notification is None:
            raise NotFoundError("Notification", str(notification_id))
        return await crud_notification.mark_as_read(db, notification=notification)

    async def mark_all_read(self, db: AsyncSession, *, user: User) -> int:
        return await crud_notification.mark_all_read(db, user_id=user.id)

    async def delete(self, db: AsyncSession, *, notification_id: uuid.UUID) -> None:
        notification = await crud_notification.get(db, notification_id)
        if notification is None:
            raise NotFoundError("Notification", str(notification_id))
        await crud_notification.remove(db, db_obj=notification)
        logger.info("Notification %s deleted", notification_id)


notification_service = NotificationService()
