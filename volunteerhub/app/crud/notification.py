"""
Notification CRUD operations.
"""
from __future__ import annotations

import uuid
from datetime import datetime, timedelta, timezone

from sqlalchemy import func, insert, or_, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from app.crud.base import CRUDBase
from app.models.notification import Notification
from app.schemas.notification import NotificationFilter, NotificationRead


class CRUDNotification(CRUDBase[Notification, NotificationRead]):

    async def create_notification(
        self,
        db: AsyncSession,
        *,
        user_id: uuid.UUID,
        title: str,
        message: str,
        type: str,
        activity_id: uuid.UUID | None = None,
    ) -> Notification:
        notification = Notification(
            user_id=user_id,
            title=title,
            message=message,
            type=type,
            activity_id=activity_id,
        )
        db.add(notification)
        await db.flush()
        await db.refresh(notification)
        return notification

    async def create_many(
        self,
        db: AsyncSession,
        *,
        user_ids: list[uuid.UUID],
        title: str,
        message: str,
        type: str,
        activity_id: uuid.UUID | None = None,
    ) -> int:
        """Insert the same notice for every recipient. Returns the number written."""
        if not user_ids:
            return 0
        await db.execute(
            insert(Notification),
            [
                {
                    "id": uuid.uuid4(),
                    "user_id": user_id,
                    "title": title,
                    "message": message,
                    "type": type,
                    "activity_id": activity_id,
                    "is_read": False,
                }
                for user_id in user_ids
            ],
        )
        return len(user_ids)

    async def list_by_user(
        self,
        db: AsyncSession,
        *,
        user_id: uuid.UUID,
        filters: NotificationFilter,
    ) -> tuple[list[Notification], int]:
        conditions = [Notification.user_id == user_id]

        if filters.unread_only:
            conditions.append(Notification.is_read.is_(False))
        if filters.type is not None:
            conditions.append(Notification.type == filters.type)
        if filters.days is not None:
            since = datetime.now(timezone.utc) - timedelta(days=filters.days)
            conditions.append(Notification.created_at >= since)
        if filters.q.strip():
            term = f"%{filters.q.strip()}%"
            conditions.append(
                or_(Notification.title.ilike(term), Notification.message.ilike(term))
            )

        total_result = await db.execute(
            select(func.count()).select_from(Notification).where(*conditions)
        )
        total = total_result.scalar_one()

        skip = (filters.page - 1) * filters.size
        result = await db.execute(
            select(Notification)
            .where(*conditions)
            .order_by(Notification.created_at.desc(), Notification.id)
            .offset(skip)
            .limit(filters.size)
        )
        return list(result.scalars().all()), total

    async def get_for_user(
        self, db: AsyncSession, *, notification_id: uuid.UUID, user_id: uuid.UUID
    ) -> Notification | None:
        result = await db.execute(
            select(Notification).where(
                Notification.id == notification_id,
                Notification.user_id == user_id,
            )
        )
        return result.scalar_one_or_none()

    async def mark_as_read(self, db: AsyncSession, *, notification: Notification) -> Notification:
        return await self.update(db, db_obj=notification, obj_in={"is_read": True})

    async def mark_all_read(self, db: AsyncSession, *, user_id: uuid.UUID) -> int:
        """Mark all unread notifications for a user as read. Returns count updated."""
        result = await db.execute(
            update(Notification)
            .where(
                Notification.user_id == user_id,
                Notification.is_read.is_(False),
            )
            .values(is_read=True)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount  # type: ignore[attr-defined]


crud_notification = CRUDNotification(Notification)
