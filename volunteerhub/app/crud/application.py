"""
ActivityApplication CRUD operations.
"""
from __future__ import annotations

import uuid

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.crud.base import CRUDBase
from app.models.application import ActivityApplication
from app.models.user import User
from app.schemas.application import ApplicationRequest


class CRUDApplication(CRUDBase[ActivityApplication, ApplicationRequest]):

    async def get_by_activity_and_user(
        self,
        db: AsyncSession,
        *,
        activity_id: uuid.UUID,
        user_id: uuid.UUID,
    ) -> ActivityApplication | None:
        result = await db.execute(
            select(ActivityApplication).where(
                ActivityApplication.activity_id == activity_id,
                ActivityApplication.user_id == user_id,
            )
        )
        return result.scalar_one_or_none()

    async def create_application(
        self,
        db: AsyncSession,
        *,
        activity_id: uuid.UUID,
        user_id: uuid.UUID,
    ) -> ActivityApplication:
        application = ActivityApplication(activity_id=activity_id, user_id=user_id)
        db.add(application)
        await db.flush()
        await db.refresh(application)
        return application

    async def list_applicants(
        self, db: AsyncSession, *, activity_id: uuid.UUID
    ) -> list[tuple[ActivityApplication, User]]:
        """Applications for an activity joined with the applicant, oldest first."""
        result = await db.execute(
            select(ActivityApplication, User)
            .join(User, ActivityApplication.user_id == User.id)
            .where(ActivityApplication.activity_id == activity_id)
            .order_by(ActivityApplication.created_at.asc(), ActivityApplication.id.asc())
        )
        return [(row[0], row[1]) for row in result.all()]

    async def list_user_ids(self, db: AsyncSession, *, activity_ids: list[uuid.UUID]) -> list[uuid.UUID]:
        """Distinct applicant ids across several activities."""
        if not activity_ids:
            return []
        result = await db.execute(
            select(ActivityApplication.user_id)
            .where(ActivityApplication.activity_id.in_(activity_ids))
            .distinct()
        )
        return list(result.scalars().all())

    async def count_all(self, db: AsyncSession) -> int:
        result = await db.execute(select(func.count()).select_from(ActivityApplication))
        return result.scalar_one()


crud_application = CRUDApplication(ActivityApplication)
