"""
Activity CRUD operations.
Filtered listing, status tallies, and the guarded capacity counter updates
used by the application flow.
"""
from __future__ import annotations

import uuid
from datetime import date, datetime, timezone

from sqlalchemy import case, func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from app.crud.base import CRUDBase
from app.models.activity import Activity, ActivityStatus
from app.models.user import User
from app.schemas.activity import ActivityCreate


class CRUDActivity(CRUDBase[Activity, ActivityCreate]):

    async def get_for_update(self, db: AsyncSession, activity_id: uuid.UUID) -> Activity | None:
        """Fetch an activity and lock its row until the transaction ends."""
        result = await db.execute(
            select(Activity).where(Activity.id == activity_id).with_for_update()
        )
        return result.scalar_one_or_none()

    async def create_activity(
        self,
        db: AsyncSession,
        *,
        obj_in: ActivityCreate,
        organizer: User,
    ) -> Activity:
        activity = Activity(
            **obj_in.model_dump(),
            current_applicants=0,
            status=ActivityStatus.PENDING,
            organizer_id=organizer.id,
            organizer_name=organizer.name.strip(),
            organizer_email=organizer.email,
        )
        db.add(activity)
        await db.flush()
        await db.refresh(activity)
        return activity

    async def list_with_filters(
        self,
        db: AsyncSession,
        *,
        status: str,
        category: str | None = None,
        organizer_id: uuid.UUID | None = None,
        start_date: date | None = None,
        end_date: date | None = None,
        skip: int = 0,
        limit: int = 6,
    ) -> tuple[list[Activity], int]:
        """
        Return (activities, total) for the conjunction of the given conditions,
        ordered by date then time. None means "no condition" for every filter
        except status.
        """
        conditions = [Activity.status == status]
        if category is not None:
            conditions.append(Activity.category == category)
        if organizer_id is not None:
            conditions.append(Activity.organizer_id == organizer_id)
        if start_date is not None:
            conditions.append(Activity.date >= start_date)
        if end_date is not None:
            conditions.append(Activity.date <= end_date)

        count_query = select(func.count()).select_from(Activity).where(*conditions)
        total_result = await db.execute(count_query)
        total = total_result.scalar_one()

        query = (
            select(Activity)
            .where(*conditions)
            .order_by(Activity.date.asc(), Activity.time.asc(), Activity.id.asc())
            .offset(skip)
            .limit(limit)
        )
        result = await db.execute(query)
        return list(result.scalars().all()), total

    async def count_by_status(self, db: AsyncSession) -> dict[str, int]:
        result = await db.execute(
            select(Activity.status, func.count(Activity.id)).group_by(Activity.status)
        )
        return {row[0]: row[1] for row in result.all()}

    async def set_status(self, db: AsyncSession, *, activity: Activity, status: str) -> Activity:
        # updated_at is set explicitly so re-applying the same status still touches it
        return await self.update(
            db,
            db_obj=activity,
            obj_in={"status": status, "updated_at": datetime.now(timezone.utc)},
        )

    async def try_take_spot(self, db: AsyncSession, *, activity_id: uuid.UUID) -> bool:
        """
        Increment current_applicants only while the activity is approved and
        below capacity. Returns False when no row qualified.
        """
        result = await db.execute(
            update(Activity)
            .where(
                Activity.id == activity_id,
                Activity.status == ActivityStatus.APPROVED,
                Activity.current_applicants < Activity.max_applicants,
            )
            .values(current_applicants=Activity.current_applicants + 1)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount == 1  # type: ignore[attr-defined]

    async def release_spot(self, db: AsyncSession, *, activity_id: uuid.UUID) -> None:
        """Decrement current_applicants, never going below zero."""
        await db.execute(
            update(Activity)
            .where(Activity.id == activity_id)
            .values(
                current_applicants=case(
                    (Activity.current_applicants > 0, Activity.current_applicants - 1),
                    else_=0,
                )
            )
            .execution_options(synchronize_session=False)
        )


crud_activity = CRUDActivity(Activity)
