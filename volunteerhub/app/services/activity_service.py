"""
Activity business logic.
Listing with moderation-aware visibility, validated creation, moderation
and deletion. Routes only call these methods.
"""
from __future__ import annotations

import logging
import uuid
from collections.abc import Iterable
from datetime import date, datetime
from typing import Any

from pydantic import ValidationError as PydanticValidationError
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import (
    DateInPastError,
    ForbiddenError,
    IncompleteProfileError,
    NotFoundError,
    ProfileNotFoundError,
    UnauthorizedError,
    ValidationError,
)
from app.crud.activity import crud_activity
from app.crud.user import crud_user
from app.models.activity import Activity, ActivityStatus
from app.models.user import User
from app.schemas.activity import ActivityCounts, ActivityCreate, ActivityFilter
from app.schemas.pagination import total_pages
from app.services.date_ranges import resolve_date_range
from app.services.notification_service import notification_service

logger = logging.getLogger(__name__)

MODERATION_TARGETS: dict[str, str] = {
    "approve": ActivityStatus.APPROVED,
    "reject": ActivityStatus.REJECTED,
}


def _coerce_date(value: Any) -> date | None:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        value = value.strip()
        try:
            return date.fromisoformat(value)
        except ValueError:
            pass
        try:
            return datetime.fromisoformat(value).date()
        except ValueError:
            return None
    return None


def _field_errors(exc: PydanticValidationError) -> list[dict[str, str]]:
    """First message per field, in the order the schema reports them."""
    errors: list[dict[str, str]] = []
    seen: set[str] = set()
    for error in exc.errors():
        field = ".".join(str(part) for part in error["loc"]) or "request"
        if field in seen:
            continue
        seen.add(field)
        errors.append({"field": field, "message": error["msg"]})
    return errors


def search_activities(activities: Iterable[Activity], q: str) -> list[Activity]:
    """
    Case-insensitive substring match over title, description, location and
    organizer name. Runs on an already fetched page, not on the whole table.
    """
    needle = q.strip().lower()
    if not needle:
        return list(activities)
    return [
        activity
        for activity in activities
        if any(
            needle in (value or "").lower()
            for value in (
                activity.title,
                activity.description,
                activity.location,
                activity.organizer_name,
            )
        )
    ]


def can_view(activity: Activity, user: User | None) -> bool:
    if activity.status == ActivityStatus.APPROVED:
        return True
    if user is None:
        return False
    return user.is_admin or activity.organizer_id == user.id


class ActivityService:

    # ── Queries ───────────────────────────────────────────────────────────────

    async def list_activities(
        self,
        db: AsyncSession,
        *,
        filters: ActivityFilter,
        current_user: User | None,
        my: bool = False,
    ) -> tuple[list[Activity], int, int]:
        """
        Return (page items, total, total_pages).
        Database failures are logged and reported as an empty listing.
        """
        organizer_id = filters.organizer_id
        if my:
            if current_user is None:
                raise UnauthorizedError("Sign in to see your activities")
            organizer_id = current_user.id

        if filters.status != ActivityStatus.APPROVED:
            allowed = current_user is not None and (
                current_user.is_admin
                or (organizer_id is not None and organizer_id == current_user.id)
            )
            if not allowed:
                raise ForbiddenError(
                    f"Only admins or the organizer can list {filters.status} activities"
                )

        start_date, end_date = resolve_date_range(filters.date)

        try:
            activities, total = await crud_activity.list_with_filters(
                db,
                status=filters.status,
                category=filters.category_filter,
                organizer_id=organizer_id,
                start_date=start_date,
                end_date=end_date,
                skip=(filters.page - 1) * filters.page_size,
                limit=filters.page_size,
            )
        except SQLAlchemyError:
            logger.exception("Activity listing query failed; returning an empty page")
            await db.rollback()
            return [], 0, 1

        pages = total_pages(total, filters.page_size)
        if filters.page > pages:
            raise NotFoundError("Page", str(filters.page))

        return search_activities(activities, filters.q), total, pages

    async def get_activity(
        self,
        db: AsyncSession,
        *,
        activity_id: uuid.UUID,
        current_user: User | None,
    ) -> Activity:
        """Fetch one activity; hidden ones look missing to everyone else."""
        activity = await crud_activity.get(db, activity_id)
        if activity is None or not can_view(activity, current_user):
            raise NotFoundError("Activity", str(activity_id))
        return activity

    async def get_counts(self, db: AsyncSession) -> ActivityCounts:
        try:
            by_status = await crud_activity.count_by_status(db)
        except SQLAlchemyError:
            logger.exception("Activity count query failed; returning zeros")
            await db.rollback()
            return ActivityCounts()

        counts = {status: by_status.get(status, 0) for status in ActivityStatus.ALL}
        return ActivityCounts(**counts, total=sum(counts.values()))

    # ── Mutations ─────────────────────────────────────────────────────────────

    async def create_activity(
        self,
        db: AsyncSession,
        *,
        data: dict[str, Any],
        organizer_id: uuid.UUID,
    ) -> Activity:
        """
        Validate and insert a new activity in the pending state.

        A past date is reported on its own, ahead of any other field problem.
        The organizer's current name and email are copied onto the row.
        """
        requested_date = _coerce_date(data.get("date"))
        if requested_date is not None and requested_date < date.today():
            raise DateInPastError()

        try:
            activity_in = ActivityCreate.model_validate(data)
        except PydanticValidationError as exc:
            raise ValidationError(_field_errors(exc)) from exc

        organizer = await crud_user.get(db, organizer_id)
        if organizer is None:
            raise ProfileNotFoundError(str(organizer_id))
        if not organizer.has_complete_profile:
            raise IncompleteProfileError()

        activity = await crud_activity.create_activity(
            db, obj_in=activity_in, organizer=organizer
        )
        logger.info(
            "Activity %s created by %s (pending review)", activity.id, organizer.id
        )
        return activity

    async def moderate_activity(
        self,
        db: AsyncSession,
        *,
        activity_id: uuid.UUID,
        action: str,
    ) -> Activity:
        """
        Approve or reject. The previous status is not checked, so repeating
        a decision or reversing one is accepted.
        """
        target = MODERATION_TARGETS.get(action)
        if target is None:
            raise ValidationError(
                [{"field": "action", "message": "Action must be 'approve' or 'reject'"}]
            )

        activity = await crud_activity.get(db, activity_id)
        if activity is None:
            raise NotFoundError("Activity", str(activity_id))

        previous = activity.status
        activity = await crud_activity.set_status(db, activity=activity, status=target)
        logger.info("Activity %s moderated: %s -> %s", activity.id, previous, target)

        if activity.organizer_id is not None:
            await notification_service.notify_activity_moderated(
                db,
                organizer_id=activity.organizer_id,
                activity_id=activity.id,
                activity_title=activity.title,
                status=target,
            )
        return activity

    async def delete_activity(self, db: AsyncSession, *, activity_id: uuid.UUID) -> None:
        """Hard delete. Applications go with it through the foreign key cascade."""
        activity = await crud_activity.get(db, activity_id)
        if activity is None:
            raise NotFoundError("Activity", str(activity_id))
        await crud_activity.remove(db, db_obj=activity)
        logger.info("Activity %s deleted", activity_id)


activity_service = ActivityService()
