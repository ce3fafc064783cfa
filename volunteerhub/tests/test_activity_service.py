"""
Service-level tests for activity creation and the query helpers.
"""
from __future__ import annotations

import uuid
from datetime import date, timedelta

import pytest
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import (
    DateInPastError,
    ForbiddenError,
    IncompleteProfileError,
    NotFoundError,
    ProfileNotFoundError,
    ValidationError,
)
from app.models.activity import Activity, ActivityStatus
from app.models.user import User
from app.schemas.activity import ActivityFilter
from app.services.activity_service import activity_service, can_view, search_activities
from conftest import ActivityFactory, activity_payload, make_user

pytestmark = pytest.mark.asyncio(loop_scope="session")


class TestCreate:
    async def test_snapshot_and_defaults(self, db: AsyncSession, organizer: User) -> None:
        activity = await activity_service.create_activity(
            db, data=activity_payload(title="  Park Planting  "), organizer_id=organizer.id
        )
        assert activity.title == "Park Planting"
        assert activity.status == ActivityStatus.PENDING
        assert activity.current_applicants == 0
        assert activity.organizer_name == "Olga Organizer"
        assert activity.organizer_email == "organizer@example.com"

    async def test_past_date_checked_before_profile(self, db: AsyncSession) -> None:
        yesterday = date.today() - timedelta(days=1)
        with pytest.raises(DateInPastError):
            await activity_service.create_activity(
                db, data=activity_payload(date=yesterday), organizer_id=uuid.uuid4()
            )

    async def test_unparseable_date_is_a_field_error(self, db: AsyncSession, organizer: User) -> None:
        with pytest.raises(ValidationError) as exc_info:
            await activity_service.create_activity(
                db, data=activity_payload(date="next tuesday"), organizer_id=organizer.id
            )
        assert [e["field"] for e in exc_info.value.errors] == ["date"]

    async def test_validation_before_profile_lookup(self, db: AsyncSession) -> None:
        with pytest.raises(ValidationError):
            await activity_service.create_activity(
                db, data=activity_payload(location=""), organizer_id=uuid.uuid4()
            )

    async def test_missing_profile(self, db: AsyncSession) -> None:
        with pytest.raises(ProfileNotFoundError):
            await activity_service.create_activity(
                db, data=activity_payload(), organizer_id=uuid.uuid4()
            )

    async def test_blank_name_is_incomplete(self, db: AsyncSession, password_hash: str) -> None:
        user = await make_user(
            db, email="blank@example.com", hashed_password=password_hash, name="   "
        )
        with pytest.raises(IncompleteProfileError):
            await activity_service.create_activity(
                db, data=activity_payload(), organizer_id=user.id
            )


class TestQueries:
    async def test_hidden_status_forbidden_for_anonymous(self, db: AsyncSession) -> None:
        with pytest.raises(ForbiddenError):
            await activity_service.list_activities(
                db, filters=ActivityFilter(status="pending"), current_user=None
            )

    async def test_page_out_of_range(
        self, db: AsyncSession, make_activity: ActivityFactory
    ) -> None:
        for _ in range(3):
            await make_activity()
        items, total, pages = await activity_service.list_activities(
            db, filters=ActivityFilter(page=2, page_size=2), current_user=None
        )
        assert (len(items), total, pages) == (1, 3, 2)

        with pytest.raises(NotFoundError):
            await activity_service.list_activities(
                db, filters=ActivityFilter(page=3, page_size=2), current_user=None
            )

    async def test_can_view(self, organizer: User, volunteer: User, admin: User) -> None:
        pending = Activity(status=ActivityStatus.PENDING, organizer_id=organizer.id)
        assert can_view(pending, organizer)
        assert can_view(pending, admin)
        assert not can_view(pending, volunteer)
        assert not can_view(pending, None)

    async def test_search_activities(self) -> None:
        activities = [
            Activity(
                title="Food Bank Shift",
                description="Sort donations",
                location="Warehouse 4",
                organizer_name="Sam",
            ),
            Activity(
                title="Tree Planting",
                description="Plant saplings",
                location="Riverside Park",
                organizer_name="Kim",
            ),
        ]
        assert [a.title for a in search_activities(activities, "river")] == ["Tree Planting"]
        assert [a.title for a in search_activities(activities, "SAM")] == ["Food Bank Shift"]
        assert search_activities(activities, "  ") == activities
        assert search_activities(activities, "zzz") == []
