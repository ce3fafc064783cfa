"""
Application endpoint tests.
Covers: apply, capacity, duplicates, withdraw, acting for another user,
and the applicant list.
"""
from __future__ import annotations

import uuid

import pytest
from httpx import AsyncClient
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.activity import ActivityStatus
from app.models.application import ActivityApplication
from app.models.notification import Notification
from app.models.user import User
from conftest import ActivityFactory, bearer, make_user

pytestmark = pytest.mark.asyncio(loop_scope="session")

URL = "/api/v1/applications"


async def _withdraw(client: AsyncClient, body: dict, headers: dict):
    return await client.request("DELETE", URL, json=body, headers=headers)


class TestApply:
    async def test_apply_takes_a_spot(
        self,
        client: AsyncClient,
        db: AsyncSession,
        organizer: User,
        volunteer: User,
        volunteer_headers: dict,
        make_activity: ActivityFactory,
    ) -> None:
        activity = await make_activity(max_applicants=3)

        response = await client.post(
            URL, json={"activity_id": str(activity.id)}, headers=volunteer_headers
        )
        assert response.status_code == 201
        assert response.json()["current_applicants"] == 1
        assert response.json()["max_applicants"] == 3

        application = await db.scalar(
            select(ActivityApplication).where(
                ActivityApplication.activity_id == activity.id,
                ActivityApplication.user_id == volunteer.id,
            )
        )
        assert application is not None

        notices = (
            await db.scalars(select(Notification).where(Notification.user_id == organizer.id))
        ).all()
        assert len(notices) == 1
        assert notices[0].activity_id == activity.id
        assert "Vera Volunteer" in notices[0].message

    async def test_capacity_is_never_exceeded(
        self,
        client: AsyncClient,
        db: AsyncSession,
        password_hash: str,
        make_activity: ActivityFactory,
    ) -> None:
        activity = await make_activity(max_applicants=2)
        users = [
            await make_user(
                db, email=f"helper{i}@example.com", hashed_password=password_hash, name=f"Helper {i}"
            )
            for i in range(3)
        ]

        results = []
        for user in users:
            response = await client.post(
                URL, json={"activity_id": str(activity.id)}, headers=bearer(user)
            )
            results.append(response)

        assert [r.status_code for r in results] == [201, 201, 400]
        assert results[2].json()["error"] == "CAPACITY_EXCEEDED"

        await db.refresh(activity)
        assert activity.current_applicants == 2
        rows = (
            await db.scalars(
                select(ActivityApplication).where(ActivityApplication.activity_id == activity.id)
            )
        ).all()
        assert len(rows) == activity.current_applicants

    async def test_duplicate_is_reported_before_capacity(
        self,
        client: AsyncClient,
        db: AsyncSession,
        volunteer_headers: dict,
        make_activity: ActivityFactory,
    ) -> None:
        activity = await make_activity(max_applicants=1)
        body = {"activity_id": str(activity.id)}

        first = await client.post(URL, json=body, headers=volunteer_headers)
        assert first.status_code == 201

        second = await client.post(URL, json=body, headers=volunteer_headers)
        assert second.status_code == 400
        assert second.json()["error"] == "DUPLICATE_APPLICATION"

        await db.refresh(activity)
        assert activity.current_applicants == 1

    @pytest.mark.parametrize("status", [ActivityStatus.PENDING, ActivityStatus.REJECTED])
    async def test_only_approved_activities_accept_applications(
        self,
        client: AsyncClient,
        volunteer_headers: dict,
        make_activity: ActivityFactory,
        status: str,
    ) -> None:
        activity = await make_activity(status=status)
        response = await client.post(
            URL, json={"activity_id": str(activity.id)}, headers=volunteer_headers
        )
        assert response.status_code == 400
        assert response.json()["error"] == "NOT_APPROVED"

    async def test_organizer_cannot_apply_to_own_activity(
        self,
        client: AsyncClient,
        organizer_headers: dict,
        make_activity: ActivityFactory,
    ) -> None:
        activity = await make_activity()
        response = await client.post(
            URL, json={"activity_id": str(activity.id)}, headers=organizer_headers
        )
        assert response.status_code == 400
        assert response.json()["error"] == "ORGANIZER_CANNOT_APPLY"

    async def test_missing_activity(
        self, client: AsyncClient, volunteer_headers: dict
    ) -> None:
        response = await client.post(
            URL, json={"activity_id": str(uuid.uuid4())}, headers=volunteer_headers
        )
        assert response.status_code == 404

    async def test_requires_authentication(
        self, client: AsyncClient, make_activity: ActivityFactory
    ) -> None:
        activity = await make_activity()
        response = await client.post(URL, json={"activity_id": str(activity.id)})
        assert response.status_code == 401

    async def test_cannot_apply_for_someone_else(
        self,
        client: AsyncClient,
        admin: User,
        volunteer_headers: dict,
        make_activity: ActivityFactory,
    ) -> None:
        activity = await make_activity()
        response = await client.post(
            URL,
            json={"activity_id": str(activity.id), "user_id": str(admin.id)},
            headers=volunteer_headers,
        )
        assert response.status_code == 403

    async def test_admin_can_apply_for_a_volunteer(
        self,
        client: AsyncClient,
        volunteer: User,
        admin_headers: dict,
        make_activity: ActivityFactory,
    ) -> None:
        activity = await make_activity()
        response = await client.post(
            URL,
            json={"activity_id": str(activity.id), "user_id": str(volunteer.id)},
            headers=admin_headers,
        )
        assert response.status_code == 201


class TestWithdraw:
    async def test_withdraw_frees_the_spot(
        self,
        client: AsyncClient,
        db: AsyncSession,
        volunteer_headers: dict,
        make_activity: ActivityFactory,
    ) -> None:
        activity = await make_activity(max_applicants=1)
        body = {"activity_id": str(activity.id)}
        await client.post(URL, json=body, headers=volunteer_headers)

        response = await _withdraw(client, body, volunteer_headers)
        assert response.status_code == 200
        assert response.json()["current_applicants"] == 0

        again = await _withdraw(client, body, volunteer_headers)
        assert again.status_code == 404

        # the freed spot can be taken again
        reapply = await client.post(URL, json=body, headers=volunteer_headers)
        assert reapply.status_code == 201

    async def test_counter_never_goes_negative(
        self,
        client: AsyncClient,
        db: AsyncSession,
        volunteer: User,
        volunteer_headers: dict,
        make_activity: ActivityFactory,
    ) -> None:
        activity = await make_activity(current_applicants=0)
        db.add(ActivityApplication(activity_id=activity.id, user_id=volunteer.id))
        await db.flush()

        response = await _withdraw(
            client, {"activity_id": str(activity.id)}, volunteer_headers
        )
        assert response.status_code == 200
        assert response.json()["current_applicants"] == 0

    async def test_withdraw_without_application(
        self,
        client: AsyncClient,
        db: AsyncSession,
        volunteer_headers: dict,
        make_activity: ActivityFactory,
    ) -> None:
        activity = await make_activity(current_applicants=2)
        response = await _withdraw(
            client, {"activity_id": str(activity.id)}, volunteer_headers
        )
        assert response.status_code == 404

        await db.refresh(activity)
        assert activity.current_applicants == 2

    async def test_freed_spot_goes_to_another_user(
        self,
        client: AsyncClient,
        db: AsyncSession,
        volunteer_headers: dict,
        password_hash: str,
        make_activity: ActivityFactory,
    ) -> None:
        activity = await make_activity(max_applicants=1)
        other = await make_user(
            db, email="second@example.com", hashed_password=password_hash, name="Sam Second"
        )
        body = {"activity_id": str(activity.id)}

        assert (await client.post(URL, json=body, headers=volunteer_headers)).status_code == 201

        full = await client.post(URL, json=body, headers=bearer(other))
        assert full.status_code == 400
        assert full.json()["error"] == "CAPACITY_EXCEEDED"

        assert (await _withdraw(client, body, volunteer_headers)).status_code == 200

        taken = await client.post(URL, json=body, headers=bearer(other))
        assert taken.status_code == 201
        assert taken.json()["current_applicants"] == 1


class TestApplicantList:
    async def test_lists_applicants_with_profile(
        self,
        client: AsyncClient,
        volunteer: User,
        volunteer_headers: dict,
        organizer_headers: dict,
        make_activity: ActivityFactory,
    ) -> None:
        activity = await make_activity()
        await client.post(
            URL, json={"activity_id": str(activity.id)}, headers=volunteer_headers
        )

        response = await client.get(
            URL, params={"activity_id": str(activity.id)}, headers=organizer_headers
        )
        assert response.status_code == 200
        [applicant] = response.json()["data"]
        assert applicant["user_id"] == str(volunteer.id)
        assert applicant["name"] == "Vera Volunteer"
        assert applicant["email"] == "volunteer@example.com"
        assert applicant["applied_at"]

    async def test_missing_activity_id_param(
        self, client: AsyncClient, volunteer_headers: dict
    ) -> None:
        response = await client.get(URL, headers=volunteer_headers)
        assert response.status_code == 400
        assert response.json()["errors"][0]["field"] == "activity_id"

    async def test_unknown_activity(
        self, client: AsyncClient, volunteer_headers: dict
    ) -> None:
        response = await client.get(
            URL, params={"activity_id": str(uuid.uuid4())}, headers=volunteer_headers
        )
        assert response.status_code == 404
