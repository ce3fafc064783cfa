"""
User CRUD operations.
"""
from __future__ import annotations

import uuid

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.crud.base import CRUDBase
from app.models.user import User, UserRole
from app.schemas.user import UserUpdate


class CRUDUser(CRUDBase[User, UserUpdate]):

    async def get_by_email(self, db: AsyncSession, email: str) -> User | None:
        result = await db.execute(select(User).where(func.lower(User.email) == email.lower()))
        return result.scalar_one_or_none()

    async def create_user(
        self,
        db: AsyncSession,
        *,
        email: str,
        hashed_password: str,
        name: str = "",
        role: str = UserRole.USER,
    ) -> User:
        user = User(
            email=email.lower(),
            hashed_password=hashed_password,
            name=name,
            role=role,
        )
        db.add(user)
        await db.flush()
        await db.refresh(user)
        return user

    async def list_users(
        self,
        db: AsyncSession,
        *,
        skip: int = 0,
        limit: int = 100,
        include_inactive: bool = False,
    ) -> tuple[list[User], int]:
        query = select(User)
        count_query = select(func.count()).select_from(User)

        if not include_inactive:
            query = query.where(User.is_active.is_(True))
            count_query = count_query.where(User.is_active.is_(True))

        total_result = await db.execute(count_query)
        total = total_result.scalar_one()

        result = await db.execute(
            query.order_by(User.created_at.desc(), User.email).offset(skip).limit(limit)
        )
        return list(result.scalars().all()), total

    async def list_active_ids(self, db: AsyncSession) -> list[uuid.UUID]:
        result = await db.execute(select(User.id).where(User.is_active.is_(True)))
        return list(result.scalars().all())


crud_user = CRUDUser(User)
