"""
Authentication service.
Handles registration and login. Routes only call these methods.
"""
from __future__ import annotations

import logging

from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import settings
from app.core.exceptions import ConflictError, UnauthorizedError
from app.core.security import create_access_token, hash_password, verify_password
from app.crud.user import crud_user
from app.models.user import User
from app.schemas.user import Token, UserCreate

logger = logging.getLogger(__name__)


class AuthService:

    async def register_user(self, db: AsyncSession, *, user_in: UserCreate) -> User:
        """Create an account; emails are unique regardless of case."""
        if await crud_user.get_by_email(db, user_in.email) is not None:
            raise ConflictError("A user with this email already exists")

        user = await crud_user.create_user(
            db,
            email=user_in.email,
            hashed_password=hash_password(user_in.password),
            name=user_in.name,
        )
        logger.info("Registered user %s", user.id)
        return user

    async def authenticate_user(
        self, db: AsyncSession, *, email: str, password: str
    ) -> Token:
        user = await crud_user.get_by_email(db, email)
        if (
            user is None
            or not user.is_active
            or not verify_password(password, user.hashed_password)
        ):
            logger.info("Failed login attempt for %s", email)
            raise UnauthorizedError("Invalid email or password")

        return Token(
            access_token=create_access_token(str(user.id), user.role),
            expires_in=settings.access_token_expire_seconds,
        )


auth_service = AuthService()
