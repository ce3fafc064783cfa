"""
FastAPI dependency injection functions.
Provides get_db, get_current_user, get_optional_user and require_admin.
"""
from __future__ import annotations

import uuid
from typing import Annotated

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import ForbiddenError, InvalidTokenError, UnauthorizedError
from app.core.security import decode_access_token
from app.crud.user import crud_user
from app.db.session import get_db
from app.models.user import User

__all__ = [
    "get_db",
    "get_current_user",
    "get_optional_user",
    "require_admin",
    "DBSession",
    "CurrentUser",
    "OptionalUser",
    "AdminUser",
]

bearer_scheme = HTTPBearer(auto_error=False)


async def _user_from_token(db: AsyncSession, token: str) -> User:
    try:
        payload = decode_access_token(token)
    except JWTError:
        raise InvalidTokenError("Invalid or expired access token")

    user_id_str = payload.get("sub")
    if not user_id_str:
        raise InvalidTokenError("Malformed token: missing subject")

    try:
        user_id = uuid.UUID(user_id_str)
    except ValueError:
        raise InvalidTokenError("Malformed token: invalid subject format")

    user = await crud_user.get(db, user_id)
    if user is None:
        raise UnauthorizedError("User not found")
    if not user.is_active:
        raise UnauthorizedError("User account is deactivated")
    return user


async def get_current_user(
    db: Annotated[AsyncSession, Depends(get_db)],
    credentials: Annotated[
        HTTPAuthorizationCredentials | None, Depends(bearer_scheme)
    ] = None,
) -> User:
    """Resolve the bearer token to an active User or fail with 401."""
    if credentials is None:
        raise UnauthorizedError("Missing authentication token")
    return await _user_from_token(db, credentials.credentials)


async def get_optional_user(
    db: Annotated[AsyncSession, Depends(get_db)],
    credentials: Annotated[
        HTTPAuthorizationCredentials | None, Depends(bearer_scheme)
    ] = None,
) -> User | None:
    """
    Like get_current_user, but anonymous callers get None.
    A token that is present but invalid is still rejected.
    """
    if credentials is None:
        return None
    return await _user_from_token(db, credentials.credentials)


async def require_admin(
    current_user: Annotated[User, Depends(get_current_user)],
) -> User:
    if not current_user.is_admin:
        raise ForbiddenError("Admin privileges required")
    return current_user


# Convenience type aliases for route signatures
DBSession = Annotated[AsyncSession, Depends(get_db)]
CurrentUser = Annotated[User, Depends(get_current_user)]
OptionalUser = Annotated[User | None, Depends(get_optional_user)]
AdminUser = Annotated[User, Depends(require_admin)]
