"""
Authentication routes.
POST /auth/register, /auth/login
"""
from __future__ import annotations

from fastapi import APIRouter, Request, status
from slowapi import Limiter
from slowapi.util import get_remote_address

from app.core.config import settings
from app.core.dependencies import DBSession
from app.schemas.user import LoginRequest, Token, UserCreate, UserRead
from app.services.auth_service import auth_service

router = APIRouter(prefix="/auth", tags=["Authentication"])

limiter = Limiter(key_func=get_remote_address, enabled=settings.RATE_LIMIT_ENABLED)


@router.post(
    "/register",
    response_model=UserRead,
    status_code=status.HTTP_201_CREATED,
    summary="Register a new user account",
)
async def register(
    user_in: UserCreate,
    db: DBSession,
) -> UserRead:
    user = await auth_service.register_user(db, user_in=user_in)
    return UserRead.model_validate(user)


@router.post(
    "/login",
    response_model=Token,
    summary="Authenticate and receive an access token",
)
@limiter.limit(settings.RATE_LIMIT_LOGIN)
async def login(
    request: Request,
    credentials: LoginRequest,
    db: DBSession,
) -> Token:
    return await auth_service.authenticate_user(
        db, email=credentials.email, password=credentials.password
    )
