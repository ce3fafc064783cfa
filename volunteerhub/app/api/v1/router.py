"""
Aggregates all v1 API routers into a single APIRouter.
"""
from __future__ import annotations

from fastapi import APIRouter

from app.api.v1 import (
    activities,
    admin,
    applications,
    auth,
    notifications,
    users,
)

api_router = APIRouter()

api_router.include_router(auth.router)
api_router.include_router(users.router)
api_router.include_router(activities.router)
api_router.include_router(applications.router)
api_router.include_router(notifications.router)
api_router.include_router(admin.router)
