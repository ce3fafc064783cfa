"""
Application Pydantic schemas.
"""
from __future__ import annotations

import uuid
from datetime import datetime

from pydantic import BaseModel


class ApplicationRequest(BaseModel):
    """Body for both applying and withdrawing.

    user_id defaults to the caller; only admins may act for someone else.
    """

    activity_id: uuid.UUID
    user_id: uuid.UUID | None = None


class ApplicationRead(BaseModel):
    id: uuid.UUID
    activity_id: uuid.UUID
    user_id: uuid.UUID
    applied_at: datetime


class ApplicantRead(ApplicationRead):
    name: str
    email: str


class ApplicantList(BaseModel):
    data: list[ApplicantRead]


class ApplicationResult(BaseModel):
    message: str
    activity_id: uuid.UUID
    current_applicants: int
    max_applicants: int
