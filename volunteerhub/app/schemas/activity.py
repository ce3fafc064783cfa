"""
Activity Pydantic schemas.
Includes the create payload, read model, moderation request and the
filter object the listing endpoint builds from query parameters.
"""
from __future__ import annotations

import datetime as dt
import uuid
from typing import Literal

from pydantic import BaseModel, Field

from app.core.config import settings

ActivityCategory = Literal[
    "environment", "community", "education", "health", "sports", "animals", "other"
]
CategoryFilter = Literal[ActivityCategory, "all", ""]
ActivityStatusValue = Literal["pending", "approved", "rejected"]
ModerationAction = Literal["approve", "reject"]
DateFilter = Literal[
    "all",
    "today",
    "tomorrow",
    "this-week",
    "next-week",
    "this-month",
    "next-month",
    "upcoming",
    "past",
]

TIME_PATTERN = r"^([01]\d|2[0-3]):[0-5]\d$"


# ── Create ────────────────────────────────────────────────────────────────────

class ActivityCreate(BaseModel):
    title: str = Field(min_length=3, max_length=200)
    description: str = Field(min_length=20, max_length=2000)
    category: ActivityCategory
    date: dt.date
    time: str = Field(pattern=TIME_PATTERN)
    location: str = Field(min_length=3, max_length=300)
    max_applicants: int = Field(ge=1, le=500)

    model_config = {"str_strip_whitespace": True}


# ── Read ──────────────────────────────────────────────────────────────────────

class ActivityRead(BaseModel):
    id: uuid.UUID
    title: str
    description: str
    category: str
    date: dt.date
    time: str
    location: str
    max_applicants: int
    current_applicants: int
    spots_left: int
    organizer_id: uuid.UUID | None
    organizer_name: str
    organizer_email: str
    status: str
    created_at: dt.datetime
    updated_at: dt.datetime

    model_config = {"from_attributes": True}


class ActivityCounts(BaseModel):
    pending: int = 0
    approved: int = 0
    rejected: int = 0
    total: int = 0


# ── Moderation ────────────────────────────────────────────────────────────────

class ModerationRequest(BaseModel):
    action: ModerationAction
    activity_id: uuid.UUID


# ── Filter ────────────────────────────────────────────────────────────────────

class ActivityFilter(BaseModel):
    """Query parameters for the activity listing."""

    category: CategoryFilter = ""
    status: ActivityStatusValue = "approved"
    organizer_id: uuid.UUID | None = None
    date: DateFilter = "all"
    q: str = Field(default="", max_length=200)
    page: int = Field(default=1, ge=1)
    page_size: int = Field(default=settings.ACTIVITIES_PAGE_SIZE, ge=1, le=settings.MAX_PAGE_SIZE)

    @property
    def category_filter(self) -> str | None:
        """The category to filter on, or None when every category is wanted."""
        if self.category in ("", "all"):
            return None
        return self.category
