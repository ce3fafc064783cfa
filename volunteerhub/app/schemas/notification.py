"""
Notification Pydantic schemas.
"""
from __future__ import annotations

import uuid
from datetime import datetime
from typing import Literal

from pydantic import BaseModel, Field, model_validator

NotificationTypeValue = Literal["announcement", "activity_update", "reminder"]


class NotificationRead(BaseModel):
    id: uuid.UUID
    user_id: uuid.UUID
    title: str
    message: str
    type: str
    is_read: bool
    activity_id: uuid.UUID | None
    created_at: datetime

    model_config = {"from_attributes": True}


class NotificationSend(BaseModel):
    """
    Outgoing notice. Either broadcast to every active user (admins only)
    or sent to the applicants of the listed activities.
    """

    title: str = Field(min_length=3, max_length=200)
    message: str = Field(min_length=1, max_length=2000)
    type: NotificationTypeValue = "announcement"
    target_all: bool = False
    activity_ids: list[uuid.UUID] = Field(default_factory=list, max_length=50)

    model_config = {"str_strip_whitespace": True}

    @model_validator(mode="after")
    def require_target(self) -> "NotificationSend":
        if not self.target_all and not self.activity_ids:
            raise ValueError("Choose target_all or at least one activity")
        return self


class NotificationSendResult(BaseModel):
    sent: int


class NotificationFilter(BaseModel):
    type: NotificationTypeValue | None = None
    q: str = Field(default="", max_length=200)
    days: int | None = Field(default=None, ge=1, le=3650)
    unread_only: bool = False
    page: int = Field(default=1, ge=1)
    size: int = Field(default=20, ge=1, le=100)
