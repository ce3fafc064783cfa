"""
Activity ORM model.
A volunteer event with a schedule, a capacity counter and a moderation status.
The organizer's name and email are copied at creation time and never refreshed.
"""
from __future__ import annotations

import datetime as dt
import uuid

from sqlalchemy import CheckConstraint, Date, Enum, ForeignKey, Index, Integer, String, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.db.base import Base, TimestampMixin, UUIDPrimaryKeyMixin


class ActivityStatus:
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"

    ALL = (PENDING, APPROVED, REJECTED)


ACTIVITY_CATEGORIES: tuple[str, ...] = (
    "environment",
    "community",
    "education",
    "health",
    "sports",
    "animals",
    "other",
)


class Activity(Base, UUIDPrimaryKeyMixin, TimestampMixin):
    __tablename__ = "activities"

    title: Mapped[str] = mapped_column(String(200), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False)
    category: Mapped[str] = mapped_column(
        Enum(*ACTIVITY_CATEGORIES, name="activity_category_enum"),
        nullable=False,
    )
    date: Mapped[dt.date] = mapped_column(Date, nullable=False)
    # 24-hour "HH:MM"; string ordering matches chronological ordering
    time: Mapped[str] = mapped_column(String(5), nullable=False)
    location: Mapped[str] = mapped_column(String(300), nullable=False)
    max_applicants: Mapped[int] = mapped_column(Integer, nullable=False)
    current_applicants: Mapped[int] = mapped_column(
        Integer, nullable=False, default=0, server_default="0"
    )
    organizer_id: Mapped[uuid.UUID | None] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("users.id", ondelete="SET NULL"),
        nullable=True,
    )
    organizer_name: Mapped[str] = mapped_column(String(200), nullable=False)
    organizer_email: Mapped[str] = mapped_column(String(255), nullable=False)
    status: Mapped[str] = mapped_column(
        Enum(*ActivityStatus.ALL, name="activity_status_enum"),
        nullable=False,
        default=ActivityStatus.PENDING,
        server_default=ActivityStatus.PENDING,
    )

    # ── Relationships ─────────────────────────────────────────────────────────
    organizer: Mapped["User | None"] = relationship(  # type: ignore[name-defined]  # noqa: F821
        "User",
        back_populates="organized_activities",
    )
    applications: Mapped[list["ActivityApplication"]] = relationship(  # type: ignore[name-defined]  # noqa: F821
        "ActivityApplication",
        back_populates="activity",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )

    __table_args__ = (
        CheckConstraint(
            "max_applicants >= 1 AND max_applicants <= 500",
            name="max_applicants_range",
        ),
        CheckConstraint(
            "current_applicants >= 0 AND current_applicants <= max_applicants",
            name="current_applicants_within_capacity",
        ),
        Index("ix_activities_status", "status"),
        Index("ix_activities_category", "category"),
        Index("ix_activities_date_time", "date", "time"),
        Index("ix_activities_organizer_id", "organizer_id"),
    )

    @property
    def spots_left(self) -> int:
        return max(0, self.max_applicants - self.current_applicants)

    def __repr__(self) -> str:
        return f"<Activity id={self.id} title={self.title!r} status={self.status}>"
