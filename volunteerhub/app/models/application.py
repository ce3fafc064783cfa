"""
ActivityApplication ORM model.
One row per (activity, user): a user's standing application to volunteer.
Rows are created and deleted together with the parent's current_applicants counter.
"""
from __future__ import annotations

import uuid
from datetime import datetime

from sqlalchemy import DateTime, ForeignKey, Index, UniqueConstraint, Uuid, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.db.base import Base, UUIDPrimaryKeyMixin


class ActivityApplication(Base, UUIDPrimaryKeyMixin):
    __tablename__ = "activity_applications"

    activity_id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("activities.id", ondelete="CASCADE"),
        nullable=False,
    )
    user_id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    )

    # ── Relationships ─────────────────────────────────────────────────────────
    activity: Mapped["Activity"] = relationship(  # type: ignore[name-defined]  # noqa: F821
        "Activity",
        back_populates="applications",
    )
    user: Mapped["User"] = relationship(  # type: ignore[name-defined]  # noqa: F821
        "User",
        back_populates="applications",
    )

    __table_args__ = (
        UniqueConstraint("activity_id", "user_id", name="uq_activity_applications_activity_user"),
        Index("ix_activity_applications_user_id", "user_id"),
    )

    def __repr__(self) -> str:
        return (
            f"<ActivityApplication id={self.id} activity_id={self.activity_id} "
            f"user_id={self.user_id}>"
        )
