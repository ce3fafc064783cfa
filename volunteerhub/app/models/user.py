"""
User ORM model.
Holds credentials plus the profile fields the activity logic reads:
name and email are snapshotted onto activities, role gates moderation.
"""
from __future__ import annotations

from sqlalchemy import Boolean, Enum, Index, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.db.base import Base, TimestampMixin, UUIDPrimaryKeyMixin


class UserRole:
    USER = "user"
    ADMIN = "admin"


class User(Base, UUIDPrimaryKeyMixin, TimestampMixin):
    __tablename__ = "users"

    email: Mapped[str] = mapped_column(String(255), nullable=False)
    # Blank until the user fills in their profile; creating activities requires it
    name: Mapped[str] = mapped_column(String(200), nullable=False, default="", server_default="")
    hashed_password: Mapped[str] = mapped_column(String(255), nullable=False)
    role: Mapped[str] = mapped_column(
        Enum(UserRole.USER, UserRole.ADMIN, name="user_role_enum"),
        nullable=False,
        default=UserRole.USER,
        server_default=UserRole.USER,
    )
    is_active: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=True, server_default="true"
    )

    # ── Relationships ─────────────────────────────────────────────────────────
    organized_activities: Mapped[list["Activity"]] = relationship(  # type: ignore[name-defined]  # noqa: F821
        "Activity",
        back_populates="organizer",
        passive_deletes=True,
    )
    applications: Mapped[list["ActivityApplication"]] = relationship(  # type: ignore[name-defined]  # noqa: F821
        "ActivityApplication",
        back_populates="user",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )
    notifications: Mapped[list["Notification"]] = relationship(  # type: ignore[name-defined]  # noqa: F821
        "Notification",
        back_populates="user",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )

    __table_args__ = (
        Index("ix_users_email", "email", unique=True),
        Index("ix_users_role", "role"),
    )

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN

    @property
    def has_complete_profile(self) -> bool:
        return bool(self.name and self.name.strip())

    def __repr__(self) -> str:
        return f"<User id={self.id} email={self.email} role={self.role}>"
