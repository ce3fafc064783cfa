"""001_initial_tables

Revision ID: 001
Revises:
Create Date: 2026-10-19 00:00:00.000000

Creates all initial tables for VolunteerHub:
  - users
  - activities
  - activity_applications
  - notifications
"""
from __future__ import annotations

import sqlalchemy as sa
from alembic import op
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision: str = "001"
down_revision: str | None = None
branch_labels: str | None = None
depends_on: str | None = None

user_role_enum = postgresql.ENUM("user", "admin", name="user_role_enum", create_type=False)
activity_status_enum = postgresql.ENUM(
    "pending", "approved", "rejected",
    name="activity_status_enum", create_type=False,
)
activity_category_enum = postgresql.ENUM(
    "environment", "community", "education", "health", "sports", "animals", "other",
    name="activity_category_enum", create_type=False,
)
notification_type_enum = postgresql.ENUM(
    "announcement", "activity_update", "reminder",
    name="notification_type_enum", create_type=False,
)

ENUMS = (user_role_enum, activity_status_enum, activity_category_enum, notification_type_enum)


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.text("now()"),
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.text("now()"),
        ),
    ]


def upgrade() -> None:
    # ── Enums ─────────────────────────────────────────────────────────────────
    for enum in ENUMS:
        enum.create(op.get_bind(), checkfirst=True)

    # ── users ─────────────────────────────────────────────────────────────────
    op.create_table(
        "users",
        sa.Column("id", sa.Uuid(as_uuid=True), nullable=False),
        sa.Column("email", sa.String(255), nullable=False),
        sa.Column("name", sa.String(200), nullable=False, server_default=""),
        sa.Column("hashed_password", sa.String(255), nullable=False),
        sa.Column("role", user_role_enum, nullable=False, server_default="user"),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default="true"),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id", name="pk_users"),
    )
    op.create_index("ix_users_email", "users", ["email"], unique=True)
    op.create_index("ix_users_role", "users", ["role"])

    # ── activities ────────────────────────────────────────────────────────────
    op.create_table(
        "activities",
        sa.Column("id", sa.Uuid(as_uuid=True), nullable=False),
        sa.Column("title", sa.String(200), nullable=False),
        sa.Column("description", sa.Text(), nullable=False),
        sa.Column("category", activity_category_enum, nullable=False),
        sa.Column("date", sa.Date(), nullable=False),
        sa.Column("time", sa.String(5), nullable=False),
        sa.Column("location", sa.String(300), nullable=False),
        sa.Column("max_applicants", sa.Integer(), nullable=False),
        sa.Column("current_applicants", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("organizer_id", sa.Uuid(as_uuid=True), nullable=True),
        sa.Column("organizer_name", sa.String(200), nullable=False),
        sa.Column("organizer_email", sa.String(255), nullable=False),
        sa.Column("status", activity_status_enum, nullable=False, server_default="pending"),
        *_timestamps(),
        sa.ForeignKeyConstraint(
            ["organizer_id"], ["users.id"],
            name="fk_activities_organizer_id_users",
            ondelete="SET NULL",
        ),
        sa.CheckConstraint(
            "max_applicants >= 1 AND max_applicants <= 500",
            name="ck_activities_max_applicants_range",
        ),
        sa.CheckConstraint(
            "current_applicants >= 0 AND current_applicants <= max_applicants",
            name="ck_activities_current_applicants_within_capacity",
        ),
        sa.PrimaryKeyConstraint("id", name="pk_activities"),
    )
    op.create_index("ix_activities_status", "activities", ["status"])
    op.create_index("ix_activities_category", "activities", ["category"])
    op.create_index("ix_activities_date_time", "activities", ["date", "time"])
    op.create_index("ix_activities_organizer_id", "activities", ["organizer_id"])

    # ── activity_applications ─────────────────────────────────────────────────
    op.create_table(
        "activity_applications",
        sa.Column("id", sa.Uuid(as_uuid=True), nullable=False),
        sa.Column("activity_id", sa.Uuid(as_uuid=True), nullable=False),
        sa.Column("user_id", sa.Uuid(as_uuid=True), nullable=False),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.text("now()"),
        ),
        sa.ForeignKeyConstraint(
            ["activity_id"], ["activities.id"],
            name="fk_activity_applications_activity_id_activities",
            ondelete="CASCADE",
        ),
        sa.ForeignKeyConstraint(
            ["user_id"], ["users.id"],
            name="fk_activity_applications_user_id_users",
            ondelete="CASCADE",
        ),
        sa.PrimaryKeyConstraint("id", name="pk_activity_applications"),
        sa.UniqueConstraint(
            "activity_id", "user_id", name="uq_activity_applications_activity_user"
        ),
    )
    op.create_index(
        "ix_activity_applications_user_id", "activity_applications", ["user_id"]
    )

    # ── notifications ─────────────────────────────────────────────────────────
    op.create_table(
        "notifications",
        sa.Column("id", sa.Uuid(as_uuid=True), nullable=False),
        sa.Column("user_id", sa.Uuid(as_uuid=True), nullable=False),
        sa.Column("title", sa.String(200), nullable=False),
        sa.Column("message", sa.Text(), nullable=False),
        sa.Column("type", notification_type_enum, nullable=False, server_default="announcement"),
        sa.Column("is_read", sa.Boolean(), nullable=False, server_default="false"),
        sa.Column("activity_id", sa.Uuid(as_uuid=True), nullable=True),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.text("now()"),
        ),
        sa.ForeignKeyConstraint(
            ["user_id"], ["users.id"],
            name="fk_notifications_user_id_users",
            ondelete="CASCADE",
        ),
        sa.ForeignKeyConstraint(
            ["activity_id"], ["activities.id"],
            name="fk_notifications_activity_id_activities",
            ondelete="SET NULL",
        ),
        sa.PrimaryKeyConstraint("id", name="pk_notifications"),
    )
    op.create_index("ix_notifications_user_id", "notifications", ["user_id"])
    op.create_index("ix_notifications_user_is_read", "notifications", ["user_id", "is_read"])
    op.create_index("ix_notifications_created_at", "notifications", ["created_at"])


def downgrade() -> None:
    # Drop tables in reverse dependency order
    op.drop_table("notifications")
    op.drop_table("activity_applications")
    op.drop_table("activities")
    op.drop_table("users")

    for enum in reversed(ENUMS):
        enum.drop(op.get_bind(), checkfirst=True)
