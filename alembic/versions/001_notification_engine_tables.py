"""Notification engine tables.

Revision ID: 001
Revises:
Create Date: 2026-10-17

Creates device_tokens, notification_preferences and notification_log, plus
the personal schedule tables the engine reads recipients from.
"""

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _audit_columns(with_users: bool = True) -> list[sa.Column]:
    columns = [
        sa.Column(
            "created_at",
            postgresql.TIMESTAMP(timezone=True),
            server_default=sa.text("now()"),
            nullable=True,
        ),
        sa.Column(
            "modified_at",
            postgresql.TIMESTAMP(timezone=True),
            server_default=sa.text("now()"),
            nullable=True,
        ),
    ]
    if with_users:
        columns.insert(1, sa.Column("created_by", sa.BigInteger(), nullable=True))
        columns.append(sa.Column("modified_by", sa.BigInteger(), nullable=True))
    return columns


def upgrade() -> None:
    op.create_table(
        "device_tokens",
        sa.Column("device_token_id", sa.BigInteger(), autoincrement=True, nullable=False),
        sa.Column("user_id", sa.BigInteger(), nullable=False),
        sa.Column("token", sa.Text(), nullable=False),
        sa.Column("platform", sa.Text(), nullable=False),
        sa.Column("device_name", sa.Text(), nullable=True),
        sa.Column("is_active", sa.Boolean(), server_default="true", nullable=False),
        sa.Column("last_used_at", postgresql.TIMESTAMP(timezone=True), nullable=True),
        *_audit_columns(),
        sa.PrimaryKeyConstraint("device_token_id", name=op.f("pk_device_tokens")),
        sa.UniqueConstraint("user_id", "token", name="uq_device_tokens_user_id_token"),
    )
    op.create_index(
        "idx_device_tokens_user_id_active",
        "device_tokens",
        ["user_id"],
        unique=False,
        postgresql_where=sa.text("is_active"),
    )
    op.create_index("idx_device_tokens_token", "device_tokens", ["token"], unique=False)

    op.create_table(
        "notification_preferences",
        sa.Column(
            "notification_preference_id", sa.BigInteger(), autoincrement=True, nullable=False
        ),
        sa.Column("user_id", sa.BigInteger(), nullable=False),
        sa.Column("push_enabled", sa.Boolean(), server_default="true", nullable=False),
        sa.Column("email_enabled", sa.Boolean(), server_default="true", nullable=False),
        sa.Column(
            "schedule_changes_enabled", sa.Boolean(), server_default="true", nullable=False
        ),
        sa.Column("reminders_enabled", sa.Boolean(), server_default="true", nullable=False),
        sa.Column(
            "reminder_minutes_before", sa.Integer(), server_default="30", nullable=False
        ),
        sa.Column(
            "announcements_enabled", sa.Boolean(), server_default="true", nullable=False
        ),
        sa.Column("quiet_hours_start", sa.Time(), nullable=True),
        sa.Column("quiet_hours_end", sa.Time(), nullable=True),
        sa.Column("time_zone_id", sa.Text(), server_default="UTC", nullable=False),
        *_audit_columns(),
        sa.CheckConstraint(
            "reminder_minutes_before >= 5 AND reminder_minutes_before <= 1440",
            name=op.f("ck_notification_preferences_reminder_minutes_before_range"),
        ),
        sa.CheckConstraint(
            "(quiet_hours_start IS NULL AND quiet_hours_end IS NULL) OR "
            "(quiet_hours_start IS NOT NULL AND quiet_hours_end IS NOT NULL)",
            name=op.f("ck_notification_preferences_quiet_hours_both_or_neither"),
        ),
        sa.PrimaryKeyConstraint(
            "notification_preference_id", name=op.f("pk_notification_preferences")
        ),
        sa.UniqueConstraint("user_id", name=op.f("uq_notification_preferences_user_id")),
    )

    op.create_table(
        "notification_log",
        sa.Column("notification_log_id", sa.BigInteger(), autoincrement=True, nullable=False),
        sa.Column("user_id", sa.BigInteger(), nullable=False),
        sa.Column("device_token_id", sa.BigInteger(), nullable=True),
        sa.Column("notification_type", sa.Text(), nullable=False),
        sa.Column("title", sa.Text(), nullable=False),
        sa.Column("body", sa.Text(), nullable=False),
        sa.Column("data_payload", sa.Text(), nullable=True),
        sa.Column("related_entity_type", sa.Text(), nullable=True),
        sa.Column("related_entity_id", sa.BigInteger(), nullable=True),
        sa.Column(
            "sent_at",
            postgresql.TIMESTAMP(timezone=True),
            server_default=sa.text("now()"),
            nullable=True,
        ),
        sa.Column("is_delivered", sa.Boolean(), server_default="false", nullable=False),
        sa.Column("error_message", sa.Text(), nullable=True),
        sa.Column("read_at", postgresql.TIMESTAMP(timezone=True), nullable=True),
        *_audit_columns(with_users=False),
        sa.ForeignKeyConstraint(
            ["device_token_id"],
            ["device_tokens.device_token_id"],
            name=op.f("fk_notification_log_device_token_id_device_tokens"),
            ondelete="SET NULL",
        ),
        sa.PrimaryKeyConstraint("notification_log_id", name=op.f("pk_notification_log")),
    )
    op.create_index(
        "idx_notification_log_user_id_sent_at",
        "notification_log",
        ["user_id", "sent_at"],
        unique=False,
    )
    op.create_index(
        "idx_notification_log_unread",
        "notification_log",
        ["user_id"],
        unique=False,
        postgresql_where=sa.text("read_at IS NULL"),
    )

    op.create_table(
        "personal_schedules",
        sa.Column("personal_schedule_id", sa.BigInteger(), autoincrement=True, nullable=False),
        sa.Column("user_id", sa.BigInteger(), nullable=False),
        sa.Column("edition_id", sa.BigInteger(), nullable=False),
        sa.Column("name", sa.Text(), nullable=True),
        sa.Column("is_default", sa.Boolean(), server_default="true", nullable=False),
        sa.Column("is_deleted", sa.Boolean(), server_default="false", nullable=False),
        sa.Column(
            "created_at",
            postgresql.TIMESTAMP(timezone=True),
            server_default=sa.text("now()"),
            nullable=True,
        ),
        sa.PrimaryKeyConstraint("personal_schedule_id", name=op.f("pk_personal_schedules")),
    )
    op.create_index(
        "idx_personal_schedules_user_id", "personal_schedules", ["user_id"], unique=False
    )
    op.create_index(
        "idx_personal_schedules_edition_id", "personal_schedules", ["edition_id"], unique=False
    )

    op.create_table(
        "personal_schedule_entries",
        sa.Column(
            "personal_schedule_entry_id", sa.BigInteger(), autoincrement=True, nullable=False
        ),
        sa.Column("personal_schedule_id", sa.BigInteger(), nullable=False),
        sa.Column("engagement_id", sa.BigInteger(), nullable=False),
        sa.Column(
            "notifications_enabled", sa.Boolean(), server_default="true", nullable=False
        ),
        sa.Column("is_deleted", sa.Boolean(), server_default="false", nullable=False),
        sa.Column(
            "created_at",
            postgresql.TIMESTAMP(timezone=True),
            server_default=sa.text("now()"),
            nullable=True,
        ),
        sa.ForeignKeyConstraint(
            ["personal_schedule_id"],
            ["personal_schedules.personal_schedule_id"],
            name=op.f("fk_personal_schedule_entries_personal_schedule_id_personal_schedules"),
            ondelete="CASCADE",
        ),
        sa.PrimaryKeyConstraint(
            "personal_schedule_entry_id", name=op.f("pk_personal_schedule_entries")
        ),
    )
    op.create_index(
        "idx_personal_schedule_entries_schedule_id",
        "personal_schedule_entries",
        ["personal_schedule_id"],
        unique=False,
    )
    op.create_index(
        "idx_personal_schedule_entries_engagement_id",
        "personal_schedule_entries",
        ["engagement_id"],
        unique=False,
    )


def downgrade() -> None:
    op.drop_index(
        "idx_personal_schedule_entries_engagement_id", table_name="personal_schedule_entries"
    )
    op.drop_index(
        "idx_personal_schedule_entries_schedule_id", table_name="personal_schedule_entries"
    )
    op.drop_table("personal_schedule_entries")
    op.drop_index("idx_personal_schedules_edition_id", table_name="personal_schedules")
    op.drop_index("idx_personal_schedules_user_id", table_name="personal_schedules")
    op.drop_table("personal_schedules")
    op.drop_index("idx_notification_log_unread", table_name="notification_log")
    op.drop_index("idx_notification_log_user_id_sent_at", table_name="notification_log")
    op.drop_table("notification_log")
    op.drop_table("notification_preferences")
    op.drop_index("idx_device_tokens_token", table_name="device_tokens")
    op.drop_index("idx_device_tokens_user_id_active", table_name="device_tokens")
    op.drop_table("device_tokens")
