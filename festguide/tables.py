"""SQLAlchemy Core table definitions for the notification engine."""

from sqlalchemy import (
    BigInteger,
    Boolean,
    CheckConstraint,
    Column,
    ForeignKey,
    Index,
    Integer,
    MetaData,
    Table,
    Text,
    Time,
    UniqueConstraint,
    func,
    text,
)
from sqlalchemy.dialects.postgresql import TIMESTAMP

# Naming convention for constraints (helps Alembic generate better names)
convention = {
    "ix": "ix_%(column_0_label)s",
    "uq": "uq_%(table_name)s_%(column_0_name)s",
    "ck": "ck_%(table_name)s_%(constraint_name)s",
    "fk": "fk_%(table_name)s_%(column_0_name)s_%(referred_table_name)s",
    "pk": "pk_%(table_name)s",
}
metadata = MetaData(naming_convention=convention)


# =====================================================
# 1. DEVICE_TOKENS
# =====================================================
# Users, editions and engagements live in the festival CRUD schema; the
# engine only stores their ids.
device_tokens = Table(
    "device_tokens",
    metadata,
    Column("device_token_id", BigInteger, primary_key=True, autoincrement=True),
    Column("user_id", BigInteger, nullable=False),
    Column("token", Text, nullable=False),
    Column("platform", Text, nullable=False),  # lowercased: "ios", "android", "web"
    Column("device_name", Text),
    Column("is_active", Boolean, nullable=False, server_default="true"),
    Column("last_used_at", TIMESTAMP(timezone=True)),
    Column("created_at", TIMESTAMP(timezone=True), server_default=func.now()),
    Column("created_by", BigInteger),
    Column("modified_at", TIMESTAMP(timezone=True), server_default=func.now()),
    Column("modified_by", BigInteger),
    UniqueConstraint("user_id", "token", name="uq_device_tokens_user_id_token"),
    Index(
        "idx_device_tokens_user_id_active",
        "user_id",
        postgresql_where=text("is_active"),
    ),
    Index("idx_device_tokens_token", "token"),
)


# =====================================================
# 2. NOTIFICATION_PREFERENCES
# =====================================================
notification_preferences = Table(
    "notification_preferences",
    metadata,
    Column("notification_preference_id", BigInteger, primary_key=True, autoincrement=True),
    Column("user_id", BigInteger, nullable=False, unique=True),
    Column("push_enabled", Boolean, nullable=False, server_default="true"),
    Column("email_enabled", Boolean, nullable=False, server_default="true"),
    Column("schedule_changes_enabled", Boolean, nullable=False, server_default="true"),
    Column("reminders_enabled", Boolean, nullable=False, server_default="true"),
    Column("reminder_minutes_before", Integer, nullable=False, server_default="30"),
    Column("announcements_enabled", Boolean, nullable=False, server_default="true"),
    Column("quiet_hours_start", Time),  # wall-clock, no date
    Column("quiet_hours_end", Time),
    Column("time_zone_id", Text, nullable=False, server_default="UTC"),
    Column("created_at", TIMESTAMP(timezone=True), server_default=func.now()),
    Column("created_by", BigInteger),
    Column("modified_at", TIMESTAMP(timezone=True), server_default=func.now()),
    Column("modified_by", BigInteger),
    CheckConstraint(
        "reminder_minutes_before >= 5 AND reminder_minutes_before <= 1440",
        name="reminder_minutes_before_range",
    ),
    CheckConstraint(
        "(quiet_hours_start IS NULL AND quiet_hours_end IS NULL) OR "
        "(quiet_hours_start IS NOT NULL AND quiet_hours_end IS NOT NULL)",
        name="quiet_hours_both_or_neither",
    ),
)


# =====================================================
# 3. NOTIFICATION_LOG
# =====================================================
# One row per device delivery attempt
notification_log = Table(
    "notification_log",
    metadata,
    Column("notification_log_id", BigInteger, primary_key=True, autoincrement=True),
    Column("user_id", BigInteger, nullable=False),
    Column(
        "device_token_id",
        BigInteger,
        ForeignKey("device_tokens.device_token_id", ondelete="SET NULL"),
    ),
    Column("notification_type", Text, nullable=False),  # e.g. "schedule_change"
    Column("title", Text, nullable=False),
    Column("body", Text, nullable=False),
    Column("data_payload", Text),  # JSON-encoded data map
    Column("related_entity_type", Text),  # "Edition", "Engagement", ...
    Column("related_entity_id", BigInteger),
    Column("sent_at", TIMESTAMP(timezone=True), server_default=func.now()),
    Column("is_delivered", Boolean, nullable=False, server_default="false"),
    Column("error_message", Text),  # Why it failed (if applicable)
    Column("read_at", TIMESTAMP(timezone=True)),  # NULL = unread
    Column("created_at", TIMESTAMP(timezone=True), server_default=func.now()),
    Column("modified_at", TIMESTAMP(timezone=True), server_default=func.now()),
    Index("idx_notification_log_user_id_sent_at", "user_id", "sent_at"),
    Index(
        "idx_notification_log_unread",
        "user_id",
        postgresql_where=text("read_at IS NULL"),
    ),
)


# =====================================================
# 4. PERSONAL_SCHEDULES (read-only for the engine)
# =====================================================
personal_schedules = Table(
    "personal_schedules",
    metadata,
    Column("personal_schedule_id", BigInteger, primary_key=True, autoincrement=True),
    Column("user_id", BigInteger, nullable=False),
    Column("edition_id", BigInteger, nullable=False),
    Column("name", Text),
    Column("is_default", Boolean, nullable=False, server_default="true"),
    Column("is_deleted", Boolean, nullable=False, server_default="false"),
    Column("created_at", TIMESTAMP(timezone=True), server_default=func.now()),
    Index("idx_personal_schedules_user_id", "user_id"),
    Index("idx_personal_schedules_edition_id", "edition_id"),
)


# =====================================================
# 5. PERSONAL_SCHEDULE_ENTRIES (read-only for the engine)
# =====================================================
personal_schedule_entries = Table(
    "personal_schedule_entries",
    metadata,
    Column("personal_schedule_entry_id", BigInteger, primary_key=True, autoincrement=True),
    Column(
        "personal_schedule_id",
        BigInteger,
        ForeignKey("personal_schedules.personal_schedule_id", ondelete="CASCADE"),
        nullable=False,
    ),
    Column("engagement_id", BigInteger, nullable=False),
    Column("notifications_enabled", Boolean, nullable=False, server_default="true"),
    Column("is_deleted", Boolean, nullable=False, server_default="false"),
    Column("created_at", TIMESTAMP(timezone=True), server_default=func.now()),
    Index("idx_personal_schedule_entries_schedule_id", "personal_schedule_id"),
    Index("idx_personal_schedule_entries_engagement_id", "engagement_id"),
)
