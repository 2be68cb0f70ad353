"""Query layer for database operations using SQLAlchemy Core."""

from .devices import (
    deactivate_device_token,
    deactivate_device_tokens_by_token,
    get_active_device_tokens_for_user,
    get_device_token_by_id,
    update_device_last_used,
    upsert_device_token,
)
from .notification_log import (
    count_unread_notifications,
    get_notification_log_by_id,
    insert_notification_log,
    list_notifications_for_user,
    mark_all_notifications_read,
    mark_notification_read,
)
from .personal_schedules import (
    get_user_ids_with_engagement,
    list_schedule_owners_for_edition,
)
from .preferences import get_preference_for_user, upsert_preference

__all__ = [
    # Devices
    "get_device_token_by_id",
    "get_active_device_tokens_for_user",
    "upsert_device_token",
    "deactivate_device_token",
    "deactivate_device_tokens_by_token",
    "update_device_last_used",
    # Preferences
    "get_preference_for_user",
    "upsert_preference",
    # Notification log
    "insert_notification_log",
    "get_notification_log_by_id",
    "list_notifications_for_user",
    "count_unread_notifications",
    "mark_notification_read",
    "mark_all_notifications_read",
    # Personal schedules (read-only)
    "list_schedule_owners_for_edition",
    "get_user_ids_with_engagement",
]
