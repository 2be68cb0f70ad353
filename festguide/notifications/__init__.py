"""
Push notification engine for festival attendees.

Public API:
    build_dispatcher(push_provider, clock) - Dispatcher wired to the database
    NotificationDispatcher.send_to_user(...) - Gate on preferences, push to every device
    NotificationDispatcher.send_to_users(...) - Same, once per distinct user
    NotificationDispatcher.send_schedule_change(change) - Resolve recipients and notify

Components:
    DeviceRegistry - register/deactivate push tokens
    PreferenceStore - read with defaults, merge-patch updates
    NotificationHistory - audit log, unread counts, read markers
    RecipientResolver - who to notify for a schedule event
    is_quiet_now(now, start, end) - quiet-hours window check
"""

from .devices import DeviceRegistry
from .dispatcher import NotificationDispatcher, build_dispatcher, is_category_enabled
from .history import NotificationHistory
from .models import (
    UNSET,
    DeviceToken,
    NotificationDto,
    NotificationLogEntry,
    NotificationPreference,
    PreferenceUpdate,
    PushMessage,
    ScheduleChange,
)
from .preferences import PreferenceStore
from .quiet_hours import is_quiet_now
from .recipients import RecipientResolver

__all__ = [
    # Components
    "NotificationDispatcher",
    "build_dispatcher",
    "DeviceRegistry",
    "PreferenceStore",
    "NotificationHistory",
    "RecipientResolver",
    "is_quiet_now",
    "is_category_enabled",
    # Records
    "UNSET",
    "DeviceToken",
    "NotificationPreference",
    "PreferenceUpdate",
    "NotificationLogEntry",
    "NotificationDto",
    "PushMessage",
    "ScheduleChange",
]
