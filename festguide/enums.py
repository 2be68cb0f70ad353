"""Enum definitions shared by the notification engine."""

import enum


class NotificationCategory(str, enum.Enum):
    schedule_change = "schedule_change"
    reminder = "reminder"
    announcement = "announcement"


class RelatedEntityType(str, enum.Enum):
    edition = "Edition"
    engagement = "Engagement"
    time_slot = "TimeSlot"
