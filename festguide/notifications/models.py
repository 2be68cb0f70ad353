"""Records and value types used by the notification engine."""

from dataclasses import dataclass, field, fields, replace
from datetime import datetime, time
from typing import Any, Mapping, Optional


class _Unset:
    """Marker for a patch field that was not supplied."""

    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "UNSET"

    def __bool__(self) -> bool:
        return False


UNSET: Any = _Unset()


def _from_row(cls, row: Mapping[str, Any]):
    """Build a dataclass from a row mapping, ignoring unknown columns."""
    names = {f.name for f in fields(cls)}
    return cls(**{k: v for k, v in dict(row).items() if k in names})


@dataclass
class DeviceToken:
    """A push token registered by one user for one app install."""

    device_token_id: int
    user_id: int
    token: str
    platform: str
    device_name: Optional[str] = None
    is_active: bool = True
    last_used_at: Optional[datetime] = None
    created_at: Optional[datetime] = None
    created_by: Optional[int] = None
    modified_at: Optional[datetime] = None
    modified_by: Optional[int] = None

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> "DeviceToken":
        return _from_row(cls, row)

    def to_dict(self) -> dict:
        return {
            "device_token_id": self.device_token_id,
            "platform": self.platform,
            "device_name": self.device_name,
            "is_active": self.is_active,
            "last_used_at": self.last_used_at.isoformat() if self.last_used_at else None,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }


@dataclass
class NotificationPreference:
    """Per-user notification settings. Field defaults are the engine defaults."""

    user_id: int
    push_enabled: bool = True
    email_enabled: bool = True
    schedule_changes_enabled: bool = True
    reminders_enabled: bool = True
    reminder_minutes_before: int = 30
    announcements_enabled: bool = True
    quiet_hours_start: Optional[time] = None
    quiet_hours_end: Optional[time] = None
    # Stored and returned, not used by the quiet-hours check (UTC only)
    time_zone_id: str = "UTC"

    @classmethod
    def default(cls, user_id: int) -> "NotificationPreference":
        return cls(user_id=user_id)

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> "NotificationPreference":
        return _from_row(cls, row)

    def to_values(self) -> dict:
        """Column values for an insert/update (everything except user_id)."""
        return {f.name: getattr(self, f.name) for f in fields(self) if f.name != "user_id"}

    def to_dict(self) -> dict:
        values = self.to_values()
        for key in ("quiet_hours_start", "quiet_hours_end"):
            if values[key] is not None:
                values[key] = values[key].strftime("%H:%M")
        return values


@dataclass(frozen=True)
class PreferenceUpdate:
    """
    Merge-patch for NotificationPreference.

    Every field defaults to UNSET. UNSET leaves the stored value alone.
    None clears the quiet-hours bounds; on any other field it counts as
    not supplied, since those columns are never null.
    """

    push_enabled: Any = UNSET
    email_enabled: Any = UNSET
    schedule_changes_enabled: Any = UNSET
    reminders_enabled: Any = UNSET
    reminder_minutes_before: Any = UNSET
    announcements_enabled: Any = UNSET
    quiet_hours_start: Any = UNSET
    quiet_hours_end: Any = UNSET
    time_zone_id: Any = UNSET

    # Fields where an explicit None is a real value
    NULLABLE_FIELDS = frozenset({"quiet_hours_start", "quiet_hours_end"})

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> "PreferenceUpdate":
        """Build a patch from a request body. Key presence decides what is set."""
        names = {f.name for f in fields(cls)}
        values = {}
        for key, value in payload.items():
            if key not in names:
                continue
            if value is None and key not in cls.NULLABLE_FIELDS:
                continue
            if key in cls.NULLABLE_FIELDS and isinstance(value, str):
                value = time.fromisoformat(value)
            values[key] = value
        return cls(**values)

    def provided(self) -> dict:
        """Only the fields that were supplied."""
        values = {}
        for f in fields(self):
            value = getattr(self, f.name)
            if value is UNSET:
                continue
            if value is None and f.name not in self.NULLABLE_FIELDS:
                continue
            values[f.name] = value
        return values

    def apply_to(self, preference: NotificationPreference) -> NotificationPreference:
        return replace(preference, **self.provided())


@dataclass
class NotificationLogEntry:
    """One device delivery attempt, as written to the audit log."""

    user_id: int
    notification_type: str
    title: str
    body: str
    sent_at: datetime
    is_delivered: bool = False
    device_token_id: Optional[int] = None
    error_message: Optional[str] = None
    data_payload: Optional[str] = None
    related_entity_type: Optional[str] = None
    related_entity_id: Optional[int] = None
    read_at: Optional[datetime] = None
    notification_log_id: Optional[int] = None

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> "NotificationLogEntry":
        return _from_row(cls, row)

    def to_values(self) -> dict:
        values = {f.name: getattr(self, f.name) for f in fields(self)}
        values.pop("notification_log_id")
        return values


@dataclass(frozen=True)
class NotificationDto:
    """History view of a log row."""

    notification_id: int
    notification_type: str
    title: str
    body: str
    related_entity_type: Optional[str]
    related_entity_id: Optional[int]
    sent_at: datetime
    is_read: bool

    @classmethod
    def from_entry(cls, entry: NotificationLogEntry) -> "NotificationDto":
        return cls(
            notification_id=entry.notification_log_id,
            notification_type=entry.notification_type,
            title=entry.title,
            body=entry.body,
            related_entity_type=entry.related_entity_type,
            related_entity_id=entry.related_entity_id,
            sent_at=entry.sent_at,
            is_read=entry.read_at is not None,
        )


@dataclass(frozen=True)
class PushMessage:
    """What the push provider receives for a single device."""

    title: str
    body: str
    category: Optional[str] = None
    data: dict[str, str] = field(default_factory=dict)


@dataclass(frozen=True)
class ScheduleChange:
    """An organizer edit to an edition's schedule."""

    edition_id: int
    change_type: str
    message: str
    engagement_id: Optional[int] = None
    time_slot_id: Optional[int] = None
    artist_name: Optional[str] = None
    stage_name: Optional[str] = None
    old_start_time: Optional[datetime] = None
    new_start_time: Optional[datetime] = None

    def to_data(self) -> dict[str, str]:
        """Data map sent with the push message."""
        data = {
            "editionId": str(self.edition_id),
            "changeType": self.change_type,
        }
        if self.engagement_id is not None:
            data["engagementId"] = str(self.engagement_id)
        if self.time_slot_id is not None:
            data["timeSlotId"] = str(self.time_slot_id)
        if self.stage_name:
            data["stageName"] = self.stage_name
        if self.old_start_time is not None:
            data["oldStartTime"] = self.old_start_time.isoformat()
        if self.new_start_time is not None:
            data["newStartTime"] = self.new_start_time.isoformat()
        return data
