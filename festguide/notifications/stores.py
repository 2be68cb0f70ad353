"""
Persistence contracts for the notification engine, and their SQL versions.

Components take these as constructor arguments. The Sql* classes open a
connection per call and delegate to festguide.queries.
"""

from datetime import datetime
from typing import Protocol

from ..database import get_connection, get_transaction
from ..queries import devices as device_queries
from ..queries import notification_log as log_queries
from ..queries import personal_schedules as schedule_queries
from ..queries import preferences as preference_queries
from .models import DeviceToken, NotificationLogEntry, NotificationPreference


class DeviceTokenStore(Protocol):
    async def get_by_id(self, device_token_id: int) -> DeviceToken | None: ...

    async def get_active_by_user(self, user_id: int) -> list[DeviceToken]: ...

    async def upsert(
        self,
        user_id: int,
        token: str,
        platform: str,
        device_name: str | None,
        now: datetime,
    ) -> DeviceToken: ...

    async def deactivate(
        self, device_token_id: int, now: datetime, modified_by: int | None = None
    ) -> None: ...

    async def deactivate_by_token(self, token: str, now: datetime) -> int: ...

    async def update_last_used(self, device_token_id: int, now: datetime) -> None: ...


class PreferenceRepository(Protocol):
    async def get_by_user(self, user_id: int) -> NotificationPreference | None: ...

    async def upsert(
        self, preference: NotificationPreference, now: datetime
    ) -> NotificationPreference: ...


class NotificationLogStore(Protocol):
    async def create(self, entry: NotificationLogEntry) -> int: ...

    async def get_by_id(self, notification_log_id: int) -> NotificationLogEntry | None: ...

    async def list_by_user(
        self, user_id: int, limit: int, offset: int
    ) -> list[NotificationLogEntry]: ...

    async def count_unread(self, user_id: int) -> int: ...

    async def mark_read(self, notification_log_id: int, now: datetime) -> None: ...

    async def mark_all_read(self, user_id: int, now: datetime) -> int: ...


class PersonalScheduleReader(Protocol):
    async def list_owner_ids_for_edition(
        self, edition_id: int, limit: int, offset: int
    ) -> list[int]: ...

    async def get_user_ids_with_engagement(self, engagement_id: int) -> list[int]: ...


# =====================================================
# SQL implementations
# =====================================================


class SqlDeviceTokenStore:
    async def get_by_id(self, device_token_id: int) -> DeviceToken | None:
        async with get_connection() as conn:
            row = await device_queries.get_device_token_by_id(conn, device_token_id)
        return DeviceToken.from_row(row) if row else None

    async def get_active_by_user(self, user_id: int) -> list[DeviceToken]:
        async with get_connection() as conn:
            rows = await device_queries.get_active_device_tokens_for_user(conn, user_id)
        return [DeviceToken.from_row(row) for row in rows]

    async def upsert(
        self,
        user_id: int,
        token: str,
        platform: str,
        device_name: str | None,
        now: datetime,
    ) -> DeviceToken:
        async with get_transaction() as conn:
            row = await device_queries.upsert_device_token(
                conn, user_id, token, platform, device_name, now
            )
        return DeviceToken.from_row(row)

    async def deactivate(
        self, device_token_id: int, now: datetime, modified_by: int | None = None
    ) -> None:
        async with get_transaction() as conn:
            await device_queries.deactivate_device_token(
                conn, device_token_id, now, modified_by
            )

    async def deactivate_by_token(self, token: str, now: datetime) -> int:
        async with get_transaction() as conn:
            return await device_queries.deactivate_device_tokens_by_token(
                conn, token, now
            )

    async def update_last_used(self, device_token_id: int, now: datetime) -> None:
        async with get_transaction() as conn:
            await device_queries.update_device_last_used(conn, device_token_id, now)


class SqlPreferenceRepository:
    async def get_by_user(self, user_id: int) -> NotificationPreference | None:
        async with get_connection() as conn:
            row = await preference_queries.get_preference_for_user(conn, user_id)
        return NotificationPreference.from_row(row) if row else None

    async def upsert(
        self, preference: NotificationPreference, now: datetime
    ) -> NotificationPreference:
        async with get_transaction() as conn:
            row = await preference_queries.upsert_preference(
                conn, preference.user_id, preference.to_values(), now
            )
        return NotificationPreference.from_row(row)


class SqlNotificationLogStore:
    async def create(self, entry: NotificationLogEntry) -> int:
        async with get_transaction() as conn:
            return await log_queries.insert_notification_log(conn, entry.to_values())

    async def get_by_id(self, notification_log_id: int) -> NotificationLogEntry | None:
        async with get_connection() as conn:
            row = await log_queries.get_notification_log_by_id(conn, notification_log_id)
        return NotificationLogEntry.from_row(row) if row else None

    async def list_by_user(
        self, user_id: int, limit: int, offset: int
    ) -> list[NotificationLogEntry]:
        async with get_connection() as conn:
            rows = await log_queries.list_notifications_for_user(
                conn, user_id, limit, offset
            )
        return [NotificationLogEntry.from_row(row) for row in rows]

    async def count_unread(self, user_id: int) -> int:
        async with get_connection() as conn:
            return await log_queries.count_unread_notifications(conn, user_id)

    async def mark_read(self, notification_log_id: int, now: datetime) -> None:
        async with get_transaction() as conn:
            await log_queries.mark_notification_read(conn, notification_log_id, now)

    async def mark_all_read(self, user_id: int, now: datetime) -> int:
        async with get_transaction() as conn:
            return await log_queries.mark_all_notifications_read(conn, user_id, now)


class SqlPersonalScheduleReader:
    async def list_owner_ids_for_edition(
        self, edition_id: int, limit: int, offset: int
    ) -> list[int]:
        async with get_connection() as conn:
            return await schedule_queries.list_schedule_owners_for_edition(
                conn, edition_id, limit, offset
            )

    async def get_user_ids_with_engagement(self, engagement_id: int) -> list[int]:
        async with get_connection() as conn:
            return await schedule_queries.get_user_ids_with_engagement(
                conn, engagement_id
            )
