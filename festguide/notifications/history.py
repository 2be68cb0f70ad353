"""Per-user notification audit trail."""

import logging

from ..clock import Clock, utc_now
from ..errors import Err, ForbiddenError, Ok, Result
from .models import NotificationDto, NotificationLogEntry
from .stores import NotificationLogStore

logger = logging.getLogger(__name__)


class NotificationHistory:
    """Reads a user's notification log and tracks what they have read."""

    def __init__(self, store: NotificationLogStore, clock: Clock = utc_now):
        self.store = store
        self.clock = clock

    async def write(self, entry: NotificationLogEntry) -> int:
        """Append one delivery attempt. Returns the new row id."""
        return await self.store.create(entry)

    async def list_notifications(
        self, user_id: int, limit: int = 50, offset: int = 0
    ) -> list[NotificationDto]:
        """A page of the user's notifications, newest first. Bounds are checked upstream."""
        entries = await self.store.list_by_user(user_id, limit, offset)
        return [NotificationDto.from_entry(entry) for entry in entries]

    async def unread_count(self, user_id: int) -> int:
        return await self.store.count_unread(user_id)

    async def mark_as_read(self, user_id: int, notification_id: int) -> Result:
        entry = await self.store.get_by_id(notification_id)
        if entry is None or entry.user_id != user_id:
            return Err(
                ForbiddenError("Notification not found or does not belong to user.")
            )

        await self.store.mark_read(notification_id, self.clock())
        return Ok(None)

    async def mark_all_as_read(self, user_id: int) -> None:
        count = await self.store.mark_all_read(user_id, self.clock())
        logger.debug(f"Marked {count} notification(s) read for user {user_id}")
