"""Notification audit log queries using SQLAlchemy Core."""

from datetime import datetime
from typing import Any

from sqlalchemy import func, insert, select, update
from sqlalchemy.ext.asyncio import AsyncConnection

from ..tables import notification_log


async def insert_notification_log(
    conn: AsyncConnection,
    values: dict[str, Any],
) -> int:
    """Append one delivery attempt. Returns the new notification_log_id."""
    result = await conn.execute(
        insert(notification_log)
        .values(**values)
        .returning(notification_log.c.notification_log_id)
    )
    return result.scalar_one()


async def get_notification_log_by_id(
    conn: AsyncConnection,
    notification_log_id: int,
) -> dict[str, Any] | None:
    result = await conn.execute(
        select(notification_log).where(
            notification_log.c.notification_log_id == notification_log_id
        )
    )
    row = result.mappings().first()
    return dict(row) if row else None


async def list_notifications_for_user(
    conn: AsyncConnection,
    user_id: int,
    limit: int,
    offset: int,
) -> list[dict[str, Any]]:
    """A page of a user's log rows, newest first."""
    result = await conn.execute(
        select(notification_log)
        .where(notification_log.c.user_id == user_id)
        .order_by(
            notification_log.c.sent_at.desc(),
            notification_log.c.notification_log_id.desc(),
        )
        .limit(limit)
        .offset(offset)
    )
    return [dict(row) for row in result.mappings()]


async def count_unread_notifications(
    conn: AsyncConnection,
    user_id: int,
) -> int:
    result = await conn.execute(
        select(func.count())
        .select_from(notification_log)
        .where(notification_log.c.user_id == user_id)
        .where(notification_log.c.read_at.is_(None))
    )
    return result.scalar_one()


async def mark_notification_read(
    conn: AsyncConnection,
    notification_log_id: int,
    now: datetime,
) -> None:
    await conn.execute(
        update(notification_log)
        .where(notification_log.c.notification_log_id == notification_log_id)
        .values(read_at=now, modified_at=now)
    )


async def mark_all_notifications_read(
    conn: AsyncConnection,
    user_id: int,
    now: datetime,
) -> int:
    """Mark every unread row of a user as read. Returns rows changed."""
    result = await conn.execute(
        update(notification_log)
        .where(notification_log.c.user_id == user_id)
        .where(notification_log.c.read_at.is_(None))
        .values(read_at=now, modified_at=now)
    )
    return result.rowcount
