"""Notification preference queries using SQLAlchemy Core."""

from datetime import datetime
from typing import Any

from sqlalchemy import select
from sqlalchemy.dialects.postgresql import insert
from sqlalchemy.ext.asyncio import AsyncConnection

from ..tables import notification_preferences


async def get_preference_for_user(
    conn: AsyncConnection,
    user_id: int,
) -> dict[str, Any] | None:
    result = await conn.execute(
        select(notification_preferences).where(
            notification_preferences.c.user_id == user_id
        )
    )
    row = result.mappings().first()
    return dict(row) if row else None


async def upsert_preference(
    conn: AsyncConnection,
    user_id: int,
    values: dict[str, Any],
    now: datetime,
) -> dict[str, Any]:
    """
    Write the full preference row for a user (one row per user).

    `values` holds every preference column; merging a partial patch is the
    caller's job.
    """
    stmt = insert(notification_preferences).values(
        user_id=user_id,
        created_at=now,
        created_by=user_id,
        modified_at=now,
        modified_by=user_id,
        **values,
    )
    stmt = stmt.on_conflict_do_update(
        index_elements=[notification_preferences.c.user_id],
        set_={**values, "modified_at": now, "modified_by": user_id},
    ).returning(notification_preferences)

    result = await conn.execute(stmt)
    return dict(result.mappings().first())
