"""Device token queries using SQLAlchemy Core."""

from datetime import datetime
from typing import Any

from sqlalchemy import select, update
from sqlalchemy.dialects.postgresql import insert
from sqlalchemy.ext.asyncio import AsyncConnection

from ..tables import device_tokens


async def get_device_token_by_id(
    conn: AsyncConnection,
    device_token_id: int,
) -> dict[str, Any] | None:
    """Look up a device token row by id (active or not)."""
    result = await conn.execute(
        select(device_tokens).where(device_tokens.c.device_token_id == device_token_id)
    )
    row = result.mappings().first()
    return dict(row) if row else None


async def get_active_device_tokens_for_user(
    conn: AsyncConnection,
    user_id: int,
) -> list[dict[str, Any]]:
    """All active device tokens for a user, oldest registration first."""
    result = await conn.execute(
        select(device_tokens)
        .where(device_tokens.c.user_id == user_id)
        .where(device_tokens.c.is_active.is_(True))
        .order_by(device_tokens.c.device_token_id)
    )
    return [dict(row) for row in result.mappings()]


async def upsert_device_token(
    conn: AsyncConnection,
    user_id: int,
    token: str,
    platform: str,
    device_name: str | None,
    now: datetime,
) -> dict[str, Any]:
    """
    Insert a device token, or refresh the existing (user_id, token) row.

    A re-registered token is reactivated and gets the new platform and name.
    """
    stmt = insert(device_tokens).values(
        user_id=user_id,
        token=token,
        platform=platform,
        device_name=device_name,
        is_active=True,
        last_used_at=now,
        created_at=now,
        created_by=user_id,
        modified_at=now,
        modified_by=user_id,
    )
    stmt = stmt.on_conflict_do_update(
        constraint="uq_device_tokens_user_id_token",
        set_={
            "platform": stmt.excluded.platform,
            "device_name": stmt.excluded.device_name,
            "is_active": True,
            "last_used_at": stmt.excluded.last_used_at,
            "modified_at": stmt.excluded.modified_at,
            "modified_by": stmt.excluded.modified_by,
        },
    ).returning(device_tokens)

    result = await conn.execute(stmt)
    return dict(result.mappings().first())


async def deactivate_device_token(
    conn: AsyncConnection,
    device_token_id: int,
    now: datetime,
    modified_by: int | None = None,
) -> None:
    """Soft-deactivate a single device token."""
    await conn.execute(
        update(device_tokens)
        .where(device_tokens.c.device_token_id == device_token_id)
        .values(is_active=False, modified_at=now, modified_by=modified_by)
    )


async def deactivate_device_tokens_by_token(
    conn: AsyncConnection,
    token: str,
    now: datetime,
) -> int:
    """Soft-deactivate every active row carrying this token. Returns rows changed."""
    result = await conn.execute(
        update(device_tokens)
        .where(device_tokens.c.token == token)
        .where(device_tokens.c.is_active.is_(True))
        .values(is_active=False, modified_at=now)
    )
    return result.rowcount


async def update_device_last_used(
    conn: AsyncConnection,
    device_token_id: int,
    now: datetime,
) -> None:
    await conn.execute(
        update(device_tokens)
        .where(device_tokens.c.device_token_id == device_token_id)
        .values(last_used_at=now)
    )
