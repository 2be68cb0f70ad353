"""
Read-only personal schedule queries.

Personal schedules are owned by the attendee CRUD service; the notification
engine only reads them to work out who to notify.
"""

from sqlalchemy import and_, select
from sqlalchemy.ext.asyncio import AsyncConnection

from ..tables import personal_schedule_entries, personal_schedules


async def list_schedule_owners_for_edition(
    conn: AsyncConnection,
    edition_id: int,
    limit: int,
    offset: int,
) -> list[int]:
    """
    Owner user_id of each live personal schedule for an edition, one page.

    One value per schedule, so a user with several schedules appears more
    than once. Ordered by schedule id for stable paging.
    """
    result = await conn.execute(
        select(personal_schedules.c.user_id)
        .where(personal_schedules.c.edition_id == edition_id)
        .where(personal_schedules.c.is_deleted.is_(False))
        .order_by(personal_schedules.c.personal_schedule_id)
        .limit(limit)
        .offset(offset)
    )
    return list(result.scalars())


async def get_user_ids_with_engagement(
    conn: AsyncConnection,
    engagement_id: int,
) -> list[int]:
    """Distinct users with a live, unmuted schedule entry for this engagement."""
    result = await conn.execute(
        select(personal_schedules.c.user_id)
        .distinct()
        .join(
            personal_schedule_entries,
            personal_schedules.c.personal_schedule_id
            == personal_schedule_entries.c.personal_schedule_id,
        )
        .where(
            and_(
                personal_schedule_entries.c.engagement_id == engagement_id,
                personal_schedule_entries.c.is_deleted.is_(False),
                personal_schedule_entries.c.notifications_enabled.is_(True),
                personal_schedules.c.is_deleted.is_(False),
            )
        )
    )
    return list(result.scalars())
