"""Turn schedule events into the set of users to notify."""

import logging

from ..config import get_edition_schedule_page_size
from .stores import PersonalScheduleReader

logger = logging.getLogger(__name__)


class RecipientResolver:
    """
    Resolves recipients from attendees' personal schedules.

    A user may keep several personal schedules for one edition, so every
    result is a set: each user is notified once no matter how many of their
    schedules match.
    """

    def __init__(self, schedules: PersonalScheduleReader, page_size: int | None = None):
        if page_size is None:
            page_size = get_edition_schedule_page_size()
        if page_size < 1:
            raise ValueError(f"page_size must be positive, got {page_size}")
        self.schedules = schedules
        self.page_size = page_size

    async def resolve_for_engagement_change(self, engagement_id: int) -> set[int]:
        """Users with the engagement in any of their personal schedules."""
        user_ids = set(await self.schedules.get_user_ids_with_engagement(engagement_id))
        logger.debug(
            f"Engagement {engagement_id}: {len(user_ids)} recipient(s)"
        )
        return user_ids

    async def resolve_for_edition_broadcast(self, edition_id: int) -> set[int]:
        """Users owning any personal schedule for the edition, entries or not."""
        user_ids: set[int] = set()
        offset = 0
        while True:
            page = await self.schedules.list_owner_ids_for_edition(
                edition_id, self.page_size, offset
            )
            user_ids.update(page)
            if len(page) < self.page_size:
                break
            offset += self.page_size

        logger.debug(f"Edition {edition_id}: {len(user_ids)} recipient(s)")
        return user_ids
