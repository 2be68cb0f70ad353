"""Per-user notification preferences."""

import logging

from ..clock import Clock, utc_now
from ..errors import InvalidPreferenceError
from .models import NotificationPreference, PreferenceUpdate
from .stores import PreferenceRepository

logger = logging.getLogger(__name__)


class PreferenceStore:
    """Reads preferences with defaulting, writes them as merge-patches."""

    def __init__(self, repository: PreferenceRepository, clock: Clock = utc_now):
        self.repository = repository
        self.clock = clock

    async def get_or_default(self, user_id: int) -> NotificationPreference:
        """The user's stored preferences, or the defaults. Never writes a row."""
        preference = await self.repository.get_by_user(user_id)
        if preference is None:
            return NotificationPreference.default(user_id)
        return preference

    async def update(
        self, user_id: int, patch: PreferenceUpdate
    ) -> NotificationPreference:
        """
        Apply a partial update.

        Fields left UNSET in the patch keep their current value (or the
        default when the user has no row yet). The merged result is stored.

        Raises InvalidPreferenceError if the merged row would have only one
        quiet-hours bound; nothing is written in that case.
        """
        current = await self.get_or_default(user_id)
        merged = patch.apply_to(current)

        if (merged.quiet_hours_start is None) != (merged.quiet_hours_end is None):
            raise InvalidPreferenceError(
                "Quiet hours need both a start and an end, or neither."
            )

        saved = await self.repository.upsert(merged, self.clock())

        logger.info(
            f"Notification preferences updated for user {user_id}: "
            f"{sorted(patch.provided())}"
        )
        return saved
