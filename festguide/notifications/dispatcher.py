"""
Notification dispatcher - gates a notification on the user's preferences and
fans it out to every active device.

Every push goes through send_to_user(). Each device attempt writes its own
notification_log row whether it succeeded or not; failures are recorded,
never raised.
"""

import asyncio
import json
import logging
from typing import Any, Iterable

import sentry_sdk

from ..clock import Clock, utc_now
from ..config import get_push_provider_name
from ..enums import NotificationCategory, RelatedEntityType
from .channels.push import LoggingPushProvider, PushProvider, get_push_provider
from .devices import DeviceRegistry
from .history import NotificationHistory
from .models import (
    DeviceToken,
    NotificationLogEntry,
    NotificationPreference,
    PushMessage,
    ScheduleChange,
)
from .preferences import PreferenceStore
from .quiet_hours import is_quiet_now
from .recipients import RecipientResolver

logger = logging.getLogger(__name__)


# Category tag -> preference flag that gates it. Unknown tags are not gated.
CATEGORY_PREFERENCE_FLAGS = {
    NotificationCategory.schedule_change.value: "schedule_changes_enabled",
    NotificationCategory.reminder.value: "reminders_enabled",
    NotificationCategory.announcement.value: "announcements_enabled",
}

# Provider error text that means the token is dead
INVALID_TOKEN_MARKERS = ("invalid", "unregistered")


def is_category_enabled(preference: NotificationPreference, category: str) -> bool:
    flag = CATEGORY_PREFERENCE_FLAGS.get(category)
    if flag is None:
        return True
    return getattr(preference, flag)


def _is_invalid_token_error(message: str | None) -> bool:
    text = (message or "").lower()
    return any(marker in text for marker in INVALID_TOKEN_MARKERS)


class NotificationDispatcher:
    def __init__(
        self,
        preferences: PreferenceStore,
        devices: DeviceRegistry,
        history: NotificationHistory,
        recipients: RecipientResolver,
        push_provider: PushProvider,
        clock: Clock = utc_now,
    ):
        self.preferences = preferences
        self.devices = devices
        self.history = history
        self.recipients = recipients
        self.push_provider = push_provider
        self.clock = clock

    async def send_to_user(
        self,
        user_id: int,
        category: str,
        title: str,
        body: str,
        *,
        related_entity_type: str | None = None,
        related_entity_id: int | None = None,
        data: dict[str, str] | None = None,
    ) -> None:
        """
        Send one notification to every active device of a user.

        Gates, in order: push enabled, category enabled, outside quiet hours.
        A closed gate or a user without devices is a silent no-op. Device
        sends run concurrently and all finish (and are logged) before this
        returns.
        """
        category = getattr(category, "value", category)
        preference = await self.preferences.get_or_default(user_id)

        if not preference.push_enabled:
            logger.debug(f"Push notifications disabled for user {user_id}, skipping")
            return

        if not is_category_enabled(preference, category):
            logger.debug(f"Notification type {category} disabled for user {user_id}, skipping")
            return

        now = self.clock()
        if is_quiet_now(now, preference.quiet_hours_start, preference.quiet_hours_end):
            logger.debug(f"Quiet hours active for user {user_id}, skipping {category}")
            return

        devices = await self.devices.get_active_devices(user_id)
        if not devices:
            logger.debug(f"No registered devices for user {user_id}")
            return

        message = PushMessage(title=title, body=body, category=category, data=dict(data or {}))
        template = NotificationLogEntry(
            user_id=user_id,
            notification_type=category,
            title=title,
            body=body,
            sent_at=now,
            data_payload=json.dumps(data) if data else None,
            related_entity_type=related_entity_type,
            related_entity_id=related_entity_id,
        )

        await asyncio.gather(
            *(self._deliver(device, message, template) for device in devices)
        )

    async def _deliver(
        self,
        device: DeviceToken,
        message: PushMessage,
        template: NotificationLogEntry,
    ) -> None:
        """One device attempt. Only cancellation escapes."""
        entry = NotificationLogEntry(
            **{**template.__dict__, "device_token_id": device.device_token_id}
        )
        try:
            await self.push_provider.send(device.platform, device.token, message)
        except Exception as e:
            entry.error_message = str(e) or type(e).__name__
            logger.warning(
                f"Failed to send notification to device {device.device_token_id}: {e!r}"
            )
        else:
            entry.is_delivered = True
            logger.info(
                f"Notification sent to user {entry.user_id} on device {device.device_token_id}"
            )

        # A completed attempt is always recorded, even if we are cancelled now
        await asyncio.shield(self._write_log(entry))

        try:
            if entry.is_delivered:
                await self.devices.mark_used(device.device_token_id)
            elif _is_invalid_token_error(entry.error_message):
                await self.devices.deactivate_invalid(device)
        except Exception as e:
            logger.error(f"Failed to update device {device.device_token_id}: {e}")
            sentry_sdk.capture_exception(e)

    async def _write_log(self, entry: NotificationLogEntry) -> None:
        try:
            await self.history.write(entry)
        except Exception as e:
            # The audit write must not break delivery to other devices
            logger.error(
                f"Failed to log notification for user {entry.user_id} "
                f"on device {entry.device_token_id}: {e}"
            )
            sentry_sdk.capture_exception(e)

    async def send_to_users(
        self,
        user_ids: Iterable[int],
        category: str,
        title: str,
        body: str,
        **kwargs: Any,
    ) -> None:
        """send_to_user() once per distinct id. One user's failure never stops the rest."""
        for user_id in dict.fromkeys(user_ids):
            try:
                await self.send_to_user(user_id, category, title, body, **kwargs)
            except Exception as e:
                logger.error(f"Notification to user {user_id} failed: {e}")
                sentry_sdk.capture_exception(e)

    async def send_schedule_change(self, change: ScheduleChange) -> None:
        """
        Notify attendees about a schedule edit.

        With an engagement id, only users who saved that engagement are
        notified; otherwise everyone with a personal schedule for the edition.
        """
        if change.engagement_id is not None:
            user_ids = await self.recipients.resolve_for_engagement_change(
                change.engagement_id
            )
        else:
            user_ids = await self.recipients.resolve_for_edition_broadcast(
                change.edition_id
            )

        if not user_ids:
            logger.debug(f"No recipients for schedule change in edition {change.edition_id}")
            return

        await self.send_to_users(
            sorted(user_ids),
            NotificationCategory.schedule_change.value,
            f"Schedule Update: {change.artist_name or 'Performance'}",
            change.message,
            related_entity_type=RelatedEntityType.edition.value,
            related_entity_id=change.edition_id,
            data=change.to_data(),
        )
        logger.info(
            f"Schedule change notification sent to {len(user_ids)} users "
            f"for edition {change.edition_id}"
        )

    async def send_edition_announcement(
        self, edition_id: int, title: str, body: str
    ) -> None:
        """Announcement to everyone with a personal schedule for the edition."""
        user_ids = await self.recipients.resolve_for_edition_broadcast(edition_id)
        if not user_ids:
            return

        await self.send_to_users(
            sorted(user_ids),
            NotificationCategory.announcement.value,
            title,
            body,
            related_entity_type=RelatedEntityType.edition.value,
            related_entity_id=edition_id,
            data={"editionId": str(edition_id)},
        )
        logger.info(f"Announcement sent to {len(user_ids)} users for edition {edition_id}")


def _default_push_provider() -> PushProvider:
    provider = get_push_provider()
    if provider is not None:
        return provider
    name = get_push_provider_name()
    if name == "logging":
        return LoggingPushProvider()
    raise ValueError(f"Unknown PUSH_PROVIDER {name!r} and no provider registered")


def build_dispatcher(
    push_provider: PushProvider | None = None,
    clock: Clock = utc_now,
) -> NotificationDispatcher:
    """Dispatcher wired to the SQL stores."""
    from .stores import (
        SqlDeviceTokenStore,
        SqlNotificationLogStore,
        SqlPersonalScheduleReader,
        SqlPreferenceRepository,
    )

    return NotificationDispatcher(
        preferences=PreferenceStore(SqlPreferenceRepository(), clock),
        devices=DeviceRegistry(SqlDeviceTokenStore(), clock),
        history=NotificationHistory(SqlNotificationLogStore(), clock),
        recipients=RecipientResolver(SqlPersonalScheduleReader()),
        push_provider=push_provider or _default_push_provider(),
        clock=clock,
    )
