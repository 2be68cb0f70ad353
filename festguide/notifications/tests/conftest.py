"""Pytest fixtures for notification engine tests: in-memory stores and a fake push provider."""

import itertools
from dataclasses import replace
from datetime import datetime, timezone

import pytest

from festguide.clock import fixed_clock
from festguide.notifications.devices import DeviceRegistry
from festguide.notifications.dispatcher import NotificationDispatcher
from festguide.notifications.history import NotificationHistory
from festguide.notifications.models import DeviceToken
from festguide.notifications.preferences import PreferenceStore
from festguide.notifications.recipients import RecipientResolver

NOON = datetime(2025, 7, 12, 12, 0, tzinfo=timezone.utc)


class InMemoryDeviceTokenStore:
    def __init__(self):
        self.rows: dict[int, DeviceToken] = {}
        self._ids = itertools.count(1)

    async def get_by_id(self, device_token_id):
        return self.rows.get(device_token_id)

    async def get_active_by_user(self, user_id):
        return [d for d in self.rows.values() if d.user_id == user_id and d.is_active]

    async def upsert(self, user_id, token, platform, device_name, now):
        for device in self.rows.values():
            if device.user_id == user_id and device.token == token:
                device.platform = platform
                device.device_name = device_name
                device.is_active = True
                device.last_used_at = now
                device.modified_at = now
                return replace(device)

        device = DeviceToken(
            device_token_id=next(self._ids),
            user_id=user_id,
            token=token,
            platform=platform,
            device_name=device_name,
            last_used_at=now,
            created_at=now,
            created_by=user_id,
        )
        self.rows[device.device_token_id] = device
        return replace(device)

    async def deactivate(self, device_token_id, now, modified_by=None):
        device = self.rows[device_token_id]
        device.is_active = False
        device.modified_at = now
        device.modified_by = modified_by

    async def deactivate_by_token(self, token, now):
        count = 0
        for device in self.rows.values():
            if device.token == token and device.is_active:
                device.is_active = False
                device.modified_at = now
                count += 1
        return count

    async def update_last_used(self, device_token_id, now):
        self.rows[device_token_id].last_used_at = now


class InMemoryPreferenceRepository:
    def __init__(self):
        self.rows = {}

    async def get_by_user(self, user_id):
        return self.rows.get(user_id)

    async def upsert(self, preference, now):
        self.rows[preference.user_id] = preference
        return preference


class InMemoryNotificationLogStore:
    def __init__(self):
        self.rows = []
        self._ids = itertools.count(1)

    async def create(self, entry):
        entry = replace(entry, notification_log_id=next(self._ids))
        self.rows.append(entry)
        return entry.notification_log_id

    async def get_by_id(self, notification_log_id):
        for entry in self.rows:
            if entry.notification_log_id == notification_log_id:
                return entry
        return None

    async def list_by_user(self, user_id, limit, offset):
        mine = [e for e in self.rows if e.user_id == user_id]
        mine.sort(key=lambda e: (e.sent_at, e.notification_log_id), reverse=True)
        return mine[offset : offset + limit]

    async def count_unread(self, user_id):
        return sum(1 for e in self.rows if e.user_id == user_id and e.read_at is None)

    async def mark_read(self, notification_log_id, now):
        for entry in self.rows:
            if entry.notification_log_id == notification_log_id:
                entry.read_at = now

    async def mark_all_read(self, user_id, now):
        count = 0
        for entry in self.rows:
            if entry.user_id == user_id and entry.read_at is None:
                entry.read_at = now
                count += 1
        return count


class InMemoryPersonalScheduleReader:
    """
    Schedules as (user_id, edition_id, is_deleted) and entries as
    (schedule_index, engagement_id, is_deleted, notifications_enabled).
    """

    def __init__(self):
        self.schedules = []
        self.entries = []
        self.page_calls = []

    def add_schedule(
        self, user_id, edition_id, engagement_ids=(), is_deleted=False, muted_ids=()
    ):
        self.schedules.append((user_id, edition_id, is_deleted))
        index = len(self.schedules) - 1
        for engagement_id in engagement_ids:
            self.entries.append((index, engagement_id, False, True))
        for engagement_id in muted_ids:
            self.entries.append((index, engagement_id, False, False))
        return index

    async def list_owner_ids_for_edition(self, edition_id, limit, offset):
        self.page_calls.append((limit, offset))
        owners = [
            user_id
            for user_id, schedule_edition, is_deleted in self.schedules
            if schedule_edition == edition_id and not is_deleted
        ]
        return owners[offset : offset + limit]

    async def get_user_ids_with_engagement(self, engagement_id):
        user_ids = []
        for index, entry_engagement, entry_deleted, enabled in self.entries:
            user_id, _, schedule_deleted = self.schedules[index]
            live = not entry_deleted and not schedule_deleted
            if entry_engagement == engagement_id and live and enabled:
                if user_id not in user_ids:
                    user_ids.append(user_id)
        return user_ids


class FakePushProvider:
    """Records every send. `failures` maps token -> exception to raise."""

    def __init__(self):
        self.sent = []
        self.failures = {}

    async def send(self, platform, token, message):
        if token in self.failures:
            raise self.failures[token]
        self.sent.append((platform, token, message))


@pytest.fixture
def clock():
    return fixed_clock(NOON)


@pytest.fixture
def device_store():
    return InMemoryDeviceTokenStore()


@pytest.fixture
def preference_repo():
    return InMemoryPreferenceRepository()


@pytest.fixture
def log_store():
    return InMemoryNotificationLogStore()


@pytest.fixture
def schedule_reader():
    return InMemoryPersonalScheduleReader()


@pytest.fixture
def push_provider():
    return FakePushProvider()


@pytest.fixture
def registry(device_store, clock):
    return DeviceRegistry(device_store, clock)


@pytest.fixture
def preferences(preference_repo, clock):
    return PreferenceStore(preference_repo, clock)


@pytest.fixture
def history(log_store, clock):
    return NotificationHistory(log_store, clock)


@pytest.fixture
def resolver(schedule_reader):
    return RecipientResolver(schedule_reader, page_size=2)


@pytest.fixture
def dispatcher(preferences, registry, history, resolver, push_provider, clock):
    return NotificationDispatcher(
        preferences=preferences,
        devices=registry,
        history=history,
        recipients=resolver,
        push_provider=push_provider,
        clock=clock,
    )
