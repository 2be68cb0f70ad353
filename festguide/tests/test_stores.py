"""Tests for the SQL-backed stores: connection handling and row conversion."""

from contextlib import asynccontextmanager
from datetime import datetime, time, timezone
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from festguide.notifications.models import NotificationLogEntry, NotificationPreference
from festguide.notifications.stores import (
    SqlDeviceTokenStore,
    SqlNotificationLogStore,
    SqlPersonalScheduleReader,
    SqlPreferenceRepository,
)

NOW = datetime(2025, 7, 12, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def conn():
    return MagicMock(name="conn")


@pytest.fixture
def patched_db(conn):
    """Route get_connection/get_transaction to one mock connection, recording which was used."""
    used = []

    def make(kind):
        @asynccontextmanager
        async def ctx():
            used.append(kind)
            yield conn

        return ctx

    with patch("festguide.notifications.stores.get_connection", make("read")), patch(
        "festguide.notifications.stores.get_transaction", make("write")
    ):
        yield used


class TestSqlDeviceTokenStore:
    @pytest.mark.asyncio
    async def test_get_active_converts_rows(self, patched_db, conn):
        rows = [
            {"device_token_id": 1, "user_id": 5, "token": "a", "platform": "ios", "extra": 1},
        ]
        with patch(
            "festguide.notifications.stores.device_queries.get_active_device_tokens_for_user",
            AsyncMock(return_value=rows),
        ) as query:
            devices = await SqlDeviceTokenStore().get_active_by_user(5)

        query.assert_awaited_once_with(conn, 5)
        assert devices[0].token == "a"
        assert patched_db == ["read"]

    @pytest.mark.asyncio
    async def test_get_by_id_missing(self, patched_db):
        with patch(
            "festguide.notifications.stores.device_queries.get_device_token_by_id",
            AsyncMock(return_value=None),
        ):
            assert await SqlDeviceTokenStore().get_by_id(9) is None

    @pytest.mark.asyncio
    async def test_deactivate_uses_transaction(self, patched_db, conn):
        with patch(
            "festguide.notifications.stores.device_queries.deactivate_device_token",
            AsyncMock(),
        ) as query:
            await SqlDeviceTokenStore().deactivate(3, NOW, modified_by=5)

        query.assert_awaited_once_with(conn, 3, NOW, 5)
        assert patched_db == ["write"]


class TestSqlPreferenceRepository:
    @pytest.mark.asyncio
    async def test_upsert_writes_every_column(self, patched_db, conn):
        pref = NotificationPreference(user_id=5, quiet_hours_start=time(23, 0))
        stored = {"user_id": 5, "quiet_hours_start": time(23, 0), "created_at": NOW}
        with patch(
            "festguide.notifications.stores.preference_queries.upsert_preference",
            AsyncMock(return_value=stored),
        ) as query:
            saved = await SqlPreferenceRepository().upsert(pref, NOW)

        args = query.await_args.args
        assert args[1] == 5
        assert "user_id" not in args[2]
        assert args[2]["reminder_minutes_before"] == 30
        assert saved.quiet_hours_start == time(23, 0)
        assert patched_db == ["write"]


class TestSqlNotificationLogStore:
    @pytest.mark.asyncio
    async def test_create_passes_values_without_id(self, patched_db, conn):
        entry = NotificationLogEntry(
            user_id=1,
            notification_type="reminder",
            title="t",
            body="b",
            sent_at=NOW,
            notification_log_id=99,
        )
        with patch(
            "festguide.notifications.stores.log_queries.insert_notification_log",
            AsyncMock(return_value=7),
        ) as query:
            new_id = await SqlNotificationLogStore().create(entry)

        assert new_id == 7
        assert "notification_log_id" not in query.await_args.args[1]


class TestSqlPersonalScheduleReader:
    @pytest.mark.asyncio
    async def test_owner_page(self, patched_db, conn):
        with patch(
            "festguide.notifications.stores.schedule_queries.list_schedule_owners_for_edition",
            AsyncMock(return_value=[1, 2]),
        ) as query:
            owners = await SqlPersonalScheduleReader().list_owner_ids_for_edition(10, 500, 0)

        query.assert_awaited_once_with(conn, 10, 500, 0)
        assert owners == [1, 2]
