"""Tests for PreferenceStore and PreferenceUpdate."""

from datetime import time

import pytest

from festguide.errors import InvalidPreferenceError
from festguide.notifications.models import (
    UNSET,
    NotificationPreference,
    PreferenceUpdate,
)


class TestGetOrDefault:
    @pytest.mark.asyncio
    async def test_defaults_when_no_row(self, preferences, preference_repo):
        pref = await preferences.get_or_default(7)

        assert pref == NotificationPreference(user_id=7)
        assert pref.push_enabled is True
        assert pref.reminder_minutes_before == 30
        assert pref.quiet_hours_start is None
        assert pref.time_zone_id == "UTC"
        # Reading never creates a row
        assert preference_repo.rows == {}

    @pytest.mark.asyncio
    async def test_returns_stored_row(self, preferences, preference_repo):
        preference_repo.rows[7] = NotificationPreference(user_id=7, push_enabled=False)

        pref = await preferences.get_or_default(7)

        assert pref.push_enabled is False


class TestUpdate:
    @pytest.mark.asyncio
    async def test_creates_row_from_defaults_plus_patch(self, preferences, preference_repo):
        saved = await preferences.update(7, PreferenceUpdate(reminders_enabled=False))

        assert saved.reminders_enabled is False
        assert saved.push_enabled is True
        assert preference_repo.rows[7] == saved

    @pytest.mark.asyncio
    async def test_unset_fields_keep_existing_values(self, preferences, preference_repo):
        preference_repo.rows[7] = NotificationPreference(
            user_id=7,
            announcements_enabled=False,
            quiet_hours_start=time(22, 0),
            quiet_hours_end=time(7, 0),
        )

        saved = await preferences.update(7, PreferenceUpdate(push_enabled=False))

        assert saved.push_enabled is False
        assert saved.announcements_enabled is False
        assert saved.quiet_hours_start == time(22, 0)
        assert saved.quiet_hours_end == time(7, 0)

    @pytest.mark.asyncio
    async def test_explicit_none_clears_quiet_hours(self, preferences, preference_repo):
        preference_repo.rows[7] = NotificationPreference(
            user_id=7, quiet_hours_start=time(22, 0), quiet_hours_end=time(7, 0)
        )

        saved = await preferences.update(
            7, PreferenceUpdate(quiet_hours_start=None, quiet_hours_end=None)
        )

        assert saved.quiet_hours_start is None
        assert saved.quiet_hours_end is None

    @pytest.mark.asyncio
    async def test_null_on_non_nullable_field_keeps_stored_value(
        self, preferences, preference_repo
    ):
        preference_repo.rows[7] = NotificationPreference(
            user_id=7, push_enabled=True, reminder_minutes_before=45
        )

        saved = await preferences.update(
            7,
            PreferenceUpdate.from_dict(
                {"push_enabled": None, "reminder_minutes_before": None}
            ),
        )

        assert saved.push_enabled is True
        assert saved.reminder_minutes_before == 45

    @pytest.mark.asyncio
    async def test_null_from_constructor_is_also_ignored(self, preferences):
        saved = await preferences.update(7, PreferenceUpdate(email_enabled=None))
        assert saved.email_enabled is True

    @pytest.mark.asyncio
    async def test_single_quiet_hours_bound_is_rejected(self, preferences, preference_repo):
        with pytest.raises(InvalidPreferenceError):
            await preferences.update(7, PreferenceUpdate(quiet_hours_start=time(22, 0)))

        assert preference_repo.rows == {}

    @pytest.mark.asyncio
    async def test_clearing_one_bound_of_a_window_is_rejected(
        self, preferences, preference_repo
    ):
        stored = NotificationPreference(
            user_id=7, quiet_hours_start=time(22, 0), quiet_hours_end=time(7, 0)
        )
        preference_repo.rows[7] = stored

        with pytest.raises(InvalidPreferenceError):
            await preferences.update(7, PreferenceUpdate(quiet_hours_end=None))

        assert preference_repo.rows[7] is stored


class TestPreferenceUpdateFromDict:
    def test_key_presence_decides_what_is_set(self):
        patch = PreferenceUpdate.from_dict(
            {"push_enabled": False, "quiet_hours_start": None, "unknown": 1}
        )

        assert patch.push_enabled is False
        assert patch.quiet_hours_start is None
        assert patch.quiet_hours_end is UNSET
        assert patch.provided() == {"push_enabled": False, "quiet_hours_start": None}

    def test_parses_quiet_hours_strings(self):
        patch = PreferenceUpdate.from_dict(
            {"quiet_hours_start": "22:30", "quiet_hours_end": "06:00"}
        )

        assert patch.quiet_hours_start == time(22, 30)
        assert patch.quiet_hours_end == time(6, 0)

    def test_empty_patch_changes_nothing(self):
        pref = NotificationPreference(user_id=1, email_enabled=False)
        assert PreferenceUpdate().apply_to(pref) == pref

    def test_null_is_dropped_for_non_nullable_fields(self):
        patch = PreferenceUpdate.from_dict(
            {"push_enabled": None, "time_zone_id": None, "quiet_hours_end": None}
        )

        assert patch.push_enabled is UNSET
        assert patch.time_zone_id is UNSET
        assert patch.provided() == {"quiet_hours_end": None}
