"""
Tests for ClockSyncDatabaseAPI.
"""

import pytest

from database.clock_sync_database_api import ClockSyncDatabaseAPI
from game_clock.clock_sync_config import ClockSyncConfig, ClockSyncStore


@pytest.fixture
def api(test_db_path):
    api = ClockSyncDatabaseAPI(test_db_path)
    api.db.initialize_database()
    return api


class TestClockSyncDatabaseAPI:

    def test_missing_video_returns_none(self, api):
        assert api.get_clock_sync("unknown") is None

    def test_save_and_load(self, api):
        config = ClockSyncConfig(quarter_length_minutes=10, jumpball_ms=4500, q2_start_ms=700000, halftime_ms=1400000)
        api.save_clock_sync("video-1", config)
        assert api.get_clock_sync("video-1") == config

    def test_save_overwrites_and_clears_markers(self, api):
        api.save_clock_sync("video-1", ClockSyncConfig(jumpball_ms=0, q2_start_ms=800000, q3_start_ms=1600000))
        api.save_clock_sync("video-1", ClockSyncConfig(jumpball_ms=0, q2_start_ms=750000))
        loaded = api.get_clock_sync("video-1")
        assert loaded.q2_start_ms == 750000
        assert loaded.q3_start_ms is None

    def test_delete(self, api):
        api.save_clock_sync("video-1", ClockSyncConfig(jumpball_ms=0))
        assert api.delete_clock_sync("video-1")
        assert not api.delete_clock_sync("video-1")

    def test_store_persists_through_api(self, api):
        store = ClockSyncStore(video_id="video-2", persistence=api)
        store.calibrate(12000)
        store.set_marker(2, 900000)

        reloaded = ClockSyncStore(persistence=api)
        reloaded.load("video-2")
        assert reloaded.config.markers() == {1: 12000, 2: 900000}
