"""
Tests for ClockSyncConfig and ClockSyncStore.
"""

import pytest

from game_clock.clock_sync_config import ClockSyncConfig, ClockSyncStore


class TestClockSyncConfig:
    """Test marker storage"""

    def test_invalid_quarter_length(self):
        with pytest.raises(ValueError, match="quarter_length_minutes"):
            ClockSyncConfig(quarter_length_minutes=0)

    def test_calibrated_only_with_jumpball(self):
        config = ClockSyncConfig(q2_start_ms=1000)
        assert not config.is_calibrated
        config.set_marker(1, 0)
        assert config.is_calibrated

    def test_set_and_get_marker(self):
        config = ClockSyncConfig()
        config.set_marker(7, 99000)
        assert config.ot3_start_ms == 99000
        assert config.get_marker(7) == 99000

    def test_invalid_marker_quarter(self):
        with pytest.raises(ValueError, match="Invalid quarter"):
            ClockSyncConfig().get_marker(8)

    def test_clear_markers_after(self):
        config = ClockSyncConfig(jumpball_ms=0, q2_start_ms=1, q3_start_ms=2, q4_start_ms=3)
        config.clear_markers_after(2)
        assert config.markers() == {1: 0, 2: 1}

    def test_from_dict_ignores_unknown_keys(self):
        config = ClockSyncConfig.from_dict({"jumpball_ms": 10, "video_id": "v1"})
        assert config.jumpball_ms == 10

    def test_dict_round_trip_preserves_halftime(self):
        config = ClockSyncConfig(jumpball_ms=0, halftime_ms=1500000)
        assert ClockSyncConfig.from_dict(config.to_dict()) == config


class TestClockSyncStore:
    """Test in-memory ownership and best-effort persistence"""

    def test_calibrate_creates_config_and_saves(self, clock_persistence):
        store = ClockSyncStore(video_id="v1", persistence=clock_persistence)
        store.calibrate(4200, quarter_length_minutes=10)
        assert store.is_calibrated
        assert store.config.quarter_length_minutes == 10
        assert clock_persistence.saved["v1"].jumpball_ms == 4200

    def test_save_failure_keeps_memory(self, clock_persistence):
        clock_persistence.fail_save = True
        store = ClockSyncStore(video_id="v1", config=ClockSyncConfig(jumpball_ms=0), persistence=clock_persistence)
        assert store.set_marker(2, 800000)
        assert store.config.q2_start_ms == 800000
        assert store.last_save_failed

    def test_load_failure_does_not_raise(self, clock_persistence):
        clock_persistence.fail_load = True
        store = ClockSyncStore(persistence=clock_persistence)
        assert store.load("v1") is None
        assert store.video_id == "v1"

    def test_load_restores_saved_markers(self, clock_persistence):
        clock_persistence.saved["v1"] = ClockSyncConfig(jumpball_ms=3000, q2_start_ms=900000)
        store = ClockSyncStore(persistence=clock_persistence)
        config = store.load("v1")
        assert config.q2_start_ms == 900000

    def test_set_marker_without_config(self):
        store = ClockSyncStore(video_id="v1")
        assert store.set_marker(2, 1000) is False

    def test_has_context_needs_video(self, calibrated_config):
        assert not ClockSyncStore(config=calibrated_config).has_context
        assert ClockSyncStore(video_id="v1", config=calibrated_config).has_context
