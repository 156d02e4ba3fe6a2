"""
Tests for clock freeze/resume and manual clock edits.
"""

import pytest

from game_clock.clock_sync_config import ClockSyncConfig, ClockSyncStore
from game_clock.clock_recalibration import (
    ClockRecalibrator,
    clamp_clock_entry,
    compute_recalibrated_marker,
)
from game_clock.freeze_controller import ClockFreezeController, FreezeReason, ResumeStatus
from game_clock.video_clock_mapper import map_video_time_to_game_clock


@pytest.fixture
def store(calibrated_config, clock_persistence):
    return ClockSyncStore(video_id="video-1", config=calibrated_config, persistence=clock_persistence)


@pytest.fixture
def controller(store):
    return ClockFreezeController(store)


def live(store, position):
    return map_video_time_to_game_clock(position, store.config)


class TestFreeze:
    """Test snapshot behavior while frozen"""

    def test_frozen_snapshot_overrides_live_clock(self, controller, store):
        frozen = live(store, 100000)
        assert controller.freeze(frozen, 100000)

        later = live(store, 160000)
        assert controller.effective_clock(later) == frozen
        assert controller.is_frozen

    def test_not_frozen_passes_live_clock_through(self, controller, store):
        clock = live(store, 5000)
        assert controller.effective_clock(clock) is clock

    def test_second_freeze_keeps_first_snapshot(self, controller, store):
        first = live(store, 100000)
        controller.freeze(first, 100000, FreezeReason.FOUL)
        assert not controller.freeze(live(store, 120000), 120000)
        assert controller.snapshot.clock == first
        assert controller.snapshot.reason == FreezeReason.FOUL

    def test_freeze_without_clock_is_ignored(self, controller):
        assert not controller.freeze(None, 1000)
        assert not controller.is_frozen


class TestResume:
    """Test recalibration on resume"""

    def test_resume_at_same_position_leaves_marker(self, controller, store, clock_persistence):
        controller.freeze(live(store, 100500), 100500)
        saves_before = clock_persistence.save_calls

        result = controller.resume(100500)

        assert result.status == ResumeStatus.UNCHANGED
        assert store.config.jumpball_ms == 0
        assert clock_persistence.save_calls == saves_before
        assert not controller.is_frozen

    def test_resume_later_shifts_marker(self, controller, store):
        clock = live(store, 100000)  # Q1 10:20
        controller.freeze(clock, 100000)

        result = controller.resume(130000)

        assert result.status == ResumeStatus.RESUMED
        assert result.new_marker_ms == 30000
        assert store.config.jumpball_ms == 30000
        assert live(store, 130000) == clock

    def test_resume_uses_exact_remaining_time(self, controller, store):
        controller.freeze(live(store, 100500), 100500)
        result = controller.resume(110500)
        assert result.new_marker_ms == 10000

    def test_new_marker_never_negative(self, controller, store):
        controller.freeze(live(store, 10000), 10000)
        result = controller.resume(5000)
        assert result.new_marker_ms == 0

    def test_resume_when_not_frozen(self, controller):
        assert controller.resume(1000).status == ResumeStatus.NOT_FROZEN

    def test_resume_without_video_context(self, calibrated_config):
        store = ClockSyncStore(config=calibrated_config)
        controller = ClockFreezeController(store)
        controller.freeze(live(store, 100000), 100000)

        result = controller.resume(130000)

        assert result.status == ResumeStatus.MISSING_CONTEXT
        assert not controller.is_frozen
        assert store.config.jumpball_ms == 0


class TestClockRecalibration:
    """Test manual clock edits"""

    def test_compute_recalibrated_marker(self, calibrated_config):
        assert compute_recalibrated_marker(130000, 1, 620000, calibrated_config) == 30000

    def test_clamps_out_of_range_entry(self, calibrated_config):
        assert clamp_clock_entry(1, 99, 75, calibrated_config) == 720000
        assert clamp_clock_entry(1, -3, -1, calibrated_config) == 0
        assert clamp_clock_entry(5, 7, 0, calibrated_config) == 300000

    def test_edit_recalibrates_and_clears_later_markers(self, store):
        store.config.q2_start_ms = 800000
        store.config.q3_start_ms = 1600000
        recalibrator = ClockRecalibrator(store)

        result = recalibrator.edit_clock(2, 5, 0, video_time_ms=1000000)

        assert result.applied
        assert result.new_marker_ms == 580000
        assert store.config.q2_start_ms == 580000
        assert store.config.q3_start_ms is None
        assert live(store, 1000000).format() == "Q2 - 05:00"

    def test_edit_overtime(self, store):
        result = ClockRecalibrator(store).edit_clock(1, 3, 0, video_time_ms=4000000, is_overtime=True)
        assert result.quarter == 5
        assert store.config.ot1_start_ms == 4000000 - 120000

    def test_edit_without_video(self, store):
        result = ClockRecalibrator(store).edit_clock(1, 5, 0, video_time_ms=None)
        assert not result.applied
        assert store.config.jumpball_ms == 0

    def test_edit_without_config(self):
        store = ClockSyncStore(video_id="video-1")
        result = ClockRecalibrator(store).edit_clock(1, 5, 0, video_time_ms=1000)
        assert not result.applied
