"""
Tests for the video-to-clock mapper and GameClock.
"""

import pytest

from game_clock.clock_sync_config import ClockSyncConfig
from game_clock.game_clock import GameClock
from game_clock.video_clock_mapper import (
    map_video_time_to_game_clock,
    game_clock_to_video_time,
    get_period_length_ms,
    find_active_period,
)


class TestGameClock:
    """Test GameClock data class"""

    def test_format_regulation(self):
        clock = GameClock(quarter=2, minutes_remaining=7, seconds_remaining=45)
        assert clock.format() == "Q2 - 07:45"
        assert str(clock) == "Q2 - 07:45"

    def test_from_remaining_seconds_overtime(self):
        clock = GameClock.from_remaining_seconds(6, 300)
        assert clock.is_overtime
        assert clock.overtime_period == 2
        assert clock.format() == "OT2 - 05:00"

    def test_invalid_quarter(self):
        with pytest.raises(ValueError, match="Invalid quarter"):
            GameClock(quarter=8, minutes_remaining=0, seconds_remaining=0)

    def test_invalid_seconds(self):
        with pytest.raises(ValueError, match="Invalid seconds_remaining"):
            GameClock(quarter=1, minutes_remaining=1, seconds_remaining=60)

    def test_is_expired(self):
        assert GameClock(quarter=3, minutes_remaining=0, seconds_remaining=0).is_expired
        assert not GameClock(quarter=3, minutes_remaining=0, seconds_remaining=1).is_expired


class TestMapVideoTimeToGameClock:
    """Test forward mapping from video position to game clock"""

    def test_one_minute_in(self, calibrated_config):
        clock = map_video_time_to_game_clock(60000, calibrated_config)
        assert clock.quarter == 1
        assert clock.minutes_remaining == 11
        assert clock.seconds_remaining == 0

    def test_uncalibrated_returns_none(self):
        assert map_video_time_to_game_clock(60000, ClockSyncConfig()) is None
        assert map_video_time_to_game_clock(60000, None) is None

    def test_before_jumpball_shows_full_quarter(self):
        config = ClockSyncConfig(quarter_length_minutes=10, jumpball_ms=30000)
        for position in (0, 1000, 29999):
            clock = map_video_time_to_game_clock(position, config)
            assert clock.quarter == 1
            assert clock.minutes_remaining == 10
            assert clock.seconds_remaining == 0

    def test_floors_partial_seconds(self, calibrated_config):
        clock = map_video_time_to_game_clock(500, calibrated_config)
        assert (clock.minutes_remaining, clock.seconds_remaining) == (11, 59)

    def test_never_shows_sixty_seconds(self, calibrated_config):
        clock = map_video_time_to_game_clock(59001, calibrated_config)
        assert (clock.minutes_remaining, clock.seconds_remaining) == (11, 0)

    def test_clamps_to_zero_without_next_marker(self, calibrated_config):
        clock = map_video_time_to_game_clock(900000, calibrated_config)
        assert clock.quarter == 1
        assert clock.is_expired

    def test_uses_latest_started_period(self, calibrated_config):
        calibrated_config.q2_start_ms = 800000
        assert map_video_time_to_game_clock(799999, calibrated_config).quarter == 1
        clock = map_video_time_to_game_clock(800000, calibrated_config)
        assert clock.quarter == 2
        assert clock.minutes_remaining == 12

    def test_overtime_period_is_five_minutes(self):
        config = ClockSyncConfig(
            jumpball_ms=0,
            q2_start_ms=800000,
            q3_start_ms=1700000,
            q4_start_ms=2500000,
            ot1_start_ms=3300000,
        )
        clock = map_video_time_to_game_clock(3360000, config)
        assert clock.quarter == 5
        assert clock.is_overtime
        assert clock.format() == "OT1 - 04:00"

    def test_remaining_is_non_increasing(self, calibrated_config):
        previous = None
        for position in range(0, 730000, 250):
            remaining = map_video_time_to_game_clock(position, calibrated_config).total_seconds
            if previous is not None:
                assert remaining <= previous
            previous = remaining

    def test_find_active_period_before_jumpball(self):
        config = ClockSyncConfig(jumpball_ms=5000)
        assert find_active_period(1000, config) == (1, 5000)


class TestGameClockToVideoTime:
    """Test inverse mapping used for seeks"""

    def test_round_trip_with_marker(self, calibrated_config):
        clock = GameClock(quarter=1, minutes_remaining=11, seconds_remaining=0)
        assert game_clock_to_video_time(clock, calibrated_config) == 60000

    def test_estimates_missing_period_start(self):
        config = ClockSyncConfig(jumpball_ms=1000)
        clock = GameClock.from_remaining_seconds(2, 720)
        assert game_clock_to_video_time(clock, config) == 1000 + 720000

    def test_estimates_overtime_start(self):
        config = ClockSyncConfig(jumpball_ms=1000)
        clock = GameClock.from_remaining_seconds(5, 300)
        assert game_clock_to_video_time(clock, config) == 1000 + 4 * 720000

    def test_uncalibrated_returns_zero(self):
        clock = GameClock(quarter=1, minutes_remaining=5, seconds_remaining=0)
        assert game_clock_to_video_time(clock, ClockSyncConfig()) == 0

    def test_period_lengths(self, calibrated_config):
        assert get_period_length_ms(4, calibrated_config) == 720000
        assert get_period_length_ms(5, calibrated_config) == 300000
