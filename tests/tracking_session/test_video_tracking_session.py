"""
Tests for VideoTrackingSession wiring.
"""

import pytest

from game_clock.clock_sync_config import ClockSyncConfig
from game_clock.freeze_controller import ResumeStatus
from game_clock.quarter_advancement import AdvancementOutcome
from play_sequence.sequence_types import FoulType, SequenceType
from stat_recording.stat_event import StatEvent, StatModifier, StatType
from tracking_session.video_tracking_session import VideoTrackingSession


@pytest.fixture
def session(game_context, memory_gateway, clock_persistence, playback):
    clock_persistence.saved["video-1"] = ClockSyncConfig(jumpball_ms=0)
    return VideoTrackingSession(
        game_context,
        memory_gateway,
        video_id="video-1",
        clock_persistence=clock_persistence,
        playback=playback,
    )


def made(player, stat_type=StatType.FIELD_GOAL):
    return StatEvent.create("game-1", player.team_id, stat_type, StatModifier.MADE, player)


class TestClock:

    def test_loads_markers_and_maps_video_time(self, session):
        update = session.update_video_time(60000)
        assert update.is_synced
        assert update.clock.format() == "Q1 - 11:00"

    def test_unsynced_without_markers(self, game_context, memory_gateway):
        session = VideoTrackingSession(game_context, memory_gateway)
        assert not session.update_video_time(60000).is_synced

    def test_foul_freezes_until_resume(self, session, players):
        session.update_video_time(100000)
        session.engine.start_foul("team-a", players["a1"])
        session.engine.select_foul_type(FoulType.PERSONAL)

        assert session.update_video_time(140000).clock.format() == "Q1 - 10:20"
        result = session.resume_clock()
        assert result.status == ResumeStatus.RESUMED
        assert session.store.config.jumpball_ms == 40000
        assert session.update_video_time(141000).clock.format() == "Q1 - 10:19"

    def test_quarter_end_prompt_and_advance(self, session):
        update = session.update_video_time(720000)
        assert update.outcome == AdvancementOutcome.ADVANCE_PROMPT

        session.update_video_time(800000)
        assert session.advance_quarter()
        assert session.store.config.q2_start_ms == 800000
        assert session.update_video_time(860000).clock.format() == "Q2 - 11:00"

    def test_edit_clock_discards_freeze(self, session):
        session.update_video_time(500000)
        session.freeze_clock()
        result = session.edit_clock(1, 5, 0)
        assert result.applied
        assert not session.freeze.is_frozen
        assert session.current_clock.format() == "Q1 - 05:00"

    def test_seek_to_period_start(self, session, playback):
        target = session.seek_to_period_start(2)
        assert target == 720000
        assert playback.seeks == [720.0]


class TestStats:

    def test_record_pauses_video_and_stamps_clock(self, session, players, playback, memory_gateway):
        session.update_video_time(60000)
        sequence = session.record_stat(made(players["a1"]))
        assert playback.pauses == 1
        assert sequence.type == SequenceType.ASSIST

        session.drain()
        stored = memory_gateway.record_calls[0]
        assert (stored.quarter, stored.game_time_minutes, stored.game_time_seconds) == (1, 11, 0)
        assert stored.video_timestamp_ms == 60000

    def test_prompt_closes_before_write(self, session, players, memory_gateway):
        session.update_video_time(1000)
        session.record_stat(made(players["a1"]))
        session.engine.select_assist(players["a2"])
        assert session.engine.current is None
        assert memory_gateway.record_calls == []
        session.drain()
        assert len(memory_gateway.record_calls) == 2

    def test_scores_update_and_undo(self, session, players):
        session.record_stat(made(players["a1"], StatType.THREE_POINTER))
        session.drain()
        assert session.scoreboard.team_a_score == 3

        assert session.undo_last()
        session.drain()
        assert session.scoreboard.team_a_score == 0

    def test_undo_before_write_withdraws_newest_stat(self, session, memory_gateway, players):
        session.record_stat(StatEvent.create("game-1", "team-a", StatType.STEAL, player=players["a1"]))
        session.drain()
        session.record_stat(made(players["a2"], StatType.THREE_POINTER))
        assert session.scoreboard.team_a_score == 3

        assert session.undo_last()
        session.drain()

        assert session.scoreboard.team_a_score == 0
        assert memory_gateway.delete_calls == []
        assert [stat.stat_type for stat in memory_gateway.get_game_stats("game-1")] == [StatType.STEAL]

    def test_q4_unequal_scores_ends_game(self, session, players):
        config = session.store.config
        config.q2_start_ms, config.q3_start_ms, config.q4_start_ms = 800000, 1600000, 2400000
        session.record_stat(made(players["a1"]))
        outcome = session.update_video_time(2400000 + 720000).outcome
        assert outcome == AdvancementOutcome.GAME_END
