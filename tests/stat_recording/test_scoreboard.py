"""
Tests for the Scoreboard.
"""

from stat_recording.scoreboard import Scoreboard
from stat_recording.stat_event import StatEvent, StatModifier, StatType


def shot(team_id, stat_type, modifier):
    return StatEvent(game_id="game-1", team_id=team_id, stat_type=stat_type, modifier=modifier)


class TestScoreboard:

    def test_recompute_from_stats(self, game_context):
        board = Scoreboard(game_context)
        scores = board.recompute([
            shot("team-a", StatType.FIELD_GOAL, StatModifier.MADE),
            shot("team-a", StatType.THREE_POINTER, StatModifier.MADE),
            shot("team-b", StatType.FREE_THROW, StatModifier.MADE),
            shot("team-b", StatType.THREE_POINTER, StatModifier.MISSED),
            shot("team-z", StatType.FIELD_GOAL, StatModifier.MADE),
        ])
        assert scores == {"team-a": 5, "team-b": 1}
        assert board.get_leading_team() == "team-a"

    def test_recompute_replaces_optimistic_scores(self, game_context):
        board = Scoreboard(game_context)
        board.apply(shot("team-a", StatType.THREE_POINTER, StatModifier.MADE))
        assert board.team_a_score == 3
        board.recompute([])
        assert board.is_tied()
        assert board.get_leading_team() is None

    def test_retract_withdrawn_stat(self, game_context):
        board = Scoreboard(game_context)
        three = shot("team-b", StatType.THREE_POINTER, StatModifier.MADE)
        board.apply(shot("team-b", StatType.FIELD_GOAL, StatModifier.MADE))
        board.apply(three)
        board.retract(three)
        assert board.team_b_score == 2
