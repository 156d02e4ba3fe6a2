"""
Tests for the foul wizard reducer.
"""

import pytest

from play_sequence.foul_flow import (
    Cancel,
    FoulerSelected,
    FoulTypeSelected,
    FreeThrows,
    FreezeClock,
    RecordStat,
    SelectFoulType,
    SelectShotOutcome,
    SelectVictim,
    ShotOutcomeSelected,
    VictimSelected,
    reduce_foul_flow,
    start_foul_flow,
)
from play_sequence.sequence_types import FoulType
from stat_recording.stat_event import StatModifier, StatType


@pytest.fixture
def at_foul_type(game_context, players):
    transition = start_foul_flow(game_context, fouler=FoulerSelected(team_id="team-a", player=players["a1"]))
    assert isinstance(transition.state, SelectFoulType)
    return transition.state


def run(state, *actions):
    commands = []
    transition = None
    for action in actions:
        transition = reduce_foul_flow(state, action)
        commands.extend(transition.commands)
        state = transition.state
    return transition, commands


class TestFoulTypes:

    @pytest.mark.parametrize("foul_type,count", [
        (FoulType.PERSONAL, 0),
        (FoulType.OFFENSIVE, 0),
        (FoulType.SHOOTING_2PT, 2),
        (FoulType.SHOOTING_3PT, 3),
        (FoulType.TECHNICAL, 1),
        (FoulType.FLAGRANT, 2),
        (FoulType.BONUS, 2),
        (FoulType.ONE_AND_ONE, 2),
    ])
    def test_free_throw_counts(self, foul_type, count):
        assert foul_type.free_throw_count == count

    def test_shooting_modifier_drops_shot_value(self):
        assert FoulType.SHOOTING_3PT.modifier == "shooting"
        assert FoulType.ONE_AND_ONE.modifier == "1-and-1"


class TestFoulFlow:
    """Test wizard transitions"""

    def test_starts_at_fouler_selection(self, game_context):
        transition = start_foul_flow(game_context)
        assert type(transition.state).__name__ == "SelectFouler"

    def test_foul_recorded_and_clock_frozen_at_type_selection(self, at_foul_type):
        transition, commands = run(at_foul_type, FoulTypeSelected(FoulType.PERSONAL))

        assert transition.is_idle
        record = [c for c in commands if isinstance(c, RecordStat)]
        assert len(record) == 1
        foul = record[0].event
        assert foul.stat_type == StatType.FOUL
        assert foul.modifier == "personal"
        assert foul.player_id == "p-a1"
        assert foul.sequence_id == at_foul_type.draft.sequence_id
        assert any(isinstance(c, FreezeClock) for c in commands)

    def test_missed_three_point_shooting_foul_awards_three(self, at_foul_type, players):
        transition, commands = run(
            at_foul_type,
            FoulTypeSelected(FoulType.SHOOTING_3PT),
            VictimSelected(player=players["b1"]),
            ShotOutcomeSelected(made=False),
        )
        assert isinstance(transition.state, FreeThrows)
        assert transition.state.count == 3
        assert len([c for c in commands if isinstance(c, RecordStat)]) == 1

    def test_made_shooting_foul_is_and_one(self, at_foul_type, players):
        transition, commands = run(
            at_foul_type,
            FoulTypeSelected(FoulType.SHOOTING_3PT),
            VictimSelected(player=players["b1"]),
            ShotOutcomeSelected(made=True),
        )
        assert transition.state.count == 1

        foul, basket = [c.event for c in commands if isinstance(c, RecordStat)]
        assert basket.stat_type == StatType.THREE_POINTER
        assert basket.modifier == StatModifier.MADE
        assert basket.player_id == "p-b1"
        assert basket.team_id == "team-b"
        assert basket.sequence_id == foul.sequence_id
        assert basket.primary_event_id == foul.event_id

    def test_non_shooting_foul_skips_outcome_step(self, at_foul_type, players):
        transition, _ = run(
            at_foul_type,
            FoulTypeSelected(FoulType.TECHNICAL),
            VictimSelected(player=players["b2"]),
        )
        assert isinstance(transition.state, FreeThrows)
        assert transition.state.count == 1

    def test_shooting_foul_goes_through_outcome(self, at_foul_type, players):
        transition, _ = run(at_foul_type, FoulTypeSelected(FoulType.SHOOTING_2PT), VictimSelected(player=players["b2"]))
        assert isinstance(transition.state, SelectShotOutcome)

    def test_free_throw_prompts_disabled_closes_after_foul(self, game_context, players):
        start = start_foul_flow(
            game_context,
            prompt_free_throws=False,
            fouler=FoulerSelected(team_id="team-a", player=players["a1"]),
        )
        transition, commands = run(start.state, FoulTypeSelected(FoulType.FLAGRANT))
        assert transition.is_idle
        assert len(commands) == 2

    def test_opponent_team_foul(self, game_context):
        start = start_foul_flow(game_context, fouler=FoulerSelected(team_id="team-b", is_opponent=True))
        transition, commands = run(start.state, FoulTypeSelected(FoulType.BONUS))
        assert isinstance(transition.state, SelectVictim)
        assert commands[0].event.is_opponent_stat
        assert transition.state.draft.victim_team_id == "team-a"


class TestFoulFlowErrors:
    """Test that bad input resets to idle instead of raising"""

    def test_out_of_order_action_resets(self, at_foul_type):
        transition = reduce_foul_flow(at_foul_type, ShotOutcomeSelected(made=True))
        assert transition.is_idle
        assert "not valid" in transition.error

    def test_victim_from_wrong_team_resets(self, at_foul_type, players):
        transition, _ = run(at_foul_type, FoulTypeSelected(FoulType.SHOOTING_2PT), VictimSelected(player=players["a2"]))
        assert transition.is_idle
        assert transition.error

    def test_cancel_resets_without_error(self, at_foul_type):
        transition = reduce_foul_flow(at_foul_type, Cancel())
        assert transition.is_idle
        assert transition.error is None
        assert transition.commands == []

    def test_action_while_idle(self):
        transition = reduce_foul_flow(None, FoulTypeSelected(FoulType.PERSONAL))
        assert transition.is_idle
        assert transition.error
