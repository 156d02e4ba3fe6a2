"""
Tests for rulesets and clock automation presets.
"""

import pytest

from tracker_config.ruleset_settings import (
    ClockAutomationFlags,
    ClockPresets,
    KEEP_SHOT_CLOCK,
    LAST_TWO_MINUTES,
    Ruleset,
    RulesetPresets,
    ShotClockRules,
)


class TestRulesetPresets:

    def test_nba(self):
        nba = RulesetPresets.NBA
        assert nba.quarter_length_minutes == 12
        assert nba.regulation_periods == 4
        assert nba.clock_stops_on_made_basket == LAST_TWO_MINUTES
        assert nba.shot_clock.full_reset == 24
        assert nba.shot_clock.offensive_rebound_reset == 14
        assert nba.shot_clock.frontcourt_foul_reset == 14
        assert nba.shot_clock.backcourt_foul_reset == 24

    def test_fiba_keeps_shot_clock_on_offensive_rebound(self):
        fiba = RulesetPresets.FIBA
        assert fiba.quarter_length_minutes == 10
        assert fiba.clock_stops_on_made_basket is False
        assert fiba.shot_clock.keeps_clock_on_offensive_rebound
        assert fiba.shot_clock.frontcourt_foul_reset == 24

    def test_ncaa_halves(self):
        ncaa = RulesetPresets.NCAA
        assert ncaa.quarter_length_minutes == 20
        assert ncaa.regulation_periods == 2
        assert ncaa.shot_clock.full_reset == 30
        assert ncaa.shot_clock.offensive_rebound_reset == 20
        assert not ncaa.shot_clock.keeps_clock_on_offensive_rebound

    def test_by_name(self):
        assert RulesetPresets.by_name("FIBA") is RulesetPresets.FIBA
        with pytest.raises(ValueError):
            RulesetPresets.by_name("streetball")


class TestRulesetValidation:

    def test_offensive_reset_cannot_exceed_full(self):
        with pytest.raises(ValueError):
            ShotClockRules(full_reset=24, offensive_rebound_reset=30)

    def test_only_keep_is_a_valid_word(self):
        assert ShotClockRules(offensive_rebound_reset=KEEP_SHOT_CLOCK).keeps_clock_on_offensive_rebound
        with pytest.raises(ValueError):
            ShotClockRules(offensive_rebound_reset="hold")

    def test_period_limits(self):
        with pytest.raises(ValueError):
            Ruleset(regulation_periods=6)
        with pytest.raises(ValueError):
            Ruleset(quarter_length_minutes=0)

    def test_made_basket_rule_values(self):
        assert Ruleset(clock_stops_on_made_basket=True).clock_stops_on_made_basket is True
        with pytest.raises(ValueError):
            Ruleset(clock_stops_on_made_basket="last_minute")


class TestClockPresets:

    def test_smart_leaves_made_baskets_to_operator(self):
        flags = ClockPresets.SMART
        assert flags.pause_active
        assert flags.reset_active
        assert flags.ft_mode_active
        assert not flags.made_basket_stop_active

    def test_full_stops_on_made_baskets(self):
        assert ClockPresets.FULL.made_basket_stop_active

    def test_master_switch_overrides_toggles(self):
        flags = ClockAutomationFlags(enabled=False)
        assert flags.auto_pause
        assert not flags.pause_active
        assert not flags.reset_active

    def test_by_name(self):
        assert ClockPresets.by_name("Manual") is ClockPresets.MANUAL
        with pytest.raises(ValueError):
            ClockPresets.by_name("auto")
