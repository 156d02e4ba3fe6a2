"""
Rulesets and Clock Automation Settings

Competition rules the live clocks follow (period lengths, shot clock resets,
made-basket clock stops) and the True/False toggles deciding which of those
rules the clocks apply on their own.
"""

from dataclasses import dataclass, field, replace
from typing import Union

from tracker_config.game_constants import (
    DEFAULT_QUARTER_LENGTH_MINUTES,
    OVERTIME_LENGTH_MINUTES,
    REGULATION_QUARTERS,
    SHOT_CLOCK_FULL_RESET,
    SHOT_CLOCK_OFFENSIVE_RESET,
)


# Offensive rebound leaves the shot clock running untouched
KEEP_SHOT_CLOCK = "keep"

# Made baskets stop the clock only inside the closing window
LAST_TWO_MINUTES = "last_2_minutes"


@dataclass(frozen=True)
class ShotClockRules:
    """Shot clock reset values for one ruleset"""

    full_reset: int = SHOT_CLOCK_FULL_RESET
    offensive_rebound_reset: Union[int, str] = SHOT_CLOCK_OFFENSIVE_RESET  # or KEEP_SHOT_CLOCK
    frontcourt_foul_reset: int = SHOT_CLOCK_OFFENSIVE_RESET
    backcourt_foul_reset: int = SHOT_CLOCK_FULL_RESET
    disable_on_free_throws: bool = True

    def __post_init__(self):
        if not 10 <= self.full_reset <= 35:
            raise ValueError(f"Invalid full_reset: {self.full_reset}. Must be 10-35 seconds.")
        reset = self.offensive_rebound_reset
        if isinstance(reset, str):
            if reset != KEEP_SHOT_CLOCK:
                raise ValueError(f"Invalid offensive_rebound_reset: {reset}. Use seconds or '{KEEP_SHOT_CLOCK}'.")
        elif not 10 <= reset <= self.full_reset:
            raise ValueError(f"Invalid offensive_rebound_reset: {reset}. Must be 10-{self.full_reset} seconds.")

    @property
    def keeps_clock_on_offensive_rebound(self) -> bool:
        return self.offensive_rebound_reset == KEEP_SHOT_CLOCK


@dataclass(frozen=True)
class Ruleset:
    """
    Clock rules for one competition.

    clock_stops_on_made_basket: False = never, True = every made basket,
    LAST_TWO_MINUTES = only late in the closing period and overtime.
    """

    name: str = "NBA"
    quarter_length_minutes: int = DEFAULT_QUARTER_LENGTH_MINUTES
    regulation_periods: int = REGULATION_QUARTERS
    overtime_length_minutes: int = OVERTIME_LENGTH_MINUTES
    clock_stops_on_made_basket: Union[bool, str] = LAST_TWO_MINUTES
    shot_clock: ShotClockRules = field(default_factory=ShotClockRules)

    def __post_init__(self):
        if not 1 <= self.quarter_length_minutes <= 30:
            raise ValueError(f"Invalid quarter_length_minutes: {self.quarter_length_minutes}. Must be 1-30.")
        if not 1 <= self.regulation_periods <= REGULATION_QUARTERS:
            raise ValueError(f"Invalid regulation_periods: {self.regulation_periods}. Must be 1-{REGULATION_QUARTERS}.")
        if not 1 <= self.overtime_length_minutes <= 15:
            raise ValueError(f"Invalid overtime_length_minutes: {self.overtime_length_minutes}. Must be 1-15.")
        if self.clock_stops_on_made_basket not in (True, False, LAST_TWO_MINUTES):
            raise ValueError(f"Invalid clock_stops_on_made_basket: {self.clock_stops_on_made_basket}")


class RulesetPresets:
    """Built-in competition rulesets."""

    NBA = Ruleset()

    # Clock keeps running on made baskets; every reset is a full 24
    FIBA = Ruleset(
        name="FIBA",
        quarter_length_minutes=10,
        clock_stops_on_made_basket=False,
        shot_clock=ShotClockRules(
            full_reset=24,
            offensive_rebound_reset=KEEP_SHOT_CLOCK,
            frontcourt_foul_reset=24,
            backcourt_foul_reset=24,
        ),
    )

    # Two 20 minute halves, 30 second shot clock
    NCAA = Ruleset(
        name="NCAA",
        quarter_length_minutes=20,
        regulation_periods=2,
        shot_clock=ShotClockRules(
            full_reset=30,
            offensive_rebound_reset=20,
            frontcourt_foul_reset=20,
            backcourt_foul_reset=30,
        ),
    )

    @classmethod
    def by_name(cls, name: str) -> Ruleset:
        """
        Look up a ruleset by name.

        Args:
            name: "nba", "fiba" or "ncaa" (case-insensitive)

        Raises:
            ValueError: If name is not a known ruleset
        """
        presets = {
            "nba": cls.NBA,
            "fiba": cls.FIBA,
            "ncaa": cls.NCAA,
        }
        key = name.lower()
        if key not in presets:
            raise ValueError(f"Unknown ruleset: {name}. Valid rulesets: {list(presets)}")
        return presets[key]


@dataclass(frozen=True)
class ClockAutomationFlags:
    """
    Live clock automation controls.

    True  = the clocks react to recorded stats on their own
    False = the operator starts, stops and resets the clocks by hand
    """

    enabled: bool = True
    auto_pause: bool = True          # Foul / timeout / turnover -> stop both clocks
    auto_reset: bool = True          # Stats reset the shot clock per the ruleset
    ft_mode: bool = True             # Free throws / shooting foul -> shot clock off
    made_basket_stop: bool = False   # Made basket late in the game -> stop clocks

    @property
    def pause_active(self) -> bool:
        return self.enabled and self.auto_pause

    @property
    def reset_active(self) -> bool:
        return self.enabled and self.auto_reset

    @property
    def ft_mode_active(self) -> bool:
        return self.enabled and self.ft_mode

    @property
    def made_basket_stop_active(self) -> bool:
        return self.enabled and self.made_basket_stop


class ClockPresets:
    """Named clock automation presets offered before tracking starts."""

    # Pause, reset and free throw handling on; made baskets left to the operator
    SMART = ClockAutomationFlags()

    # Clocks only move when the operator moves them
    MANUAL = ClockAutomationFlags(
        enabled=False,
        auto_pause=False,
        auto_reset=False,
        ft_mode=False,
        made_basket_stop=False,
    )

    FULL = replace(SMART, made_basket_stop=True)

    @classmethod
    def by_name(cls, name: str) -> ClockAutomationFlags:
        """
        Look up a preset by name.

        Args:
            name: "smart", "manual" or "full" (case-insensitive)

        Raises:
            ValueError: If name is not a known preset
        """
        presets = {
            "smart": cls.SMART,
            "manual": cls.MANUAL,
            "full": cls.FULL,
        }
        key = name.lower()
        if key not in presets:
            raise ValueError(f"Unknown clock preset: {name}. Valid presets: {list(presets)}")
        return presets[key]
