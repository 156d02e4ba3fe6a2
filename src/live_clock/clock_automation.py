"""
Live Clock Automation

Moves the live clocks the way the officials would when a stat is recorded,
following the game's ruleset. Each behavior has its own toggle so the
operator can keep any part of the clock work manual.

- Pause: foul, timeout, turnover stop both clocks
- Reset: made basket, defensive rebound, steal, turnover start a new
  possession with a full shot clock; an offensive rebound raises the shot
  clock to the ruleset value (or leaves it running under 'keep' rules);
  a foul resets it by ball location
- Free throw mode: a shooting foul or free throw switches the shot clock
  off; the next live-ball stat switches it back on
- Made basket stop: a made basket in the last two minutes of the closing
  period or overtime stops both clocks
"""

from enum import Enum
from typing import Callable, Optional
import logging

from tracker_config.game_constants import MADE_BASKET_STOP_WINDOW_SECONDS
from tracker_config.ruleset_settings import (
    ClockAutomationFlags,
    ClockPresets,
    LAST_TWO_MINUTES,
    Ruleset,
    RulesetPresets,
)
from live_clock.dual_clock_ticker import DualClockTicker
from stat_recording.stat_event import StatEvent, StatModifier, StatType


SHOOTING_FOUL_MODIFIER = "shooting"


class BallLocation(Enum):
    """Where the ball was when a foul stopped play"""
    FRONTCOURT = "frontcourt"
    BACKCOURT = "backcourt"


class ClockAutomation:
    """
    Applies ruleset clock behavior to a DualClockTicker.

    Possession always follows the stats; whether the shot clock resets with
    it depends on the reset toggle.
    """

    def __init__(
        self,
        ticker: DualClockTicker,
        opponent_of: Callable[[str], str],
        ruleset: Ruleset = RulesetPresets.NBA,
        flags: ClockAutomationFlags = ClockPresets.SMART
    ):
        self.ticker = ticker
        self.opponent_of = opponent_of
        self.ruleset = ruleset
        self.flags = flags
        self._logger = logging.getLogger(__name__)

    def apply_stat(self, event: StatEvent) -> None:
        """React to one recorded stat."""
        stat_type = event.stat_type

        if stat_type == StatType.FOUL:
            self.pause("foul")
            if event.modifier == SHOOTING_FOUL_MODIFIER:
                self._enter_free_throw_mode()
            return
        if stat_type == StatType.FREE_THROW:
            self._enter_free_throw_mode()
            return

        self._leave_free_throw_mode()

        if stat_type in (StatType.FIELD_GOAL, StatType.THREE_POINTER) and event.is_made_shot:
            self._change_possession(self.opponent_of(event.team_id))
            self._stop_for_made_basket()
        elif stat_type == StatType.REBOUND:
            if event.modifier == StatModifier.DEFENSIVE:
                self._change_possession(event.team_id)
            else:
                self._offensive_rebound_reset()
        elif stat_type == StatType.STEAL:
            self._change_possession(event.team_id)
        elif stat_type == StatType.TURNOVER:
            if event.modifier == StatModifier.SHOT_CLOCK_VIOLATION:
                # Charged to the team without the ball, which now gets it
                self._change_possession(event.team_id)
            else:
                self._change_possession(self.opponent_of(event.team_id))
            self.pause("turnover")

    def pause(self, reason: str) -> bool:
        """
        Stop both clocks if automatic pausing is on.

        Returns:
            True if the clocks were stopped
        """
        if not self.flags.pause_active:
            return False
        if self.ticker.game_clock_running:
            self._logger.info(f"Clocks stopped for {reason}")
        self.ticker.stop_game_clock()
        return True

    def foul_reset(self, location: BallLocation) -> Optional[int]:
        """
        Reset the shot clock after a non-shooting foul.

        Frontcourt fouls only raise the shot clock to the ruleset value;
        backcourt fouls always reset to it.

        Returns:
            The new shot clock value, or None if automatic resets are off
        """
        if not self.flags.reset_active:
            return None
        rules = self.ruleset.shot_clock
        if location == BallLocation.BACKCOURT:
            return self.ticker.reset_shot_clock(rules.backcourt_foul_reset)
        if self.ticker.shot_clock_seconds < rules.frontcourt_foul_reset:
            return self.ticker.reset_shot_clock(rules.frontcourt_foul_reset)
        return self.ticker.shot_clock_seconds

    def _change_possession(self, team_id: str) -> None:
        if self.flags.reset_active:
            self.ticker.new_possession(team_id)
        else:
            self.ticker.possession_team_id = team_id

    def _offensive_rebound_reset(self) -> None:
        if not self.flags.reset_active:
            return
        rules = self.ruleset.shot_clock
        if rules.keeps_clock_on_offensive_rebound:
            return
        if self.ticker.shot_clock_seconds < rules.offensive_rebound_reset:
            self.ticker.reset_shot_clock(rules.offensive_rebound_reset)

    def _enter_free_throw_mode(self) -> None:
        if self.flags.ft_mode_active and self.ruleset.shot_clock.disable_on_free_throws:
            self.ticker.disable_shot_clock()

    def _leave_free_throw_mode(self) -> None:
        if self.ticker.shot_clock_disabled:
            self.ticker.enable_shot_clock()

    def _stop_for_made_basket(self) -> None:
        if not self.flags.made_basket_stop_active:
            return
        rule = self.ruleset.clock_stops_on_made_basket
        if rule == LAST_TWO_MINUTES:
            late = (self.ticker.in_closing_period
                    and self.ticker.game_clock_seconds <= MADE_BASKET_STOP_WINDOW_SECONDS)
            if not late:
                return
        elif rule is not True:
            return
        self._logger.info("Clocks stopped on made basket")
        self.ticker.stop_game_clock()
