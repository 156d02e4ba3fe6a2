"""
Live Tracking Session

Tracking a game in real time without video. The dual-clock ticker is the
clock source; recorded stats move the clocks the way the officials would,
following the game's ruleset:

- Made basket, defensive rebound, steal, turnover: new possession, full reset
- Offensive rebound: raised to the ruleset reset (14 under NBA rules)
- Foul, timeout, turnover: both clocks stop
- Shooting foul, free throws: shot clock off until the ball is live again
- Shot clock violation: turnover charged to the team without the ball,
  which then takes possession
"""

from dataclasses import replace
from typing import Callable, Optional
import logging

from tracker_config.automation_settings import SequenceAutomationFlags, AutomationPresets
from tracker_config.ruleset_settings import ClockAutomationFlags, ClockPresets, Ruleset, RulesetPresets
from game_clock.game_clock import GameClock
from live_clock.clock_automation import BallLocation, ClockAutomation
from live_clock.dual_clock_ticker import DualClockTicker, ShotClockViolation, TickResult
from play_sequence.sequence_engine import PlaySequenceEngine
from stat_recording.dispatch_queue import CommandKind, DispatchResult, StatDispatchQueue
from stat_recording.recording_gateway import StatRecordingGateway
from stat_recording.scoreboard import Scoreboard
from stat_recording.stat_event import GameContext, PlayerRef, StatEvent, StatModifier, StatType
from stat_recording.undo_slot import UndoSlot


class LiveTrackingSession:
    """
    Owns the live clocks, prompts and stat dispatch for one game.
    """

    def __init__(
        self,
        context: GameContext,
        gateway: StatRecordingGateway,
        flags: SequenceAutomationFlags = AutomationPresets.DEFAULT,
        ruleset: Ruleset = RulesetPresets.NBA,
        clock_flags: ClockAutomationFlags = ClockPresets.SMART,
        quarter_length_minutes: Optional[int] = None
    ):
        """
        Args:
            context: Game and teams being tracked
            gateway: Where stats are written
            flags: Follow-up prompt automation
            ruleset: Period lengths and shot clock resets
            clock_flags: Which clock behaviors run automatically
            quarter_length_minutes: Override the ruleset's period length
        """
        self.context = context
        self.gateway = gateway
        self._logger = logging.getLogger(__name__)

        if quarter_length_minutes is not None:
            ruleset = replace(ruleset, quarter_length_minutes=quarter_length_minutes)
        self.ruleset = ruleset

        self.ticker = DualClockTicker.for_ruleset(ruleset, team_ids=(context.team_a_id, context.team_b_id))
        self.clock_automation = ClockAutomation(self.ticker, context.opponent_of, ruleset, clock_flags)
        self.undo_slot = UndoSlot()
        self.queue = StatDispatchQueue(gateway, undo_slot=self.undo_slot)
        self.queue.add_result_listener(self._on_write_completed)
        self.scoreboard = Scoreboard(context)
        self.schedule_score_refresh: Optional[Callable[[], None]] = None

        self.engine = PlaySequenceEngine(
            context,
            record=self._dispatch,
            flags=flags,
            freeze_clock=self._pause_for_foul,
        )

    @property
    def current_clock(self) -> GameClock:
        return GameClock.from_remaining_seconds(
            self.ticker.quarter, self.ticker.game_clock_seconds, self.ticker.regulation_periods
        )

    @property
    def pending_violation(self) -> Optional[ShotClockViolation]:
        return self.ticker.violation

    def tick(self) -> TickResult:
        return self.ticker.tick()

    def advance_quarter(self) -> bool:
        return self.ticker.advance_quarter()

    def record_stat(self, event: StatEvent):
        """
        Record a primary stat and open any follow-up prompt.

        Returns:
            The prompt that opened, or None
        """
        return self.engine.record_primary_stat(event)

    def assign_violation_turnover(self, player: Optional[PlayerRef] = None, team_id: Optional[str] = None,
                                  is_opponent: bool = False) -> bool:
        """
        Charge the live shot clock violation as a turnover.

        The turnover goes to the team that did not last possess the ball,
        and that team takes possession.

        Args:
            player: Player charged (None = team turnover)
            team_id: Team charged when possession was never set
            is_opponent: Team-level opponent turnover (no player)

        Returns:
            True if the turnover was recorded
        """
        violation = self.ticker.violation
        if violation is None:
            self._logger.warning("No shot clock violation to assign")
            return False
        charged = violation.charged_team_id or team_id or (player.team_id if player else None)
        if charged is None:
            self._logger.warning("Shot clock violation needs a team to charge")
            return False
        if player is not None and (is_opponent or player.team_id != charged):
            self._logger.warning(f"Violation turnover must be a team {charged} player or a team-level stat")
            return False

        event = StatEvent.create(
            game_id=self.context.game_id,
            team_id=charged,
            stat_type=StatType.TURNOVER,
            modifier=StatModifier.SHOT_CLOCK_VIOLATION,
            player=player,
            is_opponent_stat=is_opponent,
        )
        self._dispatch(event)
        return True

    def call_timeout(self, team_id: str) -> bool:
        """
        Timeout called; stops both clocks when automatic pausing is on.

        Returns:
            True if the clocks were stopped
        """
        return self.clock_automation.pause(f"timeout ({team_id})")

    def reset_for_foul(self, location: BallLocation) -> Optional[int]:
        """
        Apply the ruleset's foul reset for where the ball was.

        Returns:
            The new shot clock value, or None if automatic resets are off
        """
        return self.clock_automation.foul_reset(location)

    def undo_last(self) -> bool:
        command = self.queue.undo_last()
        if command is None:
            return False
        if command.kind == CommandKind.RECORD:
            self.scoreboard.retract(command.event)
        return True

    def drain(self):
        return self.queue.drain()

    def refresh_scores(self):
        return self.scoreboard.recompute(self.gateway.get_game_stats(self.context.game_id))

    def _dispatch(self, event: StatEvent) -> None:
        if event.quarter is None:
            event = event.with_clock(self.current_clock)
        self.scoreboard.apply(event)
        self.queue.submit(event)
        self.clock_automation.apply_stat(event)

    def _pause_for_foul(self) -> None:
        self.clock_automation.pause("foul")

    def _on_write_completed(self, result: DispatchResult) -> None:
        if self.schedule_score_refresh is not None:
            self.schedule_score_refresh()
        elif result.deleted:
            self.refresh_scores()
