"""
Live Dual-Clock Ticker

Real-time game clock and shot clock for tracking without video. One tick
per second decrements both clocks together so they can never drift apart.

Rules:
- Game clock runs down to 0:00, then stops and reports period expiry
- Shot clock decrements only while running and visible, and skips the one
  tick immediately after a reset
- Shot clock reaching zero while running stops it and raises a violation
  that needs a turnover assignment to the team that did not last possess the
  ball; the violation clears once the shot clock is reset above 20 seconds or
  a new possession begins
- A disabled shot clock (free throws) neither runs nor restarts until enabled
- Stopping the game clock force-stops the shot clock; starting it restarts
  the shot clock only when visible and not flagged by a live violation
"""

from dataclasses import dataclass
from typing import Optional, Tuple
import logging

from tracker_config.game_constants import (
    DEFAULT_QUARTER_LENGTH_MINUTES,
    OVERTIME_LENGTH_MINUTES,
    REGULATION_QUARTERS,
    MAX_OVERTIME_PERIODS,
    SECONDS_PER_MINUTE,
    SHOT_CLOCK_FULL_RESET,
    SHOT_CLOCK_VIOLATION_CLEAR_THRESHOLD,
)


@dataclass(frozen=True)
class ShotClockViolation:
    """
    A live shot clock violation awaiting a turnover assignment.

    charged_team_id is the team that did not have the ball when the clock
    expired, or None when possession was never set and the operator must pick.
    """
    quarter: int
    game_clock_seconds: int
    charged_team_id: Optional[str] = None


@dataclass(frozen=True)
class TickResult:
    """What happened during one tick"""
    game_clock_seconds: int
    shot_clock_seconds: int
    period_expired: bool = False
    violation: Optional[ShotClockViolation] = None


class DualClockTicker:
    """
    Owns both live clocks for a non-video tracking session.

    The ticker is driven externally (a 1000ms QTimer in the UI layer); it
    never schedules itself.
    """

    def __init__(
        self,
        quarter_length_minutes: int = DEFAULT_QUARTER_LENGTH_MINUTES,
        shot_clock_seconds: int = SHOT_CLOCK_FULL_RESET,
        quarter: int = 1,
        regulation_periods: int = REGULATION_QUARTERS,
        overtime_length_minutes: int = OVERTIME_LENGTH_MINUTES,
        team_ids: Optional[Tuple[str, str]] = None
    ):
        """
        Initialize both clocks stopped at their full values.

        Args:
            quarter_length_minutes: Regulation period length
            shot_clock_seconds: Full shot clock reset value
            quarter: Starting period
            regulation_periods: Periods before overtime (4 quarters, 2 halves)
            overtime_length_minutes: Overtime period length
            team_ids: Both teams, so a violation can be charged to the team
                without the ball (None = operator picks)
        """
        if quarter_length_minutes <= 0:
            raise ValueError(f"Invalid quarter_length_minutes: {quarter_length_minutes}. Must be positive.")
        if shot_clock_seconds <= 0:
            raise ValueError(f"Invalid shot_clock_seconds: {shot_clock_seconds}. Must be positive.")
        if not 1 <= regulation_periods <= REGULATION_QUARTERS:
            raise ValueError(f"Invalid regulation_periods: {regulation_periods}. Must be 1-{REGULATION_QUARTERS}.")
        if overtime_length_minutes <= 0:
            raise ValueError(f"Invalid overtime_length_minutes: {overtime_length_minutes}. Must be positive.")

        self.quarter_length_minutes = quarter_length_minutes
        self.shot_clock_full = shot_clock_seconds
        self.regulation_periods = regulation_periods
        self.overtime_length_minutes = overtime_length_minutes
        self.final_period = regulation_periods + MAX_OVERTIME_PERIODS
        self.team_ids = team_ids
        self.quarter = max(1, min(self.final_period, quarter))

        self.game_clock_seconds = self.period_length_seconds(self.quarter)
        self.game_clock_running = False

        self.shot_clock_seconds = shot_clock_seconds
        self.shot_clock_running = False
        self.shot_clock_visible = True
        self.shot_clock_disabled = False
        self._shot_clock_just_reset = False

        self.possession_team_id: Optional[str] = None
        self.violation: Optional[ShotClockViolation] = None

        self._logger = logging.getLogger(__name__)

    @classmethod
    def for_ruleset(cls, ruleset, team_ids: Optional[Tuple[str, str]] = None) -> 'DualClockTicker':
        """Build a ticker with a ruleset's period lengths and full shot clock."""
        return cls(
            quarter_length_minutes=ruleset.quarter_length_minutes,
            shot_clock_seconds=ruleset.shot_clock.full_reset,
            regulation_periods=ruleset.regulation_periods,
            overtime_length_minutes=ruleset.overtime_length_minutes,
            team_ids=team_ids,
        )

    def period_length_seconds(self, quarter: int) -> int:
        if quarter > self.regulation_periods:
            return self.overtime_length_minutes * SECONDS_PER_MINUTE
        return self.quarter_length_minutes * SECONDS_PER_MINUTE

    @property
    def in_closing_period(self) -> bool:
        """Final regulation period or any overtime."""
        return self.quarter >= self.regulation_periods

    @property
    def shot_clock_active(self) -> bool:
        """Shown by the operator and not switched off for free throws."""
        return self.shot_clock_visible and not self.shot_clock_disabled

    @property
    def team_without_possession(self) -> Optional[str]:
        if self.team_ids is None or self.possession_team_id not in self.team_ids:
            return None
        team_a, team_b = self.team_ids
        return team_b if self.possession_team_id == team_a else team_a

    @property
    def has_violation(self) -> bool:
        return self.violation is not None

    @property
    def is_period_expired(self) -> bool:
        return self.game_clock_seconds == 0

    # ------------------------------------------------------------------
    # Game clock
    # ------------------------------------------------------------------

    def start_game_clock(self) -> bool:
        """
        Start the game clock.

        Returns:
            False if the period has already expired
        """
        if self.game_clock_seconds <= 0:
            self._logger.debug("Game clock at 0:00 - not starting")
            return False
        self.game_clock_running = True
        if self.shot_clock_active and self.violation is None and self.shot_clock_seconds > 0:
            self.shot_clock_running = True
        return True

    def stop_game_clock(self) -> None:
        """Stop the game clock; the shot clock always stops with it."""
        self.game_clock_running = False
        self.shot_clock_running = False

    def set_game_clock(self, minutes: int, seconds: int) -> int:
        """
        Manually set the game clock, clamped to the current period.

        Returns:
            The clamped total seconds
        """
        minutes = max(0, int(minutes))
        seconds = max(0, min(SECONDS_PER_MINUTE - 1, int(seconds)))
        total = min(minutes * SECONDS_PER_MINUTE + seconds, self.period_length_seconds(self.quarter))
        self.game_clock_seconds = total
        self._logger.info(f"Game clock set to {total // 60}:{total % 60:02d}")
        return total

    def advance_quarter(self) -> bool:
        """
        Start the next period with both clocks stopped and reset.

        Returns:
            False if already in the final period slot
        """
        if self.quarter >= self.final_period:
            self._logger.warning("Cannot advance past the final overtime period")
            return False
        self.quarter += 1
        self.stop_game_clock()
        self.game_clock_seconds = self.period_length_seconds(self.quarter)
        self.violation = None
        self.shot_clock_disabled = False
        self.reset_shot_clock()
        self._logger.info(f"Advanced to period {self.quarter}")
        return True

    # ------------------------------------------------------------------
    # Shot clock
    # ------------------------------------------------------------------

    def start_shot_clock(self) -> bool:
        if not self.shot_clock_active or self.shot_clock_seconds <= 0:
            return False
        self.shot_clock_running = True
        return True

    def stop_shot_clock(self) -> None:
        self.shot_clock_running = False

    def reset_shot_clock(self, seconds: Optional[int] = None) -> int:
        """
        Reset the shot clock. The next tick will not decrement it.

        A reset above the violation threshold clears a live violation.

        Args:
            seconds: New value (default: full reset), clamped to 0..full

        Returns:
            The clamped value
        """
        value = self.shot_clock_full if seconds is None else int(seconds)
        value = max(0, min(self.shot_clock_full, value))
        self.shot_clock_seconds = value
        self._shot_clock_just_reset = True
        if self.violation is not None and value > SHOT_CLOCK_VIOLATION_CLEAR_THRESHOLD:
            self._logger.info(f"Shot clock reset to {value}s - violation cleared")
            self.violation = None
        return value

    def set_shot_clock(self, seconds: int) -> int:
        """Manually set the shot clock (same rules as a reset)."""
        return self.reset_shot_clock(seconds)

    def set_shot_clock_visible(self, visible: bool) -> None:
        """Hide or show the shot clock; hiding also stops it."""
        self.shot_clock_visible = visible
        if not visible:
            self.shot_clock_running = False

    def disable_shot_clock(self) -> None:
        """Switch the shot clock off for free throws."""
        self.shot_clock_disabled = True
        self.shot_clock_running = False

    def enable_shot_clock(self) -> None:
        """Switch the shot clock back on; it restarts with a running game clock."""
        if not self.shot_clock_disabled:
            return
        self.shot_clock_disabled = False
        if self.game_clock_running and self.shot_clock_active and self.violation is None \
                and self.shot_clock_seconds > 0:
            self.shot_clock_running = True

    def new_possession(self, team_id: Optional[str]) -> None:
        """
        Hand possession to a team: full shot clock, violation cleared.

        Args:
            team_id: Team now in possession
        """
        self.possession_team_id = team_id
        self.violation = None
        self.reset_shot_clock()
        if self.game_clock_running and self.shot_clock_active:
            self.shot_clock_running = True

    # ------------------------------------------------------------------
    # Tick
    # ------------------------------------------------------------------

    def tick(self) -> TickResult:
        """
        Advance both clocks by one second.

        Returns:
            TickResult with the new values and any expiry or violation
        """
        violation = None
        period_expired = False

        skip_shot_clock = self._shot_clock_just_reset
        self._shot_clock_just_reset = False

        if self.shot_clock_running and self.shot_clock_active and not skip_shot_clock:
            self.shot_clock_seconds = max(0, self.shot_clock_seconds - 1)
            if self.shot_clock_seconds == 0:
                self.shot_clock_running = False
                violation = ShotClockViolation(
                    quarter=self.quarter,
                    game_clock_seconds=max(0, self.game_clock_seconds - (1 if self.game_clock_running else 0)),
                    charged_team_id=self.team_without_possession,
                )
                self.violation = violation
                self._logger.info(f"Shot clock violation (charged team: {violation.charged_team_id})")

        if self.game_clock_running:
            self.game_clock_seconds = max(0, self.game_clock_seconds - 1)
            if self.game_clock_seconds == 0:
                self.stop_game_clock()
                period_expired = True
                self._logger.info(f"Period {self.quarter} expired")

        return TickResult(
            game_clock_seconds=self.game_clock_seconds,
            shot_clock_seconds=self.shot_clock_seconds,
            period_expired=period_expired,
            violation=violation,
        )
