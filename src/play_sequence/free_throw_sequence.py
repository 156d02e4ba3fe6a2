"""
Free Throw Sequence

Runs a set of free throws one attempt at a time. Two entry paths exist and
never run together:

- Sequence-driven: opened by the foul wizard with a known count and the
  foul's shared sequence id
- Auto-sequence: started directly (full automation), asks for the count
  (1-3) first

Every non-final miss is recorded with skip_rebound; only the final attempt
can lead to a rebound prompt. A missed first shot of a 1-and-1 is final.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional
import logging

from tracker_config.game_constants import MIN_FREE_THROWS, MAX_FREE_THROWS
from stat_recording.stat_event import PlayerRef, StatEvent, StatModifier, StatType
from .sequence_types import FoulType, new_sequence_id


class FreeThrowMode(Enum):
    SEQUENCE = "sequence"  # Opened by the foul wizard
    AUTO = "auto"          # Standalone auto-sequence


@dataclass
class FreeThrowRun:
    """An active run of free throws"""
    mode: FreeThrowMode
    game_id: str
    team_id: str
    shooter: Optional[PlayerRef]
    is_opponent_stat: bool = False
    total: Optional[int] = None   # None until the auto-sequence count is chosen
    made_so_far: int = 0
    attempted: int = 0
    sequence_id: Optional[str] = None
    primary_event_id: Optional[str] = None
    foul_type: Optional[FoulType] = None

    @property
    def awaiting_count(self) -> bool:
        return self.total is None

    @property
    def current_attempt(self) -> int:
        """1-based number of the next attempt"""
        return self.attempted + 1

    @property
    def remaining(self) -> int:
        if self.total is None:
            return 0
        return self.total - self.attempted


@dataclass(frozen=True)
class FreeThrowAttempt:
    """Result of recording one attempt"""
    event: StatEvent
    attempt_number: int
    total: int
    is_final: bool
    opens_rebound: bool   # Final attempt missed


class FreeThrowSequencer:
    """
    Owns the single active free throw run.
    """

    def __init__(self):
        self.active: Optional[FreeThrowRun] = None
        self._logger = logging.getLogger(__name__)

    @property
    def is_active(self) -> bool:
        return self.active is not None

    def open_from_foul(
        self,
        game_id: str,
        team_id: str,
        shooter: Optional[PlayerRef],
        count: int,
        sequence_id: str,
        primary_event_id: Optional[str] = None,
        foul_type: Optional[FoulType] = None,
        is_opponent_stat: bool = False
    ) -> FreeThrowRun:
        """
        Open a sequence-driven run. An active auto-sequence is cancelled.

        Args:
            game_id: Game being tracked
            team_id: Shooter's team
            shooter: Fouled player (None = opponent team shooter)
            count: Free throws awarded (1-3)
            sequence_id: Shared id linking the foul, any and-one basket and every attempt
            primary_event_id: The foul's event id
            foul_type: Foul that awarded the free throws
            is_opponent_stat: Shooter is the opponent team (coach mode)

        Returns:
            The new run
        """
        if self.active is not None:
            self._logger.info(f"Cancelling {self.active.mode.value} free throw run - foul opened a new one")
        count = max(MIN_FREE_THROWS, min(MAX_FREE_THROWS, count))
        self.active = FreeThrowRun(
            mode=FreeThrowMode.SEQUENCE,
            game_id=game_id,
            team_id=team_id,
            shooter=shooter,
            is_opponent_stat=is_opponent_stat,
            total=count,
            sequence_id=sequence_id,
            primary_event_id=primary_event_id,
            foul_type=foul_type,
        )
        self._logger.info(f"Free throw sequence opened: {count} attempt(s)")
        return self.active

    def start_auto(
        self,
        game_id: str,
        team_id: str,
        shooter: Optional[PlayerRef],
        is_opponent_stat: bool = False
    ) -> Optional[FreeThrowRun]:
        """
        Start a standalone auto-sequence awaiting its count.

        Returns:
            The new run, or None if a sequence-driven run is in progress
        """
        if self.active is not None and self.active.mode == FreeThrowMode.SEQUENCE:
            self._logger.warning("Free throw auto-sequence rejected - a foul free throw sequence is active")
            return None
        self.active = FreeThrowRun(
            mode=FreeThrowMode.AUTO,
            game_id=game_id,
            team_id=team_id,
            shooter=shooter,
            is_opponent_stat=is_opponent_stat,
            sequence_id=new_sequence_id(),
        )
        return self.active

    def set_count(self, count: int) -> bool:
        """
        Choose the auto-sequence count.

        An invalid count (or no run awaiting a count) resets the sequencer.

        Returns:
            True if the count was accepted
        """
        run = self.active
        if run is None or not run.awaiting_count:
            self._logger.warning("No free throw auto-sequence is waiting for a count")
            self.cancel()
            return False
        if not MIN_FREE_THROWS <= count <= MAX_FREE_THROWS:
            self._logger.warning(f"Invalid free throw count {count} - must be {MIN_FREE_THROWS}-{MAX_FREE_THROWS}")
            self.cancel()
            return False
        run.total = count
        return True

    def record_attempt(self, made: bool) -> Optional[FreeThrowAttempt]:
        """
        Record the next attempt of the active run.

        Returns:
            The attempt, or None if no run is ready for an attempt
        """
        run = self.active
        if run is None or run.awaiting_count:
            self._logger.warning("No free throw attempt is expected")
            return None

        run.attempted += 1
        if made:
            run.made_so_far += 1
        # A missed front end of a 1-and-1 ends the run
        front_end_miss = run.foul_type is FoulType.ONE_AND_ONE and run.attempted == 1 and not made
        is_final = run.attempted >= run.total or front_end_miss

        event = StatEvent.create(
            game_id=run.game_id,
            team_id=run.team_id,
            stat_type=StatType.FREE_THROW,
            modifier=StatModifier.MADE if made else StatModifier.MISSED,
            player=run.shooter,
            is_opponent_stat=run.is_opponent_stat,
            sequence_id=run.sequence_id,
            primary_event_id=run.primary_event_id,
            skip_rebound=not made and not is_final,
        )
        attempt = FreeThrowAttempt(
            event=event,
            attempt_number=run.attempted,
            total=run.total,
            is_final=is_final,
            opens_rebound=is_final and not made,
        )
        if is_final:
            self._logger.info(f"Free throws complete: {run.made_so_far}/{run.total}")
            self.active = None
        return attempt

    def cancel(self) -> None:
        """Drop the active run; all wizard fields are reset."""
        self.active = None
