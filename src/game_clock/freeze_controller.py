"""
Clock Freeze Controller

Holds the game clock still while play is stopped (a foul whistle, or an
operator freeze) even though the video keeps moving. While frozen the
snapshot, not the mapper's live output, is the effective clock.

Resuming recalibrates the frozen period's marker so the current video
position reads exactly the frozen time. Scrubbing around while frozen is
therefore harmless: the single correction on resume fixes every later read.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional
import logging

from .clock_sync_config import ClockSyncStore
from .clock_recalibration import compute_recalibrated_marker
from .game_clock import GameClock
from .video_clock_mapper import find_active_period, compute_remaining_ms


class FreezeReason(Enum):
    """Why the clock was frozen"""
    FOUL = "foul"
    MANUAL = "manual"


class ResumeStatus(Enum):
    """
    Outcome of resume().

    MISSING_CONTEXT is recoverable: the freeze is cleared but no marker is
    written because the config or video is unavailable.
    """
    RESUMED = "resumed"                # Marker rewritten
    UNCHANGED = "unchanged"            # Resumed at the freeze position, nothing to write
    NOT_FROZEN = "not_frozen"
    MISSING_CONTEXT = "missing_context"


@dataclass(frozen=True)
class FrozenClockSnapshot:
    """Clock captured at freeze time"""
    clock: GameClock
    remaining_ms: int                 # Exact, before flooring to whole seconds
    video_time_ms: Optional[int]      # Video position at freeze, if known
    reason: FreezeReason


@dataclass
class ResumeResult:
    """Result of resuming a frozen clock"""
    status: ResumeStatus
    quarter: Optional[int] = None
    new_marker_ms: Optional[int] = None

    @property
    def recalibrated(self) -> bool:
        return self.status == ResumeStatus.RESUMED


class ClockFreezeController:
    """
    Snapshot-and-realign logic for manual clock corrections.

    Usage:
        1. freeze(clock, video_time_ms) on a foul or operator action
        2. effective_clock(live_clock) on every video update
        3. resume(video_time_ms) when play restarts
    """

    def __init__(self, store: ClockSyncStore):
        """
        Args:
            store: Clock sync store whose markers resume() rewrites
        """
        self.store = store
        self._snapshot: Optional[FrozenClockSnapshot] = None
        self._logger = logging.getLogger(__name__)

    @property
    def is_frozen(self) -> bool:
        return self._snapshot is not None

    @property
    def snapshot(self) -> Optional[FrozenClockSnapshot]:
        return self._snapshot

    def freeze(
        self,
        current_clock: Optional[GameClock],
        video_time_ms: Optional[float] = None,
        reason: FreezeReason = FreezeReason.MANUAL
    ) -> bool:
        """
        Freeze the clock at its current value.

        Freezing while already frozen keeps the original snapshot.

        Args:
            current_clock: Clock to hold (None = not synced, nothing to freeze)
            video_time_ms: Video position at the freeze, for exact resume math
            reason: What triggered the freeze

        Returns:
            True if a new snapshot was taken
        """
        if current_clock is None:
            self._logger.debug("Freeze ignored - clock not synced")
            return False
        if self._snapshot is not None:
            self._logger.debug(f"Already frozen at {self._snapshot.clock} - keeping first snapshot")
            return False

        position = int(video_time_ms) if video_time_ms is not None else None
        self._snapshot = FrozenClockSnapshot(
            clock=current_clock,
            remaining_ms=self._exact_remaining_ms(current_clock, position),
            video_time_ms=position,
            reason=reason,
        )
        self._logger.info(f"Clock frozen at {current_clock} ({reason.value})")
        return True

    def effective_clock(self, live_clock: Optional[GameClock]) -> Optional[GameClock]:
        """
        Clock to display and stamp stats with.

        Args:
            live_clock: Mapper output for the current video position

        Returns:
            The frozen snapshot while frozen, otherwise live_clock
        """
        if self._snapshot is not None:
            return self._snapshot.clock
        return live_clock

    def resume(self, current_video_time_ms: Optional[float]) -> ResumeResult:
        """
        Unfreeze and realign the frozen period to the current video position.

        Args:
            current_video_time_ms: Video position at resume (None = no video)

        Returns:
            ResumeResult describing what was written
        """
        snapshot = self._snapshot
        if snapshot is None:
            return ResumeResult(status=ResumeStatus.NOT_FROZEN)

        self._snapshot = None
        quarter = snapshot.clock.quarter

        if not self.store.has_context or current_video_time_ms is None:
            self._logger.warning("Cannot recalibrate on resume - missing clock sync config or video; freeze cleared")
            return ResumeResult(status=ResumeStatus.MISSING_CONTEXT, quarter=quarter)

        position = int(current_video_time_ms)
        if snapshot.video_time_ms is not None and position == snapshot.video_time_ms:
            self._logger.info(f"Clock resumed at freeze position - Q{quarter} marker unchanged")
            return ResumeResult(status=ResumeStatus.UNCHANGED, quarter=quarter,
                                new_marker_ms=self.store.config.get_marker(quarter))

        new_marker = compute_recalibrated_marker(position, quarter, snapshot.remaining_ms, self.store.config)
        self.store.set_marker(quarter, new_marker)
        self._logger.info(f"Clock resumed from {snapshot.clock}: Q{quarter} marker now {new_marker}ms")
        return ResumeResult(status=ResumeStatus.RESUMED, quarter=quarter, new_marker_ms=new_marker)

    def discard(self) -> None:
        """Drop the snapshot without recalibrating."""
        self._snapshot = None

    def _exact_remaining_ms(self, clock: GameClock, video_time_ms: Optional[int]) -> int:
        # Sub-second precision keeps freeze+resume at one position a no-op
        config = self.store.config
        if video_time_ms is None or config is None or not config.is_calibrated:
            return clock.remaining_ms
        active = find_active_period(video_time_ms, config)
        if active is None or active[0] != clock.quarter:
            return clock.remaining_ms
        return compute_remaining_ms(active[0], active[1], video_time_ms, config)
