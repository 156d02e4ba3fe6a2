"""
Clock Recalibration

Marker arithmetic shared by resume-after-freeze and the manual clock edit.
Both realign a period so that the current video position reads a chosen
remaining time; the period's marker is shifted permanently rather than
offset temporarily, so every later derivation in that period agrees.
"""

from dataclasses import dataclass
from typing import Optional
import logging

from tracker_config.game_constants import (
    REGULATION_QUARTERS, FINAL_PERIOD, SECONDS_PER_MINUTE, MS_PER_SECOND
)
from .clock_sync_config import ClockSyncConfig, ClockSyncStore
from .video_clock_mapper import get_period_length_ms


logger = logging.getLogger(__name__)


def compute_recalibrated_marker(
    video_time_ms: int,
    quarter: int,
    remaining_ms: int,
    config: ClockSyncConfig
) -> int:
    """
    Marker that makes the video position read the given remaining time.

    new_marker = max(0, video_time - (period_length - remaining))

    Args:
        video_time_ms: Current video position
        quarter: Period being realigned
        remaining_ms: Time that should remain at the current position
        config: Config supplying the period length

    Returns:
        New marker in ms (never negative)
    """
    period_length_ms = get_period_length_ms(quarter, config)
    remaining_ms = max(0, min(period_length_ms, remaining_ms))
    elapsed_in_period_ms = period_length_ms - remaining_ms
    return max(0, int(video_time_ms) - elapsed_in_period_ms)


def clamp_clock_entry(quarter: int, minutes: int, seconds: int, config: ClockSyncConfig) -> int:
    """
    Clamp an operator-entered clock value into the period's bounds.

    Out-of-range input is clamped, never rejected, so a typo cannot stall a
    live game.

    Returns:
        Remaining time in ms
    """
    period_length_ms = get_period_length_ms(quarter, config)
    period_minutes = period_length_ms // (SECONDS_PER_MINUTE * MS_PER_SECOND)

    minutes = max(0, min(period_minutes, int(minutes)))
    seconds = max(0, min(SECONDS_PER_MINUTE - 1, int(seconds)))
    remaining_ms = (minutes * SECONDS_PER_MINUTE + seconds) * MS_PER_SECOND
    return min(remaining_ms, period_length_ms)


@dataclass
class ClockEditResult:
    """Outcome of a manual clock edit"""
    applied: bool
    quarter: int
    remaining_ms: int = 0
    new_marker_ms: Optional[int] = None


class ClockRecalibrator:
    """
    Applies manual clock edits to the clock sync store.

    An edit targets any period: Q1-Q4, or OT1-OT3 when is_overtime is set
    (quarter 1 with is_overtime means OT1). Markers of all later periods are
    cleared so the operator can step back to an earlier period.
    """

    def __init__(self, store: ClockSyncStore):
        self.store = store

    def edit_clock(
        self,
        quarter: int,
        minutes: int,
        seconds: int,
        video_time_ms: Optional[float],
        is_overtime: bool = False
    ) -> ClockEditResult:
        """
        Set the clock at the current video position.

        Args:
            quarter: Regulation quarter (1-4) or overtime number when is_overtime
            minutes: Minutes remaining (clamped)
            seconds: Seconds remaining (clamped)
            video_time_ms: Current video position (None = no video)
            is_overtime: Interpret quarter as an overtime number

        Returns:
            ClockEditResult (applied=False when config or video is missing)
        """
        effective_quarter = quarter + REGULATION_QUARTERS if is_overtime else quarter
        effective_quarter = max(1, min(FINAL_PERIOD, effective_quarter))

        if not self.store.has_context or video_time_ms is None:
            logger.warning("Cannot edit clock - missing clock sync config or video")
            return ClockEditResult(applied=False, quarter=effective_quarter)

        config = self.store.config
        remaining_ms = clamp_clock_entry(effective_quarter, minutes, seconds, config)
        new_marker = compute_recalibrated_marker(video_time_ms, effective_quarter, remaining_ms, config)

        self.store.set_marker(effective_quarter, new_marker, clear_later=True)
        logger.info(
            f"Clock edited to Q{effective_quarter} "
            f"{remaining_ms // 60000}:{(remaining_ms // 1000) % 60:02d} "
            f"at video {int(video_time_ms)}ms (marker {new_marker}ms, later markers cleared)"
        )
        return ClockEditResult(
            applied=True,
            quarter=effective_quarter,
            remaining_ms=remaining_ms,
            new_marker_ms=new_marker,
        )
