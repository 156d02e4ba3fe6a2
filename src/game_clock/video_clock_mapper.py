"""
Video-to-Clock Mapper

Pure functions converting a video playback position into the game clock and
back. Nothing here mutates the config or touches playback.

Mapping rules:
- No config or no jumpball marker: uncalibrated, returns None
- Position before the jumpball: Q1 with the full quarter remaining
- Otherwise: the latest period whose marker is at or before the position
- Remaining time is floored to whole seconds (never rounded, so 0:60 cannot appear)
"""

from typing import Optional, Tuple

from tracker_config.game_constants import (
    REGULATION_QUARTERS, FINAL_PERIOD, OVERTIME_LENGTH_MINUTES, MS_PER_MINUTE, MS_PER_SECOND
)
from .clock_sync_config import ClockSyncConfig
from .game_clock import GameClock


def get_period_length_ms(quarter: int, config: ClockSyncConfig) -> int:
    """
    Length of a period in milliseconds.

    Args:
        quarter: Period number (1-7)
        config: Clock sync config providing the regulation quarter length

    Returns:
        Regulation quarter length for Q1-Q4, fixed overtime length for OT
    """
    if quarter > REGULATION_QUARTERS:
        return OVERTIME_LENGTH_MINUTES * MS_PER_MINUTE
    return config.quarter_length_minutes * MS_PER_MINUTE


def find_active_period(video_time_ms: int, config: ClockSyncConfig) -> Optional[Tuple[int, int]]:
    """
    Find the period a video position falls in.

    Scans from OT3 down to Q1 and picks the first period whose marker is at
    or before the position, so out-of-order markers resolve to the latest
    period that has started.

    Args:
        video_time_ms: Current playback position in ms
        config: Clock sync config

    Returns:
        (quarter, marker_ms) or None if uncalibrated. Positions before the
        jumpball resolve to Q1 with its marker (negative elapsed time).
    """
    if not config.is_calibrated:
        return None

    for quarter in range(FINAL_PERIOD, 0, -1):
        marker = config.get_marker(quarter)
        if marker is not None and video_time_ms >= marker:
            return quarter, marker

    return 1, config.jumpball_ms


def compute_remaining_ms(quarter: int, marker_ms: int, video_time_ms: int, config: ClockSyncConfig) -> int:
    """
    Exact milliseconds remaining in a period at a video position.

    Clamped to [0, period length]; a position before the marker means the
    period has not started and the full length remains.
    """
    period_length_ms = get_period_length_ms(quarter, config)
    elapsed_ms = video_time_ms - marker_ms
    return max(0, min(period_length_ms, period_length_ms - elapsed_ms))


def map_video_time_to_game_clock(
    video_time_ms: float,
    config: Optional[ClockSyncConfig]
) -> Optional[GameClock]:
    """
    Derive the game clock from a video position.

    Args:
        video_time_ms: Current playback position in ms
        config: Clock sync config (None = no video calibrated)

    Returns:
        GameClock, or None when not synced

    Example:
        >>> config = ClockSyncConfig(quarter_length_minutes=12, jumpball_ms=0)
        >>> map_video_time_to_game_clock(60000, config).format()
        'Q1 - 11:00'
    """
    if config is None:
        return None

    video_time_ms = int(video_time_ms)
    active = find_active_period(video_time_ms, config)
    if active is None:
        return None

    quarter, marker_ms = active
    remaining_ms = compute_remaining_ms(quarter, marker_ms, video_time_ms, config)
    return GameClock.from_remaining_seconds(quarter, remaining_ms // MS_PER_SECOND)


def game_clock_to_video_time(clock: GameClock, config: Optional[ClockSyncConfig]) -> int:
    """
    Video position at which the game clock reads the given value.

    Uses the period's own marker when set; otherwise estimates the period
    start from the jumpball plus nominal lengths of the earlier periods
    (breaks between periods are not known, so the estimate runs early).

    Args:
        clock: Target game clock
        config: Clock sync config

    Returns:
        Video offset in ms, or 0 when uncalibrated
    """
    if config is None or not config.is_calibrated:
        return 0

    period_length_ms = get_period_length_ms(clock.quarter, config)
    elapsed_ms = period_length_ms - min(clock.remaining_ms, period_length_ms)

    period_start = config.get_marker(clock.quarter)
    if period_start is None:
        regular_before = min(clock.quarter - 1, REGULATION_QUARTERS)
        overtime_before = max(0, clock.quarter - REGULATION_QUARTERS - 1)
        period_start = (
            config.jumpball_ms
            + regular_before * get_period_length_ms(1, config)
            + overtime_before * get_period_length_ms(REGULATION_QUARTERS + 1, config)
        )

    return period_start + elapsed_ms
