"""
Game Clock Sync Engine

Derives the authoritative quarter and time remaining from a video playback
position, and supports freeze/resume, manual clock edits and period
advancement on top of per-period video markers.
"""

from .game_clock import GameClock
from .clock_sync_config import ClockSyncConfig, ClockSyncStore, ClockSyncPersistence, PERIOD_MARKER_FIELDS
from .video_clock_mapper import (
    map_video_time_to_game_clock,
    game_clock_to_video_time,
    get_period_length_ms,
)
from .clock_recalibration import ClockRecalibrator, ClockEditResult, compute_recalibrated_marker
from .freeze_controller import (
    ClockFreezeController,
    FreezeReason,
    FrozenClockSnapshot,
    ResumeResult,
    ResumeStatus,
)
from .quarter_advancement import QuarterAdvancementDetector, AdvancementOutcome, AdvancementPrompt

__all__ = [
    'GameClock',
    'ClockSyncConfig',
    'ClockSyncStore',
    'ClockSyncPersistence',
    'PERIOD_MARKER_FIELDS',
    'map_video_time_to_game_clock',
    'game_clock_to_video_time',
    'get_period_length_ms',
    'ClockRecalibrator',
    'ClockEditResult',
    'compute_recalibrated_marker',
    'ClockFreezeController',
    'FreezeReason',
    'FrozenClockSnapshot',
    'ResumeResult',
    'ResumeStatus',
    'QuarterAdvancementDetector',
    'AdvancementOutcome',
    'AdvancementPrompt',
]
