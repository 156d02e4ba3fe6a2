"""
Video Tracking Session

The single owner of clock and prompt state while tracking from game video.
Video position updates flow in; the session derives the effective clock,
watches for period ends, and stamps every stat with the clock and video
time before queueing it for the store.
"""

from dataclasses import dataclass
from typing import Callable, Optional, Protocol
import logging

from tracker_config.automation_settings import SequenceAutomationFlags, AutomationPresets
from game_clock.clock_sync_config import ClockSyncConfig, ClockSyncPersistence, ClockSyncStore
from game_clock.clock_recalibration import ClockEditResult, ClockRecalibrator
from game_clock.freeze_controller import ClockFreezeController, FreezeReason, ResumeResult
from game_clock.game_clock import GameClock
from game_clock.quarter_advancement import AdvancementOutcome, QuarterAdvancementDetector
from game_clock.video_clock_mapper import (
    game_clock_to_video_time, get_period_length_ms, map_video_time_to_game_clock
)
from play_sequence.sequence_engine import PlaySequenceEngine
from stat_recording.dispatch_queue import CommandKind, DispatchResult, StatDispatchQueue
from stat_recording.recording_gateway import StatRecordingGateway
from stat_recording.scoreboard import Scoreboard
from stat_recording.stat_event import GameContext, StatEvent
from stat_recording.undo_slot import UndoSlot


class VideoPlayback(Protocol):
    """Video player controls the session may use"""

    def seek(self, seconds: float) -> None:
        ...

    def pause(self) -> None:
        ...


@dataclass(frozen=True)
class ClockUpdate:
    """Result of one video position update"""
    clock: Optional[GameClock]
    outcome: AdvancementOutcome = AdvancementOutcome.NONE

    @property
    def is_synced(self) -> bool:
        return self.clock is not None


class VideoTrackingSession:
    """
    Wires the clock sync engine, play sequences and stat dispatch together
    for one game video.
    """

    def __init__(
        self,
        context: GameContext,
        gateway: StatRecordingGateway,
        video_id: Optional[str] = None,
        clock_config: Optional[ClockSyncConfig] = None,
        clock_persistence: Optional[ClockSyncPersistence] = None,
        flags: SequenceAutomationFlags = AutomationPresets.DEFAULT,
        playback: Optional[VideoPlayback] = None
    ):
        """
        Initialize the session.

        Args:
            context: Game being tracked
            gateway: Stat store
            video_id: Game video (None = no video loaded yet)
            clock_config: Starting markers (loaded from persistence when None)
            clock_persistence: Storage for markers
            flags: Follow-up prompt automation
            playback: Video player to pause and seek
        """
        self.context = context
        self.gateway = gateway
        self.playback = playback
        self._logger = logging.getLogger(__name__)

        self.store = ClockSyncStore(video_id=video_id, config=clock_config, persistence=clock_persistence)
        if video_id is not None and clock_config is None:
            self.store.load(video_id)

        self.freeze = ClockFreezeController(self.store)
        self.recalibrator = ClockRecalibrator(self.store)
        self.detector = QuarterAdvancementDetector(self.store)

        self.undo_slot = UndoSlot()
        self.queue = StatDispatchQueue(gateway, undo_slot=self.undo_slot)
        self.queue.add_result_listener(self._on_write_completed)
        self.scoreboard = Scoreboard(context)
        self.schedule_score_refresh: Optional[Callable[[], None]] = None

        self.engine = PlaySequenceEngine(
            context,
            record=self._dispatch,
            flags=flags,
            freeze_clock=lambda: self.freeze_clock(FreezeReason.FOUL),
        )

        self.video_time_ms: Optional[int] = None
        self.live_clock: Optional[GameClock] = None

    # ------------------------------------------------------------------
    # Video and clock
    # ------------------------------------------------------------------

    def load_video(self, video_id: str) -> Optional[ClockSyncConfig]:
        """Switch to a video and load its markers."""
        self.freeze.discard()
        self.detector.reset()
        return self.store.load(video_id)

    def calibrate(self, jumpball_ms: Optional[float] = None, quarter_length_minutes: Optional[int] = None) -> ClockSyncConfig:
        """
        Mark the opening tip (default: the current video position).
        """
        position = jumpball_ms if jumpball_ms is not None else (self.video_time_ms or 0)
        config = self.store.calibrate(int(position), quarter_length_minutes)
        self.detector.reset()
        return config

    @property
    def current_clock(self) -> Optional[GameClock]:
        """Effective clock: the frozen snapshot while frozen, otherwise live"""
        return self.freeze.effective_clock(self.live_clock)

    def update_video_time(self, video_time_ms: float) -> ClockUpdate:
        """
        Feed the current playback position.

        Args:
            video_time_ms: Playback position in ms

        Returns:
            ClockUpdate with the effective clock and any period-end outcome
        """
        self.video_time_ms = int(video_time_ms)
        self.live_clock = map_video_time_to_game_clock(self.video_time_ms, self.store.config)
        clock = self.current_clock
        outcome = self.detector.observe(clock, self.scoreboard.team_a_score, self.scoreboard.team_b_score)
        return ClockUpdate(clock=clock, outcome=outcome)

    def freeze_clock(self, reason: FreezeReason = FreezeReason.MANUAL) -> bool:
        return self.freeze.freeze(self.live_clock, self.video_time_ms, reason)

    def resume_clock(self) -> ResumeResult:
        """Unfreeze, realigning the frozen period to the current video position."""
        result = self.freeze.resume(self.video_time_ms)
        if self.video_time_ms is not None:
            self.live_clock = map_video_time_to_game_clock(self.video_time_ms, self.store.config)
        return result

    def edit_clock(self, quarter: int, minutes: int, seconds: int, is_overtime: bool = False) -> ClockEditResult:
        """
        Set the clock at the current video position.

        A manual edit replaces any active freeze and re-arms period-end prompts.
        """
        if self.freeze.is_frozen:
            self._logger.info("Manual clock edit replaces the active freeze")
            self.freeze.discard()
        result = self.recalibrator.edit_clock(quarter, minutes, seconds, self.video_time_ms, is_overtime)
        if result.applied:
            self.detector.reset()
            self.live_clock = map_video_time_to_game_clock(self.video_time_ms, self.store.config)
        return result

    def advance_quarter(self, next_period: Optional[int] = None) -> bool:
        """
        Accept the advance prompt, starting the next period at the current
        video position.

        Args:
            next_period: Period to start (default: the pending prompt's)

        Returns:
            True if the marker was written
        """
        if next_period is None:
            prompt = self.detector.pending_prompt
            if prompt is None:
                self._logger.warning("No advance prompt pending")
                return False
            next_period = prompt.next_period
        written = self.detector.advance_quarter(next_period, self.video_time_ms)
        if written:
            self.freeze.discard()
            self.live_clock = map_video_time_to_game_clock(self.video_time_ms, self.store.config)
        return written

    def seek_to_period_start(self, quarter: int) -> Optional[int]:
        """
        Seek the video to where a period's clock reads full time.

        Returns:
            Target position in ms, or None if uncalibrated or no player
        """
        if self.playback is None or not self.store.is_calibrated:
            return None
        full_seconds = get_period_length_ms(quarter, self.store.config) // 1000
        target_ms = game_clock_to_video_time(GameClock.from_remaining_seconds(quarter, full_seconds), self.store.config)
        self.playback.seek(target_ms / 1000)
        return target_ms

    # ------------------------------------------------------------------
    # Stats
    # ------------------------------------------------------------------

    def record_stat(self, event: StatEvent):
        """
        Record a primary stat: pause the video, then let the sequence engine
        queue it and open any follow-up prompt.

        Returns:
            The prompt that opened, or None
        """
        if self.playback is not None:
            self.playback.pause()
        return self.engine.record_primary_stat(event)

    def undo_last(self) -> bool:
        """Undo the most recently recorded stat, written or still queued."""
        command = self.queue.undo_last()
        if command is None:
            return False
        if command.kind == CommandKind.RECORD:
            self.scoreboard.retract(command.event)
        return True

    def drain(self):
        return self.queue.drain()

    def refresh_scores(self):
        """Recompute scores from the store."""
        return self.scoreboard.recompute(self.gateway.get_game_stats(self.context.game_id))

    def _dispatch(self, event: StatEvent) -> None:
        if event.quarter is None:
            event = event.with_clock(self.current_clock, self.video_time_ms)
        self.scoreboard.apply(event)
        self.queue.submit(event)

    def _on_write_completed(self, result: DispatchResult) -> None:
        if self.schedule_score_refresh is not None:
            self.schedule_score_refresh()
        elif result.deleted:
            self.refresh_scores()
