"""
Quarter Advancement Detector

Watches the derived clock for a period reaching 0:00 and decides what the
operator is asked next: advance to the following period, or (when the
fourth quarter or an overtime ends with unequal scores) go to the
end-of-game flow. The two outcomes are mutually exclusive for a single
zero-clock event.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional
import logging

from tracker_config.game_constants import REGULATION_QUARTERS, FINAL_PERIOD
from .clock_sync_config import ClockSyncStore
from .game_clock import GameClock


logger = logging.getLogger(__name__)


class AdvancementOutcome(Enum):
    """What an observed clock value calls for"""
    NONE = "none"
    ADVANCE_PROMPT = "advance_prompt"
    GAME_END = "game_end"


@dataclass(frozen=True)
class AdvancementPrompt:
    """Pending prompt to start the next period"""
    expired_quarter: int
    next_period: int


class QuarterAdvancementDetector:
    """
    Raises advance/game-end outcomes from a stream of clock values.

    Deduplicates by remembering the last prompted quarter, so a clock that
    sits at 0:00 across many video updates prompts once.
    """

    def __init__(self, store: ClockSyncStore):
        self.store = store
        self.last_prompted_quarter: Optional[int] = None
        self.game_end_raised = False
        self.pending_prompt: Optional[AdvancementPrompt] = None

    def observe(self, clock: Optional[GameClock], team_a_score: int, team_b_score: int) -> AdvancementOutcome:
        """
        Inspect the effective clock after a video update.

        Args:
            clock: Effective clock (None = not synced)
            team_a_score: Current score of team A
            team_b_score: Current score of team B

        Returns:
            AdvancementOutcome for this observation
        """
        if clock is None or not clock.is_expired:
            return AdvancementOutcome.NONE

        quarter = clock.quarter
        if quarter >= REGULATION_QUARTERS and team_a_score != team_b_score:
            if self.game_end_raised:
                return AdvancementOutcome.NONE
            self.game_end_raised = True
            self.pending_prompt = None
            logger.info(f"{clock.period_label} ended {team_a_score}-{team_b_score} - game over")
            return AdvancementOutcome.GAME_END

        if quarter == self.last_prompted_quarter:
            return AdvancementOutcome.NONE
        self.last_prompted_quarter = quarter

        if quarter >= FINAL_PERIOD:
            logger.warning(f"{clock.period_label} expired tied with no period slot left - no prompt")
            return AdvancementOutcome.NONE

        self.pending_prompt = AdvancementPrompt(expired_quarter=quarter, next_period=quarter + 1)
        logger.info(f"{clock.period_label} expired - prompting advance to period {quarter + 1}")
        return AdvancementOutcome.ADVANCE_PROMPT

    def advance_quarter(self, next_period: int, video_time_ms: Optional[float]) -> bool:
        """
        Accept the advance prompt: the current video time becomes the next
        period's marker.

        Args:
            next_period: Period being started (2-7)
            video_time_ms: Current video position (None = no video)

        Returns:
            True if the marker was written, False if the prompt was dismissed
            for missing context
        """
        self.pending_prompt = None
        if not self.store.has_context or video_time_ms is None:
            logger.warning(f"Cannot advance to period {next_period} - missing clock sync config or video")
            return False

        marker = max(0, int(video_time_ms))
        self.store.set_marker(next_period, marker)
        logger.info(f"Advanced to period {next_period} at video {marker}ms")
        return True

    def dismiss_prompt(self) -> None:
        """Close the advance prompt without writing a marker."""
        self.pending_prompt = None

    def reset(self) -> None:
        """Forget prompt history, e.g. after the operator edits the clock back."""
        self.last_prompted_quarter = None
        self.game_end_raised = False
        self.pending_prompt = None
