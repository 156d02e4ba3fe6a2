"""
Game Clock

The derived quarter / time-remaining value shown to the operator. Never
persisted: it is recomputed from the video position on every update.
"""

from dataclasses import dataclass

from tracker_config.game_constants import (
    REGULATION_QUARTERS, FINAL_PERIOD, SECONDS_PER_MINUTE, MS_PER_SECOND
)


@dataclass(frozen=True)
class GameClock:
    """
    Quarter and time remaining in that quarter.

    Quarters 1-4 are regulation, 5-7 are OT1-OT3.
    """
    quarter: int
    minutes_remaining: int
    seconds_remaining: int
    is_overtime: bool = False
    overtime_period: int = 0  # 0 for regulation, 1+ for OT

    def __post_init__(self):
        if not 1 <= self.quarter <= FINAL_PERIOD:
            raise ValueError(f"Invalid quarter: {self.quarter}. Must be 1-{FINAL_PERIOD}.")
        if self.minutes_remaining < 0:
            raise ValueError(f"Invalid minutes_remaining: {self.minutes_remaining}")
        if not 0 <= self.seconds_remaining < SECONDS_PER_MINUTE:
            raise ValueError(f"Invalid seconds_remaining: {self.seconds_remaining}. Must be 0-59.")

    @classmethod
    def from_remaining_seconds(cls, quarter: int, total_seconds: int,
                               regulation_periods: int = REGULATION_QUARTERS) -> "GameClock":
        """
        Build a clock from whole seconds remaining in the quarter.

        Args:
            quarter: Period number (1-7)
            total_seconds: Seconds remaining, already floored
            regulation_periods: Periods before overtime (2 for halves)

        Returns:
            GameClock with overtime fields derived from the quarter
        """
        is_overtime = quarter > regulation_periods
        return cls(
            quarter=quarter,
            minutes_remaining=total_seconds // SECONDS_PER_MINUTE,
            seconds_remaining=total_seconds % SECONDS_PER_MINUTE,
            is_overtime=is_overtime,
            overtime_period=quarter - regulation_periods if is_overtime else 0,
        )

    @property
    def total_seconds(self) -> int:
        return self.minutes_remaining * SECONDS_PER_MINUTE + self.seconds_remaining

    @property
    def remaining_ms(self) -> int:
        return self.total_seconds * MS_PER_SECOND

    @property
    def is_expired(self) -> bool:
        """True when the quarter clock reads 0:00"""
        return self.minutes_remaining == 0 and self.seconds_remaining == 0

    @property
    def period_label(self) -> str:
        return f"OT{self.overtime_period}" if self.is_overtime else f"Q{self.quarter}"

    def format(self) -> str:
        """Display string, e.g. 'Q2 - 07:45' or 'OT1 - 05:00'"""
        return f"{self.period_label} - {self.minutes_remaining:02d}:{self.seconds_remaining:02d}"

    def to_dict(self) -> dict:
        return {
            "quarter": self.quarter,
            "minutes_remaining": self.minutes_remaining,
            "seconds_remaining": self.seconds_remaining,
            "is_overtime": self.is_overtime,
            "overtime_period": self.overtime_period,
        }

    def __str__(self) -> str:
        return self.format()
