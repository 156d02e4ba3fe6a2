"""
Game Constants for Basketball Stat Tracking

Central location for all magic numbers used by the clock and sequence engines.
This avoids scattered magic values and makes tuning/configuration easier.
"""


# =============================================================================
# PERIOD CONSTANTS
# =============================================================================

REGULATION_QUARTERS = 4  # Q1-Q4
MAX_OVERTIME_PERIODS = 3  # OT1-OT3
FINAL_PERIOD = REGULATION_QUARTERS + MAX_OVERTIME_PERIODS  # 7 = OT3
DEFAULT_QUARTER_LENGTH_MINUTES = 12
OVERTIME_LENGTH_MINUTES = 5  # Fixed regardless of quarter length


# =============================================================================
# TIME CONSTANTS
# =============================================================================

MS_PER_SECOND = 1000
MS_PER_MINUTE = 60 * MS_PER_SECOND
SECONDS_PER_MINUTE = 60


# =============================================================================
# SHOT CLOCK CONSTANTS
# =============================================================================

SHOT_CLOCK_FULL_RESET = 24  # NBA full reset
SHOT_CLOCK_OFFENSIVE_RESET = 14  # NBA offensive rebound / frontcourt foul
SHOT_CLOCK_VIOLATION_CLEAR_THRESHOLD = 20  # Reset above this clears a live violation
MADE_BASKET_STOP_WINDOW_SECONDS = 120  # Last 2 minutes of the closing period or overtime


# =============================================================================
# SCHEDULING CONSTANTS
# =============================================================================

CLOCK_TICK_INTERVAL_MS = 1000  # Dual clock tick period
SCORE_REFRESH_DEBOUNCE_MS = 2000  # Score recomputation debounce window
DISPLACED_SEQUENCE_HISTORY_LIMIT = 20  # Bounded history of replaced prompts


# =============================================================================
# FREE THROW CONSTANTS
# =============================================================================

MIN_FREE_THROWS = 1
MAX_FREE_THROWS = 3


# =============================================================================
# SCORING CONSTANTS
# =============================================================================

FIELD_GOAL_POINTS = 2
THREE_POINTER_POINTS = 3
FREE_THROW_POINTS = 1
