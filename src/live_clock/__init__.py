"""
Live Clock

Real-time dual game/shot clock used when tracking without video, and the
ruleset automation that moves it as stats are recorded.
"""

from .dual_clock_ticker import DualClockTicker, ShotClockViolation, TickResult
from .clock_automation import BallLocation, ClockAutomation

__all__ = [
    'DualClockTicker',
    'ShotClockViolation',
    'TickResult',
    'BallLocation',
    'ClockAutomation',
]
