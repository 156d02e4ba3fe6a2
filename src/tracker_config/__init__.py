"""
Tracker Configuration

Central constants, automation presets and competition rulesets shared by the
clock sync engine, the live dual-clock ticker and the play-sequence engine.
"""

from .automation_settings import SequenceAutomationFlags, AutomationPresets
from .ruleset_settings import (
    ClockAutomationFlags,
    ClockPresets,
    Ruleset,
    RulesetPresets,
    ShotClockRules,
)

__all__ = [
    'SequenceAutomationFlags',
    'AutomationPresets',
    'ClockAutomationFlags',
    'ClockPresets',
    'Ruleset',
    'RulesetPresets',
    'ShotClockRules',
]
