"""
Stat Recording

Stat event types, the recording gateway interface, and the dispatch queue,
undo slot and scoreboard that sit in front of it.
"""

from .stat_event import StatEvent, StatType, StatModifier, PlayerRef, GameContext, CUSTOM_PLAYER_PREFIX
from .recording_gateway import StatRecordingGateway, StatRecordingError
from .undo_slot import UndoSlot, UndoEntry
from .dispatch_queue import (
    StatDispatchQueue,
    DispatchCommand,
    DispatchFailure,
    DispatchResult,
    CommandKind,
)
from .scoreboard import Scoreboard

__all__ = [
    'StatEvent',
    'StatType',
    'StatModifier',
    'PlayerRef',
    'GameContext',
    'CUSTOM_PLAYER_PREFIX',
    'StatRecordingGateway',
    'StatRecordingError',
    'UndoSlot',
    'UndoEntry',
    'StatDispatchQueue',
    'DispatchCommand',
    'DispatchFailure',
    'DispatchResult',
    'CommandKind',
    'Scoreboard',
]
