"""
Play Sequences

Follow-up prompts (assist, rebound, blocked shot type, turnover, free
throws) and the foul wizard that run after a primary stat is recorded.
"""

from .sequence_types import (
    SequenceType,
    SequenceStatus,
    SequenceMetadata,
    PlaySequence,
    FoulType,
    AND_ONE_FREE_THROWS,
)
from .foul_flow import (
    FoulDraft,
    SelectFouler,
    SelectFoulType,
    SelectVictim,
    SelectShotOutcome,
    FreeThrows,
    FoulerSelected,
    FoulTypeSelected,
    VictimSelected,
    ShotOutcomeSelected,
    Cancel,
    RecordStat,
    FreezeClock,
    FoulFlowTransition,
    start_foul_flow,
    reduce_foul_flow,
)
from .free_throw_sequence import FreeThrowSequencer, FreeThrowRun, FreeThrowAttempt, FreeThrowMode
from .sequence_engine import PlaySequenceEngine

__all__ = [
    'SequenceType',
    'SequenceStatus',
    'SequenceMetadata',
    'PlaySequence',
    'FoulType',
    'AND_ONE_FREE_THROWS',
    'FoulDraft',
    'SelectFouler',
    'SelectFoulType',
    'SelectVictim',
    'SelectShotOutcome',
    'FreeThrows',
    'FoulerSelected',
    'FoulTypeSelected',
    'VictimSelected',
    'ShotOutcomeSelected',
    'Cancel',
    'RecordStat',
    'FreezeClock',
    'FoulFlowTransition',
    'start_foul_flow',
    'reduce_foul_flow',
    'FreeThrowSequencer',
    'FreeThrowRun',
    'FreeThrowAttempt',
    'FreeThrowMode',
    'PlaySequenceEngine',
]
