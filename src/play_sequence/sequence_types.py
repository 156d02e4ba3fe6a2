"""
Play Sequence Types

Follow-up prompts that open after a primary stat, and the foul types that
drive the foul wizard.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional
import uuid

from stat_recording.stat_event import PlayerRef, StatType


class SequenceType(Enum):
    """Kinds of follow-up prompt"""
    ASSIST = "assist"
    REBOUND = "rebound"
    MISSED_SHOT_TYPE = "missed_shot_type"   # Blocked shot: which shot was blocked
    TURNOVER = "turnover"
    FREE_THROW = "free_throw"


class SequenceStatus(Enum):
    """Lifecycle: OPEN -> FULFILLED | SKIPPED (or DISPLACED by a newer prompt)"""
    OPEN = "open"
    FULFILLED = "fulfilled"
    SKIPPED = "skipped"
    DISPLACED = "displaced"

    @property
    def is_closed(self) -> bool:
        return self != SequenceStatus.OPEN


class FoulType(Enum):
    """
    Foul types offered by the foul wizard.

    The stored modifier drops the 2PT/3PT distinction; the shot value only
    decides how many free throws a missed shooting attempt earns.
    """
    PERSONAL = "personal"
    SHOOTING_2PT = "shooting_2pt"
    SHOOTING_3PT = "shooting_3pt"
    OFFENSIVE = "offensive"
    TECHNICAL = "technical"
    FLAGRANT = "flagrant"
    BONUS = "bonus"
    ONE_AND_ONE = "one_and_one"

    @property
    def modifier(self) -> str:
        """Modifier recorded on the foul stat"""
        return _FOUL_MODIFIERS[self]

    @property
    def free_throw_count(self) -> int:
        """Free throws awarded (for shooting fouls, when the shot is missed)"""
        return _FOUL_FREE_THROWS[self]

    @property
    def is_shooting(self) -> bool:
        return self in (FoulType.SHOOTING_2PT, FoulType.SHOOTING_3PT)

    @property
    def awards_free_throws(self) -> bool:
        return self.free_throw_count > 0

    @property
    def shot_stat_type(self) -> Optional[StatType]:
        """Stat type of the fouled shot attempt, for shooting fouls"""
        if self == FoulType.SHOOTING_2PT:
            return StatType.FIELD_GOAL
        if self == FoulType.SHOOTING_3PT:
            return StatType.THREE_POINTER
        return None


_FOUL_MODIFIERS = {
    FoulType.PERSONAL: "personal",
    FoulType.SHOOTING_2PT: "shooting",
    FoulType.SHOOTING_3PT: "shooting",
    FoulType.OFFENSIVE: "offensive",
    FoulType.TECHNICAL: "technical",
    FoulType.FLAGRANT: "flagrant",
    FoulType.BONUS: "bonus",
    FoulType.ONE_AND_ONE: "1-and-1",
}

_FOUL_FREE_THROWS = {
    FoulType.PERSONAL: 0,
    FoulType.SHOOTING_2PT: 2,
    FoulType.SHOOTING_3PT: 3,
    FoulType.OFFENSIVE: 0,
    FoulType.TECHNICAL: 1,
    FoulType.FLAGRANT: 2,
    FoulType.BONUS: 2,
    FoulType.ONE_AND_ONE: 2,
}

AND_ONE_FREE_THROWS = 1


def new_sequence_id() -> str:
    return str(uuid.uuid4())


@dataclass
class SequenceMetadata:
    """
    What a follow-up prompt needs to know about its primary stat.

    team_id is the team of the primary actor (the shooter for assist,
    rebound and free throw prompts; the stealer for turnover prompts; the
    blocker for blocked shot prompts).
    """
    team_id: str
    player: Optional[PlayerRef] = None
    is_opponent_stat: bool = False
    shot_type: Optional[StatType] = None
    foul_type: Optional[FoulType] = None
    free_throw_total: int = 0


@dataclass
class PlaySequence:
    """An open or closed follow-up prompt"""
    type: SequenceType
    metadata: SequenceMetadata
    primary_event_id: Optional[str] = None
    sequence_id: str = field(default_factory=new_sequence_id)
    status: SequenceStatus = SequenceStatus.OPEN

    @property
    def is_open(self) -> bool:
        return self.status == SequenceStatus.OPEN

    def close(self, status: SequenceStatus) -> None:
        if not status.is_closed:
            raise ValueError(f"Cannot close a sequence with status {status.value}")
        self.status = status

    def to_dict(self) -> dict:
        return {
            "sequence_id": self.sequence_id,
            "type": self.type.value,
            "primary_event_id": self.primary_event_id,
            "status": self.status.value,
            "team_id": self.metadata.team_id,
            "player_id": self.metadata.player.player_id if self.metadata.player else None,
            "is_opponent_stat": self.metadata.is_opponent_stat,
        }
