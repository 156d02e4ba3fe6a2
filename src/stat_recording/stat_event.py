"""
Stat Events

The records dispatched to the stat recording gateway, plus the small value
types describing who a stat belongs to.
"""

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Optional, TYPE_CHECKING
import uuid

from tracker_config.game_constants import (
    FINAL_PERIOD, FIELD_GOAL_POINTS, THREE_POINTER_POINTS, FREE_THROW_POINTS
)

if TYPE_CHECKING:
    from game_clock.game_clock import GameClock


CUSTOM_PLAYER_PREFIX = "custom-"


class StatType(Enum):
    """Stat types the tracker records"""
    FIELD_GOAL = "field_goal"
    THREE_POINTER = "three_pointer"
    FREE_THROW = "free_throw"
    ASSIST = "assist"
    REBOUND = "rebound"
    STEAL = "steal"
    BLOCK = "block"
    TURNOVER = "turnover"
    FOUL = "foul"

    @property
    def is_shot(self) -> bool:
        return self in (StatType.FIELD_GOAL, StatType.THREE_POINTER, StatType.FREE_THROW)


class StatModifier:
    """Modifier strings stored alongside a stat type"""
    MADE = "made"
    MISSED = "missed"
    OFFENSIVE = "offensive"
    DEFENSIVE = "defensive"
    STEAL = "steal"
    SHOT_CLOCK_VIOLATION = "shot_clock_violation"


@dataclass
class PlayerRef:
    """
    A player a stat can be attributed to.

    Custom-roster players (ids prefixed 'custom-') are recorded under
    custom_player_id instead of player_id.
    """
    player_id: str
    team_id: str
    name: str = ""
    is_custom: bool = False

    def __post_init__(self):
        if not self.player_id:
            raise ValueError("player_id must not be empty")
        if self.player_id.startswith(CUSTOM_PLAYER_PREFIX):
            self.is_custom = True


@dataclass(frozen=True)
class GameContext:
    """The game being tracked and its two teams"""
    game_id: str
    team_a_id: str
    team_b_id: str

    def __post_init__(self):
        if self.team_a_id == self.team_b_id:
            raise ValueError("Team A and team B must be different.")

    def opponent_of(self, team_id: str) -> str:
        """
        Get the other team in this game.

        Raises:
            ValueError: If team_id is not in this game
        """
        if team_id == self.team_a_id:
            return self.team_b_id
        if team_id == self.team_b_id:
            return self.team_a_id
        raise ValueError(f"Team {team_id} is not in this game. Valid teams: {[self.team_a_id, self.team_b_id]}")


@dataclass(frozen=True)
class StatEvent:
    """
    A single stat as sent to the recording gateway.

    Exactly one of player_id/custom_player_id is set for a player stat;
    neither is set for a team-level opponent stat.
    """
    game_id: str
    team_id: str
    stat_type: StatType
    modifier: Optional[str] = None
    player_id: Optional[str] = None
    custom_player_id: Optional[str] = None
    is_opponent_stat: bool = False
    sequence_id: Optional[str] = None
    primary_event_id: Optional[str] = None   # Links a follow-up to its primary stat
    skip_rebound: bool = False               # Non-final FT miss, no rebound follows
    quarter: Optional[int] = None
    game_time_minutes: Optional[int] = None
    game_time_seconds: Optional[int] = None
    video_timestamp_ms: Optional[int] = None
    event_id: str = field(default_factory=lambda: str(uuid.uuid4()))

    def __post_init__(self):
        if self.player_id and self.custom_player_id:
            raise ValueError("A stat cannot name both player_id and custom_player_id")
        if self.is_opponent_stat and (self.player_id or self.custom_player_id):
            raise ValueError("Opponent stats are team-level and cannot name a player")
        if self.quarter is not None and not 1 <= self.quarter <= FINAL_PERIOD:
            raise ValueError(f"Invalid quarter: {self.quarter}. Must be 1-{FINAL_PERIOD}.")

    @classmethod
    def create(
        cls,
        game_id: str,
        team_id: str,
        stat_type: StatType,
        modifier: Optional[str] = None,
        player: Optional[PlayerRef] = None,
        is_opponent_stat: bool = False,
        sequence_id: Optional[str] = None,
        primary_event_id: Optional[str] = None,
        skip_rebound: bool = False
    ) -> "StatEvent":
        """
        Build an event for a player (or for the opponent team when player is None).

        Args:
            game_id: Game being tracked
            team_id: Team credited with the stat
            stat_type: Kind of stat
            modifier: made/missed, rebound type, foul type...
            player: Player credited (None = team-level opponent stat)
            is_opponent_stat: Coach-mode stat for the opponent team
            sequence_id: Shared id linking related events
            primary_event_id: Event this follow-up belongs to
            skip_rebound: Mark a non-final free throw miss

        Returns:
            New StatEvent with a fresh event_id
        """
        player_id = custom_player_id = None
        if player is not None and not is_opponent_stat:
            if player.is_custom:
                custom_player_id = player.player_id
            else:
                player_id = player.player_id
        return cls(
            game_id=game_id,
            team_id=team_id,
            stat_type=stat_type,
            modifier=modifier,
            player_id=player_id,
            custom_player_id=custom_player_id,
            is_opponent_stat=is_opponent_stat,
            sequence_id=sequence_id,
            primary_event_id=primary_event_id,
            skip_rebound=skip_rebound,
        )

    def with_clock(self, clock: Optional["GameClock"], video_time_ms: Optional[float] = None) -> "StatEvent":
        """Stamp the event with the effective clock and video position."""
        if clock is None:
            return replace(
                self,
                video_timestamp_ms=int(video_time_ms) if video_time_ms is not None else None,
            )
        return replace(
            self,
            quarter=clock.quarter,
            game_time_minutes=clock.minutes_remaining,
            game_time_seconds=clock.seconds_remaining,
            video_timestamp_ms=int(video_time_ms) if video_time_ms is not None else None,
        )

    @property
    def attributed_player_id(self) -> Optional[str]:
        return self.player_id or self.custom_player_id

    @property
    def is_made_shot(self) -> bool:
        return self.stat_type.is_shot and self.modifier == StatModifier.MADE

    @property
    def is_missed_shot(self) -> bool:
        return self.stat_type.is_shot and self.modifier == StatModifier.MISSED

    @property
    def points(self) -> int:
        """Points this event adds to the team score"""
        if not self.is_made_shot:
            return 0
        if self.stat_type == StatType.THREE_POINTER:
            return THREE_POINTER_POINTS
        if self.stat_type == StatType.FREE_THROW:
            return FREE_THROW_POINTS
        return FIELD_GOAL_POINTS

    def to_dict(self) -> dict:
        """Convert to the gateway's record shape."""
        return {
            "event_id": self.event_id,
            "game_id": self.game_id,
            "team_id": self.team_id,
            "player_id": self.player_id,
            "custom_player_id": self.custom_player_id,
            "is_opponent_stat": self.is_opponent_stat,
            "stat_type": self.stat_type.value,
            "modifier": self.modifier,
            "sequence_id": self.sequence_id,
            "quarter": self.quarter,
            "game_time_minutes": self.game_time_minutes,
            "game_time_seconds": self.game_time_seconds,
            "video_timestamp_ms": self.video_timestamp_ms,
            "metadata": {"primary_event_id": self.primary_event_id} if self.primary_event_id else None,
            "event_metadata": {"skip_rebound": True} if self.skip_rebound else None,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "StatEvent":
        """Rebuild an event from its record shape."""
        metadata = data.get("metadata") or {}
        event_metadata = data.get("event_metadata") or {}
        kwargs = dict(
            game_id=data["game_id"],
            team_id=data["team_id"],
            stat_type=StatType(data["stat_type"]),
            modifier=data.get("modifier"),
            player_id=data.get("player_id"),
            custom_player_id=data.get("custom_player_id"),
            is_opponent_stat=bool(data.get("is_opponent_stat", False)),
            sequence_id=data.get("sequence_id"),
            primary_event_id=metadata.get("primary_event_id"),
            skip_rebound=bool(event_metadata.get("skip_rebound", False)),
            quarter=data.get("quarter"),
            game_time_minutes=data.get("game_time_minutes"),
            game_time_seconds=data.get("game_time_seconds"),
            video_timestamp_ms=data.get("video_timestamp_ms"),
        )
        if data.get("event_id"):
            kwargs["event_id"] = data["event_id"]
        return cls(**kwargs)
