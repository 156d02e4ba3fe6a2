"""
Foul Flow

The multi-step foul wizard as an explicit state machine:

    SelectFouler -> SelectFoulType -> SelectVictim -> SelectShotOutcome -> FreeThrows
                                   \\-> (no free throws) closed
                                   SelectVictim -> FreeThrows (non-shooting fouls)

reduce_foul_flow() is pure: it returns the next step plus the commands the
caller must carry out (record a stat, freeze the clock). Idle is None. Any
action that does not fit the current step resets the wizard to idle with an
error instead of raising.
"""

from dataclasses import dataclass, field, replace
from typing import List, Optional, Union

from stat_recording.stat_event import GameContext, PlayerRef, StatEvent, StatModifier, StatType
from .sequence_types import AND_ONE_FREE_THROWS, FoulType, new_sequence_id


# =============================================================================
# STATE
# =============================================================================

@dataclass(frozen=True)
class FoulDraft:
    """Choices accumulated while the wizard runs"""
    context: GameContext
    sequence_id: str = field(default_factory=new_sequence_id)
    prompt_free_throws: bool = True
    fouler: Optional[PlayerRef] = None
    fouling_team_id: Optional[str] = None
    fouler_is_opponent: bool = False
    foul_type: Optional[FoulType] = None
    foul_event_id: Optional[str] = None
    victim: Optional[PlayerRef] = None
    victim_team_id: Optional[str] = None
    victim_is_opponent: bool = False


@dataclass(frozen=True)
class SelectFouler:
    draft: FoulDraft


@dataclass(frozen=True)
class SelectFoulType:
    draft: FoulDraft


@dataclass(frozen=True)
class SelectVictim:
    draft: FoulDraft


@dataclass(frozen=True)
class SelectShotOutcome:
    draft: FoulDraft


@dataclass(frozen=True)
class FreeThrows:
    """Terminal step: hand the shooter over to the free throw sequence"""
    draft: FoulDraft
    count: int


FoulFlowState = Optional[Union[SelectFouler, SelectFoulType, SelectVictim, SelectShotOutcome, FreeThrows]]


# =============================================================================
# ACTIONS
# =============================================================================

@dataclass(frozen=True)
class FoulerSelected:
    """player None = team-level opponent foul (coach mode)"""
    team_id: str
    player: Optional[PlayerRef] = None
    is_opponent: bool = False


@dataclass(frozen=True)
class FoulTypeSelected:
    foul_type: FoulType


@dataclass(frozen=True)
class VictimSelected:
    player: Optional[PlayerRef] = None
    is_opponent: bool = False


@dataclass(frozen=True)
class ShotOutcomeSelected:
    made: bool


@dataclass(frozen=True)
class Cancel:
    pass


FoulFlowAction = Union[FoulerSelected, FoulTypeSelected, VictimSelected, ShotOutcomeSelected, Cancel]


# =============================================================================
# COMMANDS
# =============================================================================

@dataclass(frozen=True)
class RecordStat:
    event: StatEvent


@dataclass(frozen=True)
class FreezeClock:
    pass


FoulFlowCommand = Union[RecordStat, FreezeClock]


@dataclass
class FoulFlowTransition:
    state: FoulFlowState
    commands: List[FoulFlowCommand] = field(default_factory=list)
    error: Optional[str] = None

    @property
    def is_idle(self) -> bool:
        return self.state is None


# =============================================================================
# REDUCER
# =============================================================================

def start_foul_flow(
    context: GameContext,
    prompt_free_throws: bool = True,
    fouler: Optional[FoulerSelected] = None
) -> FoulFlowTransition:
    """
    Open the wizard.

    Args:
        context: Game being tracked
        prompt_free_throws: Continue to victim/free throw steps when awarded
        fouler: Fouler already chosen by the operator (skips SelectFouler)

    Returns:
        Transition into SelectFouler, or SelectFoulType when fouler is given
    """
    state = SelectFouler(draft=FoulDraft(context=context, prompt_free_throws=prompt_free_throws))
    if fouler is None:
        return FoulFlowTransition(state=state)
    return reduce_foul_flow(state, fouler)


def reduce_foul_flow(state: FoulFlowState, action: FoulFlowAction) -> FoulFlowTransition:
    """
    Apply one operator action to the wizard.

    Args:
        state: Current step (None = idle)
        action: Operator choice

    Returns:
        FoulFlowTransition with the next step and commands to run
    """
    if isinstance(action, Cancel):
        return FoulFlowTransition(state=None)

    if isinstance(state, SelectFouler) and isinstance(action, FoulerSelected):
        return _select_fouler(state.draft, action)
    if isinstance(state, SelectFoulType) and isinstance(action, FoulTypeSelected):
        return _select_foul_type(state.draft, action.foul_type)
    if isinstance(state, SelectVictim) and isinstance(action, VictimSelected):
        return _select_victim(state.draft, action)
    if isinstance(state, SelectShotOutcome) and isinstance(action, ShotOutcomeSelected):
        return _select_shot_outcome(state.draft, action.made)

    step = type(state).__name__ if state is not None else "idle"
    return FoulFlowTransition(state=None, error=f"{type(action).__name__} is not valid at step {step}")


def _select_fouler(draft: FoulDraft, action: FoulerSelected) -> FoulFlowTransition:
    if action.team_id not in (draft.context.team_a_id, draft.context.team_b_id):
        return FoulFlowTransition(state=None, error=f"Team {action.team_id} is not in this game")
    if action.player is None and not action.is_opponent:
        return FoulFlowTransition(state=None, error="A fouler is required unless the foul is an opponent team foul")
    draft = replace(
        draft,
        fouler=None if action.is_opponent else action.player,
        fouling_team_id=action.team_id,
        fouler_is_opponent=action.is_opponent,
    )
    return FoulFlowTransition(state=SelectFoulType(draft=draft))


def _select_foul_type(draft: FoulDraft, foul_type: FoulType) -> FoulFlowTransition:
    foul_event = StatEvent.create(
        game_id=draft.context.game_id,
        team_id=draft.fouling_team_id,
        stat_type=StatType.FOUL,
        modifier=foul_type.modifier,
        player=draft.fouler,
        is_opponent_stat=draft.fouler_is_opponent,
        sequence_id=draft.sequence_id,
    )
    draft = replace(
        draft,
        foul_type=foul_type,
        foul_event_id=foul_event.event_id,
        victim_team_id=draft.context.opponent_of(draft.fouling_team_id),
    )
    commands = [RecordStat(foul_event), FreezeClock()]

    if not foul_type.awards_free_throws or not draft.prompt_free_throws:
        return FoulFlowTransition(state=None, commands=commands)
    return FoulFlowTransition(state=SelectVictim(draft=draft), commands=commands)


def _select_victim(draft: FoulDraft, action: VictimSelected) -> FoulFlowTransition:
    if action.player is None and not action.is_opponent:
        return FoulFlowTransition(state=None, error="A fouled player is required unless the victim is the opponent team")
    if action.player is not None and action.player.team_id != draft.victim_team_id:
        return FoulFlowTransition(
            state=None,
            error=f"Fouled player must be on team {draft.victim_team_id}, not {action.player.team_id}",
        )
    draft = replace(
        draft,
        victim=None if action.is_opponent else action.player,
        victim_is_opponent=action.is_opponent,
    )
    if draft.foul_type.is_shooting:
        return FoulFlowTransition(state=SelectShotOutcome(draft=draft))
    return FoulFlowTransition(state=FreeThrows(draft=draft, count=draft.foul_type.free_throw_count))


def _select_shot_outcome(draft: FoulDraft, made: bool) -> FoulFlowTransition:
    if not made:
        return FoulFlowTransition(state=FreeThrows(draft=draft, count=draft.foul_type.free_throw_count))

    basket = StatEvent.create(
        game_id=draft.context.game_id,
        team_id=draft.victim_team_id,
        stat_type=draft.foul_type.shot_stat_type,
        modifier=StatModifier.MADE,
        player=draft.victim,
        is_opponent_stat=draft.victim_is_opponent,
        sequence_id=draft.sequence_id,
        primary_event_id=draft.foul_event_id,
    )
    return FoulFlowTransition(
        state=FreeThrows(draft=draft, count=AND_ONE_FREE_THROWS),
        commands=[RecordStat(basket)],
    )
