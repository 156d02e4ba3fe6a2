"""
Play Sequence Engine

Opens follow-up prompts after primary stats and resolves them:

| Primary event      | Opens            | Follow-up                                 |
|--------------------|------------------|-------------------------------------------|
| made FG / 3PT      | assist           | assisting teammate or skip                |
| missed FG / 3PT    | rebound          | rebounder; offensive if same team as shot |
| block              | missed_shot_type | blocked shot type, then rebound reopens   |
| steal              | turnover         | turnover for the team that lost the ball  |
| foul               | foul wizard      | fouler, type, victim, outcome, free throws|

At most one prompt is open; opening another replaces it. Prompts close as
soon as the operator chooses; stats are handed to the record callback
(which only enqueues) so nothing here waits on the store.
"""

from collections import deque
from dataclasses import replace
from typing import Callable, Deque, Optional
import logging

from tracker_config.automation_settings import SequenceAutomationFlags, AutomationPresets
from tracker_config.game_constants import DISPLACED_SEQUENCE_HISTORY_LIMIT
from stat_recording.stat_event import GameContext, PlayerRef, StatEvent, StatModifier, StatType
from .foul_flow import (
    FoulFlowAction,
    FoulFlowState,
    FoulFlowTransition,
    FoulerSelected,
    FoulTypeSelected,
    VictimSelected,
    ShotOutcomeSelected,
    Cancel,
    FreeThrows,
    RecordStat,
    FreezeClock,
    start_foul_flow,
    reduce_foul_flow,
)
from .free_throw_sequence import FreeThrowAttempt, FreeThrowSequencer
from .sequence_types import (
    FoulType,
    PlaySequence,
    SequenceMetadata,
    SequenceStatus,
    SequenceType,
)


class PlaySequenceEngine:
    """
    Single writer of prompt state for a tracking session.
    """

    def __init__(
        self,
        context: GameContext,
        record: Callable[[StatEvent], None],
        flags: SequenceAutomationFlags = AutomationPresets.DEFAULT,
        freeze_clock: Optional[Callable[[], None]] = None
    ):
        """
        Initialize the engine.

        Args:
            context: Game being tracked
            record: Receives every stat to write (must not block)
            flags: Which follow-up prompts are active
            freeze_clock: Called whenever a foul is recorded
        """
        self.context = context
        self.flags = flags
        self._record = record
        self._freeze_clock = freeze_clock

        self.current: Optional[PlaySequence] = None
        self.foul_state: FoulFlowState = None
        self.free_throws = FreeThrowSequencer()
        self.displaced: Deque[PlaySequence] = deque(maxlen=DISPLACED_SEQUENCE_HISTORY_LIMIT)
        self.last_error: Optional[str] = None

        self._logger = logging.getLogger(__name__)

    # ------------------------------------------------------------------
    # Primary stats
    # ------------------------------------------------------------------

    def record_primary_stat(self, event: StatEvent) -> Optional[PlaySequence]:
        """
        Record a primary stat and open its follow-up prompt, if any.

        Args:
            event: The stat the operator just entered

        Returns:
            The prompt that opened, or None
        """
        self._record(event)
        stat_type = event.stat_type
        metadata = SequenceMetadata(
            team_id=event.team_id,
            player=self._player_of(event),
            is_opponent_stat=event.is_opponent_stat,
            shot_type=stat_type if stat_type.is_shot else None,
        )

        if stat_type == StatType.FOUL:
            self._freeze()
            return None

        if stat_type in (StatType.FIELD_GOAL, StatType.THREE_POINTER):
            if event.is_made_shot and self.flags.assists_active:
                return self._open(SequenceType.ASSIST, metadata, event.event_id)
            if event.is_missed_shot and self.flags.rebounds_active:
                return self._open(SequenceType.REBOUND, metadata, event.event_id)
            return None

        if stat_type == StatType.FREE_THROW:
            if event.is_missed_shot and not event.skip_rebound and self.flags.rebounds_active:
                return self._open(SequenceType.REBOUND, metadata, event.event_id)
            return None

        if stat_type == StatType.BLOCK and self.flags.blocks_active:
            return self._open(SequenceType.MISSED_SHOT_TYPE, metadata, event.event_id)

        if stat_type == StatType.STEAL and self.flags.enabled:
            return self._open(SequenceType.TURNOVER, metadata, event.event_id)

        return None

    # ------------------------------------------------------------------
    # Prompt resolution
    # ------------------------------------------------------------------

    def select_assist(self, player: Optional[PlayerRef]) -> bool:
        """
        Credit the assist for the open made-shot prompt.

        Args:
            player: Assisting teammate (None only for an opponent-team shot)

        Returns:
            True if recorded and the prompt closed
        """
        sequence = self._expect(SequenceType.ASSIST)
        if sequence is None:
            return False
        meta = sequence.metadata
        if player is None and not meta.is_opponent_stat:
            return self._reject("An assisting player is required")
        if player is not None:
            if player.team_id != meta.team_id:
                return self._reject(f"Assist must come from team {meta.team_id}")
            if meta.player is not None and player.player_id == meta.player.player_id:
                return self._reject("A shooter cannot assist their own basket")

        self._close(sequence, SequenceStatus.FULFILLED)
        self._emit(sequence, StatType.ASSIST, meta.team_id, player, meta.is_opponent_stat)
        return True

    def select_rebounder(self, team_id: str, player: Optional[PlayerRef] = None,
                         is_opponent: bool = False) -> bool:
        """
        Credit the rebound for the open missed-shot prompt.

        Rebound type is offensive when the rebounder's team is the shooter's.

        Args:
            team_id: Rebounding team
            player: Rebounder (None = team rebound)
            is_opponent: Team-level opponent rebound (no player)

        Returns:
            True if recorded and the prompt closed
        """
        sequence = self._expect(SequenceType.REBOUND)
        if sequence is None:
            return False
        if team_id not in (self.context.team_a_id, self.context.team_b_id):
            return self._reject(f"Team {team_id} is not in this game")
        if player is not None and player.team_id != team_id:
            return self._reject(f"Rebounder is on team {player.team_id}, not {team_id}")
        if is_opponent and player is not None:
            return self._reject("Opponent rebounds are team-level and cannot name a player")

        rebound_type = StatModifier.OFFENSIVE if team_id == sequence.metadata.team_id else StatModifier.DEFENSIVE
        self._close(sequence, SequenceStatus.FULFILLED)
        self._emit(sequence, StatType.REBOUND, team_id, player, is_opponent, modifier=rebound_type)
        return True

    def select_blocked_shot_type(self, shot_type: StatType, shooter: Optional[PlayerRef] = None,
                                 is_opponent: bool = False) -> bool:
        """
        Record the blocked shot as a miss for the blocked team, then reopen
        the rebound prompt.

        Args:
            shot_type: FIELD_GOAL or THREE_POINTER
            shooter: Blocked player (None = team-level miss)
            is_opponent: The blocked team is the opponent (no player)

        Returns:
            True if recorded and the prompt closed
        """
        sequence = self._expect(SequenceType.MISSED_SHOT_TYPE)
        if sequence is None:
            return False
        if shot_type not in (StatType.FIELD_GOAL, StatType.THREE_POINTER):
            return self._reject(f"{shot_type.value} cannot be blocked")

        blocked_team_id = self.context.opponent_of(sequence.metadata.team_id)
        if shooter is not None and shooter.team_id != blocked_team_id:
            return self._reject(f"Blocked shooter must be on team {blocked_team_id}")
        if is_opponent and shooter is not None:
            return self._reject("Opponent shots are team-level and cannot name a shooter")

        self._close(sequence, SequenceStatus.FULFILLED)
        missed = self._emit(sequence, shot_type, blocked_team_id, shooter, is_opponent,
                            modifier=StatModifier.MISSED)

        if self.flags.rebounds_active:
            self._open(
                SequenceType.REBOUND,
                SequenceMetadata(
                    team_id=blocked_team_id,
                    player=shooter,
                    is_opponent_stat=is_opponent,
                    shot_type=shot_type,
                ),
                missed.event_id,
            )
        return True

    def select_turnover(self, player: Optional[PlayerRef] = None, is_opponent: bool = False) -> bool:
        """
        Charge the turnover that the open steal prompt implies.

        Args:
            player: Player who lost the ball (None = team turnover)
            is_opponent: Team-level opponent turnover (no player)

        Returns:
            True if recorded and the prompt closed
        """
        sequence = self._expect(SequenceType.TURNOVER)
        if sequence is None:
            return False
        losing_team_id = self.context.opponent_of(sequence.metadata.team_id)
        if player is not None and player.team_id != losing_team_id:
            return self._reject(f"Turnover must be charged to team {losing_team_id}")
        if is_opponent and player is not None:
            return self._reject("Opponent turnovers are team-level and cannot name a player")

        self._close(sequence, SequenceStatus.FULFILLED)
        self._emit(sequence, StatType.TURNOVER, losing_team_id, player, is_opponent,
                   modifier=StatModifier.STEAL)
        return True

    def skip(self) -> Optional[PlaySequence]:
        """
        Close the open prompt unfulfilled; no stat is written.

        Returns:
            The skipped prompt, or None if nothing was open
        """
        sequence = self.current
        if sequence is None:
            return None
        if sequence.type == SequenceType.FREE_THROW:
            self.free_throws.cancel()
        self._close(sequence, SequenceStatus.SKIPPED)
        self._logger.info(f"Skipped {sequence.type.value} prompt")
        return sequence

    # ------------------------------------------------------------------
    # Foul wizard
    # ------------------------------------------------------------------

    def start_foul(self, team_id: Optional[str] = None, player: Optional[PlayerRef] = None,
                   is_opponent: bool = False) -> FoulFlowTransition:
        """
        Open the foul wizard, optionally with the fouler already chosen.

        Args:
            team_id: Fouling team (None = ask the operator)
            player: Fouler
            is_opponent: Team-level opponent foul

        Returns:
            The wizard transition
        """
        fouler = FoulerSelected(team_id=team_id, player=player, is_opponent=is_opponent) if team_id else None
        transition = start_foul_flow(
            self.context,
            prompt_free_throws=self.flags.free_throws_active,
            fouler=fouler,
        )
        return self._apply_foul_transition(transition)

    def select_fouler(self, team_id: str, player: Optional[PlayerRef] = None,
                      is_opponent: bool = False) -> FoulFlowTransition:
        return self.apply_foul_action(FoulerSelected(team_id=team_id, player=player, is_opponent=is_opponent))

    def select_foul_type(self, foul_type: FoulType) -> FoulFlowTransition:
        return self.apply_foul_action(FoulTypeSelected(foul_type=foul_type))

    def select_victim(self, player: Optional[PlayerRef] = None, is_opponent: bool = False) -> FoulFlowTransition:
        return self.apply_foul_action(VictimSelected(player=player, is_opponent=is_opponent))

    def select_shot_outcome(self, made: bool) -> FoulFlowTransition:
        return self.apply_foul_action(ShotOutcomeSelected(made=made))

    def cancel_foul(self) -> FoulFlowTransition:
        return self.apply_foul_action(Cancel())

    def apply_foul_action(self, action: FoulFlowAction) -> FoulFlowTransition:
        """Feed one operator choice through the foul wizard."""
        return self._apply_foul_transition(reduce_foul_flow(self.foul_state, action))

    # ------------------------------------------------------------------
    # Free throws
    # ------------------------------------------------------------------

    def start_free_throw_auto_sequence(self, team_id: str, shooter: Optional[PlayerRef] = None,
                                       is_opponent: bool = False) -> bool:
        """
        Start the standalone free throw auto-sequence (full automation only).

        Args:
            team_id: Shooting team
            shooter: Shooter (None = team-level shots)
            is_opponent: Team-level opponent shooter (no player)

        Returns:
            True if the count prompt opened
        """
        if not self.flags.free_throw_auto_active:
            self._logger.debug("Free throw auto-sequence disabled")
            return False
        if is_opponent and shooter is not None:
            return self._reject("Opponent free throws are team-level and cannot name a shooter")
        run = self.free_throws.start_auto(self.context.game_id, team_id, shooter, is_opponent_stat=is_opponent)
        if run is None:
            return False
        self._open(
            SequenceType.FREE_THROW,
            SequenceMetadata(team_id=team_id, player=shooter, is_opponent_stat=is_opponent),
            None,
            sequence_id=run.sequence_id,
            keep_free_throws=True,
        )
        return True

    def set_free_throw_count(self, count: int) -> bool:
        """
        Answer the auto-sequence count prompt.

        An invalid count closes the prompt and resets the wizard.
        """
        if self.free_throws.set_count(count):
            if self.current is not None and self.current.type == SequenceType.FREE_THROW:
                self.current.metadata.free_throw_total = count
            return True
        self._drop_free_throw_prompt()
        return self._reject(f"Invalid free throw count: {count}")

    def record_free_throw(self, made: bool) -> Optional[FreeThrowAttempt]:
        """
        Record the next attempt of the active free throw run.

        The final attempt closes the prompt; a final miss opens a rebound.

        Returns:
            The attempt, or None if no attempt was expected
        """
        run = self.free_throws.active
        attempt = self.free_throws.record_attempt(made)
        if attempt is None:
            return None

        if not self.flags.link_events:
            attempt_event = _unlinked(attempt.event)
        else:
            attempt_event = attempt.event
        self._record(attempt_event)

        if attempt.is_final:
            sequence = self.current
            if sequence is not None and sequence.type == SequenceType.FREE_THROW:
                self._close(sequence, SequenceStatus.FULFILLED)
            if attempt.opens_rebound and self.flags.rebounds_active:
                self._open(
                    SequenceType.REBOUND,
                    SequenceMetadata(
                        team_id=run.team_id,
                        player=run.shooter,
                        is_opponent_stat=run.is_opponent_stat,
                        shot_type=StatType.FREE_THROW,
                    ),
                    attempt_event.event_id,
                )
        return attempt

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _apply_foul_transition(self, transition: FoulFlowTransition) -> FoulFlowTransition:
        for command in transition.commands:
            if isinstance(command, RecordStat):
                event = command.event if self.flags.link_events else _unlinked(command.event)
                self._record(event)
            elif isinstance(command, FreezeClock):
                self._freeze()

        if transition.error:
            self.last_error = transition.error
            self._logger.warning(f"Foul wizard reset: {transition.error}")

        state = transition.state
        if isinstance(state, FreeThrows):
            self._open_foul_free_throws(state)
            state = None
        self.foul_state = state
        return transition

    def _open_foul_free_throws(self, step: FreeThrows) -> None:
        draft = step.draft
        run = self.free_throws.open_from_foul(
            game_id=self.context.game_id,
            team_id=draft.victim_team_id,
            shooter=draft.victim,
            count=step.count,
            sequence_id=draft.sequence_id,
            primary_event_id=draft.foul_event_id,
            foul_type=draft.foul_type,
            is_opponent_stat=draft.victim_is_opponent,
        )
        self._open(
            SequenceType.FREE_THROW,
            SequenceMetadata(
                team_id=draft.victim_team_id,
                player=draft.victim,
                is_opponent_stat=draft.victim_is_opponent,
                foul_type=draft.foul_type,
                free_throw_total=run.total,
            ),
            draft.foul_event_id,
            sequence_id=draft.sequence_id,
            keep_free_throws=True,
        )

    def _open(
        self,
        sequence_type: SequenceType,
        metadata: SequenceMetadata,
        primary_event_id: Optional[str],
        sequence_id: Optional[str] = None,
        keep_free_throws: bool = False
    ) -> PlaySequence:
        previous = self.current
        if previous is not None and previous.is_open:
            previous.status = SequenceStatus.DISPLACED
            self.displaced.append(previous)
            if previous.type == SequenceType.FREE_THROW and not keep_free_throws:
                self.free_throws.cancel()
            self._logger.info(f"{previous.type.value} prompt replaced by {sequence_type.value} prompt")

        sequence = PlaySequence(type=sequence_type, metadata=metadata, primary_event_id=primary_event_id)
        if sequence_id is not None:
            sequence.sequence_id = sequence_id
        self.current = sequence
        self.last_error = None
        self._logger.debug(f"Opened {sequence_type.value} prompt (sequence {sequence.sequence_id})")
        return sequence

    def _close(self, sequence: PlaySequence, status: SequenceStatus) -> None:
        sequence.close(status)
        if self.current is sequence:
            self.current = None

    def _expect(self, sequence_type: SequenceType) -> Optional[PlaySequence]:
        if self.current is None or self.current.type != sequence_type:
            open_type = self.current.type.value if self.current else "none"
            self._reject(f"No {sequence_type.value} prompt is open (open: {open_type})")
            return None
        return self.current

    def _reject(self, message: str) -> bool:
        self.last_error = message
        self._logger.warning(message)
        return False

    def _drop_free_throw_prompt(self) -> None:
        if self.current is not None and self.current.type == SequenceType.FREE_THROW:
            self._close(self.current, SequenceStatus.SKIPPED)

    def _emit(
        self,
        sequence: PlaySequence,
        stat_type: StatType,
        team_id: str,
        player: Optional[PlayerRef],
        is_opponent_stat: bool,
        modifier: Optional[str] = None
    ) -> StatEvent:
        link = self.flags.link_events
        event = StatEvent.create(
            game_id=self.context.game_id,
            team_id=team_id,
            stat_type=stat_type,
            modifier=modifier,
            player=player,
            is_opponent_stat=is_opponent_stat,
            sequence_id=sequence.sequence_id if link else None,
            primary_event_id=sequence.primary_event_id if link else None,
        )
        self._record(event)
        return event

    def _freeze(self) -> None:
        if self._freeze_clock is not None:
            self._freeze_clock()

    def _player_of(self, event: StatEvent) -> Optional[PlayerRef]:
        player_id = event.attributed_player_id
        if player_id is None:
            return None
        return PlayerRef(player_id=player_id, team_id=event.team_id)


def _unlinked(event: StatEvent) -> StatEvent:
    return replace(event, sequence_id=None, primary_event_id=None)
