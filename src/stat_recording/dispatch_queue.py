"""
Stat Dispatch Queue

Accepted stats are enqueued synchronously and written afterwards, so a
prompt can close the moment the operator chooses and the next input is
never blocked on the store.

Writes run strictly in submission order. Each write has its own error
handling: a failure is logged and reported as a DispatchFailure, the
command is dropped (no retry) and local state is not rolled back.
"""

from collections import deque
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Deque, List, Optional
import logging

from logging_config import log_exception
from .recording_gateway import StatRecordingGateway
from .stat_event import StatEvent
from .undo_slot import UndoSlot


class CommandKind(Enum):
    RECORD = "record"
    DELETE = "delete"


@dataclass(frozen=True)
class DispatchCommand:
    """One queued gateway write"""
    kind: CommandKind
    event: Optional[StatEvent] = None
    stat_id: Optional[str] = None

    @property
    def description(self) -> str:
        if self.kind == CommandKind.DELETE:
            return f"delete stat {self.stat_id}"
        return f"record {self.event.stat_type.value} ({self.event.modifier or '-'})"


@dataclass(frozen=True)
class DispatchFailure:
    """Notice that a queued write failed and was dropped"""
    command: DispatchCommand
    error: str

    @property
    def message(self) -> str:
        return f"Failed to {self.command.description}: {self.error}"

    @property
    def context(self) -> dict:
        """Fields identifying the dropped write in the error log"""
        if self.command.event is not None:
            return {
                "action": self.command.description,
                "game_id": self.command.event.game_id,
                "event_id": self.command.event.event_id,
            }
        return {"action": self.command.description}


@dataclass(frozen=True)
class DispatchResult:
    """Outcome of one successful write"""
    command: DispatchCommand
    stat_id: Optional[str] = None
    deleted: bool = False


class StatDispatchQueue:
    """
    FIFO command queue in front of a StatRecordingGateway.

    Draining is triggered by schedule_drain when set (the UI layer defers it
    to the next event-loop turn); otherwise the caller drains explicitly.
    """

    def __init__(
        self,
        gateway: StatRecordingGateway,
        undo_slot: Optional[UndoSlot] = None,
        schedule_drain: Optional[Callable[[], None]] = None
    ):
        """
        Args:
            gateway: Store that performs the writes
            undo_slot: Receives each successfully recorded stat
            schedule_drain: Requests a deferred drain() call
        """
        self.gateway = gateway
        self.undo_slot = undo_slot if undo_slot is not None else UndoSlot()
        self.schedule_drain = schedule_drain
        self._pending: Deque[DispatchCommand] = deque()
        self._last_record: Optional[DispatchCommand] = None
        self._draining = False
        self._failure_listeners: List[Callable[[DispatchFailure], None]] = []
        self._result_listeners: List[Callable[[DispatchResult], None]] = []
        self.failures: List[DispatchFailure] = []
        self._logger = logging.getLogger(__name__)

    @property
    def pending_count(self) -> int:
        return len(self._pending)

    def add_failure_listener(self, listener: Callable[[DispatchFailure], None]) -> None:
        self._failure_listeners.append(listener)

    def add_result_listener(self, listener: Callable[[DispatchResult], None]) -> None:
        self._result_listeners.append(listener)

    def submit(self, event: StatEvent) -> DispatchCommand:
        """
        Queue a stat for recording. Returns immediately.

        Args:
            event: Stat to record

        Returns:
            The queued command
        """
        command = DispatchCommand(kind=CommandKind.RECORD, event=event)
        self._last_record = command
        return self._enqueue(command)

    def submit_delete(self, stat_id: str) -> DispatchCommand:
        """Queue a delete-by-id."""
        return self._enqueue(DispatchCommand(kind=CommandKind.DELETE, stat_id=stat_id))

    def undo_last(self) -> Optional[DispatchCommand]:
        """
        Undo the most recently recorded stat.

        A record still waiting in the queue is withdrawn before it reaches
        the store; a confirmed one is deleted by id.

        Returns:
            The withdrawn RECORD command, the queued DELETE command, or None
            if nothing can be undone
        """
        last = self._last_record
        self._last_record = None
        if last is not None and last in self._pending:
            self._pending.remove(last)
            self.undo_slot.clear()
            self._logger.info(f"Undoing {last.event.stat_type.value} before it was written")
            return last

        entry = self.undo_slot.take()
        if entry is None:
            return None
        self._logger.info(f"Undoing {entry.event.stat_type.value} (stat {entry.stat_id})")
        return self.submit_delete(entry.stat_id)

    def drain(self) -> List[DispatchResult]:
        """
        Perform every queued write in order.

        Re-entrant calls (a listener submitting while draining) are folded
        into the running drain.

        Returns:
            Results of the successful writes
        """
        if self._draining:
            return []
        self._draining = True
        results = []
        try:
            while self._pending:
                command = self._pending.popleft()
                result = self._execute(command)
                if result is not None:
                    results.append(result)
        finally:
            self._draining = False
        return results

    def _enqueue(self, command: DispatchCommand) -> DispatchCommand:
        self._pending.append(command)
        self._logger.debug(f"Queued {command.description} ({len(self._pending)} pending)")
        if self.schedule_drain is not None:
            self.schedule_drain()
        return command

    def _execute(self, command: DispatchCommand) -> Optional[DispatchResult]:
        try:
            if command.kind == CommandKind.RECORD:
                stat_id = self.gateway.record_stat(command.event)
                self.undo_slot.remember(stat_id, command.event)
                result = DispatchResult(command=command, stat_id=stat_id)
            else:
                deleted = self.gateway.delete_stat(command.stat_id)
                result = DispatchResult(command=command, stat_id=command.stat_id, deleted=deleted)
        except Exception as e:
            if command is self._last_record:
                # The newest stat never landed, so there is nothing left to undo
                self._last_record = None
                self.undo_slot.clear()
            failure = DispatchFailure(command=command, error=str(e))
            self.failures.append(failure)
            log_exception(self._logger, e, context=failure.context)
            for listener in self._failure_listeners:
                listener(failure)
            return None

        self._logger.debug(f"Completed {command.description}")
        for listener in self._result_listeners:
            listener(result)
        return result
