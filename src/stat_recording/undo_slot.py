"""
Undo Slot

Single-slot undo: only the most recently recorded stat can be deleted.
There is no history stack; recording another stat replaces the slot.
"""

from dataclasses import dataclass
from typing import Optional
import logging

from .stat_event import StatEvent


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class UndoEntry:
    """The last stat the gateway confirmed"""
    stat_id: str
    event: StatEvent


class UndoSlot:
    """Holds the last recorded stat until it is undone or replaced."""

    def __init__(self):
        self._entry: Optional[UndoEntry] = None

    @property
    def entry(self) -> Optional[UndoEntry]:
        return self._entry

    @property
    def can_undo(self) -> bool:
        return self._entry is not None

    def remember(self, stat_id: str, event: StatEvent) -> None:
        self._entry = UndoEntry(stat_id=stat_id, event=event)

    def take(self) -> Optional[UndoEntry]:
        """
        Empty the slot and return what it held.

        Returns:
            The last entry, or None if there is nothing to undo
        """
        entry = self._entry
        self._entry = None
        if entry is None:
            logger.debug("Nothing to undo")
        return entry

    def clear(self) -> None:
        self._entry = None
