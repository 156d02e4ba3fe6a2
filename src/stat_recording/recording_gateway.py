"""
Stat Recording Gateway

Interface to the external store that persists stats. The tracker writes at
most once per logical action and never retries; the gateway decides what a
failure means.
"""

from abc import ABC, abstractmethod
from typing import List

from .stat_event import StatEvent


class StatRecordingError(Exception):
    """Raised by a gateway when a write cannot be completed"""
    pass


class StatRecordingGateway(ABC):
    """Abstract stat store used by the dispatch queue and undo slot."""

    @abstractmethod
    def record_stat(self, event: StatEvent) -> str:
        """
        Persist a stat.

        Args:
            event: Stat to write

        Returns:
            Stored stat id

        Raises:
            StatRecordingError: If the write fails
        """
        pass

    @abstractmethod
    def delete_stat(self, stat_id: str) -> bool:
        """
        Delete a stat by id.

        Returns:
            True if a stat was deleted
        """
        pass

    @abstractmethod
    def get_game_stats(self, game_id: str) -> List[StatEvent]:
        """All stats recorded for a game, oldest first"""
        pass
