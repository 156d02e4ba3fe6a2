"""
Stat Dispatch Controller - Defers stat writes and debounces score refresh.

Handles:
- Draining the dispatch queue on the next event-loop turn after a submit
- Reporting failed writes through a signal (no retry)
- Restarting a single-shot timer on each write so rapid entries trigger
  one score recomputation
"""

from typing import Optional
import logging

from PySide6.QtCore import QObject, Signal, QTimer

from tracker_config.game_constants import SCORE_REFRESH_DEBOUNCE_MS
from stat_recording.dispatch_queue import DispatchFailure


class StatDispatchController(QObject):
    """
    Connects a tracking session's dispatch queue to the Qt event loop.

    Works with either session type: both expose queue,
    schedule_score_refresh and refresh_scores().

    Signals:
        write_failed: Failure message for the operator
        scores_updated: Team id -> score after a debounced refresh
    """

    write_failed = Signal(str)
    scores_updated = Signal(dict)

    def __init__(
        self,
        session,  # VideoTrackingSession or LiveTrackingSession
        debounce_ms: int = SCORE_REFRESH_DEBOUNCE_MS,
        parent: Optional[QObject] = None
    ):
        """
        Initialize stat dispatch controller.

        Args:
            session: Tracking session whose queue is drained
            debounce_ms: Score refresh debounce window
            parent: Optional Qt parent object
        """
        super().__init__(parent)

        self._session = session
        self._logger = logging.getLogger(__name__)
        self._drain_scheduled = False

        self._refresh_timer = QTimer(self)
        self._refresh_timer.setSingleShot(True)
        self._refresh_timer.setInterval(debounce_ms)
        self._refresh_timer.timeout.connect(self._refresh_scores)

        session.queue.schedule_drain = self._schedule_drain
        session.queue.add_failure_listener(self._on_write_failed)
        session.schedule_score_refresh = self.request_score_refresh

    @property
    def refresh_pending(self) -> bool:
        return self._refresh_timer.isActive()

    def request_score_refresh(self) -> None:
        """(Re)start the debounce window."""
        self._refresh_timer.start()

    def drain_now(self) -> None:
        """Drain synchronously, e.g. before closing the session."""
        self._drain_scheduled = False
        self._session.queue.drain()

    def _schedule_drain(self) -> None:
        if self._drain_scheduled:
            return
        self._drain_scheduled = True
        QTimer.singleShot(0, self._drain)

    def _drain(self) -> None:
        if not self._drain_scheduled:
            return
        self.drain_now()

    def _on_write_failed(self, failure: DispatchFailure) -> None:
        self.write_failed.emit(failure.message)

    def _refresh_scores(self) -> None:
        try:
            scores = self._session.refresh_scores()
        except Exception as e:
            self._logger.error(f"Score refresh failed: {e}")
            return
        self.scores_updated.emit(scores)
