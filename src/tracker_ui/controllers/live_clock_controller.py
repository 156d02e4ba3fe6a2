"""
Live Clock Controller - Drives the dual-clock ticker from a QTimer.

Handles:
- One 1000ms periodic tick for both clocks
- Skipping a tick that would start while the previous one still runs
- Signals for clock display, shot clock violations and period expiry
"""

from typing import Optional
import logging

from PySide6.QtCore import QObject, Signal, QTimer

from tracker_config.game_constants import CLOCK_TICK_INTERVAL_MS
from tracking_session.live_tracking_session import LiveTrackingSession


class LiveClockController(QObject):
    """
    Owns the tick timer for a live tracking session.

    Signals:
        clock_updated: (quarter, game_clock_seconds, shot_clock_seconds) after every tick
        shot_clock_violation: Charged team id ("" when unknown)
        period_expired: Quarter that reached 0:00
        running_changed: Game clock started/stopped
    """

    clock_updated = Signal(int, int, int)
    shot_clock_violation = Signal(str)
    period_expired = Signal(int)
    running_changed = Signal(bool)

    def __init__(
        self,
        session: LiveTrackingSession,
        interval_ms: int = CLOCK_TICK_INTERVAL_MS,
        parent: Optional[QObject] = None
    ):
        """
        Initialize live clock controller.

        Args:
            session: Live tracking session whose ticker is driven
            interval_ms: Tick period
            parent: Optional Qt parent object
        """
        super().__init__(parent)

        self._session = session
        self._logger = logging.getLogger(__name__)
        self._ticking = False

        self._tick_timer = QTimer(self)
        self._tick_timer.setInterval(interval_ms)
        self._tick_timer.timeout.connect(self.tick)

    # =========================================================================
    # Control
    # =========================================================================

    def start_clock(self) -> bool:
        """
        Start the game clock (and shot clock when allowed) and the tick timer.

        Returns:
            False if the period has already expired
        """
        if not self._session.ticker.start_game_clock():
            return False
        if not self._tick_timer.isActive():
            self._tick_timer.start()
        self.running_changed.emit(True)
        self._logger.info("Live clock started")
        return True

    def stop_clock(self) -> None:
        """Stop both clocks and the tick timer."""
        self._session.ticker.stop_game_clock()
        self._tick_timer.stop()
        self.running_changed.emit(False)
        self._logger.info("Live clock stopped")

    @property
    def is_running(self) -> bool:
        return self._tick_timer.isActive()

    # =========================================================================
    # Tick
    # =========================================================================

    def tick(self) -> None:
        """Advance both clocks one second and emit the results."""
        if self._ticking:
            self._logger.debug("Tick skipped - previous tick still running")
            return
        self._ticking = True
        try:
            result = self._session.tick()
            ticker = self._session.ticker
            self.clock_updated.emit(ticker.quarter, result.game_clock_seconds, result.shot_clock_seconds)

            if result.violation is not None:
                self.shot_clock_violation.emit(result.violation.charged_team_id or "")
            if result.period_expired:
                self._tick_timer.stop()
                self.running_changed.emit(False)
                self.period_expired.emit(ticker.quarter)
        finally:
            self._ticking = False
