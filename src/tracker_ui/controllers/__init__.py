"""Controllers driving tracking sessions from the Qt event loop."""

from tracker_ui.controllers.live_clock_controller import LiveClockController
from tracker_ui.controllers.stat_dispatch_controller import StatDispatchController

__all__ = ["LiveClockController", "StatDispatchController"]
