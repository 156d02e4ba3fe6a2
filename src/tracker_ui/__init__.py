"""Qt event-loop integration for the stat tracker."""
