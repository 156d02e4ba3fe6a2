"""
Tracking Sessions

Single owned session objects for video and live tracking.
"""

from .video_tracking_session import VideoTrackingSession, VideoPlayback, ClockUpdate
from .live_tracking_session import LiveTrackingSession

__all__ = [
    'VideoTrackingSession',
    'VideoPlayback',
    'ClockUpdate',
    'LiveTrackingSession',
]
