"""
Clock Sync Configuration

Per-period video timeline markers for one game video, plus the store that
owns the live config for a tracking session and persists it best-effort.

A marker is the video offset (ms) at which that period's clock reads its full
starting time. Markers are assumed to increase with period order but this is
not enforced.
"""

from dataclasses import dataclass, field, fields
from typing import Dict, Optional, Protocol
import logging

from tracker_config.game_constants import DEFAULT_QUARTER_LENGTH_MINUTES, FINAL_PERIOD


logger = logging.getLogger(__name__)


# Period number -> config attribute holding its marker
PERIOD_MARKER_FIELDS: Dict[int, str] = {
    1: "jumpball_ms",
    2: "q2_start_ms",
    3: "q3_start_ms",
    4: "q4_start_ms",
    5: "ot1_start_ms",
    6: "ot2_start_ms",
    7: "ot3_start_ms",
}


@dataclass
class ClockSyncConfig:
    """
    Video timeline calibration for a single game video.

    Only the jumpball marker is needed for calibration; later markers are
    written as the operator advances periods or recalibrates.
    """
    quarter_length_minutes: int = DEFAULT_QUARTER_LENGTH_MINUTES
    jumpball_ms: Optional[int] = None
    q2_start_ms: Optional[int] = None
    q3_start_ms: Optional[int] = None
    q4_start_ms: Optional[int] = None
    ot1_start_ms: Optional[int] = None
    ot2_start_ms: Optional[int] = None
    ot3_start_ms: Optional[int] = None
    halftime_ms: Optional[int] = None  # Informational only, never used for derivation

    def __post_init__(self):
        if self.quarter_length_minutes <= 0:
            raise ValueError(
                f"Invalid quarter_length_minutes: {self.quarter_length_minutes}. Must be positive."
            )

    @property
    def is_calibrated(self) -> bool:
        """Calibrated once the jumpball (Q1) marker is known"""
        return self.jumpball_ms is not None

    def get_marker(self, quarter: int) -> Optional[int]:
        """
        Get the video marker for a period.

        Args:
            quarter: Period number (1-7)

        Returns:
            Marker in ms, or None if not set
        """
        return getattr(self, self._field_for(quarter))

    def set_marker(self, quarter: int, marker_ms: Optional[int]) -> None:
        """
        Write (or clear with None) the marker for a period.

        Args:
            quarter: Period number (1-7)
            marker_ms: Video offset in ms
        """
        setattr(self, self._field_for(quarter), marker_ms)

    def clear_markers_after(self, quarter: int) -> None:
        """Clear every marker for periods later than the given one."""
        for later in range(quarter + 1, FINAL_PERIOD + 1):
            self.set_marker(later, None)

    def markers(self) -> Dict[int, int]:
        """Set markers keyed by period number, in period order"""
        result = {}
        for quarter in PERIOD_MARKER_FIELDS:
            marker = self.get_marker(quarter)
            if marker is not None:
                result[quarter] = marker
        return result

    def copy(self) -> "ClockSyncConfig":
        return ClockSyncConfig(**self.to_dict())

    def to_dict(self) -> dict:
        """Convert to dictionary for serialization."""
        return {f.name: getattr(self, f.name) for f in fields(self)}

    @classmethod
    def from_dict(cls, data: dict) -> "ClockSyncConfig":
        """
        Rebuild a config from its serialized form.

        Unknown keys are ignored so older rows with extra columns still load.
        """
        known = {f.name for f in fields(cls)}
        return cls(**{k: v for k, v in data.items() if k in known})

    @staticmethod
    def _field_for(quarter: int) -> str:
        if quarter not in PERIOD_MARKER_FIELDS:
            raise ValueError(f"Invalid quarter: {quarter}. Must be 1-{FINAL_PERIOD}.")
        return PERIOD_MARKER_FIELDS[quarter]


class ClockSyncPersistence(Protocol):
    """Opaque storage for clock sync configs, keyed by video id."""

    def save_clock_sync(self, video_id: str, config: ClockSyncConfig) -> None:
        ...

    def get_clock_sync(self, video_id: str) -> Optional[ClockSyncConfig]:
        ...


class ClockSyncStore:
    """
    Owns the in-memory clock sync config for one tracking session.

    Marker writes take effect synchronously in memory so the next clock read
    sees them. Persistence is best-effort: a failed save is logged and the
    in-memory config is kept.
    """

    def __init__(
        self,
        video_id: Optional[str] = None,
        config: Optional[ClockSyncConfig] = None,
        persistence: Optional[ClockSyncPersistence] = None
    ):
        """
        Initialize the store.

        Args:
            video_id: Video the markers belong to (None = no video loaded)
            config: Starting config (None = not configured yet)
            persistence: Optional storage backend
        """
        self.video_id = video_id
        self.config = config
        self._persistence = persistence
        self.last_save_failed = False

    @property
    def is_calibrated(self) -> bool:
        return self.config is not None and self.config.is_calibrated

    @property
    def has_context(self) -> bool:
        """True when both a config and a video are loaded"""
        return self.config is not None and self.video_id is not None

    def load(self, video_id: str) -> Optional[ClockSyncConfig]:
        """
        Load the stored config for a video.

        A load failure leaves the store unconfigured rather than raising.

        Args:
            video_id: Video to load markers for

        Returns:
            Loaded config, or None if none stored / no persistence / failure
        """
        self.video_id = video_id
        if self._persistence is None:
            return self.config
        try:
            loaded = self._persistence.get_clock_sync(video_id)
        except Exception as e:
            logger.warning(f"Failed to load clock sync for video {video_id}: {e}")
            return self.config
        if loaded is not None:
            self.config = loaded
            logger.info(f"Loaded clock sync for video {video_id}: markers={loaded.markers()}")
        return self.config

    def calibrate(self, jumpball_ms: int, quarter_length_minutes: Optional[int] = None) -> ClockSyncConfig:
        """
        Set the jumpball marker, creating the config if needed.

        Args:
            jumpball_ms: Video offset of the opening tip
            quarter_length_minutes: Overrides the configured quarter length

        Returns:
            The updated config
        """
        if self.config is None:
            self.config = ClockSyncConfig()
        if quarter_length_minutes is not None:
            self.config = ClockSyncConfig.from_dict(
                {**self.config.to_dict(), "quarter_length_minutes": quarter_length_minutes}
            )
        self.config.set_marker(1, max(0, int(jumpball_ms)))
        logger.info(f"Calibrated jumpball at {self.config.jumpball_ms}ms")
        self.save()
        return self.config

    def set_marker(self, quarter: int, marker_ms: int, clear_later: bool = False) -> bool:
        """
        Write a period marker and persist.

        Args:
            quarter: Period number (1-7)
            marker_ms: New video offset in ms
            clear_later: Also clear all later period markers

        Returns:
            True if written, False if no config is loaded
        """
        if self.config is None:
            logger.warning(f"Cannot set Q{quarter} marker - no clock sync config loaded")
            return False

        self.config.set_marker(quarter, marker_ms)
        if clear_later:
            self.config.clear_markers_after(quarter)
        logger.debug(f"Q{quarter} marker set to {marker_ms}ms (clear_later={clear_later})")
        self.save()
        return True

    def save(self) -> bool:
        """
        Persist the current config.

        Returns:
            True if saved, False if skipped or failed (failure is non-fatal)
        """
        if self._persistence is None or self.config is None or self.video_id is None:
            return False
        try:
            self._persistence.save_clock_sync(self.video_id, self.config)
        except Exception as e:
            self.last_save_failed = True
            logger.error(f"Failed to save clock sync for video {self.video_id}: {e}")
            return False
        self.last_save_failed = False
        return True
