"""
Clock Sync Database API

Stores per-video clock sync markers in the clock_sync_configs table.
Implements the persistence protocol the ClockSyncStore saves through.
"""

from typing import Optional
import logging

from game_clock.clock_sync_config import ClockSyncConfig, PERIOD_MARKER_FIELDS
from .connection import DatabaseConnection, DEFAULT_DB_PATH


_CONFIG_COLUMNS = ["quarter_length_minutes"] + list(PERIOD_MARKER_FIELDS.values()) + ["halftime_ms"]


class ClockSyncDatabaseAPI:
    """
    API for clock sync configs keyed by video id.
    """

    def __init__(self, db_path: str = DEFAULT_DB_PATH):
        """
        Initialize Clock Sync Database API.

        Args:
            db_path: Path to SQLite database file
        """
        self.db_path = db_path
        self.db = DatabaseConnection(db_path)
        self.logger = logging.getLogger(__name__)

    def save_clock_sync(self, video_id: str, config: ClockSyncConfig) -> None:
        """
        Insert or replace the markers for a video.

        Args:
            video_id: Game video identifier
            config: Markers to store
        """
        data = config.to_dict()
        columns = ", ".join(_CONFIG_COLUMNS)
        placeholders = ", ".join("?" for _ in _CONFIG_COLUMNS)
        updates = ", ".join(f"{col} = excluded.{col}" for col in _CONFIG_COLUMNS)
        query = f"""
            INSERT INTO clock_sync_configs (video_id, {columns})
            VALUES (?, {placeholders})
            ON CONFLICT(video_id) DO UPDATE SET {updates}, updated_at = CURRENT_TIMESTAMP
        """
        params = (video_id,) + tuple(data[col] for col in _CONFIG_COLUMNS)
        self.db.execute_update(query, params)
        self.logger.debug(f"Saved clock sync for video {video_id}")

    def get_clock_sync(self, video_id: str) -> Optional[ClockSyncConfig]:
        """
        Load the markers for a video.

        Returns:
            ClockSyncConfig, or None if the video has never been synced
        """
        query = f"SELECT {', '.join(_CONFIG_COLUMNS)} FROM clock_sync_configs WHERE video_id = ?"
        results = self.db.execute_query(query, (video_id,))
        if not results:
            return None
        row = results[0]
        return ClockSyncConfig.from_dict(dict(zip(row.keys(), row)))

    def delete_clock_sync(self, video_id: str) -> bool:
        """Remove a video's markers. Returns True if a row was deleted."""
        return self.db.execute_update("DELETE FROM clock_sync_configs WHERE video_id = ?", (video_id,)) > 0
