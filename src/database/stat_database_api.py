"""
Stat Database API

SQLite implementation of the stat recording gateway. Each stat is one row
in game_stats; the row id is returned as the stat id used for undo.
"""

import json
import sqlite3
from typing import List
import logging

from stat_recording.recording_gateway import StatRecordingGateway, StatRecordingError
from stat_recording.stat_event import StatEvent
from .connection import DatabaseConnection, DEFAULT_DB_PATH


class SQLiteStatGateway(StatRecordingGateway):
    """
    Stat store backed by the game_stats table.
    """

    def __init__(self, db_path: str = DEFAULT_DB_PATH):
        """
        Args:
            db_path: Path to SQLite database file
        """
        self.db_path = db_path
        self.db = DatabaseConnection(db_path)
        self.logger = logging.getLogger(__name__)

    def record_stat(self, event: StatEvent) -> str:
        """
        Insert a stat row.

        Raises:
            StatRecordingError: On any database error (including a duplicate event_id)
        """
        data = event.to_dict()
        query = """
            INSERT INTO game_stats (
                event_id, game_id, team_id, player_id, custom_player_id, is_opponent_stat,
                stat_type, modifier, sequence_id, quarter, game_time_minutes,
                game_time_seconds, video_timestamp_ms, metadata, event_metadata
            ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
        """
        params = (
            data["event_id"],
            data["game_id"],
            data["team_id"],
            data["player_id"],
            data["custom_player_id"],
            data["is_opponent_stat"],
            data["stat_type"],
            data["modifier"],
            data["sequence_id"],
            data["quarter"],
            data["game_time_minutes"],
            data["game_time_seconds"],
            data["video_timestamp_ms"],
            json.dumps(data["metadata"]) if data["metadata"] else None,
            json.dumps(data["event_metadata"]) if data["event_metadata"] else None,
        )

        conn = self.db.get_connection()
        try:
            cursor = conn.execute(query, params)
            conn.commit()
            stat_id = str(cursor.lastrowid)
        except sqlite3.Error as e:
            conn.rollback()
            raise StatRecordingError(f"Could not record {data['stat_type']}: {e}") from e
        finally:
            conn.close()

        self.logger.debug(f"Recorded {data['stat_type']} as stat {stat_id}")
        return stat_id

    def delete_stat(self, stat_id: str) -> bool:
        try:
            deleted = self.db.execute_update("DELETE FROM game_stats WHERE id = ?", (int(stat_id),))
        except sqlite3.Error as e:
            raise StatRecordingError(f"Could not delete stat {stat_id}: {e}") from e
        return deleted > 0

    def get_game_stats(self, game_id: str) -> List[StatEvent]:
        """
        All stats for a game in insertion order.

        Args:
            game_id: Game identifier

        Returns:
            List of StatEvent
        """
        results = self.db.execute_query(
            "SELECT * FROM game_stats WHERE game_id = ? ORDER BY id",
            (game_id,)
        )
        return [self._row_to_event(row) for row in results]

    def get_sequence_stats(self, sequence_id: str) -> List[StatEvent]:
        """Every stat linked under one sequence id (foul, and-one basket, free throws)."""
        results = self.db.execute_query(
            "SELECT * FROM game_stats WHERE sequence_id = ? ORDER BY id",
            (sequence_id,)
        )
        return [self._row_to_event(row) for row in results]

    @staticmethod
    def _row_to_event(row: sqlite3.Row) -> StatEvent:
        data = dict(zip(row.keys(), row))
        data["is_opponent_stat"] = bool(data["is_opponent_stat"])
        data["metadata"] = json.loads(data["metadata"]) if data["metadata"] else None
        data["event_metadata"] = json.loads(data["event_metadata"]) if data["event_metadata"] else None
        return StatEvent.from_dict(data)
