"""
Database Connection Module

Manages SQLite database connections and schema for the stat tracker:
clock sync markers per game video, and recorded game stats.
"""

import sqlite3
from pathlib import Path
import logging


DEFAULT_DB_PATH = "data/database/courtside_tracker.db"


class DatabaseConnection:
    """
    Manages SQLite database connection and operations.

    Features:
    - WAL mode for better concurrency
    - Automatic schema creation
    - Indexes for per-game stat lookups
    """

    def __init__(self, db_path: str = DEFAULT_DB_PATH):
        """
        Initialize database connection.

        Args:
            db_path: Path to the SQLite database file
        """
        self.db_path = db_path
        self.logger = logging.getLogger(__name__)

        # Ensure directory exists
        Path(db_path).parent.mkdir(parents=True, exist_ok=True)

    def initialize_database(self) -> None:
        """Initialize database with WAL mode and create all tables."""
        conn = sqlite3.connect(self.db_path)

        try:
            conn.execute("PRAGMA journal_mode=WAL")
            conn.execute("PRAGMA synchronous=NORMAL")

            self._create_tables(conn)

            conn.commit()
            self.logger.info(f"Database initialized successfully at {self.db_path}")

        except Exception as e:
            conn.rollback()
            self.logger.error(f"Error initializing database: {e}")
            raise
        finally:
            conn.close()

    def _create_tables(self, conn: sqlite3.Connection) -> None:
        """Create all database tables."""

        # One row per game video; NULL marker = period not synced yet
        conn.execute('''
            CREATE TABLE IF NOT EXISTS clock_sync_configs (
                video_id TEXT PRIMARY KEY,
                quarter_length_minutes INTEGER NOT NULL DEFAULT 12,
                jumpball_ms INTEGER,
                q2_start_ms INTEGER,
                q3_start_ms INTEGER,
                q4_start_ms INTEGER,
                ot1_start_ms INTEGER,
                ot2_start_ms INTEGER,
                ot3_start_ms INTEGER,
                halftime_ms INTEGER,
                updated_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
            )
        ''')

        conn.execute('''
            CREATE TABLE IF NOT EXISTS game_stats (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                event_id TEXT NOT NULL UNIQUE,
                game_id TEXT NOT NULL,
                team_id TEXT NOT NULL,
                player_id TEXT,
                custom_player_id TEXT,
                is_opponent_stat BOOLEAN DEFAULT FALSE,
                stat_type TEXT NOT NULL,
                modifier TEXT,
                sequence_id TEXT,
                quarter INTEGER,
                game_time_minutes INTEGER,
                game_time_seconds INTEGER,
                video_timestamp_ms INTEGER,
                metadata TEXT,        -- JSON: {"primary_event_id": ...}
                event_metadata TEXT,  -- JSON: {"skip_rebound": true}
                created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
            )
        ''')

        conn.execute("CREATE INDEX IF NOT EXISTS idx_game_stats_game ON game_stats(game_id)")
        conn.execute("CREATE INDEX IF NOT EXISTS idx_game_stats_sequence ON game_stats(sequence_id)")

    def get_connection(self) -> sqlite3.Connection:
        """
        Get a database connection with schema initialized.

        Returns:
            SQLite connection object with tables created
        """
        conn = sqlite3.connect(self.db_path)
        conn.row_factory = sqlite3.Row  # Enable column access by name

        # Ensure tables exist (idempotent - safe to call multiple times)
        self._create_tables(conn)

        return conn

    def execute_query(self, query: str, params: tuple = None) -> list:
        """
        Execute a SELECT query and return results.

        Args:
            query: SQL query to execute
            params: Query parameters

        Returns:
            List of query results
        """
        conn = self.get_connection()
        cursor = conn.cursor()

        try:
            if params:
                cursor.execute(query, params)
            else:
                cursor.execute(query)
            return cursor.fetchall()
        finally:
            conn.close()

    def execute_update(self, query: str, params: tuple = None) -> int:
        """
        Execute an INSERT/UPDATE/DELETE query.

        Args:
            query: SQL query to execute
            params: Query parameters

        Returns:
            Number of affected rows
        """
        conn = self.get_connection()
        cursor = conn.cursor()

        try:
            if params:
                cursor.execute(query, params)
            else:
                cursor.execute(query)

            conn.commit()
            return cursor.rowcount

        except Exception as e:
            conn.rollback()
            self.logger.error(f"Error executing update: {e}")
            raise
        finally:
            conn.close()
