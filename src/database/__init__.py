"""
Database Module

SQLite persistence for clock sync markers and recorded game stats.
"""

from .connection import DatabaseConnection, DEFAULT_DB_PATH
from .clock_sync_database_api import ClockSyncDatabaseAPI
from .stat_database_api import SQLiteStatGateway

__all__ = ['DatabaseConnection', 'DEFAULT_DB_PATH', 'ClockSyncDatabaseAPI', 'SQLiteStatGateway']
