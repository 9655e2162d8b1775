"""
Shared plumbing for the SQLite repositories.

All repositories point at the same database file. Each call opens its own
connection, which keeps the repositories safe to use from the profile
resolution thread pool.
"""

import sqlite3
from datetime import datetime
from pathlib import Path


class SqliteRepository:
    """Base class: connection factory and schema bootstrap."""

    _SCHEMA: str = ""

    def __init__(self, db_path: Path) -> None:
        """
        Initialize the repository with a database path
        """
        self._db_path = Path(db_path)
        self._db_path.parent.mkdir(parents=True, exist_ok=True)
        self._init_schema()

    def _get_connection(self) -> sqlite3.Connection:
        """Get a database connection with row factory."""
        conn = sqlite3.connect(str(self._db_path))
        conn.row_factory = sqlite3.Row
        return conn

    def _init_schema(self) -> None:
        """Create this repository's tables if they don't exist."""
        with self._get_connection() as conn:
            conn.executescript(self._SCHEMA)
        conn.close()

    @staticmethod
    def _to_timestamp(value: datetime) -> str:
        return value.isoformat(timespec="microseconds")

    @staticmethod
    def _from_timestamp(value: str) -> datetime:
        return datetime.fromisoformat(value)
