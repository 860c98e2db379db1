"""Repository that coordinates all storage operations."""

from __future__ import annotations

import sqlite3
from pathlib import Path

import structlog

from temporium.core.exceptions import ConnectivityError
from temporium.core.storage.games import GameStorage
from temporium.core.storage.users import UserStorage

log = structlog.stdlib.get_logger()

_SCHEMA = """
CREATE TABLE IF NOT EXISTS users (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    username TEXT UNIQUE NOT NULL,
    password_hash TEXT NOT NULL CHECK (length(password_hash) = 64),
    is_admin INTEGER NOT NULL DEFAULT 0,
    created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
);

CREATE TABLE IF NOT EXISTS games (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    name TEXT NOT NULL,
    disk_space REAL NOT NULL,
    ram_usage REAL NOT NULL,
    vram_required REAL NOT NULL,
    genre TEXT NOT NULL,
    completed INTEGER NOT NULL DEFAULT 0,
    url TEXT DEFAULT '',
    user_id INTEGER NOT NULL REFERENCES users(id) ON DELETE CASCADE,
    rating INTEGER NOT NULL DEFAULT -1 CHECK (rating BETWEEN -1 AND 10),
    is_favorite INTEGER NOT NULL DEFAULT 0,
    is_installed INTEGER NOT NULL DEFAULT 0,
    notes TEXT DEFAULT '',
    tags TEXT DEFAULT '',
    created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
    UNIQUE (name, user_id)
);

CREATE INDEX IF NOT EXISTS idx_games_user_id ON games(user_id);
CREATE INDEX IF NOT EXISTS idx_games_genre ON games(genre);
CREATE INDEX IF NOT EXISTS idx_games_completed ON games(completed);
CREATE INDEX IF NOT EXISTS idx_games_favorite ON games(is_favorite);
CREATE INDEX IF NOT EXISTS idx_games_rating ON games(rating);
CREATE INDEX IF NOT EXISTS idx_games_installed ON games(is_installed);
"""


class CatalogRepository:
    """Facade that coordinates users and games storage."""

    def __init__(self, db_path: Path, timeout: float = 5.0) -> None:
        self._db_path = db_path
        self._timeout = timeout
        self._conn: sqlite3.Connection | None = None

        self.users = UserStorage(self._get_connection)
        self.games = GameStorage(self._get_connection)

    @property
    def db_path(self) -> Path:
        return self._db_path

    def _get_connection(self) -> sqlite3.Connection:
        """Get or create a database connection."""
        if self._conn is None:
            try:
                self._db_path.parent.mkdir(parents=True, exist_ok=True)
                conn = sqlite3.connect(self._db_path, timeout=self._timeout)
                conn.row_factory = sqlite3.Row
                conn.execute("PRAGMA foreign_keys = ON")
                conn.executescript(_SCHEMA)
            except (OSError, sqlite3.Error) as e:
                raise ConnectivityError(f"Cannot open database {self._db_path}: {e}") from e
            log.debug("Database opened", path=str(self._db_path))
            self._conn = conn
        return self._conn

    def close(self) -> None:
        """Close the database connection."""
        if self._conn is not None:
            self._conn.close()
            self._conn = None

    def __enter__(self) -> CatalogRepository:
        return self

    def __exit__(self, exc_type: type | None, exc_val: Exception | None, exc_tb: object) -> None:
        self.close()


def get_default_db_path(base: Path | None = None) -> Path:
    """Get the default database path, under the home directory unless base is given."""
    return (base or Path.home()) / ".temporium" / "catalog.db"
