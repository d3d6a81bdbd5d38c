"""Simple SQLite store for the persisted username."""

import logging
import sqlite3
from pathlib import Path
from typing import Optional

logger = logging.getLogger(__name__)

USERNAME_KEY = "hackagoal_username"


class UserStore:
    """Key-value SQLite store holding the tracked Hackatime username."""

    def __init__(self, db_path: str = "data/hackagoal.db"):
        """Initialize database."""
        self.db_path = Path(db_path)
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        self._init_db()

    def _init_db(self):
        """Create database tables if they don't exist."""
        with sqlite3.connect(self.db_path) as conn:
            conn.execute("""
                CREATE TABLE IF NOT EXISTS preferences (
                    key TEXT PRIMARY KEY,
                    value TEXT NOT NULL
                )
            """)
            conn.commit()
        logger.info(f"Database initialized at {self.db_path}")

    def get_username(self) -> Optional[str]:
        """Get the saved username, or None on first run."""
        with sqlite3.connect(self.db_path) as conn:
            row = conn.execute(
                "SELECT value FROM preferences WHERE key = ?", (USERNAME_KEY,)
            ).fetchone()

        return row[0] if row else None

    def set_username(self, username: str):
        """Save the username, replacing any previous one."""
        with sqlite3.connect(self.db_path) as conn:
            conn.execute(
                """
                INSERT INTO preferences (key, value) VALUES (?, ?)
                ON CONFLICT(key) DO UPDATE SET value = excluded.value
                """,
                (USERNAME_KEY, username),
            )
            conn.commit()
        logger.info(f"Saved username: {username}")

    def clear_username(self):
        """Forget the saved username."""
        with sqlite3.connect(self.db_path) as conn:
            conn.execute("DELETE FROM preferences WHERE key = ?", (USERNAME_KEY,))
            conn.commit()
