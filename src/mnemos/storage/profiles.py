"""SQLite storage for per-user document profiles."""

import json
import sqlite3
from pathlib import Path
from typing import Any


class ProfileStore:
    """Persistent storage for profile data using SQLite.

    Each user has at most one profile: a JSON object of collected
    field values, keyed by user id.
    """

    def __init__(self, db_path: Path) -> None:
        """Initialize the store with a database path.

        Args:
            db_path: Path to the SQLite database file.
        """
        self.db_path = db_path
        self._conn: sqlite3.Connection | None = None

    def _get_connection(self) -> sqlite3.Connection:
        """Get or create the database connection."""
        if self._conn is None:
            self.db_path.parent.mkdir(parents=True, exist_ok=True)
            self._conn = sqlite3.connect(self.db_path)
            self._conn.row_factory = sqlite3.Row
        return self._conn

    def init_db(self) -> None:
        """Create the profiles table if it doesn't exist."""
        conn = self._get_connection()
        conn.execute("""
            CREATE TABLE IF NOT EXISTS profiles (
                user_id     TEXT PRIMARY KEY,
                data        TEXT NOT NULL,
                created_at  TEXT NOT NULL DEFAULT (datetime('now')),
                updated_at  TEXT NOT NULL DEFAULT (datetime('now'))
            )
        """)
        conn.commit()

    def get_profile(self, user_id: str) -> dict[str, Any] | None:
        """Get the stored profile for a user.

        Returns:
            The profile data, or None if the user has no profile.
        """
        conn = self._get_connection()
        row = conn.execute(
            "SELECT data FROM profiles WHERE user_id = ?", (user_id,)
        ).fetchone()
        if row is None:
            return None
        return json.loads(row["data"])

    def save_profile(self, user_id: str, data: dict[str, Any]) -> None:
        """Insert or replace the profile for a user."""
        conn = self._get_connection()
        conn.execute(
            """
            INSERT INTO profiles (user_id, data)
            VALUES (?, ?)
            ON CONFLICT(user_id) DO UPDATE SET
                data = excluded.data,
                updated_at = datetime('now')
            """,
            (user_id, json.dumps(data, ensure_ascii=False)),
        )
        conn.commit()

    def delete_profile(self, user_id: str) -> bool:
        """Delete a user's profile.

        Returns:
            True if a profile was deleted, False otherwise.
        """
        conn = self._get_connection()
        cursor = conn.execute("DELETE FROM profiles WHERE user_id = ?", (user_id,))
        conn.commit()
        return cursor.rowcount > 0

    def close(self) -> None:
        """Close the database connection."""
        if self._conn is not None:
            self._conn.close()
            self._conn = None
