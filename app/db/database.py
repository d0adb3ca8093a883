import sqlite3
import json
from contextlib import contextmanager
from typing import Optional
from datetime import datetime
import logging

from pydantic import ValidationError

from app.config.game_constants import STARTING_COINS
from app.models.schemas import EconomyState

logger = logging.getLogger(__name__)


def default_game_state() -> EconomyState:
    """Fresh state for a new player."""
    return EconomyState()


def recover_zero_state(state: EconomyState) -> EconomyState:
    """
    Re-grant starting coins to a save with no coins, no plants and no animals.

    Only that exact combination is treated as degenerate; a broke player
    who still owns something keeps their zero balance.
    """
    if state.currency == 0 and not state.plants and not state.animals:
        logger.warning(f"[WARN] Empty save with no coins, granting {STARTING_COINS} starting coins")
        return state.model_copy(update={"currency": STARTING_COINS})
    return state


class Database:
    """SQLite key-value store holding the serialized game state."""

    def __init__(self, database_path: Optional[str] = None):
        if database_path is None:
            from app.core.config import settings
            database_path = settings.database_path
        self.database_path = database_path
        self._schema_ready = False

    def _ensure_schema(self, conn: sqlite3.Connection):
        """Create the store table on first use."""
        if self._schema_ready:
            return
        conn.execute("""
            CREATE TABLE IF NOT EXISTS kv_store (
                key TEXT PRIMARY KEY,
                value TEXT NOT NULL,
                updated_at TEXT NOT NULL
            )
        """)
        self._schema_ready = True

    @contextmanager
    def _get_connection(self):
        """Context manager for database connections."""
        conn = None
        try:
            conn = sqlite3.connect(self.database_path)
            conn.row_factory = sqlite3.Row
            self._ensure_schema(conn)
            yield conn
            conn.commit()
        except Exception:
            if conn:
                conn.rollback()
            raise
        finally:
            if conn:
                conn.close()

    # Key-Value Operations
    def get(self, key: str) -> Optional[str]:
        """Read the raw value stored under a key."""
        with self._get_connection() as conn:
            row = conn.execute(
                "SELECT value FROM kv_store WHERE key = ?", (key,)
            ).fetchone()
            return row["value"] if row else None

    def set(self, key: str, value: str):
        """Write a raw value under a key, replacing any previous value."""
        with self._get_connection() as conn:
            conn.execute("""
                INSERT INTO kv_store (key, value, updated_at)
                VALUES (?, ?, ?)
                ON CONFLICT(key) DO UPDATE SET
                    value = excluded.value,
                    updated_at = excluded.updated_at
            """, (key, value, datetime.now().isoformat()))

    def delete(self, key: str) -> bool:
        """Remove a key. Returns True if something was deleted."""
        with self._get_connection() as conn:
            cursor = conn.execute("DELETE FROM kv_store WHERE key = ?", (key,))
            return cursor.rowcount > 0

    # Game State Operations
    def load_game_state(self, key: Optional[str] = None) -> EconomyState:
        """
        Load the saved game state.

        A missing save gives a fresh state. An unreadable or invalid save is
        logged and also replaced by a fresh state; loading never raises for
        bad data.
        """
        key = key or self._default_key()
        try:
            raw = self.get(key)
        except sqlite3.Error as e:
            logger.error(f"[ERROR] Could not open saved game under '{key}': {e}. Starting fresh")
            return default_game_state()

        if raw is None:
            logger.info(f"No saved game under '{key}', starting fresh")
            return default_game_state()

        try:
            state = EconomyState.model_validate(json.loads(raw))
        except (json.JSONDecodeError, ValidationError, TypeError) as e:
            logger.warning(f"[WARN] Could not read saved game under '{key}': {e}. Starting fresh")
            return default_game_state()

        return recover_zero_state(state)

    def save_game_state(self, state: EconomyState, key: Optional[str] = None):
        """Persist the full game state as a JSON blob."""
        key = key or self._default_key()
        try:
            self.set(key, state.model_dump_json())
        except sqlite3.Error as e:
            logger.error(f"[ERROR] Failed to save game under '{key}': {e}")
            raise

    def _default_key(self) -> str:
        from app.core.config import settings
        return settings.save_key


# Global database instance
db = Database()
