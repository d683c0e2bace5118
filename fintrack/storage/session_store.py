"""Session persistence using SQLite."""
import logging
import sqlite3
from contextlib import contextmanager
from datetime import datetime, timezone
from typing import Optional

from fintrack.config import settings
from fintrack.models.auth import Session

logger = logging.getLogger(__name__)


class SessionStore:
    """Stores at most one session per API base URL."""
    
    def __init__(self, db_path: Optional[str] = None):
        self.db_path = db_path or settings.session_db_path
        self._init_db()
    
    def _init_db(self):
        """Initialize database tables."""
        with self._get_conn() as conn:
            conn.execute("""
                CREATE TABLE IF NOT EXISTS sessions (
                    api_base_url TEXT PRIMARY KEY,
                    session TEXT NOT NULL,
                    saved_at TEXT NOT NULL
                )
            """)
            conn.commit()
    
    @contextmanager
    def _get_conn(self):
        """Get database connection."""
        conn = sqlite3.connect(self.db_path)
        conn.row_factory = sqlite3.Row
        try:
            yield conn
        finally:
            conn.close()
    
    def save(self, api_base_url: str, session: Session) -> None:
        """Save (or replace) the session for an API."""
        with self._get_conn() as conn:
            conn.execute("""
                INSERT OR REPLACE INTO sessions (api_base_url, session, saved_at)
                VALUES (?, ?, ?)
            """, (
                api_base_url,
                session.model_dump_json(),
                datetime.now(timezone.utc).isoformat(),
            ))
            conn.commit()
        logger.debug("Saved session", extra={"api_base_url": api_base_url})
    
    def load(self, api_base_url: str) -> Optional[Session]:
        """Load the stored session for an API, if any."""
        with self._get_conn() as conn:
            row = conn.execute(
                "SELECT session FROM sessions WHERE api_base_url = ?",
                (api_base_url,),
            ).fetchone()
        
        if not row:
            return None
        return Session.model_validate_json(row["session"])
    
    def clear(self, api_base_url: str) -> None:
        with self._get_conn() as conn:
            conn.execute("DELETE FROM sessions WHERE api_base_url = ?", (api_base_url,))
            conn.commit()
