"""Usage event repository - append-only quota log."""

from datetime import datetime
from typing import Optional
from .base import BaseRepository


class UsageEventRepository(BaseRepository):
    """Repository for the append-only usage_events log."""

    def append(self, project_id: str, category: str, kind: str,
               created_at: Optional[datetime] = None) -> bool:
        """
        Append one event row.

        Args:
            project_id: Project ID
            category: Event log the row belongs to (e.g. "action", "llm")
            kind: Action name or usage type
            created_at: Event time, defaults to now

        Returns:
            True if successful, False otherwise
        """
        try:
            self.conn.execute("""
                INSERT INTO usage_events (id, project_id, category, kind, created_at)
                VALUES (nextval('usage_events_id_seq'), ?, ?, ?, ?)
            """, [project_id, category, kind, created_at or datetime.utcnow()])
            self.conn.commit()
            return True
        except Exception as e:
            self.logger.error(f"Failed to append usage event: {e}")
            return False

    def count_since(self, project_id: str, category: str, since: datetime) -> Optional[int]:
        """
        Count events of a category at or after ``since``.

        Args:
            project_id: Project ID
            category: Event log to count
            since: Window start (inclusive)

        Returns:
            Event count, or None if the count is unknown
        """
        try:
            result = self.conn.execute("""
                SELECT COUNT(*)
                FROM usage_events
                WHERE project_id = ? AND category = ? AND created_at >= ?
            """, [project_id, category, since]).fetchone()
            return int(result[0]) if result else 0
        except Exception as e:
            self.logger.error(f"Failed to count usage events: {e}")
            return None
