"""Activity log repository."""

from datetime import datetime
from typing import Any, Dict, List, Optional
from .base import BaseRepository


class ActivityLogRepository(BaseRepository):
    """Repository for the activity_logs audit trail."""

    def add(self, project_id: str, action_type: str, status: str,
            input_payload: Optional[Dict[str, Any]] = None,
            result: Optional[Dict[str, Any]] = None) -> Optional[int]:
        """
        Add an audit row.

        Args:
            project_id: Project ID
            action_type: Action name
            status: success, failed, rate_limited or daily_limit_exceeded
            input_payload: Snapshot of what triggered the action
            result: Snapshot of the action outcome

        Returns:
            Row ID if successful, None otherwise
        """
        try:
            row = self.conn.execute("""
                INSERT INTO activity_logs (id, project_id, action_type, status, input_payload, result, created_at)
                VALUES (nextval('activity_logs_id_seq'), ?, ?, ?, ?, ?, ?)
                RETURNING id
            """, [
                project_id,
                action_type,
                status,
                self._dump_json(input_payload),
                self._dump_json(result),
                datetime.utcnow()
            ]).fetchone()
            self.conn.commit()
            return row[0] if row else None
        except Exception as e:
            self.logger.error(f"Failed to add activity log: {e}")
            return None

    def list_by_project(self, project_id: str, limit: int = 50) -> List[Dict[str, Any]]:
        """
        List recent audit rows for a project, newest first.

        Diagnostic read helper; the message pipeline only appends rows.

        Args:
            project_id: Project ID
            limit: Maximum number of rows

        Returns:
            List of row dictionaries
        """
        try:
            rows = self.conn.execute("""
                SELECT id, project_id, action_type, status, input_payload, result, created_at
                FROM activity_logs
                WHERE project_id = ?
                ORDER BY id DESC
                LIMIT ?
            """, [project_id, limit]).fetchall()

            return [
                {
                    "id": row[0],
                    "project_id": row[1],
                    "action_type": row[2],
                    "status": row[3],
                    "input_payload": self._load_json(row[4], {}),
                    "result": self._load_json(row[5], {}),
                    "created_at": row[6],
                }
                for row in rows
            ]
        except Exception as e:
            self.logger.error(f"Failed to list activity logs: {e}")
            return []
