"""Task repository for database operations."""

from typing import List, Optional
from .base import BaseRepository
from ..database_models.task import TaskDO, TASK_PENDING


class TaskRepository(BaseRepository):
    """Repository for scheduled task rows."""

    def create(self, task: TaskDO) -> bool:
        """
        Create a new task record.

        Args:
            task: TaskDO instance

        Returns:
            True if successful, False otherwise
        """
        try:
            self.conn.execute("""
                INSERT INTO tasks (id, project_id, chat_id, action_type, context, execute_at, status, created_at, updated_at)
                VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)
            """, [
                task.id,
                task.project_id,
                task.chat_id,
                task.action_type,
                self._dump_json(task.context),
                task.execute_at,
                task.status,
                task.created_at,
                task.updated_at
            ])
            self.conn.commit()
            self.logger.info(f"Created task record: {task.id} ({task.action_type})")
            return True
        except Exception as e:
            self.logger.error(f"Failed to create task: {e}")
            return False

    def count_pending(self, project_id: str) -> Optional[int]:
        """
        Count pending tasks for a project.

        Returns:
            Pending count, or None if unknown
        """
        try:
            result = self.conn.execute("""
                SELECT COUNT(*) FROM tasks WHERE project_id = ? AND status = ?
            """, [project_id, TASK_PENDING]).fetchone()
            return int(result[0]) if result else 0
        except Exception as e:
            self.logger.error(f"Failed to count pending tasks: {e}")
            return None

    def list_by_project(self, project_id: str) -> List[TaskDO]:
        """
        List tasks for a project ordered by execution time.

        Diagnostic read helper; the message pipeline only inserts tasks.

        Args:
            project_id: Project ID

        Returns:
            List of TaskDO instances
        """
        try:
            rows = self.conn.execute("""
                SELECT id, project_id, chat_id, action_type, context, execute_at, status, created_at, updated_at
                FROM tasks
                WHERE project_id = ?
                ORDER BY execute_at ASC
            """, [project_id]).fetchall()

            return [
                TaskDO(
                    id=row[0],
                    project_id=row[1],
                    chat_id=row[2],
                    action_type=row[3],
                    context=self._load_json(row[4], {}),
                    execute_at=row[5],
                    status=row[6],
                    created_at=row[7],
                    updated_at=row[8]
                )
                for row in rows
            ]
        except Exception as e:
            self.logger.error(f"Failed to list tasks: {e}")
            return []
