"""Project repository for database operations."""

from datetime import datetime
from typing import Any, Dict, Optional
from .base import BaseRepository
from ..database_models.project import ProjectDO


_COLUMNS = (
    "id", "user_id", "ai_name", "business_name", "business_category",
    "business_location", "business_description", "enabled_features", "status",
    "telegram_token", "telegram_bot_username", "google_connected",
    "google_access_token", "google_refresh_token", "google_location_id",
    "google_last_validated_at", "created_at", "updated_at",
)

# Columns that may be changed through update(); id and created_at are fixed
_UPDATABLE = frozenset(_COLUMNS) - {"id", "created_at", "updated_at"}


class ProjectRepository(BaseRepository):
    """Repository for Project CRUD operations."""

    def _to_do(self, row) -> ProjectDO:
        data = dict(zip(_COLUMNS, row))
        data["enabled_features"] = self._load_json(data["enabled_features"], [])
        data["google_connected"] = bool(data["google_connected"])
        for key in ("ai_name", "business_name", "business_category",
                    "business_location", "business_description"):
            data[key] = data[key] or ""
        return ProjectDO(**data)

    def create(self, project: ProjectDO) -> bool:
        """
        Create a new project record.

        Args:
            project: ProjectDO instance

        Returns:
            True if successful, False otherwise
        """
        try:
            values = [getattr(project, column) for column in _COLUMNS]
            values[_COLUMNS.index("enabled_features")] = self._dump_json(list(project.enabled_features or []))
            placeholders = ", ".join("?" for _ in _COLUMNS)
            self.conn.execute(
                f"INSERT INTO projects ({', '.join(_COLUMNS)}) VALUES ({placeholders})",
                values
            )
            self.conn.commit()
            self.logger.info(f"Created project record: {project.id}")
            return True
        except Exception as e:
            self.logger.error(f"Failed to create project: {e}")
            return False

    def get(self, project_id: str) -> Optional[ProjectDO]:
        """
        Get project by ID.

        Args:
            project_id: Project ID

        Returns:
            ProjectDO instance or None
        """
        try:
            result = self.conn.execute(
                f"SELECT {', '.join(_COLUMNS)} FROM projects WHERE id = ?",
                [project_id]
            ).fetchone()

            return self._to_do(result) if result else None
        except Exception as e:
            self.logger.error(f"Failed to get project {project_id}: {e}")
            return None

    def exists(self, project_id: str) -> bool:
        """Check whether a project row exists."""
        try:
            result = self.conn.execute(
                "SELECT 1 FROM projects WHERE id = ? LIMIT 1", [project_id]
            ).fetchone()
            return result is not None
        except Exception as e:
            self.logger.error(f"Failed to check project existence: {e}")
            return False

    def update(self, project_id: str, updates: Dict[str, Any]) -> bool:
        """
        Update project fields.

        Unknown keys are ignored; ``updated_at`` is always refreshed.

        Args:
            project_id: Project ID
            updates: Dictionary of fields to update

        Returns:
            True if successful, False otherwise
        """
        try:
            set_clauses = []
            params = []

            for key, value in updates.items():
                if key not in _UPDATABLE:
                    self.logger.warning(f"Ignoring unknown project field: {key}")
                    continue
                if key == "enabled_features":
                    value = self._dump_json(list(value or []))
                set_clauses.append(f"{key} = ?")
                params.append(value)

            if not set_clauses:
                return True

            set_clauses.append("updated_at = ?")
            params.append(datetime.utcnow())
            params.append(project_id)
            query = f"UPDATE projects SET {', '.join(set_clauses)} WHERE id = ?"

            self.conn.execute(query, params)
            self.conn.commit()
            return True
        except Exception as e:
            self.logger.error(f"Failed to update project: {e}")
            return False
