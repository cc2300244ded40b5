"""Activity logger - audit trail of attempted actions."""

from typing import Any, Dict, Optional

from ..db.store import StoreGateway
from ..utils.logger import get_app_logger


STATUS_SUCCESS = "success"
STATUS_FAILED = "failed"
STATUS_RATE_LIMITED = "rate_limited"
STATUS_DAILY_LIMIT = "daily_limit_exceeded"


class ActivityLogger:
    """Writes one audit row per attempted action. Never raises."""

    def __init__(self, store: StoreGateway):
        self.store = store
        self.logger = get_app_logger()

    async def log(
        self,
        project_id: str,
        action_type: str,
        status: str,
        input_payload: Optional[Dict[str, Any]] = None,
        result: Optional[Dict[str, Any]] = None
    ) -> bool:
        """
        Append an audit row.

        Returns:
            True if the row was written, False otherwise
        """
        try:
            written = await self.store.append_activity_log(
                project_id, action_type, status, input_payload or {}, result or {}
            )
        except Exception as e:
            self.logger.error(f"[Activity] Failed to log {action_type} for project {project_id}: {e}")
            return False

        if not written:
            self.logger.error(f"[Activity] Failed to log {action_type} for project {project_id}")
        return bool(written)
