"""Task database model."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, Optional


TASK_PENDING = "pending"
TASK_COMPLETED = "completed"
TASK_FAILED = "failed"


@dataclass
class TaskDO:
    """Task data object - maps to tasks table."""

    id: str
    project_id: str
    action_type: str
    execute_at: datetime
    chat_id: Optional[str] = None
    context: Dict[str, Any] = field(default_factory=dict)
    status: str = TASK_PENDING
    created_at: datetime = field(default_factory=datetime.utcnow)
    updated_at: datetime = field(default_factory=datetime.utcnow)
