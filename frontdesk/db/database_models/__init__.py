"""Database models (Data Objects) - map to database tables."""

from .project import ProjectDO, FEATURE_CATALOG
from .conversation import ConversationDO
from .task import TaskDO, TASK_PENDING, TASK_COMPLETED, TASK_FAILED

__all__ = [
    "ProjectDO",
    "FEATURE_CATALOG",
    "ConversationDO",
    "TaskDO",
    "TASK_PENDING",
    "TASK_COMPLETED",
    "TASK_FAILED",
]
