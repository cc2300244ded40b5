"""Repository layer for data access."""

from .project import ProjectRepository
from .conversation import ConversationRepository
from .event import UsageEventRepository
from .activity import ActivityLogRepository
from .task import TaskRepository

__all__ = [
    "ProjectRepository",
    "ConversationRepository",
    "UsageEventRepository",
    "ActivityLogRepository",
    "TaskRepository",
]
