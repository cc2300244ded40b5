"""Store gateway - the persistence boundary used by the message pipeline."""

import uuid
from abc import ABC, abstractmethod
from dataclasses import fields
from datetime import datetime
from typing import Any, Dict, List, Optional

from .connection import DatabaseConnection
from .database_models import ConversationDO, ProjectDO, TaskDO
from .repositories import (
    ActivityLogRepository,
    ConversationRepository,
    ProjectRepository,
    TaskRepository,
    UsageEventRepository,
)
from ..utils.logger import get_app_logger


class StoreGateway(ABC):
    """
    Async persistence interface.

    Every call is fallible. Reads return None when the answer is unknown and
    writes return False on failure; implementations may also raise, so callers
    treat an exception the same as an unknown answer.
    """

    # === Projects ===
    @abstractmethod
    async def get_project(self, project_id: str) -> Optional[ProjectDO]:
        pass

    @abstractmethod
    async def upsert_project(self, project_id: str, updates: Dict[str, Any]) -> bool:
        pass

    # === Conversations ===
    @abstractmethod
    async def get_conversation(self, project_id: str, chat_id: str) -> Optional[ConversationDO]:
        pass

    @abstractmethod
    async def upsert_conversation(
        self,
        project_id: str,
        chat_id: str,
        messages: List[Dict[str, str]],
        conversation_id: Optional[str] = None
    ) -> bool:
        pass

    # === Quota event logs ===
    @abstractmethod
    async def count_events(self, project_id: str, category: str, since: datetime) -> Optional[int]:
        pass

    @abstractmethod
    async def append_event(self, project_id: str, category: str, kind: str,
                           created_at: Optional[datetime] = None) -> bool:
        pass

    # === Audit trail ===
    @abstractmethod
    async def append_activity_log(
        self,
        project_id: str,
        action_type: str,
        status: str,
        input_payload: Dict[str, Any],
        result: Dict[str, Any]
    ) -> bool:
        pass

    # === Tasks ===
    @abstractmethod
    async def count_pending_tasks(self, project_id: str) -> Optional[int]:
        pass

    @abstractmethod
    async def insert_task(self, task: TaskDO) -> bool:
        pass


class DuckDBStore(StoreGateway):
    """StoreGateway backed by a DuckDB connection and the table repositories."""

    def __init__(self, db: DatabaseConnection):
        """
        Args:
            db: Open database connection (schema already initialized)
        """
        self.db = db
        self.logger = get_app_logger()
        self.projects = ProjectRepository(db.conn)
        self.conversations = ConversationRepository(db.conn)
        self.events = UsageEventRepository(db.conn)
        self.activity = ActivityLogRepository(db.conn)
        self.tasks = TaskRepository(db.conn)

    async def get_project(self, project_id: str) -> Optional[ProjectDO]:
        return self.projects.get(project_id)

    async def upsert_project(self, project_id: str, updates: Dict[str, Any]) -> bool:
        """
        Update an existing project or create it from the given fields.

        Args:
            project_id: Project ID
            updates: Partial set of ProjectDO fields

        Returns:
            True if successful, False otherwise
        """
        if self.projects.exists(project_id):
            return self.projects.update(project_id, updates)

        known = {f.name for f in fields(ProjectDO)}
        unknown = set(updates) - known
        if unknown:
            self.logger.error(f"Cannot create project {project_id}: unknown fields {sorted(unknown)}")
            return False
        values = {k: v for k, v in updates.items() if k != "id"}
        return self.projects.create(ProjectDO(id=project_id, **values))

    async def get_conversation(self, project_id: str, chat_id: str) -> Optional[ConversationDO]:
        return self.conversations.get_by_chat(project_id, str(chat_id))

    async def upsert_conversation(
        self,
        project_id: str,
        chat_id: str,
        messages: List[Dict[str, str]],
        conversation_id: Optional[str] = None
    ) -> bool:
        """
        Write a transcript: update when the row is known, insert otherwise.

        Args:
            project_id: Project ID
            chat_id: Chat address
            messages: Full transcript to store
            conversation_id: ID of the existing row, if the caller loaded one

        Returns:
            True if successful, False otherwise
        """
        if conversation_id:
            return self.conversations.update_messages(conversation_id, messages)

        now = datetime.utcnow()
        return self.conversations.create(ConversationDO(
            id=str(uuid.uuid4()),
            project_id=project_id,
            chat_id=str(chat_id),
            messages=messages,
            created_at=now,
            updated_at=now
        ))

    async def count_events(self, project_id: str, category: str, since: datetime) -> Optional[int]:
        return self.events.count_since(project_id, category, since)

    async def append_event(self, project_id: str, category: str, kind: str,
                           created_at: Optional[datetime] = None) -> bool:
        return self.events.append(project_id, category, kind, created_at)

    async def append_activity_log(
        self,
        project_id: str,
        action_type: str,
        status: str,
        input_payload: Dict[str, Any],
        result: Dict[str, Any]
    ) -> bool:
        return self.activity.add(project_id, action_type, status, input_payload, result) is not None

    async def count_pending_tasks(self, project_id: str) -> Optional[int]:
        return self.tasks.count_pending(project_id)

    async def insert_task(self, task: TaskDO) -> bool:
        return self.tasks.create(task)
