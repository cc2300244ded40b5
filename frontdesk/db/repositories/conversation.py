"""Conversation repository for database operations."""

from datetime import datetime
from typing import Dict, List, Optional
from .base import BaseRepository
from ..database_models.conversation import ConversationDO


class ConversationRepository(BaseRepository):
    """Repository for Conversation transcript operations."""

    def _to_do(self, row) -> ConversationDO:
        return ConversationDO(
            id=row[0],
            project_id=row[1],
            chat_id=row[2],
            messages=self._load_json(row[3], []),
            created_at=row[4],
            updated_at=row[5]
        )

    def create(self, conversation: ConversationDO) -> bool:
        """
        Create a new conversation record.

        Args:
            conversation: ConversationDO instance

        Returns:
            True if successful, False otherwise
        """
        try:
            self.conn.execute("""
                INSERT INTO conversations (id, project_id, chat_id, messages, created_at, updated_at)
                VALUES (?, ?, ?, ?, ?, ?)
            """, [
                conversation.id,
                conversation.project_id,
                conversation.chat_id,
                self._dump_json(conversation.messages),
                conversation.created_at,
                conversation.updated_at
            ])
            self.conn.commit()
            self.logger.info(f"Created conversation record: {conversation.id}")
            return True
        except Exception as e:
            self.logger.error(f"Failed to create conversation: {e}")
            return False

    def get_by_chat(self, project_id: str, chat_id: str) -> Optional[ConversationDO]:
        """
        Get the conversation for a project + chat address.

        Args:
            project_id: Project ID
            chat_id: Chat address on the messaging platform

        Returns:
            ConversationDO instance or None
        """
        try:
            result = self.conn.execute("""
                SELECT id, project_id, chat_id, messages, created_at, updated_at
                FROM conversations
                WHERE project_id = ? AND chat_id = ?
            """, [project_id, chat_id]).fetchone()

            return self._to_do(result) if result else None
        except Exception as e:
            self.logger.error(f"Failed to get conversation {project_id}/{chat_id}: {e}")
            return None

    def update_messages(self, conversation_id: str, messages: List[Dict[str, str]]) -> bool:
        """
        Replace the transcript of a conversation.

        Args:
            conversation_id: Conversation ID
            messages: Full transcript to store

        Returns:
            True if successful, False otherwise
        """
        try:
            self.conn.execute("""
                UPDATE conversations
                SET messages = ?, updated_at = ?
                WHERE id = ?
            """, [self._dump_json(messages), datetime.utcnow(), conversation_id])
            self.conn.commit()
            return True
        except Exception as e:
            self.logger.error(f"Failed to update conversation: {e}")
            return False
