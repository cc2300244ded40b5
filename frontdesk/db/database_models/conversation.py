"""Conversation database model."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Dict, List


@dataclass
class ConversationDO:
    """Conversation data object - maps to conversations table."""

    id: str
    project_id: str
    chat_id: str
    messages: List[Dict[str, str]] = field(default_factory=list)
    created_at: datetime = field(default_factory=datetime.utcnow)
    updated_at: datetime = field(default_factory=datetime.utcnow)
