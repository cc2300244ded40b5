"""Intent models - the classified meaning of an inbound message."""

from enum import Enum
from typing import Any, Dict, Literal, Optional, Union
from pydantic import BaseModel, Field


class QueryKind(str, Enum):
    """System-status questions answerable from stored state."""

    GOOGLE_STATUS = "google_status"
    TELEGRAM_STATUS = "telegram_status"
    USAGE_STATUS = "usage_status"
    FEATURE_STATUS = "feature_status"
    FULL_STATUS = "full_status"


class ChatIntent(BaseModel):
    """Plain conversation - reply with the message, no side effects."""

    type: Literal["chat"] = "chat"
    message: Optional[str] = Field(None, description="Sanitized reply for the end user")
    follow_up: Optional[Dict[str, Any]] = Field(
        None, description="Follow-up request recovered from a legacy FOLLOWUP_ACTION tag"
    )


class ActionIntent(BaseModel):
    """A request to run a registered action."""

    type: Literal["action"] = "action"
    action: str = Field(min_length=1, description="Registered action name")
    payload: Dict[str, Any] = Field(default_factory=dict, description="Action parameters")
    message: Optional[str] = Field(None, description="Conversational preface for the reply")


class SystemQueryIntent(BaseModel):
    """A status question answered by the system state reporter."""

    type: Literal["system_query"] = "system_query"
    query: QueryKind = Field(default=QueryKind.FULL_STATUS, description="Which status to report")
    message: Optional[str] = Field(None, description="Optional conversational preface")


Intent = Union[ChatIntent, ActionIntent, SystemQueryIntent]
