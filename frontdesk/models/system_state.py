"""System state models."""

from typing import List, Optional
from pydantic import BaseModel, Field


class QuotaDecision(BaseModel):
    """Result of a sliding-window quota check."""

    allowed: bool
    reason: Optional[str] = Field(None, description="Rule that denied the request, e.g. minute_limit")


class SystemState(BaseModel):
    """Stored-state snapshot used to answer status questions."""

    google_connected: bool = False
    telegram_connected: bool = False
    enabled_features: List[str] = Field(default_factory=list)
    actions_used_today: int = 0
    actions_remaining_today: int = 0
    minute_usage: int = 0
    minute_remaining: int = 0
    pending_tasks: int = 0
    status: str = "draft"
