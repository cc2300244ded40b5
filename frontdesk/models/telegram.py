"""Telegram webhook envelope models."""

from typing import Optional
from pydantic import BaseModel, ConfigDict, Field


class TelegramChat(BaseModel):
    """Chat the update came from."""

    model_config = ConfigDict(extra="ignore")

    id: int = Field(description="Telegram chat ID")


class TelegramMessage(BaseModel):
    """Inbound message; only text messages are handled."""

    model_config = ConfigDict(extra="ignore")

    message_id: Optional[int] = None
    chat: Optional[TelegramChat] = None
    text: Optional[str] = None


class TelegramUpdate(BaseModel):
    """Telegram webhook update."""

    model_config = ConfigDict(extra="ignore")

    update_id: Optional[int] = None
    message: Optional[TelegramMessage] = None


class WebhookReply(BaseModel):
    """Reply delivered through the webhook HTTP response body."""

    method: str = "sendMessage"
    chat_id: int
    text: str


class ActionInfo(BaseModel):
    """Registered action description."""

    name: str
    required_feature: str
    description: str
