"""Pydantic models for intents, action results, state and API payloads."""

from .intent import QueryKind, ChatIntent, ActionIntent, SystemQueryIntent, Intent
from .action import ActionResult, ActionContext
from .system_state import QuotaDecision, SystemState
from .telegram import TelegramUpdate, TelegramMessage, TelegramChat, WebhookReply, ActionInfo

__all__ = [
    "QueryKind",
    "ChatIntent",
    "ActionIntent",
    "SystemQueryIntent",
    "Intent",
    "ActionResult",
    "ActionContext",
    "QuotaDecision",
    "SystemState",
    "TelegramUpdate",
    "TelegramMessage",
    "TelegramChat",
    "WebhookReply",
    "ActionInfo",
]
