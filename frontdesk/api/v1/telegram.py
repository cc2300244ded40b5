"""Telegram webhook routes - V1."""

from typing import Any, Dict, Optional, Union

from fastapi import APIRouter, Depends, HTTPException

from ...clients.base import BaseChatTransport
from ...db.store import StoreGateway
from ...models.telegram import TelegramUpdate, WebhookReply
from ...services.orchestrator import Orchestrator
from ...utils.logger import get_app_logger

router = APIRouter(prefix="/api/v1/telegram", tags=["Telegram"])

# Pipeline (set by main.py)
orchestrator: Orchestrator = None
# Store gateway (set by main.py)
store: StoreGateway = None
# Outbound transport, used when reply_mode is "send" (set by main.py)
transport: Optional[BaseChatTransport] = None
# "webhook" answers in the response body, "send" calls the transport
reply_mode: str = "webhook"

logger = get_app_logger()

OK = {"ok": True}


def get_orchestrator() -> Orchestrator:
    """Dependency to get the orchestrator."""
    if orchestrator is None:
        raise HTTPException(status_code=500, detail="Orchestrator not initialized")
    return orchestrator


def get_store() -> StoreGateway:
    """Dependency to get the store gateway."""
    if store is None:
        raise HTTPException(status_code=500, detail="Store not initialized")
    return store


async def _deliver(token: Optional[str], chat_id: int, text: str) -> Union[WebhookReply, Dict[str, Any]]:
    if reply_mode == "send" and transport is not None:
        result = await transport.send_text(token or "", chat_id, text)
        if not result.ok:
            logger.error(f"[Webhook] sendMessage failed for chat {chat_id}: {result.error}")
        return OK
    return WebhookReply(chat_id=chat_id, text=text)


@router.post("/{project_id}")
async def telegram_webhook(
    project_id: str,
    update: TelegramUpdate,
    pipeline: Orchestrator = Depends(get_orchestrator),
    gateway: StoreGateway = Depends(get_store)
):
    """
    Receive a Telegram update and reply.

    Always answers 200 once the envelope parses; internal failures are logged
    and acknowledged with {"ok": true} so Telegram does not retry.
    """
    logger.info(f"[Webhook] Incoming update for {project_id}")

    msg = update.message
    if msg is None or msg.chat is None or not msg.text:
        logger.info("[Webhook] No chat_id or text, skipping")
        return OK

    chat_id = msg.chat.id
    text = msg.text

    try:
        project = await gateway.get_project(project_id)
        if project is None or not project.is_active:
            logger.error(f"[Webhook] Project not found or not active: {project_id}")
            return OK

        if text.startswith("/start"):
            welcome = f"Hey! 👋 Welcome to {project.business_name or 'our business'}! How can I help you today?"
            return await _deliver(project.telegram_token, chat_id, welcome)

        reply = await pipeline.handle_message(project_id, chat_id, text, channel="telegram")
        logger.info(f"[Webhook] Reply ({len(reply)} chars) for chat {chat_id}")
        return await _deliver(project.telegram_token, chat_id, reply)

    except Exception as e:
        logger.error(f"[Webhook] Error handling update for {project_id}: {e}")
        return OK


@router.get("/{project_id}")
async def telegram_webhook_status(project_id: str):
    """Liveness probe for the webhook URL."""
    return {"status": "active"}
