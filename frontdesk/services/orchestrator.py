"""Message-handling orchestrator.

One inbound chat message goes through: load project, load history, classify,
route (system query, gated action, or plain chat), persist the bounded
transcript, and return the reply text. Messages for the same
(project, chat) pair are handled one at a time within this process.
"""

import math
import uuid
from datetime import datetime, timedelta
from typing import Any, Callable, Dict, List, Optional, Union

import httpx

from .activity_logger import (
    ActivityLogger,
    STATUS_DAILY_LIMIT,
    STATUS_FAILED,
    STATUS_RATE_LIMITED,
    STATUS_SUCCESS,
)
from .intent_classifier import IntentClassifier, build_system_prompt
from .quota import MINUTE_LIMIT, RateLimiter, UsageGuard
from .system_state import SystemStateReporter
from ..actions.google import GoogleActions
from ..actions.registry import ActionRegistry, build_action_registry
from ..actions.seo import SeoActions
from ..clients.google import GoogleBusinessClient
from ..clients.perplexity import PerplexityProvider
from ..config import Settings
from ..db.database_models import ConversationDO, ProjectDO, TaskDO
from ..db.store import StoreGateway
from ..models.action import ActionContext
from ..models.intent import ActionIntent, ChatIntent, SystemQueryIntent
from ..utils.keyed_lock import KeyedLock
from ..utils.logger import get_app_logger


UNAVAILABLE_MESSAGE = "Sorry, this service is currently unavailable."
MINUTE_LIMIT_MESSAGE = "⚠️ Too many actions. Please wait a moment before trying again."
DAILY_LIMIT_MESSAGE = "⚠️ Daily action limit reached. You can perform more actions tomorrow."

FOLLOW_UP_ACTION = "follow_up"
DEFAULT_FOLLOW_UP_DELAY = timedelta(hours=24)
MAX_FOLLOW_UP_DELAY = timedelta(days=30)


def follow_up_delay(hours: Any) -> timedelta:
    """Delay for a follow-up task; anything but a finite positive number up to 30 days gets the default."""
    if isinstance(hours, bool) or not isinstance(hours, (int, float)):
        return DEFAULT_FOLLOW_UP_DELAY
    if not math.isfinite(hours) or hours <= 0 or hours > MAX_FOLLOW_UP_DELAY.total_seconds() / 3600:
        return DEFAULT_FOLLOW_UP_DELAY
    return timedelta(hours=hours)


class Orchestrator:
    """Channel-agnostic entry point for inbound chat messages."""

    def __init__(
        self,
        store: StoreGateway,
        classifier: IntentClassifier,
        registry: ActionRegistry,
        rate_limiter: RateLimiter,
        reporter: SystemStateReporter,
        activity_logger: ActivityLogger,
        transcript_max_turns: int = 20,
        clock: Callable[[], datetime] = datetime.utcnow
    ):
        self.store = store
        self.classifier = classifier
        self.registry = registry
        self.rate_limiter = rate_limiter
        self.reporter = reporter
        self.activity_logger = activity_logger
        self.transcript_max_turns = transcript_max_turns
        self.clock = clock
        self._locks = KeyedLock()
        self.logger = get_app_logger()

    async def handle_message(
        self,
        project_id: str,
        chat_id: Union[int, str],
        message: str,
        channel: str = "telegram"
    ) -> str:
        """
        Handle one inbound message and return the reply text.

        Args:
            project_id: Project the message was addressed to
            chat_id: Chat the message came from
            message: Message text
            channel: Originating channel

        Returns:
            Reply text, never empty
        """
        async with self._locks.hold((project_id, str(chat_id))):
            return await self._handle(project_id, chat_id, message, channel)

    async def _handle(self, project_id: str, chat_id: Union[int, str], message: str, channel: str) -> str:
        self.logger.info(f"[Orchestrator] handle_message project={project_id} channel={channel} chat={chat_id}")

        project = await self._load_project(project_id)
        if project is None:
            return UNAVAILABLE_MESSAGE
        self.logger.info(
            f'[Orchestrator] Project loaded: "{project.ai_name}" | features: {project.enabled_features}'
        )

        conversation = await self._load_conversation(project_id, chat_id)
        history = list(conversation.messages) if conversation else []

        system_prompt = build_system_prompt(project, self.registry.names())
        intent = await self.classifier.classify(system_prompt, history, message)
        self.logger.info(f"[Orchestrator] Intent: type={intent.type}")

        if isinstance(intent, SystemQueryIntent):
            state = await self.reporter.get_state(project_id)
            reply = self.reporter.render(intent.query, state)
        elif isinstance(intent, ActionIntent):
            reply = await self._run_action(project, chat_id, channel, message, intent)
        else:
            reply = intent.message or (
                f"Thanks for reaching out to {project.business_name}! Our team will get back to you shortly."
            )
            if isinstance(intent, ChatIntent) and intent.follow_up:
                await self._schedule_follow_up(project_id, chat_id, message, intent.follow_up)

        await self._save_transcript(project_id, chat_id, conversation, history, message, reply)
        return reply

    async def _load_project(self, project_id: str) -> Optional[ProjectDO]:
        try:
            project = await self.store.get_project(project_id)
        except Exception as e:
            self.logger.error(f"[Orchestrator] Failed to load project {project_id}: {e}")
            return None

        if project is None or not project.is_active:
            self.logger.error(f"[Orchestrator] Project not found or not active: {project_id}")
            return None
        return project

    async def _load_conversation(self, project_id: str, chat_id: Union[int, str]) -> Optional[ConversationDO]:
        try:
            return await self.store.get_conversation(project_id, str(chat_id))
        except Exception as e:
            self.logger.error(f"[Orchestrator] Failed to load conversation: {e}")
            return None

    async def _run_action(
        self,
        project: ProjectDO,
        chat_id: Union[int, str],
        channel: str,
        message: str,
        intent: ActionIntent
    ) -> str:
        snapshot = {"userMessage": message, "intent": intent.action, "payload": intent.payload}

        decision = await self.rate_limiter.check(project.id, intent.action)
        if not decision.allowed:
            if decision.reason == MINUTE_LIMIT:
                reply, status = MINUTE_LIMIT_MESSAGE, STATUS_RATE_LIMITED
            else:
                reply, status = DAILY_LIMIT_MESSAGE, STATUS_DAILY_LIMIT
            self.logger.warning(f'[Orchestrator] Rate limited: {decision.reason} for action "{intent.action}"')
            await self.activity_logger.log(
                project.id, intent.action, status, snapshot, {"success": False, "message": reply}
            )
            return reply

        result = await self.registry.execute(
            intent.action,
            intent.payload,
            ActionContext(project=project, chat_id=chat_id, channel=channel)
        )
        await self.activity_logger.log(
            project.id,
            intent.action,
            STATUS_SUCCESS if result.success else STATUS_FAILED,
            snapshot,
            result.snapshot()
        )

        parts = [intent.message] if intent.message else []
        parts.append(result.message)
        return "\n\n".join(parts)

    async def _schedule_follow_up(
        self,
        project_id: str,
        chat_id: Union[int, str],
        message: str,
        follow_up: Dict[str, Any]
    ) -> None:
        try:
            now = self.clock()
            delay = follow_up_delay(follow_up.get("delay_hours"))
            task = TaskDO(
                id=str(uuid.uuid4()),
                project_id=project_id,
                chat_id=str(chat_id),
                action_type=FOLLOW_UP_ACTION,
                context={**follow_up, "delay_hours": delay.total_seconds() / 3600, "userMessage": message},
                execute_at=now + delay,
                created_at=now,
                updated_at=now
            )
            inserted = await self.store.insert_task(task)
        except Exception as e:
            self.logger.error(f"[Orchestrator] Failed to schedule follow-up: {e}")
            return
        if inserted:
            self.logger.info(f"[Orchestrator] Follow-up scheduled for {task.execute_at.isoformat()}")

    async def _save_transcript(
        self,
        project_id: str,
        chat_id: Union[int, str],
        conversation: Optional[ConversationDO],
        history: List[Dict[str, str]],
        message: str,
        reply: str
    ) -> None:
        updated = history + [
            {"role": "user", "content": message},
            {"role": "assistant", "content": reply},
        ]
        updated = updated[-self.transcript_max_turns:]

        try:
            saved = await self.store.upsert_conversation(
                project_id,
                str(chat_id),
                updated,
                conversation_id=conversation.id if conversation else None
            )
        except Exception as e:
            self.logger.error(f"[Orchestrator] Failed to save conversation: {e}")
            return

        if saved:
            self.logger.info("[Orchestrator] Conversation saved")
        else:
            self.logger.error("[Orchestrator] Failed to save conversation")


def build_orchestrator(
    settings: Settings,
    store: StoreGateway,
    http_client: Optional[httpx.AsyncClient] = None
) -> Orchestrator:
    """
    Wire the production pipeline from settings.

    Args:
        settings: Application settings
        store: Store gateway
        http_client: Shared outbound HTTP client

    Returns:
        Orchestrator
    """
    provider = PerplexityProvider(
        api_key=settings.perplexity_api_key,
        api_base=settings.perplexity_api_base,
        model=settings.perplexity_model,
        timeout=settings.perplexity_timeout,
        http_client=http_client
    )
    rate_limiter = RateLimiter(
        store,
        minute_limit=settings.action_minute_limit,
        daily_limit=settings.action_daily_limit
    )
    usage_guard = UsageGuard(store, daily_limit=settings.llm_daily_limit)
    google_client = GoogleBusinessClient(
        store,
        client_id=settings.google_client_id,
        client_secret=settings.google_client_secret,
        token_url=settings.google_token_url,
        http_client=http_client
    )

    registry = build_action_registry(
        SeoActions(provider, usage_guard),
        GoogleActions(google_client, store, provider, usage_guard)
    )

    return Orchestrator(
        store=store,
        classifier=IntentClassifier(
            provider,
            history_window=settings.history_window,
            max_tokens=settings.intent_max_tokens
        ),
        registry=registry,
        rate_limiter=rate_limiter,
        reporter=SystemStateReporter(store, rate_limiter),
        activity_logger=ActivityLogger(store),
        transcript_max_turns=settings.transcript_max_turns
    )
