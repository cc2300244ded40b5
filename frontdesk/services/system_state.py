"""System state reporter.

Answers status questions from stored state only; never calls the completion
provider. Every read failure degrades to a safe default.
"""

from typing import Optional

from .quota import DAILY_LIMIT, MINUTE_LIMIT, RateLimiter
from ..db.store import StoreGateway
from ..models.intent import QueryKind
from ..models.system_state import SystemState
from ..utils.logger import get_app_logger


class SystemStateReporter:
    """Builds a SystemState snapshot and renders it for one query kind."""

    def __init__(self, store: StoreGateway, rate_limiter: RateLimiter):
        """
        Args:
            store: Store gateway
            rate_limiter: Limiter whose windows and limits define "usage"
        """
        self.store = store
        self.rate_limiter = rate_limiter
        self.logger = get_app_logger()

    def default_state(self) -> SystemState:
        """Nothing connected, full quota, draft."""
        return SystemState(
            actions_remaining_today=self.rate_limiter.rule(DAILY_LIMIT).limit,
            minute_remaining=self.rate_limiter.rule(MINUTE_LIMIT).limit,
        )

    async def _pending_tasks(self, project_id: str) -> Optional[int]:
        try:
            return await self.store.count_pending_tasks(project_id)
        except Exception as e:
            self.logger.warning(f"[SysState] Pending task count failed: {e}")
            return None

    async def get_state(self, project_id: str) -> SystemState:
        """
        Snapshot integration status, features and usage for a project.

        Args:
            project_id: Project ID

        Returns:
            SystemState (defaults when the project cannot be read)
        """
        state = self.default_state()

        try:
            project = await self.store.get_project(project_id)
        except Exception as e:
            self.logger.error(f"[SysState] Failed to load project {project_id}: {e}")
            return state

        if project is None:
            self.logger.warning(f"[SysState] Project not found: {project_id}")
            return state

        state.google_connected = bool(project.google_refresh_token)
        state.telegram_connected = bool(project.telegram_token)
        state.enabled_features = list(project.enabled_features or [])
        state.status = project.status or "draft"

        now = self.rate_limiter.clock()
        daily_rule = self.rate_limiter.rule(DAILY_LIMIT)
        minute_rule = self.rate_limiter.rule(MINUTE_LIMIT)

        daily = await self.rate_limiter.usage(project_id, daily_rule, now)
        if daily is not None:
            state.actions_used_today = daily
            state.actions_remaining_today = max(0, daily_rule.limit - daily)

        minute = await self.rate_limiter.usage(project_id, minute_rule, now)
        if minute is not None:
            state.minute_usage = minute
            state.minute_remaining = max(0, minute_rule.limit - minute)

        pending = await self._pending_tasks(project_id)
        if pending is not None:
            state.pending_tasks = pending

        return state

    @staticmethod
    def render(query: QueryKind, state: SystemState) -> str:
        """Render a deterministic answer for one query kind."""
        if query == QueryKind.GOOGLE_STATUS:
            if state.google_connected:
                return "✅ Your Google Business Profile is connected and active."
            return "❌ Your Google Business Profile is not connected yet. Please connect it from your dashboard."

        if query == QueryKind.TELEGRAM_STATUS:
            if state.telegram_connected:
                return "✅ Your Telegram bot is connected and active."
            return "❌ Your Telegram bot is not connected yet. Please set it up from the AI builder."

        daily_total = state.actions_used_today + state.actions_remaining_today
        minute_total = state.minute_usage + state.minute_remaining

        if query == QueryKind.USAGE_STATUS:
            text = (
                "📊 Usage Status:\n\n"
                f"Today: {state.actions_used_today} of {daily_total} actions used. "
                f"{state.actions_remaining_today} remaining.\n"
                f"This minute: {state.minute_usage} of {minute_total} used. "
                f"{state.minute_remaining} remaining."
            )
            if state.pending_tasks > 0:
                text += f"\n\nPending tasks: {state.pending_tasks}"
            return text

        if query == QueryKind.FEATURE_STATUS:
            if not state.enabled_features:
                return "⚠️ No features are currently enabled. Enable features from your AI builder settings."
            bullets = "\n".join(f"• {feature}" for feature in state.enabled_features)
            return f"🔧 Enabled features:\n\n{bullets}"

        status_label = "🟢 Active" if state.status == "active" else "🟡 Draft"
        features = ", ".join(state.enabled_features) if state.enabled_features else "None enabled"
        lines = [
            f"📋 System Status: {status_label}",
            "",
            f"🔗 Google Business: {'✅ Connected' if state.google_connected else '❌ Not connected'}",
            f"🤖 Telegram Bot: {'✅ Connected' if state.telegram_connected else '❌ Not connected'}",
            "",
            f"🔧 Features: {features}",
            "",
            f"📊 Usage: {state.actions_used_today}/{daily_total} actions today "
            f"({state.actions_remaining_today} left)",
            f"⏱️ This minute: {state.minute_usage}/{minute_total} ({state.minute_remaining} left)",
        ]
        if state.pending_tasks > 0:
            lines.append(f"\n⏳ Pending tasks: {state.pending_tasks}")
        return "\n".join(lines)
