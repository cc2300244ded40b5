"""Sliding-window quotas over the append-only usage event log.

``WindowedQuota`` is the shared primitive: it counts a project's events of one
category over each trailing window in order, denies on the first rule whose
limit is reached, and otherwise appends one event before returning. Any
failure to count fails open. The count-then-append is not atomic, so
concurrent requests for one project may overshoot a limit slightly.
"""

from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Callable, Optional, Sequence

from ..db.store import StoreGateway
from ..models.system_state import QuotaDecision
from ..utils.logger import get_app_logger


ACTION_EVENTS = "action"
LLM_EVENTS = "llm"

MINUTE_LIMIT = "minute_limit"
DAILY_LIMIT = "daily_limit"


@dataclass(frozen=True)
class WindowRule:
    """Deny with ``reason`` once ``limit`` events fall inside ``window``."""

    reason: str
    window: timedelta
    limit: int


class WindowedQuota:
    """Counted sliding-window gate that fails open on store errors."""

    def __init__(
        self,
        store: StoreGateway,
        category: str,
        rules: Sequence[WindowRule],
        clock: Callable[[], datetime] = datetime.utcnow,
        name: str = "Quota"
    ):
        """
        Args:
            store: Store gateway holding the event log
            category: Event log category this quota counts and appends to
            rules: Windows evaluated in order
            clock: Returns "now" (naive UTC); injectable for tests
            name: Log tag
        """
        self.store = store
        self.category = category
        self.rules = tuple(rules)
        self.clock = clock
        self.name = name
        self.logger = get_app_logger()

    def rule(self, reason: str) -> Optional[WindowRule]:
        """Look up a rule by its reason."""
        for rule in self.rules:
            if rule.reason == reason:
                return rule
        return None

    async def usage(self, project_id: str, rule: WindowRule, now: Optional[datetime] = None) -> Optional[int]:
        """
        Count events inside one rule's window.

        Returns:
            Event count, or None when the store could not answer
        """
        now = now or self.clock()
        try:
            return await self.store.count_events(project_id, self.category, now - rule.window)
        except Exception as e:
            self.logger.warning(f"[{self.name}] {rule.reason} count failed: {e}")
            return None

    async def check_and_record(self, project_id: str, kind: str) -> QuotaDecision:
        """
        Evaluate every rule and, when all pass, record one event.

        Args:
            project_id: Project ID
            kind: Action name or usage type stored on the event

        Returns:
            QuotaDecision
        """
        now = self.clock()

        for rule in self.rules:
            count = await self.usage(project_id, rule, now)
            if count is None:
                self.logger.warning(f"[{self.name}] Failing open for project {project_id}")
                return QuotaDecision(allowed=True)
            if count >= rule.limit:
                self.logger.warning(
                    f"[{self.name}] {rule.reason} hit for project {project_id}: {count}/{rule.limit}"
                )
                return QuotaDecision(allowed=False, reason=rule.reason)

        try:
            recorded = await self.store.append_event(project_id, self.category, kind, created_at=now)
        except Exception as e:
            self.logger.warning(f"[{self.name}] Failed to record event: {e}")
        else:
            if not recorded:
                self.logger.warning(f"[{self.name}] Failed to record event for project {project_id}")

        return QuotaDecision(allowed=True)


class RateLimiter(WindowedQuota):
    """Per-project action throttling: a minute window, then a day window."""

    def __init__(
        self,
        store: StoreGateway,
        minute_limit: int = 5,
        daily_limit: int = 100,
        clock: Callable[[], datetime] = datetime.utcnow
    ):
        super().__init__(
            store,
            ACTION_EVENTS,
            [
                WindowRule(MINUTE_LIMIT, timedelta(seconds=60), minute_limit),
                WindowRule(DAILY_LIMIT, timedelta(hours=24), daily_limit),
            ],
            clock=clock,
            name="RateLimit"
        )

    async def check(self, project_id: str, action_name: str) -> QuotaDecision:
        """Gate one action; records it as consumed when allowed."""
        return await self.check_and_record(project_id, action_name)


class UsageGuard(WindowedQuota):
    """Per-project daily cap on completion-provider calls made by action handlers."""

    def __init__(
        self,
        store: StoreGateway,
        daily_limit: int = 300,
        clock: Callable[[], datetime] = datetime.utcnow
    ):
        super().__init__(
            store,
            LLM_EVENTS,
            [WindowRule(DAILY_LIMIT, timedelta(hours=24), daily_limit)],
            clock=clock,
            name="LLMGuard"
        )

    async def check_and_track(self, project_id: str, usage_kind: str) -> QuotaDecision:
        """Gate one completion call; records it when allowed."""
        return await self.check_and_record(project_id, usage_kind)
