"""Tests for SystemStateReporter."""

from datetime import datetime, timedelta
from unittest.mock import AsyncMock, MagicMock

import pytest

from frontdesk.db.database_models import TaskDO
from frontdesk.models.intent import QueryKind
from frontdesk.models.system_state import SystemState
from frontdesk.services.quota import RateLimiter
from frontdesk.services.system_state import SystemStateReporter


@pytest.fixture
def limiter(store, clock):
    return RateLimiter(store, minute_limit=5, daily_limit=100, clock=clock)


@pytest.fixture
def reporter(store, limiter):
    return SystemStateReporter(store, limiter)


class TestGetState:
    """SUT: SystemStateReporter.get_state"""

    async def test_from_stored_state(self, store, reporter, limiter, clock, make_project):
        store.projects.create(make_project(
            enabled_features=["seo_content"],
            google_refresh_token="refresh",
        ))
        await store.append_event("p1", "action", "a", created_at=clock() - timedelta(hours=3))
        await limiter.check("p1", "a")
        await limiter.check("p1", "a")
        await store.insert_task(TaskDO(id="t1", project_id="p1", action_type="follow_up",
                                       execute_at=datetime.utcnow()))

        state = await reporter.get_state("p1")
        assert state.google_connected is True
        assert state.telegram_connected is True
        assert state.enabled_features == ["seo_content"]
        assert state.status == "active"
        assert state.actions_used_today == 3
        assert state.actions_remaining_today == 97
        assert state.minute_usage == 2
        assert state.minute_remaining == 3
        assert state.pending_tasks == 1

    async def test_missing_project_defaults(self, reporter):
        state = await reporter.get_state("nope")
        assert state == SystemState(actions_remaining_today=100, minute_remaining=5)

    async def test_store_error_defaults(self, limiter):
        """A failing store should yield nothing connected, full quota, draft."""
        store = MagicMock()
        store.get_project = AsyncMock(side_effect=RuntimeError("db down"))
        state = await SystemStateReporter(store, limiter).get_state("p1")
        assert state.google_connected is False
        assert state.telegram_connected is False
        assert state.actions_remaining_today == 100
        assert state.minute_remaining == 5
        assert state.status == "draft"


class TestRender:
    """SUT: SystemStateReporter.render"""

    def _state(self, **overrides):
        values = dict(
            google_connected=True,
            telegram_connected=False,
            enabled_features=["seo_content", "google_review_reply"],
            actions_used_today=4,
            actions_remaining_today=96,
            minute_usage=1,
            minute_remaining=4,
            pending_tasks=0,
            status="active",
        )
        values.update(overrides)
        return SystemState(**values)

    def test_google(self):
        assert SystemStateReporter.render(QueryKind.GOOGLE_STATUS, self._state()).startswith("✅")
        assert SystemStateReporter.render(
            QueryKind.GOOGLE_STATUS, self._state(google_connected=False)
        ).startswith("❌")

    def test_telegram(self):
        assert "not connected" in SystemStateReporter.render(QueryKind.TELEGRAM_STATUS, self._state())

    def test_usage(self):
        text = SystemStateReporter.render(QueryKind.USAGE_STATUS, self._state(pending_tasks=2))
        assert "Today: 4 of 100 actions used. 96 remaining." in text
        assert "This minute: 1 of 5 used. 4 remaining." in text
        assert text.endswith("Pending tasks: 2")

    def test_features(self):
        text = SystemStateReporter.render(QueryKind.FEATURE_STATUS, self._state())
        assert "• seo_content" in text
        assert "• google_review_reply" in text
        assert SystemStateReporter.render(
            QueryKind.FEATURE_STATUS, self._state(enabled_features=[])
        ).startswith("⚠️ No features")

    def test_full(self):
        text = SystemStateReporter.render(QueryKind.FULL_STATUS, self._state())
        assert "🟢 Active" in text
        assert "Google Business: ✅ Connected" in text
        assert "Telegram Bot: ❌ Not connected" in text
        assert "Features: seo_content, google_review_reply" in text
        assert "Usage: 4/100 actions today (96 left)" in text
        assert "Pending tasks" not in text

    def test_deterministic(self):
        state = self._state()
        for query in QueryKind:
            assert SystemStateReporter.render(query, state) == SystemStateReporter.render(query, state)
