"""Shared pytest fixtures."""

from datetime import datetime, timedelta

import pytest

from frontdesk.clients.base import BaseCompletionProvider
from frontdesk.db import DatabaseConnection, DuckDBStore
from frontdesk.db.database_models import ProjectDO


class FakeClock:
    """Manually advanced clock."""

    def __init__(self, start: datetime):
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs):
        self.now += timedelta(**kwargs)


class ScriptedProvider(BaseCompletionProvider):
    """Completion provider that replays queued answers and records every call."""

    def __init__(self, answers):
        self.answers = list(answers)
        self.calls = []

    async def complete(self, messages, max_tokens=None):
        self.calls.append(messages)
        if not self.answers:
            return None
        answer = self.answers.pop(0)
        if isinstance(answer, Exception):
            raise answer
        return answer


@pytest.fixture
def db(tmp_path):
    """Provide a fresh database connection."""
    conn = DatabaseConnection(str(tmp_path / "test.db"))
    yield conn
    conn.close()


@pytest.fixture
def store(db):
    """Provide a DuckDB-backed store gateway."""
    return DuckDBStore(db)


@pytest.fixture
def clock():
    """Provide a fake clock starting at a fixed instant."""
    return FakeClock(datetime(2026, 3, 2, 9, 30, 0))


@pytest.fixture
def make_project():
    """Factory for ProjectDO with sensible defaults."""
    def _make(**overrides) -> ProjectDO:
        defaults = dict(
            id="p1",
            ai_name="Maya",
            business_name="Iron Temple Gym",
            business_category="gym",
            business_location="Austin, TX",
            business_description="Strength training for everyone.",
            status="active",
            telegram_token="123:abc",
        )
        defaults.update(overrides)
        return ProjectDO(**defaults)
    return _make


@pytest.fixture
def scripted_provider():
    """Factory for a ScriptedProvider replaying the given answers."""
    def _make(*answers) -> ScriptedProvider:
        return ScriptedProvider(answers)
    return _make
