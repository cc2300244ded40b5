"""Pytest fixtures for API testing."""

import httpx
import pytest
from fastapi import FastAPI
from httpx import AsyncClient, ASGITransport

from frontdesk.api.v1 import actions, telegram
from frontdesk.config import Settings
from frontdesk.services.orchestrator import build_orchestrator


class FakePerplexity:
    """Mock transport handler answering chat-completions with queued contents."""

    def __init__(self):
        self.answers = []
        self.requests = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        content = self.answers.pop(0) if self.answers else ""
        return httpx.Response(200, json={"choices": [{"message": {"content": content}}]})


@pytest.fixture
def perplexity():
    return FakePerplexity()


@pytest.fixture
async def client(store, perplexity):
    """Create an async HTTP client over a test app wired to a fresh database."""
    settings = Settings(_env_file=None, perplexity_api_key="pplx-test", log_level="WARNING")
    http_client = httpx.AsyncClient(transport=httpx.MockTransport(perplexity))
    orchestrator = build_orchestrator(settings, store, http_client)

    # Inject dependencies into routers
    telegram.orchestrator = orchestrator
    telegram.store = store
    telegram.transport = None
    telegram.reply_mode = "webhook"
    actions.registry = orchestrator.registry

    # Create a test app without lifespan (to avoid conflicts)
    test_app = FastAPI(title="Front Desk Test")
    test_app.include_router(telegram.router)
    test_app.include_router(actions.router)

    transport = ASGITransport(app=test_app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    await http_client.aclose()
    telegram.orchestrator = None
    telegram.store = None
    actions.registry = None
