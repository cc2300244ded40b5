"""Tests for the outbound HTTP clients."""

import json

import httpx

from frontdesk.clients.perplexity import PerplexityProvider
from frontdesk.clients.telegram import TelegramTransport


def _client(handler) -> httpx.AsyncClient:
    return httpx.AsyncClient(transport=httpx.MockTransport(handler))


class TestPerplexityProvider:
    """SUT: PerplexityProvider.complete"""

    async def test_success(self):
        seen = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, json={"choices": [{"message": {"content": "hello"}}]})

        provider = PerplexityProvider("pplx-key", http_client=_client(handler))
        messages = [{"role": "user", "content": "hi"}]
        assert await provider.complete(messages, max_tokens=50) == "hello"

        request = seen[0]
        assert str(request.url) == "https://api.perplexity.ai/chat/completions"
        assert request.headers["Authorization"] == "Bearer pplx-key"
        body = json.loads(request.content)
        assert body["model"] == "sonar"
        assert body["messages"] == messages
        assert body["max_tokens"] == 50

    async def test_missing_key(self):
        def handler(request):
            raise AssertionError("should not be called")

        assert await PerplexityProvider(None, http_client=_client(handler)).complete([]) is None

    async def test_non_200(self):
        provider = PerplexityProvider("k", http_client=_client(lambda r: httpx.Response(500, text="down")))
        assert await provider.complete([{"role": "user", "content": "hi"}]) is None

    async def test_malformed_body(self):
        provider = PerplexityProvider("k", http_client=_client(lambda r: httpx.Response(200, json={"x": 1})))
        assert await provider.complete([{"role": "user", "content": "hi"}]) is None

    async def test_network_error(self):
        def handler(request):
            raise httpx.ConnectError("refused", request=request)

        provider = PerplexityProvider("k", http_client=_client(handler))
        assert await provider.complete([{"role": "user", "content": "hi"}]) is None


class TestTelegramTransport:
    """SUT: TelegramTransport.send_text"""

    async def test_success(self):
        seen = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, json={"ok": True, "result": {}})

        transport = TelegramTransport(http_client=_client(handler))
        result = await transport.send_text("123:abc", 42, "hello")
        assert result.ok is True
        assert seen[0].url.path == "/bot123:abc/sendMessage"
        assert json.loads(seen[0].content) == {"chat_id": 42, "text": "hello"}

    async def test_api_error(self):
        handler = lambda r: httpx.Response(400, json={"ok": False, "description": "chat not found"})
        result = await TelegramTransport(http_client=_client(handler)).send_text("t", 1, "x")
        assert result.ok is False
        assert result.error == "chat not found"

    async def test_network_error(self):
        def handler(request):
            raise httpx.ConnectError("refused", request=request)

        result = await TelegramTransport(http_client=_client(handler)).send_text("t", 1, "x")
        assert result.ok is False
