"""Perplexity chat-completions client."""

from typing import Dict, List, Optional

import httpx

from .base import BaseCompletionProvider
from ..utils.logger import get_app_logger


class PerplexityProvider(BaseCompletionProvider):
    """Completion provider backed by the Perplexity chat-completions API."""

    def __init__(
        self,
        api_key: Optional[str],
        api_base: str = "https://api.perplexity.ai",
        model: str = "sonar",
        temperature: float = 0.7,
        timeout: float = 20.0,
        http_client: Optional[httpx.AsyncClient] = None
    ):
        self.api_key = api_key
        self.api_base = api_base.rstrip("/")
        self.model = model
        self.temperature = temperature
        self.timeout = timeout
        self._client = http_client
        self.logger = get_app_logger()

    async def complete(
        self,
        messages: List[Dict[str, str]],
        max_tokens: Optional[int] = None
    ) -> Optional[str]:
        if not self.api_key:
            self.logger.error("[Perplexity] No API key configured")
            return None

        body = {
            "model": self.model,
            "messages": messages,
            "max_tokens": max_tokens or 500,
            "temperature": self.temperature,
        }
        headers = {"Authorization": f"Bearer {self.api_key}"}
        url = f"{self.api_base}/chat/completions"

        try:
            if self._client is not None:
                response = await self._client.post(url, json=body, headers=headers, timeout=self.timeout)
            else:
                async with httpx.AsyncClient(timeout=self.timeout) as client:
                    response = await client.post(url, json=body, headers=headers)
        except httpx.HTTPError as e:
            self.logger.error(f"[Perplexity] Request failed: {e}")
            return None

        if response.status_code != 200:
            self.logger.error(f"[Perplexity] Error {response.status_code}: {response.text[:200]}")
            return None

        try:
            data = response.json()
            content = data["choices"][0]["message"]["content"]
        except (ValueError, KeyError, IndexError, TypeError) as e:
            self.logger.error(f"[Perplexity] Malformed response body: {e}")
            return None

        if not isinstance(content, str) or not content.strip():
            return None
        return content
