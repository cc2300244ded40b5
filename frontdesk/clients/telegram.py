"""Telegram Bot API transport."""

from typing import Optional, Union

import httpx

from .base import BaseChatTransport, SendResult
from ..utils.logger import get_app_logger


class TelegramTransport(BaseChatTransport):
    """
    Sends messages through the Bot API.

    The webhook normally answers inside the HTTP response, so this is used for
    the ``send`` reply mode and for out-of-band sends (follow-ups, summaries).
    """

    def __init__(
        self,
        api_base: str = "https://api.telegram.org",
        timeout: float = 10.0,
        http_client: Optional[httpx.AsyncClient] = None
    ):
        self.api_base = api_base.rstrip("/")
        self.timeout = timeout
        self._client = http_client
        self.logger = get_app_logger()

    async def send_text(
        self,
        credential: str,
        address: Union[int, str],
        text: str,
        parse_mode: str = ""
    ) -> SendResult:
        body = {"chat_id": address, "text": text}
        if parse_mode:
            body["parse_mode"] = parse_mode
        url = f"{self.api_base}/bot{credential}/sendMessage"

        try:
            if self._client is not None:
                response = await self._client.post(url, json=body, timeout=self.timeout)
            else:
                async with httpx.AsyncClient(timeout=self.timeout) as client:
                    response = await client.post(url, json=body)
            data = response.json()
        except (httpx.HTTPError, ValueError) as e:
            self.logger.error(f"[Telegram] sendMessage error: {e}")
            return SendResult(ok=False, error="Network error sending Telegram message")

        if not isinstance(data, dict) or not data.get("ok"):
            description = (data.get("description") if isinstance(data, dict) else None) or "Unknown Telegram error"
            self.logger.error(f"[Telegram] sendMessage failed: {description}")
            return SendResult(ok=False, error=description)

        return SendResult(ok=True)
