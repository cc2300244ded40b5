"""Abstract interfaces for external collaborators."""

from abc import ABC, abstractmethod
from typing import Dict, List, Optional, Union
from pydantic import BaseModel


class SendResult(BaseModel):
    """Outcome of a chat transport send."""

    ok: bool
    error: Optional[str] = None


class BaseCompletionProvider(ABC):
    """Prompt in, text out. Fallible, no retries, quota-unaware."""

    @abstractmethod
    async def complete(
        self,
        messages: List[Dict[str, str]],
        max_tokens: Optional[int] = None
    ) -> Optional[str]:
        """
        Complete a chat-style prompt.

        Args:
            messages: List of {"role", "content"} dictionaries
            max_tokens: Optional cap on generated tokens

        Returns:
            Generated text, or None when the provider gave no usable answer
        """
        pass


class BaseChatTransport(ABC):
    """Sends text to a chat address on an external messaging platform."""

    @abstractmethod
    async def send_text(self, credential: str, address: Union[int, str], text: str) -> SendResult:
        """
        Send a text message.

        Args:
            credential: Platform credential (e.g. bot token)
            address: Chat address
            text: Message text

        Returns:
            SendResult
        """
        pass
