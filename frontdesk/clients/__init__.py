"""Clients for external collaborators: completion provider, chat transport, Google."""

from .base import BaseCompletionProvider, BaseChatTransport, SendResult
from .perplexity import PerplexityProvider
from .telegram import TelegramTransport
from .google import GoogleBusinessClient, GoogleReview

__all__ = [
    "BaseCompletionProvider",
    "BaseChatTransport",
    "SendResult",
    "PerplexityProvider",
    "TelegramTransport",
    "GoogleBusinessClient",
    "GoogleReview",
]
