"""API v1 package."""

from .actions import router as actions_router
from .telegram import router as telegram_router

__all__ = ["actions_router", "telegram_router"]
