"""Services package."""

from .activity_logger import ActivityLogger
from .intent_classifier import IntentClassifier, build_system_prompt, sanitize
from .quota import RateLimiter, UsageGuard, WindowedQuota, WindowRule
from .system_state import SystemStateReporter

__all__ = [
    "ActivityLogger",
    "IntentClassifier",
    "build_system_prompt",
    "sanitize",
    "RateLimiter",
    "UsageGuard",
    "WindowedQuota",
    "WindowRule",
    "SystemStateReporter",
]
