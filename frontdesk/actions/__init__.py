"""Action handlers and the registry that guards them."""

from .google import GoogleActions
from .registry import ActionEntry, ActionRegistry, build_action_registry
from .seo import SeoActions

__all__ = ["ActionEntry", "ActionRegistry", "build_action_registry", "GoogleActions", "SeoActions"]
