"""Action registry.

Maps action names to handlers guarded by a feature flag. The mapping is
built once and is read-only afterwards; only registered actions can run.
"""

from dataclasses import dataclass
from types import MappingProxyType
from typing import Any, Awaitable, Callable, Dict, List, Mapping

from .google import GoogleActions
from .seo import SeoActions
from ..models.action import ActionContext, ActionResult
from ..utils.logger import get_app_logger


ActionHandler = Callable[[Dict[str, Any], ActionContext], Awaitable[ActionResult]]

HANDLER_ERROR_MESSAGE = "❌ Something went wrong while executing this action. Please try again."
UNKNOWN_ACTION_MESSAGE = "❌ I don't know how to perform that action. Please try rephrasing your request."


@dataclass(frozen=True)
class ActionEntry:
    handler: ActionHandler
    required_feature: str
    description: str


class ActionRegistry:
    """Permission-guarded dispatch over a fixed set of actions."""

    def __init__(self, entries: Mapping[str, ActionEntry]):
        self._entries = MappingProxyType(dict(entries))
        self.logger = get_app_logger()

    @property
    def entries(self) -> Mapping[str, ActionEntry]:
        return self._entries

    def names(self) -> List[str]:
        return list(self._entries)

    async def execute(self, action_name: str, payload: Dict[str, Any], context: ActionContext) -> ActionResult:
        """
        Run a registered action if the project has its feature enabled.

        Args:
            action_name: Registered action name
            payload: Action parameters
            context: Project and chat the action runs for

        Returns:
            ActionResult; never raises
        """
        entry = self._entries.get(action_name)
        if entry is None:
            self.logger.warning(f'[ActionRegistry] Unknown action: "{action_name}"')
            return ActionResult(
                success=False,
                message=UNKNOWN_ACTION_MESSAGE,
                error=f"Unregistered action: {action_name}"
            )

        if not context.project.has_feature(entry.required_feature):
            self.logger.warning(
                f'[ActionRegistry] Feature "{entry.required_feature}" not enabled for action "{action_name}"'
            )
            return ActionResult(
                success=False,
                message=(
                    f'❌ This feature is not enabled for your project. Please enable "{entry.required_feature}" '
                    "in your AI builder settings to use this action."
                ),
                error=f"Feature not enabled: {entry.required_feature}"
            )

        self.logger.info(f'[ActionRegistry] Executing "{action_name}" (feature: {entry.required_feature})')
        try:
            result = await entry.handler(payload or {}, context)
        except Exception as e:
            self.logger.error(f'[ActionRegistry] Unexpected error executing "{action_name}": {e}')
            return ActionResult(success=False, message=HANDLER_ERROR_MESSAGE, error=str(e))

        self.logger.info(
            f"[ActionRegistry] Result: {'SUCCESS' if result.success else 'FAILED'} - {action_name}"
        )
        return result

    def list_actions(self) -> List[Dict[str, str]]:
        """Name, required feature and description of every registered action."""
        return [
            {"name": name, "required_feature": entry.required_feature, "description": entry.description}
            for name, entry in self._entries.items()
        ]


def build_action_registry(seo: SeoActions, google: GoogleActions) -> ActionRegistry:
    """Build the production registry."""
    return ActionRegistry({
        "reply_google_review": ActionEntry(
            handler=google.reply_to_reviews,
            required_feature="google_review_reply",
            description="Reply to unreplied Google Business reviews with AI-generated responses"
        ),
        "update_business_description": ActionEntry(
            handler=google.update_description,
            required_feature="google_review_reply",
            description="Update the Google Business profile description"
        ),
        "generate_seo_post": ActionEntry(
            handler=seo.generate_post,
            required_feature="seo_content",
            description="Generate an SEO-optimized promotional post"
        ),
        "generate_seo_description": ActionEntry(
            handler=seo.generate_description,
            required_feature="seo_content",
            description="Generate an SEO-optimized business description"
        ),
        "suggest_keywords": ActionEntry(
            handler=seo.suggest_keywords,
            required_feature="seo_content",
            description="Suggest SEO keywords for the business"
        ),
    })
