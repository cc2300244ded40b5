"""Google Business Profile actions."""

from typing import Any, Dict, Optional

from ..clients.base import BaseCompletionProvider
from ..clients.google import GoogleBusinessClient, RECONNECT_MESSAGE
from ..db.store import StoreGateway
from ..models.action import ActionContext, ActionResult
from ..services.intent_classifier import sanitize
from ..services.quota import UsageGuard
from ..utils.logger import get_app_logger


NOT_CONNECTED_MESSAGE = "❌ Google Business is not connected. Please reconnect from dashboard."
DEFAULT_REPLY_LIMIT = 5


class GoogleActions:
    """Review replies and profile updates for a connected Google location."""

    def __init__(
        self,
        client: GoogleBusinessClient,
        store: StoreGateway,
        provider: BaseCompletionProvider,
        usage_guard: UsageGuard,
        reply_max_tokens: int = 150
    ):
        self.client = client
        self.store = store
        self.provider = provider
        self.usage_guard = usage_guard
        self.reply_max_tokens = reply_max_tokens
        self.logger = get_app_logger()

    async def _access_token(self, context: ActionContext):
        """
        Strict connection check followed by a token refresh.

        Returns:
            (token, None) or (None, failure ActionResult)
        """
        if not self.client.is_connected(context.project):
            return None, ActionResult(
                success=False,
                message=NOT_CONNECTED_MESSAGE,
                error="Google not connected (strict check)"
            )

        token, error = await self.client.get_valid_access_token(context.project)
        if not token:
            return None, ActionResult(success=False, message=error or RECONNECT_MESSAGE, error=error)
        return token, None

    async def _generate_reply(self, context: ActionContext, rating: str, comment: str) -> Optional[str]:
        project = context.project
        prompt = (
            f'You are the owner of "{project.business_name}", a {project.business_category} in '
            f"{project.business_location}. Provide a polite, professional, and SEO-friendly response to "
            "the following customer review. Keep it under 3 sentences. Mention the business name organically "
            "if positive. If negative, apologize professionally and offer an offline contact path."
        )
        raw = await self.provider.complete(
            [
                {"role": "system", "content": prompt},
                {"role": "user", "content": f"Rating: {rating}\nReview Text: {comment}"},
            ],
            max_tokens=self.reply_max_tokens
        )
        if not raw or not raw.strip():
            return None
        return sanitize(raw)

    async def reply_to_reviews(self, payload: Dict[str, Any], context: ActionContext) -> ActionResult:
        """Reply to the latest unreplied reviews, up to ``payload['limit']`` (default 5)."""
        token, failure = await self._access_token(context)
        if failure:
            return failure

        project = context.project
        reviews, fetch_error = await self.client.fetch_reviews(project, token)
        if fetch_error:
            return ActionResult(success=False, message="❌ Could not fetch reviews from Google.", error=fetch_error)

        unreplied = [review for review in reviews if not review.review_reply]
        if not unreplied:
            return ActionResult(success=True, message="✅ All reviews are already replied to. No action needed.")

        limit = payload.get("limit")
        if isinstance(limit, bool) or not isinstance(limit, int):
            limit = DEFAULT_REPLY_LIMIT
        to_reply = unreplied[:max(limit, 0)]

        replied = 0
        for review in to_reply:
            decision = await self.usage_guard.check_and_track(project.id, "review_reply")
            if not decision.allowed:
                self.logger.warning(f"[Google] LLM limit reached during review replies for {project.id}, stopping")
                break

            reply_text = await self._generate_reply(context, review.star_rating, review.comment)
            if not reply_text:
                continue

            ok, _ = await self.client.reply_to_review(project, token, review.review_id, reply_text)
            if ok:
                replied += 1

        return ActionResult(
            success=True,
            message=f"✅ Replied to {replied} of {len(to_reply)} reviews successfully.",
            data={"replied_count": replied, "total_unreplied": len(unreplied)}
        )

    async def update_description(self, payload: Dict[str, Any], context: ActionContext) -> ActionResult:
        """PATCH the profile description and mirror it onto the project."""
        token, failure = await self._access_token(context)
        if failure:
            return failure

        description = payload.get("description")
        if not isinstance(description, str) or not description:
            return ActionResult(success=False, message="❌ No description provided.",
                                error="Missing description in payload")

        project = context.project
        ok, error = await self.client.update_description(project, token, description)
        if not ok:
            return ActionResult(success=False, message="❌ Failed to update business description.", error=error)

        try:
            saved = await self.store.upsert_project(project.id, {"business_description": description})
        except Exception as e:
            self.logger.error(f"[Google] Failed to store description for {project.id}: {e}")
        else:
            if not saved:
                self.logger.error(f"[Google] Failed to store description for {project.id}")

        return ActionResult(success=True, message="✅ Business description updated successfully.")
