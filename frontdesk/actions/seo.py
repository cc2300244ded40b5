"""SEO content actions."""

from typing import Any, Dict

from ..clients.base import BaseCompletionProvider
from ..models.action import ActionContext, ActionResult
from ..services.intent_classifier import sanitize
from ..services.quota import UsageGuard
from ..utils.logger import get_app_logger


LLM_LIMIT_MESSAGE = "⚠️ Daily AI usage limit reached. Please try again tomorrow."
LLM_LIMIT_ERROR = "llm_limit_exceeded"


def llm_limit_result() -> ActionResult:
    return ActionResult(success=False, message=LLM_LIMIT_MESSAGE, error=LLM_LIMIT_ERROR)


class SeoActions:
    """Generates promotional copy for a project's business."""

    def __init__(self, provider: BaseCompletionProvider, usage_guard: UsageGuard, max_tokens: int = 400):
        self.provider = provider
        self.usage_guard = usage_guard
        self.max_tokens = max_tokens
        self.logger = get_app_logger()

    async def _generate(self, project_id: str, usage_kind: str, prompt: str):
        """
        Gate and run one completion call.

        Returns:
            (text, None) on success, (None, ActionResult) when denied or failed
        """
        decision = await self.usage_guard.check_and_track(project_id, usage_kind)
        if not decision.allowed:
            return None, llm_limit_result()

        raw = await self.provider.complete([{"role": "user", "content": prompt}], max_tokens=self.max_tokens)
        if not raw or not raw.strip():
            self.logger.error(f"[SEO] {usage_kind} generation failed for project {project_id}")
            return None, None
        return sanitize(raw), None

    async def generate_post(self, payload: Dict[str, Any], context: ActionContext) -> ActionResult:
        project = context.project
        topic = payload.get("topic") if isinstance(payload.get("topic"), str) else "weekly update"
        tone = payload.get("tone") or "Professional and friendly"

        prompt = (
            "You are a social media expert for local businesses. Write an engaging, SEO-friendly "
            "promotional post for the following business. Keep it under 280 characters suitable for "
            "social media. Include a call to action. Do not use markdown. Do not use hashtags unless requested.\n\n"
            f"Business Name: {project.business_name}\n"
            f"Category: {project.business_category}\n"
            f"Location: {project.business_location}\n"
            f"Topic: {topic}\n"
            f"Tone: {tone}"
        )

        text, denied = await self._generate(project.id, "seo_post", prompt)
        if denied:
            return denied
        if text is None:
            return ActionResult(success=False, message="❌ Failed to generate post content.",
                                error="LLM call failed")

        return ActionResult(
            success=True,
            message=f"✅ Here is your generated post:\n\n{text}",
            data={"post": text, "topic": topic}
        )

    async def generate_description(self, payload: Dict[str, Any], context: ActionContext) -> ActionResult:
        project = context.project
        prompt = (
            "You are an expert SEO copywriter. Write an SEO-optimized Google Business description for "
            "the following business. Keep it under 750 characters. Include relevant keywords naturally. "
            "Do not use markdown formatting.\n\n"
            f"Business Name: {project.business_name}\n"
            f"Category: {project.business_category}\n"
            f"Location: {project.business_location}\n"
            f"Current Description: {project.business_description or 'None'}"
        )
        if payload.get("focus"):
            prompt += f"\nFocus areas: {payload['focus']}"

        text, denied = await self._generate(project.id, "seo_description", prompt)
        if denied:
            return denied
        if text is None:
            return ActionResult(success=False, message="❌ Failed to generate description. Try again later.",
                                error="LLM call failed")

        return ActionResult(
            success=True,
            message=f"✅ Here is your optimized description:\n\n{text}",
            data={"description": text}
        )

    async def suggest_keywords(self, payload: Dict[str, Any], context: ActionContext) -> ActionResult:
        project = context.project
        prompt = (
            "You are an SEO specialist. Suggest 10 high-impact local SEO keywords for the following "
            "business. Return as a numbered list. Consider local intent, service-related terms, and "
            "competitor keywords. Do not use markdown formatting.\n\n"
            f"Business Name: {project.business_name}\n"
            f"Category: {project.business_category}\n"
            f"Location: {project.business_location}\n"
            f"Description: {project.business_description or 'N/A'}"
        )
        if payload.get("focus"):
            prompt += f"\nSpecific focus: {payload['focus']}"

        text, denied = await self._generate(project.id, "seo_keywords", prompt)
        if denied:
            return denied
        if text is None:
            return ActionResult(success=False, message="❌ Failed to generate keyword suggestions.",
                                error="LLM call failed")

        return ActionResult(
            success=True,
            message=f"✅ Keyword suggestions:\n\n{text}",
            data={"keywords": text}
        )
