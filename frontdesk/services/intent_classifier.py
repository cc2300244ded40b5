"""Intent classification.

Status questions are matched locally and never reach the completion provider.
Everything else goes to the provider, which is asked for a bare JSON object;
its answer is parsed through an ordered fallback ladder so that a malformed
or empty answer always degrades to a safe chat reply.
"""

import json
import re
from typing import Any, Dict, Iterable, List, Optional, Sequence

from ..clients.base import BaseCompletionProvider
from ..db.database_models import ProjectDO
from ..models.intent import ActionIntent, ChatIntent, Intent, QueryKind, SystemQueryIntent
from ..utils.logger import get_app_logger


MAX_REPLY_CHARS = 4000
DEFAULT_GREETING = "Thanks for your message! I'm here to help."
NO_ANSWER_MESSAGE = "Thanks for your message! We'll get back to you shortly."

INTENT_TYPES = ("chat", "action", "system_query")

# Skill instructions appended to the system prompt per enabled feature
FEATURE_PROMPTS: Dict[str, str] = {
    "auto_lead_reply":
        "When a user shows interest, collect their name and preferred visit time. Convert leads into walk-ins.",
    "trial_booking":
        "Guide the user to book a free trial. Ask for name, preferred date and time.",
    "follow_up_reminder":
        "If interested but not ready, suggest following up.",
    "seo_content":
        "If asked for promotional content, generate engaging copy.",
    "renewal_reminder":
        "Help with membership renewal inquiries.",
    "google_review_reply":
        'If the user asks to reply to Google reviews, classify as action with action "reply_google_review".',
}

# === Sanitization ===

_CITATION = re.compile(r"\[\d+\]")
_CODE_BLOCK = re.compile(r"```[\s\S]*?```")
_BOLD = re.compile(r"\*\*(.*?)\*\*")
_UNDERLINE = re.compile(r"__(.*?)__")
_ITALIC_STAR = re.compile(r"\*(.*?)\*")
_ITALIC_UNDERSCORE = re.compile(r"_(.*?)_")
_INLINE_CODE = re.compile(r"`([^`]*)`")
_LINK = re.compile(r"\[([^\]]+)\]\([^)]+\)")
_SPACES = re.compile(r"  +")
_BLANK_LINES = re.compile(r"\n{3,}")

_STRIP_STEPS = (
    (_CITATION, ""),
    (_CODE_BLOCK, ""),
    (_BOLD, r"\1"),
    (_UNDERLINE, r"\1"),
    (_ITALIC_STAR, r"\1"),
    (_ITALIC_UNDERSCORE, r"\1"),
    (_INLINE_CODE, r"\1"),
    (_LINK, r"\1"),
    (_SPACES, " "),
    (_BLANK_LINES, "\n\n"),
)


def sanitize(text: Optional[str]) -> str:
    """
    Make provider text safe to show on a plain-text chat.

    Every strip step only ever shortens the text, so repeating the steps
    until nothing changes terminates, and the result is idempotent.

    Args:
        text: Raw text

    Returns:
        Cleaned text, never empty
    """
    current = text or ""
    while True:
        stripped = current
        for pattern, replacement in _STRIP_STEPS:
            stripped = pattern.sub(replacement, stripped)
        if stripped == current:
            break
        current = stripped

    current = current.strip()[:MAX_REPLY_CHARS].strip()
    return current or DEFAULT_GREETING


# === Local system-query detection ===

SYSTEM_QUERY_PATTERNS: Sequence = (
    (re.compile(r"\b(google|gbp|business profile)\b.*\b(connect|status|linked|active)", re.I), QueryKind.GOOGLE_STATUS),
    (re.compile(r"\b(is|check)\b.*\bgoogle\b.*\bconnect", re.I), QueryKind.GOOGLE_STATUS),
    (re.compile(r"\b(telegram|bot)\b.*\b(connect|status|active|linked)", re.I), QueryKind.TELEGRAM_STATUS),
    (re.compile(r"\b(is|check)\b.*\b(telegram|bot)\b.*\b(connect|active)", re.I), QueryKind.TELEGRAM_STATUS),
    (re.compile(r"\b(how many (actions?|requests?|credits?)|actions? (left|remaining)|usage|quota|(rate|daily|action) limits?)\b", re.I), QueryKind.USAGE_STATUS),
    (re.compile(r"\b(why can.?t|can.?t .* (reply|action|execute))\b", re.I), QueryKind.USAGE_STATUS),
    (re.compile(r"\b(feature|features|enabled|what.*feature|which.*feature)\b", re.I), QueryKind.FEATURE_STATUS),
    (re.compile(r"\b(system status|full status|connection status|status check|all connections|my status)\b", re.I), QueryKind.FULL_STATUS),
    (re.compile(r"^\s*(status|system|diagnostics?)\s*[?!.]*\s*$", re.I), QueryKind.FULL_STATUS),
)


def detect_system_query(message: str) -> Optional[SystemQueryIntent]:
    """Match a status question locally; first pattern wins."""
    for pattern, query in SYSTEM_QUERY_PATTERNS:
        if pattern.search(message or ""):
            return SystemQueryIntent(query=query)
    return None


# === Provider response parsing ===

_FENCE = re.compile(r"```(?:json)?\s*([\s\S]*?)```")
_LEAD_TAG = re.compile(r"\[LEAD_ACTION:\s*\{[^}]*\}\]")
_FOLLOWUP_TAG = re.compile(r"\[FOLLOWUP_ACTION:\s*(\{[^}]*\})\]")


def _extract_json_candidate(raw: str) -> str:
    """Drop one code fence and any prose around the outermost braces."""
    text = raw.strip()

    fenced = _FENCE.search(text)
    if fenced:
        text = fenced.group(1).strip()

    first = text.find("{")
    last = text.rfind("}")
    if first != -1 and last > first:
        text = text[first:last + 1]
    return text


def _recover_plain_text(raw: str) -> ChatIntent:
    """Treat an unparseable answer as chat text, stripping legacy action tags."""
    follow_up = None
    for body in _FOLLOWUP_TAG.findall(raw):
        try:
            candidate = json.loads(body)
        except ValueError:
            continue
        if isinstance(candidate, dict):
            follow_up = candidate

    cleaned = _FOLLOWUP_TAG.sub("", _LEAD_TAG.sub("", raw)).strip()
    return ChatIntent(message=sanitize(cleaned), follow_up=follow_up)


def _clean_message(value: Any) -> Optional[str]:
    if isinstance(value, str) and value.strip():
        return sanitize(value)
    return None


def parse_intent_response(raw: str) -> Intent:
    """
    Parse provider output into an Intent.

    Args:
        raw: Non-empty provider text

    Returns:
        The parsed intent, or a chat intent when the output is unusable
    """
    logger = get_app_logger()

    try:
        parsed = json.loads(_extract_json_candidate(raw))
    except ValueError:
        logger.warning("[Intent] JSON parse failed - falling back to plain chat")
        return _recover_plain_text(raw)

    if not isinstance(parsed, dict) or parsed.get("type") not in INTENT_TYPES:
        logger.warning("[Intent] Invalid type - falling back to chat")
        return _recover_plain_text(raw)

    kind = parsed["type"]
    message = _clean_message(parsed.get("message"))

    if kind == "system_query":
        try:
            query = QueryKind(parsed.get("query"))
        except ValueError:
            query = QueryKind.FULL_STATUS
        return SystemQueryIntent(query=query, message=message)

    if kind == "action":
        action = parsed.get("action")
        if not isinstance(action, str) or not action.strip():
            logger.warning("[Intent] Action type but no action name - falling back to chat")
            return ChatIntent(message=message or sanitize(raw))
        payload = parsed.get("payload")
        return ActionIntent(
            action=action.strip(),
            payload=payload if isinstance(payload, dict) else {},
            message=message
        )

    return ChatIntent(message=message)


# === Prompt building ===

def build_system_prompt(project: ProjectDO, action_names: Iterable[str]) -> str:
    """
    Build the persona + response-format prompt for a project.

    Only business fields and feature flags are used; credentials never enter
    the prompt.

    Args:
        project: Project configuration
        action_names: Registered action names the provider may choose from

    Returns:
        System prompt text
    """
    skills = "\n".join(
        f"- {FEATURE_PROMPTS[feature]}"
        for feature in (project.enabled_features or [])
        if feature in FEATURE_PROMPTS
    )
    actions = ", ".join(f'"{name}"' for name in action_names)
    queries = ", ".join(f'"{kind.value}"' for kind in QueryKind)
    persona = f' Your name is {project.ai_name}.' if project.ai_name else ""

    prompt = f"""You are the AI assistant for "{project.business_name}", a {project.business_category} business in {project.business_location}.{persona}
About: {project.business_description or 'A professional local business.'}
Rules: Speak as the business ("we"). Be friendly, concise (2-4 sentences). Never say you are AI.

CRITICAL INSTRUCTION - RESPONSE FORMAT:
You MUST ALWAYS respond with a valid JSON object and NOTHING else. No text before or after the JSON.

The JSON must have this exact structure:
{{
  "type": "chat" or "action" or "system_query",
  "action": null or one of: {actions},
  "payload": {{}},
  "message": "your conversational reply here",
  "query": null or one of: {queries}
}}

Rules for choosing type:
- If the user is making general conversation, asking questions, or chatting, use type "chat" with action null.
- If the user explicitly asks to perform an external action (reply to reviews, update profile, generate SEO content, etc.), use type "action" with the appropriate action name.
- If the user asks about system status, connection status, enabled features, remaining actions, or integration health, use type "system_query" with the appropriate query value.
  - "google_status" for Google connection questions
  - "telegram_status" for Telegram/bot connection questions
  - "usage_status" for action count, remaining actions, or rate limit questions
  - "feature_status" for enabled feature questions
  - "full_status" for general system, status, or overview questions
- The "message" field should ALWAYS contain a human-friendly response.
- For actions, set "payload" with relevant parameters extracted from the user message.
- Do NOT use markdown formatting like ** or __ in the message field. Plain text only.
- Do NOT include citations like [1]. Plain text only."""

    if skills:
        prompt += f"\n\nSkills:\n{skills}"
    return prompt


class IntentClassifier:
    """Turns a user message into an Intent, locally when possible."""

    def __init__(
        self,
        provider: BaseCompletionProvider,
        history_window: int = 10,
        max_tokens: int = 500
    ):
        """
        Args:
            provider: Completion provider used when no local pattern matches
            history_window: Number of most recent turns sent to the provider
            max_tokens: Token cap for the classification call
        """
        self.provider = provider
        self.history_window = history_window
        self.max_tokens = max_tokens
        self.logger = get_app_logger()

    def _history_messages(self, history: List[Dict[str, str]]) -> List[Dict[str, str]]:
        recent = history[-self.history_window:] if self.history_window > 0 else []
        return [
            {"role": turn["role"], "content": turn["content"]}
            for turn in recent
            if isinstance(turn, dict)
            and turn.get("role") in ("user", "assistant")
            and isinstance(turn.get("content"), str)
        ]

    async def classify(
        self,
        system_prompt: str,
        history: List[Dict[str, str]],
        user_message: str
    ) -> Intent:
        """
        Classify one inbound message.

        Args:
            system_prompt: Prompt from build_system_prompt
            history: Stored transcript, oldest first
            user_message: Inbound text

        Returns:
            Intent
        """
        detected = detect_system_query(user_message)
        if detected:
            self.logger.info(f"[Intent] System query detected locally: {detected.query.value}")
            return detected

        messages = [{"role": "system", "content": system_prompt}]
        messages.extend(self._history_messages(history))
        messages.append({"role": "user", "content": user_message})

        try:
            raw = await self.provider.complete(messages, max_tokens=self.max_tokens)
        except Exception as e:
            self.logger.error(f"[Intent] Completion provider failed: {e}")
            raw = None

        if not raw or not raw.strip():
            return ChatIntent(message=NO_ANSWER_MESSAGE)

        return parse_intent_response(raw)
