"""
LLM-backed persona chat, moderation and persona prompt generation.

Without an API key every call degrades gracefully: chat returns a fixed
"not configured" reply, moderation allows everything and prompt generation
falls back to a template.
"""

import json
import logging
from dataclasses import dataclass
from typing import Optional

from langchain_core.messages import HumanMessage, SystemMessage

from config import Settings
from enums import ModelProvider
from services.llm import create_llm

logger = logging.getLogger(__name__)

NOT_CONFIGURED_REPLY = (
    "AI chat is not configured. Please set XAI_API_KEY environment variable to enable AI features."
)
EMPTY_REPLY = "Sorry, I couldn't process that message."
DEFAULT_SYSTEM_PROMPT = (
    "You are a flirty and engaging AI assistant. Respond in character with a playful, confident tone."
)
MODERATION_PROMPT = (
    "You are a content moderation assistant. Analyze the provided content and determine if it "
    'violates platform policies. Respond with JSON format: {"isAppropriate": boolean, "reason": string}'
)
PERSONA_PROMPT = (
    "Generate a system prompt for an AI chatbot that will roleplay as a content creator. "
    "The prompt should be engaging, flirty, and appropriate for an adult platform. "
    "Keep it under 200 words."
)


class AiServiceError(Exception):
    """The chat provider failed to produce a reply."""


@dataclass
class ModerationResult:
    is_appropriate: bool
    reason: Optional[str] = None


def default_persona_prompt(handle: str) -> str:
    return (
        f"You are {handle}, a charismatic content creator. "
        "Respond in character with a flirty, engaging tone."
    )


class AiChatClient:
    def __init__(
        self,
        provider: ModelProvider = ModelProvider.XAI,
        api_key: Optional[str] = None,
        model: str = "grok-2-1212",
    ):
        self.configured = bool(api_key)
        if not self.configured:
            self._chat_llm = self._moderation_llm = self._persona_llm = None
            return

        self._chat_llm = create_llm(
            provider,
            api_key,
            model,
            temperature=0.9,
            max_tokens=500,
            top_p=0.95,
            frequency_penalty=0.1,
            presence_penalty=0.1,
        )
        self._moderation_llm = create_llm(provider, api_key, model).bind(
            response_format={"type": "json_object"}
        )
        self._persona_llm = create_llm(provider, api_key, model, temperature=0.7, max_tokens=300)

    @classmethod
    def from_settings(cls, settings: Settings) -> "AiChatClient":
        return cls(settings.ai_provider, settings.ai_api_key, settings.ai_model)

    async def chat_with_ai(
        self, user_message: str, system_prompt: str = DEFAULT_SYSTEM_PROMPT
    ) -> str:
        """
        Get an in-character reply.

        Raises:
            AiServiceError: The provider call failed after retries
        """
        if not self._chat_llm:
            return NOT_CONFIGURED_REPLY

        try:
            response = await self._chat_llm.ainvoke(
                [SystemMessage(content=system_prompt), HumanMessage(content=user_message)]
            )
        except Exception as e:
            logger.error("AI chat request failed: %s", e)
            raise AiServiceError("Failed to get AI response") from e
        return response.content or EMPTY_REPLY

    async def moderate_content(self, content: str) -> ModerationResult:
        """Classify content. Fails open: unconfigured or failed moderation allows the content."""
        if not self._moderation_llm:
            return ModerationResult(is_appropriate=True)

        try:
            response = await self._moderation_llm.ainvoke(
                [SystemMessage(content=MODERATION_PROMPT), HumanMessage(content=content)]
            )
            verdict = json.loads(response.content or '{"isAppropriate": true}')
        except Exception as e:
            logger.warning("Content moderation failed, allowing content: %s", e)
            return ModerationResult(is_appropriate=True)
        return ModerationResult(
            is_appropriate=bool(verdict.get("isAppropriate", True)),
            reason=verdict.get("reason"),
        )

    async def generate_persona_prompt(self, bio: str, handle: str) -> str:
        if not self._persona_llm:
            return default_persona_prompt(handle)

        try:
            response = await self._persona_llm.ainvoke(
                [
                    SystemMessage(content=PERSONA_PROMPT),
                    HumanMessage(content=f"Creator handle: {handle}\nBio: {bio}"),
                ]
            )
        except Exception as e:
            logger.warning("Persona prompt generation failed for %s: %s", handle, e)
            return default_persona_prompt(handle)
        return response.content or default_persona_prompt(handle)
