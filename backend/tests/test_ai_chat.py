import pytest
from langchain_core.messages import AIMessage

from services.ai_chat import (
    NOT_CONFIGURED_REPLY,
    AiChatClient,
    AiServiceError,
    default_persona_prompt,
)


class FakeLLM:
    def __init__(self, content=None, error=None):
        self.content = content
        self.error = error
        self.messages = None

    async def ainvoke(self, messages, **kwargs):
        self.messages = messages
        if self.error:
            raise self.error
        return AIMessage(content=self.content)


async def test_unconfigured_client_degrades():
    client = AiChatClient(api_key=None)
    assert client.configured is False
    assert await client.chat_with_ai("hi") == NOT_CONFIGURED_REPLY
    assert (await client.moderate_content("anything")).is_appropriate is True
    assert await client.generate_persona_prompt("bio", "sarah") == default_persona_prompt("sarah")


async def test_chat_passes_system_prompt():
    client = AiChatClient(api_key=None)
    client._chat_llm = FakeLLM(content="hey there")
    assert await client.chat_with_ai("hi", "You are Sarah.") == "hey there"
    assert client._chat_llm.messages[0].content == "You are Sarah."
    assert client._chat_llm.messages[1].content == "hi"


async def test_chat_failure_raises():
    client = AiChatClient(api_key=None)
    client._chat_llm = FakeLLM(error=RuntimeError("boom"))
    with pytest.raises(AiServiceError):
        await client.chat_with_ai("hi")


async def test_moderation_parses_verdict():
    client = AiChatClient(api_key=None)
    client._moderation_llm = FakeLLM(content='{"isAppropriate": false, "reason": "spam"}')
    verdict = await client.moderate_content("buy now")
    assert verdict.is_appropriate is False
    assert verdict.reason == "spam"


async def test_moderation_fails_open():
    client = AiChatClient(api_key=None)
    client._moderation_llm = FakeLLM(content="not json")
    assert (await client.moderate_content("hello")).is_appropriate is True


async def test_persona_prompt_falls_back_on_error():
    client = AiChatClient(api_key=None)
    client._persona_llm = FakeLLM(error=RuntimeError("down"))
    assert await client.generate_persona_prompt("bio", "sarah") == default_persona_prompt("sarah")
