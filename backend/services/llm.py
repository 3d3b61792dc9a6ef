"""
Chat model construction. Every model handed out is wrapped so its calls go
through the provider rate limiter and retry policy.
"""

from typing import Any

from langchain_openai import ChatOpenAI

from enums import ModelProvider
from services.rate_limiter import call_with_limits


class RateLimitedModel:
    """Wraps a chat model or bound runnable; ainvoke is throttled per provider."""

    def __init__(self, provider: ModelProvider, runnable: Any):
        self.provider = provider
        self._runnable = runnable

    def bind(self, **kwargs) -> "RateLimitedModel":
        # e.g. response_format for JSON moderation verdicts
        return RateLimitedModel(self.provider, self._runnable.bind(**kwargs))

    async def ainvoke(self, *args, **kwargs):
        return await call_with_limits(
            self.provider, lambda: self._runnable.ainvoke(*args, **kwargs)
        )


def create_llm(
    provider: ModelProvider,
    api_key: str,
    model: str,
    temperature: float = 0.3,
    **model_kwargs,
) -> RateLimitedModel:
    """Create a rate-limited chat model. Both providers speak the OpenAI chat API;
    xAI only differs by base URL."""
    match provider:
        case ModelProvider.XAI | ModelProvider.OPENAI:
            base_llm = ChatOpenAI(
                model=model,
                temperature=temperature,
                api_key=api_key,
                base_url=provider.base_url(),
                **model_kwargs,
            )
        case _:
            raise ValueError(f"Unknown model provider: {provider}")

    return RateLimitedModel(provider, base_llm)
