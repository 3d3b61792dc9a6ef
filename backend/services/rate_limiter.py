"""
Async rate limiting and retry utilities for LLM providers.

Provider-scoped limits (xAI, OpenAI) use a token-bucket limiter with a
semaphore for burst control and RPS pacing. Calls that fail with 429s or
common transient errors are retried with exponential backoff.
"""

import asyncio
import logging
import os
import time
from contextlib import asynccontextmanager
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Dict, Optional

from enums import ModelProvider

logger = logging.getLogger(__name__)

TRANSIENT_MARKERS = (
    "timeout",
    "temporarily unavailable",
    "connection reset",
    "server error",
    "retry-after",
    "too many requests",
)


@dataclass
class ProviderLimits:
    max_concurrent: int
    requests_per_second: float
    burst: int


def _env_float(name: str, default: float) -> float:
    try:
        return float(os.getenv(name, str(default)))
    except ValueError:
        return default


def _env_int(name: str, default: int) -> int:
    try:
        return int(os.getenv(name, str(default)))
    except ValueError:
        return default


def _defaults_for_provider(provider: ModelProvider) -> ProviderLimits:
    if provider == ModelProvider.OPENAI:
        return ProviderLimits(
            max_concurrent=_env_int("LLM_OPENAI_MAX_CONCURRENT", 4),
            requests_per_second=_env_float("LLM_OPENAI_RPS", 1.0),
            burst=_env_int("LLM_OPENAI_BURST", 4),
        )
    # xAI; chat replies are user-facing
    return ProviderLimits(
        max_concurrent=_env_int("LLM_XAI_MAX_CONCURRENT", 4),
        requests_per_second=_env_float("LLM_XAI_RPS", 2.0),
        burst=_env_int("LLM_XAI_BURST", 4),
    )


class AsyncRateLimiter:
    """Async rate limiter combining concurrency and RPS pacing."""

    def __init__(self, limits: ProviderLimits):
        self._limits = limits
        self._semaphore = asyncio.Semaphore(limits.max_concurrent)
        self._lock = asyncio.Lock()
        self._allowance = float(limits.burst)
        self._last_check = time.monotonic()

    def _refill(self) -> None:
        current = time.monotonic()
        elapsed = current - self._last_check
        self._last_check = current
        self._allowance = min(
            float(self._limits.burst),
            self._allowance + elapsed * self._limits.requests_per_second,
        )

    async def _consume_token(self) -> None:
        async with self._lock:
            self._refill()
            # Wait until a token becomes available
            while self._allowance < 1.0:
                needed = 1.0 - self._allowance
                sleep_for = needed / max(self._limits.requests_per_second, 0.0001)
                await asyncio.sleep(min(sleep_for, 1.0))
                self._refill()
            self._allowance -= 1.0

    @asynccontextmanager
    async def throttle(self):
        async with self._semaphore:
            await self._consume_token()
            yield


class ProviderLimiterRegistry:
    """Process-wide registry of limiters per provider."""

    _limiters: Dict[ModelProvider, AsyncRateLimiter] = {}

    @classmethod
    def get_limiter(cls, provider: ModelProvider) -> AsyncRateLimiter:
        if provider not in cls._limiters:
            cls._limiters[provider] = AsyncRateLimiter(_defaults_for_provider(provider))
        return cls._limiters[provider]

    @classmethod
    def reset(cls) -> None:
        cls._limiters.clear()


def _retry_after_seconds(message: str) -> Optional[float]:
    # e.g. "Please retry after 3 seconds"
    for token in message.split():
        if token.isdigit():
            seconds = float(token)
            if 0 < seconds < 120:
                return seconds
    return None


async def with_retries(
    func: Callable[[], Awaitable[Any]],
    *,
    max_retries: int = _env_int("LLM_MAX_RETRIES", 3),
    base_delay: float = _env_float("LLM_RETRY_BASE_DELAY", 1.0),
    max_delay: float = _env_float("LLM_RETRY_MAX_DELAY", 15.0),
) -> Any:
    """Execute an async callable with exponential backoff on transient errors.

    Retries on HTTP 429 and common network/transient exceptions; anything
    else is re-raised immediately.
    """
    attempt = 0
    while True:
        try:
            return await func()
        except Exception as e:  # noqa: BLE001 - re-raised unless transient
            message = str(e).lower()
            is_rate_limited = "429" in message or "rate limit" in message
            is_transient = any(marker in message for marker in TRANSIENT_MARKERS)

            if not (is_rate_limited or is_transient) or attempt >= max_retries:
                raise

            attempt += 1
            delay = min(max_delay, base_delay * (2 ** (attempt - 1)))
            retry_after = _retry_after_seconds(message)
            if retry_after is not None:
                delay = max(delay, retry_after)
            logger.warning("LLM call failed (%s), retry %d in %.1fs", e, attempt, delay)
            await asyncio.sleep(delay)


async def call_with_limits(
    provider: ModelProvider,
    coro_factory: Callable[[], Awaitable[Any]],
) -> Any:
    """Run an async operation under provider-specific rate limits with retries."""
    limiter = ProviderLimiterRegistry.get_limiter(provider)

    async def _do_call() -> Any:
        async with limiter.throttle():
            return await coro_factory()

    return await with_retries(_do_call)
