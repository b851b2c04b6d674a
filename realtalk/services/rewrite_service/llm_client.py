"""OpenRouter chat-completion client.

OpenRouter speaks the OpenAI chat-completions protocol, so the official
async OpenAI client is used with its base URL pointed at OpenRouter. The
client's own retry loop is disabled; rate-limit responses (HTTP 429) are
retried here with exponential backoff of 1s, 2s, 4s... up to the
configured number of attempts.

The Flask handlers drive each request through its own asyncio.run(), so
the HTTP client is opened and closed inside every complete() call. A
client kept across calls would hold connections bound to a closed loop.
"""
import asyncio
import logging
import time
from contextlib import asynccontextmanager
from dataclasses import dataclass
from typing import Any, AsyncIterator, Awaitable, Callable, Dict, List, Optional, Tuple

import openai

from .config import RewriteConfig
from .errors import LLMServiceError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LLMResponse:
    """Response from one chat completion."""
    text: str
    model: str
    attempts: int
    tokens_used: Optional[int] = None
    latency_ms: Optional[float] = None


class OpenRouterClient:
    """Sends a system prompt plus the user's draft to the configured model."""

    def __init__(
        self,
        config: RewriteConfig,
        client: Optional[Any] = None,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ):
        """Initialize client.

        Args:
            config: Rewrite configuration (API key is required)
            client: AsyncOpenAI-compatible client to reuse, for testing;
                by default a fresh client is opened per call
            sleep: Backoff sleep, injectable for testing

        Raises:
            ConfigurationError: If no API key is configured
        """
        self.config = config
        self._sleep = sleep
        self._client = client
        self._api_key = config.api_key if client is not None else config.require_api_key()

        logger.info(
            "LLM_CLIENT_INITIALIZED",
            extra={"model": config.model, "api_url": config.api_url}
        )

    @staticmethod
    def backoff_seconds(attempt: int) -> float:
        """Wait before retrying after the given 0-based attempt: 1, 2, 4, ..."""
        return float(2 ** attempt)

    @asynccontextmanager
    async def _session(self) -> AsyncIterator[Any]:
        if self._client is not None:
            yield self._client
            return

        async with openai.AsyncOpenAI(
            api_key=self._api_key,
            base_url=self.config.api_url,
            max_retries=0,
            timeout=self.config.timeout_seconds,
        ) as client:
            yield client

    async def complete(
        self,
        system_prompt: str,
        user_text: str,
    ) -> LLMResponse:
        """Run one chat completion.

        Args:
            system_prompt: Rendered prompt template
            user_text: The user's draft

        Returns:
            LLMResponse with the model's message content

        Raises:
            LLMServiceError: On API errors, exhausted rate-limit retries or
                an empty answer
        """
        messages = [
            {"role": "system", "content": system_prompt},
            {"role": "user", "content": user_text},
        ]
        start_time = time.perf_counter()

        async with self._session() as client:
            response, attempts = await self._create_with_retries(client, messages)

        content = response.choices[0].message.content if response.choices else None
        if not content:
            raise LLMServiceError("No response from OpenRouter")

        latency_ms = (time.perf_counter() - start_time) * 1000
        tokens_used = response.usage.total_tokens if response.usage else None

        logger.info(
            "LLM_GENERATION_SUCCESSFUL",
            extra={
                "model": self.config.model,
                "latency_ms": latency_ms,
                "tokens_used": tokens_used,
                "attempts": attempts,
            }
        )

        return LLMResponse(
            text=content,
            model=self.config.model,
            attempts=attempts,
            tokens_used=tokens_used,
            latency_ms=latency_ms,
        )

    async def _create_with_retries(self, client: Any, messages: List[Dict[str, str]]) -> Tuple[Any, int]:
        attempt = 0
        while True:
            try:
                response = await client.chat.completions.create(
                    model=self.config.model,
                    messages=messages,
                    max_tokens=self.config.max_tokens,
                    temperature=self.config.temperature,
                )
                return response, attempt + 1
            except openai.RateLimitError as e:
                if attempt >= self.config.max_attempts - 1:
                    logger.warning(
                        "LLM_RATE_LIMIT_EXHAUSTED",
                        extra={"model": self.config.model, "attempts": attempt + 1}
                    )
                    raise LLMServiceError("Rate limited by OpenRouter", status_code=429) from e

                wait = self.backoff_seconds(attempt)
                logger.info(
                    "LLM_RATE_LIMITED_RETRYING",
                    extra={
                        "wait_seconds": wait,
                        "attempt": attempt + 1,
                        "max_attempts": self.config.max_attempts,
                    }
                )
                await self._sleep(wait)
                attempt += 1
            except openai.APIStatusError as e:
                logger.error(
                    "LLM_API_ERROR",
                    extra={"model": self.config.model, "status_code": e.status_code}
                )
                raise LLMServiceError(f"OpenRouter API error: {e.status_code}", status_code=e.status_code) from e
            except openai.APIError as e:
                logger.error(
                    "LLM_REQUEST_FAILED",
                    extra={"model": self.config.model, "error_type": type(e).__name__}
                )
                raise LLMServiceError(f"OpenRouter request failed: {e}") from e
