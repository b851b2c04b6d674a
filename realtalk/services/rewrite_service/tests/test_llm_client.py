"""Tests for the OpenRouter chat-completion client."""
from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock, patch

import httpx
import openai
import pytest

from realtalk.services.rewrite_service.config import RewriteConfig
from realtalk.services.rewrite_service.errors import ConfigurationError, LLMServiceError
from realtalk.services.rewrite_service.llm_client import OpenRouterClient

API_URL = "https://openrouter.ai/api/v1/chat/completions"


def make_completion(content, total_tokens=42):
    """Chat-completion response shaped like the OpenAI client's."""
    return SimpleNamespace(
        choices=[SimpleNamespace(message=SimpleNamespace(content=content))],
        usage=SimpleNamespace(total_tokens=total_tokens),
    )


def _status_error(cls, status_code):
    response = httpx.Response(status_code, request=httpx.Request("POST", API_URL))
    return cls(f"HTTP {status_code}", response=response, body=None)


@pytest.fixture
def openai_client():
    client = MagicMock()
    client.chat.completions.create = AsyncMock()
    return client


@pytest.fixture
def sleep():
    return AsyncMock()


@pytest.fixture
def llm(openai_client, sleep):
    return OpenRouterClient(RewriteConfig(api_key="sk-test"), client=openai_client, sleep=sleep)


class TestConstruction:
    """Tests for client construction."""

    def test_missing_api_key(self):
        with pytest.raises(ConfigurationError):
            OpenRouterClient(RewriteConfig(api_key=None))

    def test_no_client_opened_at_construction(self):
        """The HTTP client is only opened inside a completion call."""
        with patch("realtalk.services.rewrite_service.llm_client.openai.AsyncOpenAI") as async_openai:
            OpenRouterClient(RewriteConfig(api_key="sk-test"))

        async_openai.assert_not_called()

    @pytest.mark.asyncio
    async def test_fresh_client_per_call(self, openai_client):
        """Each call opens and closes its own client pointed at OpenRouter."""
        openai_client.chat.completions.create.return_value = make_completion("hello")
        with patch("realtalk.services.rewrite_service.llm_client.openai.AsyncOpenAI") as async_openai:
            async_openai.return_value.__aenter__.return_value = openai_client
            llm = OpenRouterClient(RewriteConfig(api_key="sk-test", timeout_seconds=12))

            await llm.complete("system", "first")
            await llm.complete("system", "second")

        assert async_openai.call_count == 2
        assert async_openai.return_value.__aexit__.await_count == 2
        kwargs = async_openai.call_args.kwargs
        assert kwargs["api_key"] == "sk-test"
        assert kwargs["base_url"] == "https://openrouter.ai/api/v1"
        assert kwargs["max_retries"] == 0
        assert kwargs["timeout"] == 12

    def test_backoff_doubles(self):
        assert [OpenRouterClient.backoff_seconds(n) for n in range(3)] == [1.0, 2.0, 4.0]


class TestComplete:
    """Tests for a single completion call."""

    @pytest.mark.asyncio
    async def test_success(self, llm, openai_client):
        openai_client.chat.completions.create.return_value = make_completion("hello")

        response = await llm.complete("system prompt", "draft text")

        assert response.text == "hello"
        assert response.attempts == 1
        assert response.tokens_used == 42
        kwargs = openai_client.chat.completions.create.call_args.kwargs
        assert kwargs["model"] == "mistralai/mistral-7b-instruct:free"
        assert kwargs["max_tokens"] == 800
        assert kwargs["temperature"] == 0.7
        assert kwargs["messages"] == [
            {"role": "system", "content": "system prompt"},
            {"role": "user", "content": "draft text"},
        ]

    @pytest.mark.asyncio
    async def test_retries_rate_limit_with_backoff(self, llm, openai_client, sleep):
        """Rate limits should be retried with doubling backoff."""
        openai_client.chat.completions.create.side_effect = [
            _status_error(openai.RateLimitError, 429),
            _status_error(openai.RateLimitError, 429),
            make_completion("third time lucky"),
        ]

        response = await llm.complete("system", "draft")

        assert response.text == "third time lucky"
        assert response.attempts == 3
        assert [c.args[0] for c in sleep.await_args_list] == [1.0, 2.0]

    @pytest.mark.asyncio
    async def test_rate_limit_exhausted(self, llm, openai_client, sleep):
        openai_client.chat.completions.create.side_effect = _status_error(openai.RateLimitError, 429)

        with pytest.raises(LLMServiceError) as exc_info:
            await llm.complete("system", "draft")

        assert exc_info.value.status_code == 429
        assert openai_client.chat.completions.create.await_count == 3
        assert sleep.await_count == 2

    @pytest.mark.asyncio
    async def test_other_status_errors_are_not_retried(self, llm, openai_client, sleep):
        """Non rate-limit status errors should fail at once."""
        openai_client.chat.completions.create.side_effect = _status_error(openai.InternalServerError, 500)

        with pytest.raises(LLMServiceError) as exc_info:
            await llm.complete("system", "draft")

        assert exc_info.value.status_code == 500
        assert openai_client.chat.completions.create.await_count == 1
        sleep.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_connection_error(self, llm, openai_client):
        openai_client.chat.completions.create.side_effect = openai.APIConnectionError(
            request=httpx.Request("POST", API_URL)
        )

        with pytest.raises(LLMServiceError):
            await llm.complete("system", "draft")

    @pytest.mark.asyncio
    async def test_empty_content(self, llm, openai_client):
        """An empty completion should be treated as a service error."""
        openai_client.chat.completions.create.return_value = make_completion(None)

        with pytest.raises(LLMServiceError):
            await llm.complete("system", "draft")
