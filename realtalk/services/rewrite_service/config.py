"""Rewrite service configuration."""
import os
from dataclasses import dataclass
from typing import Optional

from .errors import ConfigurationError

DEFAULT_API_URL = "https://openrouter.ai/api/v1"
DEFAULT_MODEL = "mistralai/mistral-7b-instruct:free"

# Request and response limits shared with the extension
MAX_TEXT_LENGTH = 500
MAX_REWRITE_LENGTH = 280
FALLBACK_EXCERPT_LENGTH = 100


@dataclass(frozen=True)
class RewriteConfig:
    """OpenRouter chat-completion settings."""
    api_key: Optional[str] = None
    api_url: str = DEFAULT_API_URL
    model: str = DEFAULT_MODEL
    max_tokens: int = 800
    temperature: float = 0.7
    max_attempts: int = 3
    timeout_seconds: float = 30.0

    def __post_init__(self):
        if self.max_attempts < 1:
            raise ValueError(f"max_attempts must be >= 1, got {self.max_attempts}")
        if self.max_tokens < 1:
            raise ValueError(f"max_tokens must be >= 1, got {self.max_tokens}")

    @classmethod
    def from_env(cls) -> "RewriteConfig":
        """Create config from environment variables.

        Environment variables:
            OPENROUTER_API_KEY: API key (required before any LLM call)
            OPENROUTER_API_URL: OpenAI-compatible base URL
            REWRITE_MODEL: Model identifier
            REWRITE_MAX_TOKENS: Completion token limit (default 800)
            REWRITE_TEMPERATURE: Sampling temperature (default 0.7)
            REWRITE_MAX_ATTEMPTS: Attempts on HTTP 429 (default 3)
            REWRITE_TIMEOUT_SECONDS: Per-request timeout (default 30)
        """
        return cls(
            api_key=os.getenv("OPENROUTER_API_KEY") or None,
            api_url=os.getenv("OPENROUTER_API_URL", DEFAULT_API_URL),
            model=os.getenv("REWRITE_MODEL", DEFAULT_MODEL),
            max_tokens=int(os.getenv("REWRITE_MAX_TOKENS", "800")),
            temperature=float(os.getenv("REWRITE_TEMPERATURE", "0.7")),
            max_attempts=int(os.getenv("REWRITE_MAX_ATTEMPTS", "3")),
            timeout_seconds=float(os.getenv("REWRITE_TIMEOUT_SECONDS", "30")),
        )

    def require_api_key(self) -> str:
        """Return the API key.

        Raises:
            ConfigurationError: If no key is configured
        """
        if not self.api_key:
            raise ConfigurationError("OpenRouter API key not configured")
        return self.api_key
