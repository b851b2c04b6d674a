"""Rewrite Service: risk-aware rewrites and Smooth It suggestions.

Uses the risk assessment to choose a rewrite mode, sends the matching
prompt to an OpenRouter-hosted model, validates the answer and falls back
to templated rewrites whenever the model fails.

Components:
- prompts.py: Mode selection, slot labels, prompt templates
- llm_client.py: OpenRouter chat-completion client with 429 backoff
- rewrites.py: Validation of model answers
- fallback.py: Deterministic templated rewrites
- service.py: RewriteService orchestration (quota, assessment, model, fallback)
- handler.py: Flask HTTP endpoints (/rewrite, /smooth)
"""

from .config import RewriteConfig
from .errors import (
    RewriteServiceError,
    ConfigurationError,
    LLMServiceError,
    InvalidRewriteResponse,
    RewriteValidationError,
)
from .prompts import (
    RewriteMode,
    select_rewrite_mode,
    build_rewrite_prompt,
    build_smooth_prompt,
    tone_from_slider,
    labels_for,
)
from .rewrites import Rewrite, parse_rewrites, parse_smoothed_text
from .fallback import fallback_rewrites, fallback_smooth
from .llm_client import OpenRouterClient, LLMResponse
from .service import (
    RewriteService,
    RewriteRequest,
    SmoothRequest,
    RewriteResult,
    SmoothResult,
)

__all__ = [
    "RewriteConfig",
    "RewriteServiceError",
    "ConfigurationError",
    "LLMServiceError",
    "InvalidRewriteResponse",
    "RewriteValidationError",
    "RewriteMode",
    "select_rewrite_mode",
    "build_rewrite_prompt",
    "build_smooth_prompt",
    "tone_from_slider",
    "labels_for",
    "Rewrite",
    "parse_rewrites",
    "parse_smoothed_text",
    "fallback_rewrites",
    "fallback_smooth",
    "OpenRouterClient",
    "LLMResponse",
    "RewriteService",
    "RewriteRequest",
    "SmoothRequest",
    "RewriteResult",
    "SmoothResult",
]
