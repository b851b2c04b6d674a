"""Rewrite orchestration.

Flow for a rewrite request:
1. Validate the draft and user id
2. Reserve one request from the user's monthly quota (atomic check and count)
3. Assess risk and pick a rewrite mode (panic > explicit scenario > assessment)
4. Ask the model for three rewrites and validate the answer
5. Fall back to templated rewrites on any model or parse failure
   (the reserved request stays counted)

Smoothing follows the same flow for a single message, with the tone taken
from the slider or from the politeness analyzer.

No PII in logs: user ids are hashed, drafts are fingerprinted.
"""
import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional, Tuple

from realtalk.shared.models import RiskAssessment, Tone
from realtalk.shared.utils import hash_pii, hash_text_for_audit
from realtalk.services.risk_service import RiskAssessor
from realtalk.services.usage_service import UsageLedger, UsageStatus
from .config import MAX_TEXT_LENGTH, RewriteConfig
from .errors import InvalidRewriteResponse, LLMServiceError, RewriteValidationError
from .fallback import fallback_rewrites, fallback_smooth
from .llm_client import OpenRouterClient
from .prompts import (
    TONE_SLIDER_VALUES,
    TONE_SMOOTH_MODES,
    RewriteMode,
    build_rewrite_prompt,
    build_smooth_prompt,
    labels_for,
    resolve_requested_mode,
    select_rewrite_mode,
    tone_from_slider,
)
from .rewrites import Rewrite, parse_rewrites, parse_smoothed_text

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RewriteRequest:
    """A request for three rewrites of a draft."""
    text: Any
    user_id: Any
    platform: str = "general"
    scenario_type: Optional[str] = None
    panic: bool = False
    url: Optional[str] = None


@dataclass(frozen=True)
class SmoothRequest:
    """A request for one smoothed version of a draft."""
    text: Any
    user_id: Any
    tone_value: Optional[Any] = None
    platform: str = "general"


@dataclass(frozen=True)
class RewriteResult:
    """Three rewrites plus everything the popup needs to label them."""
    rewrites: Tuple[Rewrite, Rewrite, Rewrite]
    mode: RewriteMode
    platform: str
    assessment: RiskAssessment
    usage: UsageStatus
    fallback: bool = False

    @property
    def labels(self) -> Dict[str, Dict[str, str]]:
        return labels_for(self.mode)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "rewrites": [rewrite.to_dict() for rewrite in self.rewrites],
            "mode": self.mode.value,
            "platform": self.platform,
            "labels": self.labels,
            "risk": self.assessment.to_dict(),
            "usage": self.usage.to_dict(),
            "fallback": self.fallback,
        }


@dataclass(frozen=True)
class SmoothResult:
    """One smoothed message."""
    smoothed_text: str
    original_text: str
    tone: Tone
    tone_value: float
    mode: RewriteMode
    platform: str
    usage: UsageStatus
    fallback: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return {
            "smoothed_text": self.smoothed_text,
            "original_text": self.original_text,
            "tone": self.tone.value,
            "tone_value": self.tone_value,
            "mode": self.mode.value,
            "platform": self.platform,
            "usage": self.usage.to_dict(),
            "fallback": self.fallback,
        }


def validate_draft(text: Any, user_id: Any) -> None:
    """Reject empty or oversized drafts and missing user ids.

    Raises:
        RewriteValidationError: With the message shown to the user
    """
    if not isinstance(text, str) or not text:
        raise RewriteValidationError("Text is required")
    if len(text) > MAX_TEXT_LENGTH:
        raise RewriteValidationError(f"Text must be {MAX_TEXT_LENGTH} characters or less")
    if not isinstance(user_id, str) or not user_id.strip():
        raise RewriteValidationError("User ID is required")


class RewriteService:
    """Turns drafts into safer rewrites and smoothed messages."""

    def __init__(
        self,
        config: Optional[RewriteConfig] = None,
        ledger: Optional[UsageLedger] = None,
        assessor: Optional[RiskAssessor] = None,
        llm_client: Optional[OpenRouterClient] = None,
    ):
        """Initialize service.

        Args:
            config: Rewrite configuration (from environment by default)
            ledger: Usage ledger shared with the usage service
            assessor: Risk assessor
            llm_client: Chat-completion client, created on first use when omitted
        """
        self.config = config or RewriteConfig.from_env()
        self.ledger = ledger or UsageLedger()
        self.assessor = assessor or RiskAssessor()
        self._llm_client = llm_client

        logger.info(
            "REWRITE_SERVICE_INITIALIZED",
            extra={"model": self.config.model, "api_key_configured": bool(self.config.api_key)}
        )

    @property
    def llm_client(self) -> OpenRouterClient:
        """Chat-completion client.

        Raises:
            ConfigurationError: If no API key is configured
        """
        if self._llm_client is None:
            self._llm_client = OpenRouterClient(self.config)
        return self._llm_client

    async def rewrite(self, request: RewriteRequest) -> RewriteResult:
        """Produce three rewrites of a draft.

        Raises:
            RewriteValidationError: Invalid text, user id or scenarioType
            ConfigurationError: No API key configured
            UsageLimitExceeded: Monthly quota spent
        """
        validate_draft(request.text, request.user_id)
        requested_mode = resolve_requested_mode(request.scenario_type)
        client = self.llm_client
        user_id_hash = hash_pii(request.user_id)

        usage = self.ledger.reserve_usage(request.user_id)

        assessment = self.assessor.assess(request.text, request.platform, {"url": request.url})
        if requested_mode is not None and not request.panic:
            mode = requested_mode
        else:
            mode = select_rewrite_mode(assessment, panic=request.panic)
        platform = assessment.platform.platform

        logger.info(
            "REWRITE_REQUEST_STARTED",
            extra={
                "user_id_hash": user_id_hash,
                "text_hash": hash_text_for_audit(request.text),
                "platform": platform,
                "mode": mode.value,
                "overall_risk": assessment.overall_risk.value,
                "panic": request.panic,
            }
        )

        prompt = build_rewrite_prompt(request.text, platform, mode, assessment.overall_risk)
        try:
            response = await client.complete(prompt, request.text)
            rewrites = parse_rewrites(response.text)
            fallback = False
        except (LLMServiceError, InvalidRewriteResponse) as e:
            logger.warning(
                "REWRITE_FALLBACK_USED",
                extra={
                    "user_id_hash": user_id_hash,
                    "mode": mode.value,
                    "reason": str(e),
                    "error_type": type(e).__name__,
                }
            )
            rewrites = fallback_rewrites(request.text, mode)
            fallback = True

        return RewriteResult(
            rewrites=rewrites,
            mode=mode,
            platform=platform,
            assessment=assessment,
            usage=usage,
            fallback=fallback,
        )

    async def smooth(self, request: SmoothRequest) -> SmoothResult:
        """Produce one smoothed version of a draft.

        Without a slider value the politeness analyzer's suggested tone is
        used.

        Raises:
            RewriteValidationError: Invalid text, user id or toneValue
            ConfigurationError: No API key configured
            UsageLimitExceeded: Monthly quota spent
        """
        validate_draft(request.text, request.user_id)
        if request.tone_value is not None:
            tone = tone_from_slider(request.tone_value)
            tone_value = float(request.tone_value)
        else:
            tone = self.assessor.politeness_analyzer.analyze(request.text).suggested_tone
            tone_value = float(TONE_SLIDER_VALUES[tone])
        client = self.llm_client
        user_id_hash = hash_pii(request.user_id)

        usage = self.ledger.reserve_usage(request.user_id)

        mode = TONE_SMOOTH_MODES[tone]
        platform = self.assessor.platform_analyzer.analyze(request.platform).platform

        logger.info(
            "SMOOTH_REQUEST_STARTED",
            extra={
                "user_id_hash": user_id_hash,
                "text_hash": hash_text_for_audit(request.text),
                "tone": tone.value,
                "platform": platform,
            }
        )

        prompt = build_smooth_prompt(request.text, tone, mode)
        try:
            response = await client.complete(prompt, request.text)
            smoothed = parse_smoothed_text(response.text)
            fallback = False
        except (LLMServiceError, InvalidRewriteResponse) as e:
            logger.warning(
                "SMOOTH_FALLBACK_USED",
                extra={
                    "user_id_hash": user_id_hash,
                    "tone": tone.value,
                    "reason": str(e),
                    "error_type": type(e).__name__,
                }
            )
            smoothed = fallback_smooth(request.text, tone)
            fallback = True

        return SmoothResult(
            smoothed_text=smoothed,
            original_text=request.text,
            tone=tone,
            tone_value=tone_value,
            mode=mode,
            platform=platform,
            usage=usage,
            fallback=fallback,
        )
