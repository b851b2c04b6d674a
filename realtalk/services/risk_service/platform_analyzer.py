"""Platform exposure analyzer.

Maps (platform, message type) to a risk tier and an audience estimate.
The message type is inferred from the page URL when the caller provides
one; without a URL every input is treated as a generic form field.
"""
import logging
from typing import Any, Optional

from realtalk.shared.models import AudienceSize, MessageType, PlatformAssessment, RiskTier
from .config import (
    AUDIENCE_SIZES,
    GENERAL_PLATFORM,
    PLATFORM_RISK_FACTORS,
    PUBLIC_MESSAGE_TYPES,
    URL_MESSAGE_TYPE_HINTS,
)
from .inputs import context_url

logger = logging.getLogger(__name__)


class PlatformRiskAnalyzer:
    """Estimates how exposed a message is on the platform it is written for."""

    def analyze(self, platform: Any, context: Any = None) -> PlatformAssessment:
        """Analyze platform-specific risk.

        Args:
            platform: Platform identifier (slack, gmail, linkedin, ...)
            context: Optional mapping with a "url" hint

        Returns:
            PlatformAssessment; unknown platforms use the general table
        """
        platform_id = self._normalize_platform(platform)
        risk_table = PLATFORM_RISK_FACTORS.get(platform_id, PLATFORM_RISK_FACTORS[GENERAL_PLATFORM])

        message_type = self.infer_message_type(context_url(context))
        tier = risk_table.get(message_type, RiskTier.MEDIUM)
        audience_size = self.estimate_audience_size(platform_id, message_type)

        logger.debug(
            "PLATFORM_ANALYSIS_COMPLETED",
            extra={
                "platform": platform_id,
                "message_type": message_type.value,
                "tier": tier.value,
                "audience_size": audience_size.value,
            }
        )

        return PlatformAssessment(
            tier=tier,
            platform=platform_id,
            message_type=message_type,
            is_public=message_type in PUBLIC_MESSAGE_TYPES,
            audience_size=audience_size,
        )

    @staticmethod
    def infer_message_type(url: Optional[str]) -> MessageType:
        """Infer the message type from URL substrings.

        Hints are checked in declaration order and the last one that
        matches wins, so ".../post/123/reply" resolves to POST.
        """
        message_type = MessageType.FORM
        if not url:
            return message_type

        for hints, hinted_type in URL_MESSAGE_TYPE_HINTS:
            if any(hint in url for hint in hints):
                message_type = hinted_type
        return message_type

    @staticmethod
    def estimate_audience_size(platform: str, message_type: MessageType) -> AudienceSize:
        return AUDIENCE_SIZES.get(platform, {}).get(message_type, AudienceSize.MEDIUM)

    @staticmethod
    def _normalize_platform(platform: Any) -> str:
        if isinstance(platform, str) and platform.strip():
            return platform.strip().lower()
        return GENERAL_PLATFORM
