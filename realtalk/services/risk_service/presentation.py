"""Display text for recommendation codes.

The assessment itself only carries RecommendationCode values; the popup
and the HTTP layer render them through this table.
"""
from typing import Dict, Iterable, List

from realtalk.shared.models import RecommendationCode, RiskTier

RECOMMENDATION_MESSAGES: Dict[RecommendationCode, str] = {
    RecommendationCode.PANIC_MODE: "🚨 HIGH RISK: Consider using Panic Mode for safest options",
    RecommendationCode.COOL_DOWN: "💭 Take time to cool down before sending",
    RecommendationCode.DE_ESCALATION: "😤 High emotional content detected - recommend De-escalation mode",
    RecommendationCode.CRISIS_RESPONSE: "🆘 Customer complaint detected - use Crisis Response mode",
    RecommendationCode.PROFESSIONAL_MODE: "💼 Executive communication - use Professional mode",
    RecommendationCode.APOLOGY_FRAMEWORK: "🤲 Apology context detected - use Apology Framework",
}

RISK_MESSAGES: Dict[RiskTier, str] = {
    RiskTier.LOW: "Low Communication Risk",
    RiskTier.MEDIUM: "Moderate Communication Risk",
    RiskTier.HIGH: "⚠️ HIGH RISK - Use Caution",
}


def render_recommendations(codes: Iterable[RecommendationCode]) -> List[str]:
    """Render recommendation codes as display strings, preserving order."""
    return [RECOMMENDATION_MESSAGES[code] for code in codes]
