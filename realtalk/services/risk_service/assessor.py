"""Risk assessor - combines the individual analyzers into one assessment.

Architecture:
- Emotional, platform, scenario, urgency and politeness analyzers run
  independently on the same input (no shared state, no ordering)
- The emotional, platform and scenario tiers plus an urgency bonus are
  averaged into the overall tier
- Recommendation codes are derived from the overall tier, the emotional
  tier and the detected scenario

Every call is a pure computation; a RiskAssessor can be shared freely
between threads.
"""
import logging
import time
from typing import Any, List, Optional

from realtalk.shared.models import (
    EmotionalAssessment,
    PlatformAssessment,
    PolitenessAssessment,
    RecommendationCode,
    RiskAssessment,
    RiskTier,
    ScenarioAssessment,
    ScenarioTag,
    UrgencyAssessment,
)
from realtalk.shared.utils import hash_text_for_audit
from .config import RiskConfig
from .emotional_analyzer import EmotionalAnalyzer
from .inputs import coerce_context, coerce_text
from .platform_analyzer import PlatformRiskAnalyzer
from .politeness_analyzer import PolitenessAnalyzer
from .scenario_detector import ScenarioDetector, UrgencyDetector

logger = logging.getLogger(__name__)

SCENARIO_RECOMMENDATIONS = {
    ScenarioTag.CUSTOMER_COMPLAINT: RecommendationCode.CRISIS_RESPONSE,
    ScenarioTag.EXECUTIVE_COMMUNICATION: RecommendationCode.PROFESSIONAL_MODE,
    ScenarioTag.APOLOGY_NEEDED: RecommendationCode.APOLOGY_FRAMEWORK,
}


class RiskAssessor:
    """Builds a RiskAssessment for a drafted message."""

    def __init__(
        self,
        config: Optional[RiskConfig] = None,
        emotional_analyzer: Optional[EmotionalAnalyzer] = None,
        platform_analyzer: Optional[PlatformRiskAnalyzer] = None,
        scenario_detector: Optional[ScenarioDetector] = None,
        urgency_detector: Optional[UrgencyDetector] = None,
        politeness_analyzer: Optional[PolitenessAnalyzer] = None,
    ):
        """Initialize assessor with its analyzers.

        Args:
            config: Aggregation weights and thresholds
            emotional_analyzer: Injected for testing
            platform_analyzer: Injected for testing
            scenario_detector: Injected for testing
            urgency_detector: Injected for testing
            politeness_analyzer: Injected for testing
        """
        self.config = config or RiskConfig()
        self.emotional_analyzer = emotional_analyzer or EmotionalAnalyzer()
        self.platform_analyzer = platform_analyzer or PlatformRiskAnalyzer()
        self.scenario_detector = scenario_detector or ScenarioDetector()
        self.urgency_detector = urgency_detector or UrgencyDetector()
        self.politeness_analyzer = politeness_analyzer or PolitenessAnalyzer(self.config)

        logger.info(
            "RISK_ASSESSOR_INITIALIZED",
            extra={
                "lexicon_version": self.config.lexicon_version,
                "high_threshold": self.config.high_threshold,
                "medium_threshold": self.config.medium_threshold,
            }
        )

    def assess(self, text: Any, platform: Any = "general", context: Any = None) -> RiskAssessment:
        """Assess the communication risk of a drafted message.

        Args:
            text: Draft text (non-string input is treated as empty)
            platform: Platform identifier, "general" when unknown
            context: Optional mapping with a "url" hint

        Returns:
            Complete RiskAssessment
        """
        start_time = time.perf_counter()
        text = coerce_text(text)
        context = coerce_context(context)

        emotional = self.emotional_analyzer.analyze(text)
        platform_risk = self.platform_analyzer.analyze(platform, context)
        scenario = self.scenario_detector.detect(text, context)
        urgency = self.urgency_detector.detect(text)
        politeness = self.politeness_analyzer.analyze(text)

        overall_risk = self.overall_risk(emotional, platform_risk, scenario, urgency)
        recommendations = self.recommendations(overall_risk, scenario, emotional)

        logger.info(
            "RISK_ASSESSMENT_COMPLETED",
            extra={
                "text_hash": hash_text_for_audit(text),
                "text_length": len(text),
                "platform": platform_risk.platform,
                "overall_risk": overall_risk.value,
                "emotional_risk": emotional.tier.value,
                "platform_risk": platform_risk.tier.value,
                "scenario": scenario.tag.value,
                "has_urgency": urgency.has_urgency,
                "needs_smoothing": politeness.needs_smoothing,
                "latency_ms": (time.perf_counter() - start_time) * 1000,
            }
        )

        return RiskAssessment(
            overall_risk=overall_risk,
            emotional=emotional,
            platform=platform_risk,
            scenario=scenario,
            urgency=urgency,
            politeness=politeness,
            recommendations=tuple(recommendations),
        )

    def overall_risk(
        self,
        emotional: EmotionalAssessment,
        platform: PlatformAssessment,
        scenario: ScenarioAssessment,
        urgency: UrgencyAssessment,
    ) -> RiskTier:
        """Combine the weighted tiers into the overall tier.

        Four quantities are summed but divided by three, so urgency only
        contributes partial credit.
        """
        total = (
            emotional.tier.weight
            + platform.tier.weight
            + scenario.tier.weight
            + (self.config.urgency_bonus if urgency.has_urgency else 0)
        )
        average = total / self.config.divisor

        if average >= self.config.high_threshold:
            return RiskTier.HIGH
        if average >= self.config.medium_threshold:
            return RiskTier.MEDIUM
        return RiskTier.LOW

    @staticmethod
    def recommendations(
        overall_risk: RiskTier,
        scenario: ScenarioAssessment,
        emotional: EmotionalAssessment,
    ) -> List[RecommendationCode]:
        """Every applicable recommendation, in display order."""
        codes: List[RecommendationCode] = []

        if overall_risk == RiskTier.HIGH:
            codes.append(RecommendationCode.PANIC_MODE)
            codes.append(RecommendationCode.COOL_DOWN)

        if emotional.tier == RiskTier.HIGH:
            codes.append(RecommendationCode.DE_ESCALATION)

        scenario_code = SCENARIO_RECOMMENDATIONS.get(scenario.tag)
        if scenario_code is not None:
            codes.append(scenario_code)

        return codes


# Shared default instance for the module-level helpers below
_default_assessor: Optional[RiskAssessor] = None


def get_default_assessor() -> RiskAssessor:
    global _default_assessor
    if _default_assessor is None:
        _default_assessor = RiskAssessor()
    return _default_assessor


def assess_risk(text: Any, platform: Any = "general", context: Any = None) -> RiskAssessment:
    return get_default_assessor().assess(text, platform, context)


def analyze_emotional_content(text: Any) -> EmotionalAssessment:
    return get_default_assessor().emotional_analyzer.analyze(text)


def analyze_platform_risk(platform: Any, context: Any = None) -> PlatformAssessment:
    return get_default_assessor().platform_analyzer.analyze(platform, context)


def detect_scenario(text: Any, context: Any = None) -> ScenarioAssessment:
    return get_default_assessor().scenario_detector.detect(text, context)


def detect_urgency_factors(text: Any) -> UrgencyAssessment:
    return get_default_assessor().urgency_detector.detect(text)


def analyze_politeness(text: Any) -> PolitenessAssessment:
    return get_default_assessor().politeness_analyzer.analyze(text)
