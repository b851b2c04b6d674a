"""Tests for RiskAssessor aggregation and recommendations."""
from itertools import product
from unittest.mock import MagicMock

import pytest

from realtalk.shared.models import (
    AudienceSize,
    EmotionalAssessment,
    MessageType,
    PlatformAssessment,
    RecommendationCode,
    RiskAssessment,
    RiskTier,
    ScenarioAssessment,
    ScenarioTag,
    UrgencyAssessment,
)
from realtalk.shared.utils import configure_pii_salt
from realtalk.services.risk_service import assess_risk
from realtalk.services.risk_service.assessor import RiskAssessor
from realtalk.services.risk_service.config import RiskConfig

REDDIT_COMMENT_URL = "https://www.reddit.com/r/gadgets/comments/abc123"


@pytest.fixture(autouse=True)
def setup_pii_salt():
    """Configure PII salt for all tests."""
    configure_pii_salt("test_salt_that_is_at_least_32_characters_long")


@pytest.fixture
def assessor():
    return RiskAssessor()


def _emotional(tier):
    return EmotionalAssessment(tier=tier)


def _platform(tier):
    return PlatformAssessment(
        tier=tier,
        platform="general",
        message_type=MessageType.FORM,
        is_public=False,
        audience_size=AudienceSize.MEDIUM,
    )


def _scenario(tier):
    if tier == RiskTier.LOW:
        return ScenarioAssessment(tag=ScenarioTag.GENERAL, context="general communication", tier=tier)
    return ScenarioAssessment(tag=ScenarioTag.CONFLICT_ESCALATION, context="conflict resolution", tier=tier, match_count=1)


class TestOverallRisk:
    """Tests for the weighted average of the analyzer tiers."""

    def test_empty_draft_baseline(self, assessor):
        """An empty draft should score the low baseline everywhere."""
        result = assessor.assess("", "general", {})

        assert result.overall_risk == RiskTier.LOW
        assert result.emotional.tier == RiskTier.LOW
        assert result.platform.tier == RiskTier.MEDIUM
        assert result.scenario.tag == ScenarioTag.GENERAL
        assert result.urgency.has_urgency is False
        assert result.politeness.needs_smoothing is False
        assert result.recommendations == ()

    def test_angry_public_complaint_is_high(self, assessor):
        """Angry public complaints must reach HIGH overall risk."""
        result = assessor.assess(
            "This is terrible. I want a refund for this broken product!",
            "reddit",
            {"url": REDDIT_COMMENT_URL},
        )

        assert result.emotional.tier == RiskTier.HIGH
        assert result.platform.tier == RiskTier.HIGH
        assert result.scenario.tag == ScenarioTag.CUSTOMER_COMPLAINT
        assert result.overall_risk == RiskTier.HIGH
        assert result.recommendations == (
            RecommendationCode.PANIC_MODE,
            RecommendationCode.COOL_DOWN,
            RecommendationCode.DE_ESCALATION,
            RecommendationCode.CRISIS_RESPONSE,
        )
        assert result.show_panic_mode is True

    def test_disagreement_on_slack_is_medium(self, assessor):
        """Polite disagreement on Slack should be MEDIUM."""
        result = assessor.assess("I disagree with this approach.", "slack")

        assert result.scenario.tag == ScenarioTag.CONFLICT_ESCALATION
        assert result.overall_risk == RiskTier.MEDIUM
        assert result.recommendations == ()
        assert result.show_panic_mode is False

    def test_urgency_gives_partial_credit(self, assessor):
        """Urgency alone should add half its weight."""
        calm = assessor.assess("See you at lunch.", "general")
        urgent = assessor.assess("This is an emergency.", "general")

        assert calm.overall_risk == RiskTier.LOW
        assert urgent.urgency.has_urgency is True
        assert urgent.overall_risk == RiskTier.MEDIUM

    def test_apology_recommends_framework(self, assessor):
        """Apology drafts should recommend the apology framework."""
        result = assessor.assess("sorry, my mistake on the schedule", "general")

        assert result.scenario.tag == ScenarioTag.APOLOGY_NEEDED
        assert result.recommendations == (RecommendationCode.APOLOGY_FRAMEWORK,)
        assert result.scenario_badge == "MISTAKE ACKNOWLEDGMENT"

    def test_executive_recommends_professional_mode(self, assessor):
        result = assessor.assess("Sharing the plan with the ceo.", "gmail")

        assert RecommendationCode.PROFESSIONAL_MODE in result.recommendations

    def test_overall_risk_is_monotone(self, assessor):
        """Raising any factor should never lower overall risk."""
        tiers = list(RiskTier)
        no_urgency = UrgencyAssessment(has_urgency=False)
        with_urgency = UrgencyAssessment(has_urgency=True, urgency_words=("asap",))

        for emotional, platform, scenario in product(tiers, repeat=3):
            base = assessor.overall_risk(
                _emotional(emotional), _platform(platform), _scenario(scenario), no_urgency
            )
            # Raising any single input never lowers the result
            for raised in tiers:
                if raised >= emotional:
                    assert assessor.overall_risk(
                        _emotional(raised), _platform(platform), _scenario(scenario), no_urgency
                    ) >= base
                if raised >= platform:
                    assert assessor.overall_risk(
                        _emotional(emotional), _platform(raised), _scenario(scenario), no_urgency
                    ) >= base
                if raised >= scenario:
                    assert assessor.overall_risk(
                        _emotional(emotional), _platform(platform), _scenario(raised), no_urgency
                    ) >= base
            assert assessor.overall_risk(
                _emotional(emotional), _platform(platform), _scenario(scenario), with_urgency
            ) >= base

    def test_all_high_is_high_all_low_is_low(self, assessor):
        no_urgency = UrgencyAssessment(has_urgency=False)

        assert assessor.overall_risk(
            _emotional(RiskTier.HIGH), _platform(RiskTier.HIGH), _scenario(RiskTier.HIGH), no_urgency
        ) == RiskTier.HIGH
        assert assessor.overall_risk(
            _emotional(RiskTier.LOW), _platform(RiskTier.LOW), _scenario(RiskTier.LOW), no_urgency
        ) == RiskTier.LOW

    def test_thresholds_are_configurable(self):
        strict = RiskAssessor(config=RiskConfig(medium_threshold=1.0))

        assert strict.assess("", "general").overall_risk == RiskTier.MEDIUM


class TestRecommendations:
    """Tests for recommendation code derivation."""

    def test_high_emotion_without_high_overall(self):
        """High emotion should not force a HIGH overall level on its own."""
        codes = RiskAssessor.recommendations(
            RiskTier.MEDIUM, _scenario(RiskTier.LOW), _emotional(RiskTier.HIGH)
        )

        assert codes == [RecommendationCode.DE_ESCALATION]

    def test_no_duplicates(self, assessor):
        """Recommendations should never repeat."""
        result = assessor.assess(
            "This is terrible. I want a refund for this broken product!",
            "reddit",
            {"url": REDDIT_COMMENT_URL},
        )

        assert len(result.recommendations) == len(set(result.recommendations))


class TestContract:
    """Tests for determinism, input coercion and serialization."""

    def test_assessment_is_deterministic(self, assessor):
        """The same draft and context should give the same assessment."""
        text = "WHY is this still broken?? I need it now"

        assert assessor.assess(text, "twitter", {"url": "https://x.com/reply"}) == \
            assessor.assess(text, "twitter", {"url": "https://x.com/reply"})

    def test_none_text_equals_empty_text(self, assessor):
        """None text should be assessed like an empty string."""
        assert assessor.assess(None, "general", None) == assessor.assess("", "general", {})

    def test_round_trip_through_dict(self, assessor):
        result = assessor.assess(
            "This is terrible. I want a refund for this broken product!",
            "reddit",
            {"url": REDDIT_COMMENT_URL},
        )

        assert RiskAssessment.from_dict(result.to_dict()) == result

    def test_module_level_helper(self):
        result = assess_risk("I disagree with this approach.", "slack")

        assert result.overall_risk == RiskTier.MEDIUM

    def test_injected_analyzers_are_used(self):
        """Injected analyzers should replace the defaults."""
        emotional_analyzer = MagicMock()
        emotional_analyzer.analyze.return_value = _emotional(RiskTier.HIGH)
        assessor = RiskAssessor(emotional_analyzer=emotional_analyzer)

        result = assessor.assess("hello.", "general")

        emotional_analyzer.analyze.assert_called_once_with("hello.")
        assert result.emotional.tier == RiskTier.HIGH
        assert RecommendationCode.DE_ESCALATION in result.recommendations
