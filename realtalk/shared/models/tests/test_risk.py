"""Tests for risk domain models."""
import pytest

from realtalk.shared.models import (
    AudienceSize,
    CommonScenario,
    EmotionalAssessment,
    MessageType,
    PlatformAssessment,
    PolitenessAssessment,
    PolitenessIssue,
    RecommendationCode,
    RiskAssessment,
    RiskTier,
    ScenarioAssessment,
    ScenarioTag,
    Tone,
    UrgencyAssessment,
)


def _assessment(overall=RiskTier.MEDIUM, scenario=None, audience=AudienceSize.SMALL):
    return RiskAssessment(
        overall_risk=overall,
        emotional=EmotionalAssessment(
            tier=RiskTier.HIGH,
            high_triggers=("awful", "excessive caps"),
            medium_triggers=("frustrated",),
            caps_words=("WHY",),
            has_excessive_caps=True,
        ),
        platform=PlatformAssessment(
            tier=RiskTier.LOW,
            platform="gmail",
            message_type=MessageType.REPLY,
            is_public=True,
            audience_size=audience,
        ),
        scenario=scenario or ScenarioAssessment(
            tag=ScenarioTag.CUSTOMER_COMPLAINT,
            context="customer service",
            tier=RiskTier.HIGH,
            match_count=2,
        ),
        urgency=UrgencyAssessment(has_urgency=True, urgency_words=("asap",)),
        politeness=PolitenessAssessment(
            needs_smoothing=True,
            severity=RiskTier.MEDIUM,
            suggested_tone=Tone.FIRM,
            detected_scenario=CommonScenario.LANDLORD_REQUEST,
            issues=(PolitenessIssue.MISSING_PLEASE, PolitenessIssue.ABRUPT_ENDING),
            issue_count=2,
        ),
        recommendations=(RecommendationCode.DE_ESCALATION, RecommendationCode.CRISIS_RESPONSE),
    )


class TestRiskTier:
    """Tests for RiskTier ordering."""

    def test_total_order(self):
        """Risk levels should order LOW < MEDIUM < HIGH."""
        assert RiskTier.LOW < RiskTier.MEDIUM < RiskTier.HIGH
        assert RiskTier.HIGH >= RiskTier.HIGH
        assert max(RiskTier) == RiskTier.HIGH

    def test_weights(self):
        assert [tier.weight for tier in RiskTier] == [1, 2, 3]

    def test_comparison_with_other_types(self):
        with pytest.raises(TypeError):
            RiskTier.LOW < 2


class TestValidation:
    """Tests for __post_init__ invariants."""

    def test_general_scenario_must_be_low(self):
        """A GENERAL scenario must carry LOW risk."""
        with pytest.raises(ValueError):
            ScenarioAssessment(tag=ScenarioTag.GENERAL, context="general communication", tier=RiskTier.HIGH)

    def test_negative_match_count(self):
        with pytest.raises(ValueError):
            ScenarioAssessment(tag=ScenarioTag.PUBLIC_REPLY, context="public discussion", tier=RiskTier.HIGH, match_count=-1)

    def test_negative_issue_count(self):
        with pytest.raises(ValueError):
            PolitenessAssessment(
                needs_smoothing=False, severity=RiskTier.LOW, suggested_tone=Tone.BALANCED, issue_count=-1
            )

    def test_assessments_are_frozen(self):
        """Assessment objects should be immutable."""
        with pytest.raises(AttributeError):
            _assessment().overall_risk = RiskTier.LOW


class TestDerivedProperties:
    """Tests for UI affordances derived from an assessment."""

    def test_panic_mode_only_for_high(self):
        """Panic mode should only be set for HIGH overall risk."""
        assert _assessment(overall=RiskTier.HIGH).show_panic_mode is True
        assert _assessment(overall=RiskTier.MEDIUM).show_panic_mode is False

    def test_public_audience_only_for_large(self):
        """Public audience should only be set for LARGE audiences."""
        assert _assessment(audience=AudienceSize.LARGE).is_public_audience is True
        assert _assessment(audience=AudienceSize.MEDIUM).is_public_audience is False

    def test_scenario_badge(self):
        general = ScenarioAssessment(tag=ScenarioTag.GENERAL, context="general communication", tier=RiskTier.LOW)

        assert _assessment().scenario_badge == "CUSTOMER SERVICE"
        assert _assessment(scenario=general).scenario_badge is None

    def test_emotional_triggers_by_tier(self):
        triggers = _assessment().emotional.triggers

        assert triggers[RiskTier.HIGH] == ("awful", "excessive caps")
        assert triggers[RiskTier.LOW] == ()

    def test_urgency_tier(self):
        assert UrgencyAssessment(has_urgency=True).tier == RiskTier.HIGH
        assert UrgencyAssessment(has_urgency=False).tier == RiskTier.LOW


class TestSerialization:
    """Tests for to_dict / from_dict."""

    def test_round_trip(self):
        assessment = _assessment()

        assert RiskAssessment.from_dict(assessment.to_dict()) == assessment

    def test_plain_record_shape(self):
        """to_dict() should produce plain JSON-ready values."""
        data = _assessment().to_dict()

        assert data["overall_risk"] == "medium"
        assert data["emotional"]["triggers"]["high"] == ["awful", "excessive caps"]
        assert data["platform"]["message_type"] == "reply"
        assert data["scenario"]["tag"] == "customerComplaint"
        assert data["politeness"]["detected_scenario"] == "landlordRequest"
        assert data["politeness"]["issues"] == ["missing_please", "abrupt_ending"]
        assert data["recommendations"] == ["de_escalation", "crisis_response"]

    def test_missing_detected_scenario(self):
        """A missing detected scenario should survive the dict round trip."""
        politeness = PolitenessAssessment(needs_smoothing=False, severity=RiskTier.LOW, suggested_tone=Tone.BALANCED)

        assert politeness.to_dict()["detected_scenario"] is None
        assert PolitenessAssessment.from_dict(politeness.to_dict()) == politeness
