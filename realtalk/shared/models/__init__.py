"""Shared domain models for RealTalk services."""
from .risk import (
    RiskTier,
    MessageType,
    AudienceSize,
    ScenarioTag,
    Tone,
    CommonScenario,
    PolitenessIssue,
    RecommendationCode,
    EmotionalAssessment,
    PlatformAssessment,
    ScenarioAssessment,
    UrgencyAssessment,
    PolitenessAssessment,
    RiskAssessment,
)

__all__ = [
    "RiskTier",
    "MessageType",
    "AudienceSize",
    "ScenarioTag",
    "Tone",
    "CommonScenario",
    "PolitenessIssue",
    "RecommendationCode",
    "EmotionalAssessment",
    "PlatformAssessment",
    "ScenarioAssessment",
    "UrgencyAssessment",
    "PolitenessAssessment",
    "RiskAssessment",
]
