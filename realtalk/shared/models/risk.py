"""Risk tier and message assessment domain models.

This file defines the core enums and data structures produced by the
risk service. Every assessment is frozen: it is built fresh for one
piece of text and never modified after it is returned.
"""
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Mapping, Optional, Tuple


class RiskTier(Enum):
    """Risk classification tiers for a drafted message.

    Totally ordered: LOW < MEDIUM < HIGH.
    """
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"

    @property
    def weight(self) -> int:
        """Numeric weight used by the risk aggregator (1/2/3)."""
        return _TIER_WEIGHTS[self]

    def __lt__(self, other: "RiskTier") -> bool:
        if not isinstance(other, RiskTier):
            return NotImplemented
        return self.weight < other.weight

    def __le__(self, other: "RiskTier") -> bool:
        if not isinstance(other, RiskTier):
            return NotImplemented
        return self.weight <= other.weight

    def __gt__(self, other: "RiskTier") -> bool:
        if not isinstance(other, RiskTier):
            return NotImplemented
        return self.weight > other.weight

    def __ge__(self, other: "RiskTier") -> bool:
        if not isinstance(other, RiskTier):
            return NotImplemented
        return self.weight >= other.weight


_TIER_WEIGHTS = {
    RiskTier.LOW: 1,
    RiskTier.MEDIUM: 2,
    RiskTier.HIGH: 3,
}


class MessageType(Enum):
    """Where on a platform the message is being composed."""
    FORM = "form"           # Unknown input field
    COMPOSE = "compose"
    REPLY = "reply"
    COMMENT = "comment"
    POST = "post"
    PUBLIC = "public"
    MESSAGE = "message"
    TWEET = "tweet"
    DM = "dm"
    CHANNEL = "channel"
    THREAD = "thread"
    FORWARD = "forward"


class AudienceSize(Enum):
    """Estimated number of people who will read the message."""
    SMALL = "small"
    MEDIUM = "medium"
    LARGE = "large"


class ScenarioTag(Enum):
    """Communicative situations recognised by the scenario detector."""
    CUSTOMER_COMPLAINT = "customerComplaint"
    PUBLIC_REPLY = "publicReply"
    EXECUTIVE_COMMUNICATION = "executiveCommunication"
    CONFLICT_ESCALATION = "conflictEscalation"
    APOLOGY_NEEDED = "apologyNeeded"
    GENERAL = "general"     # Fallback when nothing matches


class Tone(Enum):
    """Target register for a smoothed rewrite."""
    FRIENDLY = "friendly"
    BALANCED = "balanced"
    FIRM = "firm"


class CommonScenario(Enum):
    """Everyday situations that usually need smoothing."""
    CANCELLATION = "cancellation"
    LANDLORD_REQUEST = "landlordRequest"
    APOLOGY = "apology"
    REQUEST = "request"


class PolitenessIssue(Enum):
    """Issue tags reported by the politeness analyzer."""
    BLUNT_LANGUAGE = "blunt_language"
    AWKWARD_PHRASING = "awkward_phrasing"
    ESL_PATTERNS = "esl_patterns"
    MISSING_PLEASE = "missing_please"
    MISSING_GRATITUDE = "missing_gratitude"
    ABRUPT_ENDING = "abrupt_ending"


class RecommendationCode(Enum):
    """Advisory codes attached to a risk assessment.

    Display text lives in the risk service presentation table, not here.
    """
    PANIC_MODE = "panic_mode"
    COOL_DOWN = "cool_down"
    DE_ESCALATION = "de_escalation"
    CRISIS_RESPONSE = "crisis_response"
    PROFESSIONAL_MODE = "professional_mode"
    APOLOGY_FRAMEWORK = "apology_framework"


@dataclass(frozen=True)
class EmotionalAssessment:
    """Emotional tone of a message with the triggers that produced it."""
    tier: RiskTier
    high_triggers: Tuple[str, ...] = ()
    medium_triggers: Tuple[str, ...] = ()
    low_triggers: Tuple[str, ...] = ()
    caps_words: Tuple[str, ...] = ()
    has_excessive_caps: bool = False
    has_excessive_punctuation: bool = False

    @property
    def triggers(self) -> Dict[RiskTier, Tuple[str, ...]]:
        """Matched triggers partitioned by the tier they came from."""
        return {
            RiskTier.HIGH: self.high_triggers,
            RiskTier.MEDIUM: self.medium_triggers,
            RiskTier.LOW: self.low_triggers,
        }

    def to_dict(self) -> Dict[str, Any]:
        return {
            "tier": self.tier.value,
            "triggers": {
                "high": list(self.high_triggers),
                "medium": list(self.medium_triggers),
                "low": list(self.low_triggers),
            },
            "caps_words": list(self.caps_words),
            "has_excessive_caps": self.has_excessive_caps,
            "has_excessive_punctuation": self.has_excessive_punctuation,
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "EmotionalAssessment":
        triggers = data.get("triggers", {})
        return cls(
            tier=RiskTier(data["tier"]),
            high_triggers=tuple(triggers.get("high", ())),
            medium_triggers=tuple(triggers.get("medium", ())),
            low_triggers=tuple(triggers.get("low", ())),
            caps_words=tuple(data.get("caps_words", ())),
            has_excessive_caps=bool(data.get("has_excessive_caps", False)),
            has_excessive_punctuation=bool(data.get("has_excessive_punctuation", False)),
        )


@dataclass(frozen=True)
class PlatformAssessment:
    """Exposure of a message given the platform and the kind of input."""
    tier: RiskTier
    platform: str
    message_type: MessageType
    is_public: bool
    audience_size: AudienceSize

    def to_dict(self) -> Dict[str, Any]:
        return {
            "tier": self.tier.value,
            "platform": self.platform,
            "message_type": self.message_type.value,
            "is_public": self.is_public,
            "audience_size": self.audience_size.value,
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "PlatformAssessment":
        return cls(
            tier=RiskTier(data["tier"]),
            platform=data["platform"],
            message_type=MessageType(data["message_type"]),
            is_public=bool(data["is_public"]),
            audience_size=AudienceSize(data["audience_size"]),
        )


@dataclass(frozen=True)
class ScenarioAssessment:
    """Best matching communicative scenario for a message.

    match_count is only used to pick the best scenario; callers should
    not treat it as a score.
    """
    tag: ScenarioTag
    context: str
    tier: RiskTier
    match_count: int = 0

    def __post_init__(self):
        if self.match_count < 0:
            raise ValueError(f"Match count must be >= 0, got {self.match_count}")
        if self.tag == ScenarioTag.GENERAL and self.tier != RiskTier.LOW:
            raise ValueError(f"General scenario must be low tier, got {self.tier.value}")

    @property
    def is_general(self) -> bool:
        return self.tag == ScenarioTag.GENERAL

    def to_dict(self) -> Dict[str, Any]:
        return {
            "tag": self.tag.value,
            "context": self.context,
            "tier": self.tier.value,
            "match_count": self.match_count,
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "ScenarioAssessment":
        return cls(
            tag=ScenarioTag(data["tag"]),
            context=data["context"],
            tier=RiskTier(data["tier"]),
            match_count=int(data.get("match_count", 0)),
        )


@dataclass(frozen=True)
class UrgencyAssessment:
    """Urgency keywords present in a message."""
    has_urgency: bool
    urgency_words: Tuple[str, ...] = ()

    @property
    def tier(self) -> RiskTier:
        return RiskTier.HIGH if self.has_urgency else RiskTier.LOW

    def to_dict(self) -> Dict[str, Any]:
        return {
            "has_urgency": self.has_urgency,
            "urgency_words": list(self.urgency_words),
            "tier": self.tier.value,
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "UrgencyAssessment":
        return cls(
            has_urgency=bool(data["has_urgency"]),
            urgency_words=tuple(data.get("urgency_words", ())),
        )


@dataclass(frozen=True)
class PolitenessAssessment:
    """Social smoothness of a message, used for Simple Mode suggestions.

    severity stays LOW with needs_smoothing False when no issue was found.
    """
    needs_smoothing: bool
    severity: RiskTier
    suggested_tone: Tone
    detected_scenario: Optional[CommonScenario] = None
    issues: Tuple[PolitenessIssue, ...] = ()
    issue_count: int = 0

    def __post_init__(self):
        if self.issue_count < 0:
            raise ValueError(f"Issue count must be >= 0, got {self.issue_count}")

    def to_dict(self) -> Dict[str, Any]:
        return {
            "needs_smoothing": self.needs_smoothing,
            "severity": self.severity.value,
            "suggested_tone": self.suggested_tone.value,
            "detected_scenario": self.detected_scenario.value if self.detected_scenario else None,
            "issues": [issue.value for issue in self.issues],
            "issue_count": self.issue_count,
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "PolitenessAssessment":
        detected = data.get("detected_scenario")
        return cls(
            needs_smoothing=bool(data["needs_smoothing"]),
            severity=RiskTier(data["severity"]),
            suggested_tone=Tone(data["suggested_tone"]),
            detected_scenario=CommonScenario(detected) if detected else None,
            issues=tuple(PolitenessIssue(issue) for issue in data.get("issues", ())),
            issue_count=int(data.get("issue_count", 0)),
        )


@dataclass(frozen=True)
class RiskAssessment:
    """Aggregate assessment for one drafted message.

    Constructed fresh per analyzed text and discarded once the caller has
    picked a rewrite mode and tone.
    """
    overall_risk: RiskTier
    emotional: EmotionalAssessment
    platform: PlatformAssessment
    scenario: ScenarioAssessment
    urgency: UrgencyAssessment
    politeness: PolitenessAssessment
    recommendations: Tuple[RecommendationCode, ...] = field(default_factory=tuple)

    @property
    def show_panic_mode(self) -> bool:
        """Whether the UI should offer the panic-mode button."""
        return self.overall_risk == RiskTier.HIGH

    @property
    def is_public_audience(self) -> bool:
        return self.platform.audience_size == AudienceSize.LARGE

    @property
    def scenario_badge(self) -> Optional[str]:
        """Badge label for a detected scenario, None for general messages."""
        if self.scenario.is_general:
            return None
        return self.scenario.context.upper()

    def to_dict(self) -> Dict[str, Any]:
        """Convert to a plain record for API responses."""
        return {
            "overall_risk": self.overall_risk.value,
            "emotional": self.emotional.to_dict(),
            "platform": self.platform.to_dict(),
            "scenario": self.scenario.to_dict(),
            "urgency": self.urgency.to_dict(),
            "politeness": self.politeness.to_dict(),
            "recommendations": [code.value for code in self.recommendations],
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "RiskAssessment":
        return cls(
            overall_risk=RiskTier(data["overall_risk"]),
            emotional=EmotionalAssessment.from_dict(data["emotional"]),
            platform=PlatformAssessment.from_dict(data["platform"]),
            scenario=ScenarioAssessment.from_dict(data["scenario"]),
            urgency=UrgencyAssessment.from_dict(data["urgency"]),
            politeness=PolitenessAssessment.from_dict(data["politeness"]),
            recommendations=tuple(
                RecommendationCode(code) for code in data.get("recommendations", ())
            ),
        )
