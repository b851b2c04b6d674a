"""Risk service configuration and lexicon tables.

All tables are immutable. Declaration order matters: trigger lists are
reported in lexicon order, and scenario tables are evaluated top to bottom
with the first declared entry winning ties.
"""
from dataclasses import dataclass
from types import MappingProxyType
from typing import Mapping, Tuple

from realtalk.shared.models import (
    AudienceSize,
    CommonScenario,
    MessageType,
    RiskTier,
    ScenarioTag,
)


@dataclass(frozen=True)
class RiskConfig:
    """Aggregation weights and thresholds for the overall risk tier."""

    # Overall tier = HIGH when average >= high_threshold, MEDIUM when >= medium_threshold
    high_threshold: float = 2.5
    medium_threshold: float = 1.5

    # Urgency adds a flat bonus but the divisor stays at 3 (partial credit)
    urgency_bonus: int = 1
    divisor: int = 3

    # Messages shorter than this with no terminal punctuation read as abrupt
    abrupt_ending_max_length: int = 50

    # Version tracking for lexicon changes
    lexicon_version: str = "2025.08.01"


@dataclass(frozen=True)
class ScenarioDefinition:
    """A named scenario with its keywords, display label and intrinsic tier."""
    tag: ScenarioTag
    keywords: Tuple[str, ...]
    context: str
    tier: RiskTier


# =============================================================================
# EMOTIONAL TRIGGERS (substring match on lower-cased text)
# =============================================================================
HIGH_EMOTIONAL_TRIGGERS: Tuple[str, ...] = (
    # Aggressive
    "angry", "furious", "ridiculous", "stupid", "idiotic", "incompetent",
    "unacceptable", "outrageous", "disgusted", "appalled",
    # Accusatory
    "you always", "you never", "your fault", "blame you", "you should have",
    # Extreme statements
    "absolutely not", "completely wrong", "total failure", "disaster",
    "terrible", "awful", "worst", "hate", "can't stand",
)

MEDIUM_EMOTIONAL_TRIGGERS: Tuple[str, ...] = (
    # Frustrated
    "frustrated", "disappointed", "confused", "concerned", "worried",
    "surprised", "shocked", "unexpected", "unfortunate",
    # Passive aggressive
    "fine", "whatever", "obviously", "clearly", "as i said", "per my last",
    # Demanding
    "need this now", "asap", "urgent", "immediately", "demanding", "require",
)

LOW_EMOTIONAL_TRIGGERS: Tuple[str, ...] = (
    "hope", "think", "feel", "believe", "suggest", "recommend",
    "prefer", "would like", "could we", "maybe", "perhaps",
)

EXCESSIVE_CAPS_TRIGGER = "excessive caps"
EXCESSIVE_PUNCTUATION_TRIGGER = "excessive punctuation"


# =============================================================================
# PLATFORM EXPOSURE
# =============================================================================
GENERAL_PLATFORM = "general"

PLATFORM_RISK_FACTORS: Mapping[str, Mapping[MessageType, RiskTier]] = MappingProxyType({
    "linkedin": MappingProxyType({
        MessageType.PUBLIC: RiskTier.HIGH,      # Public posts carry reputation risk
        MessageType.MESSAGE: RiskTier.MEDIUM,
        MessageType.COMMENT: RiskTier.HIGH,
    }),
    "twitter": MappingProxyType({
        MessageType.TWEET: RiskTier.HIGH,
        MessageType.REPLY: RiskTier.HIGH,       # Replies can go viral
        MessageType.DM: RiskTier.LOW,
    }),
    "reddit": MappingProxyType({
        MessageType.POST: RiskTier.HIGH,
        MessageType.COMMENT: RiskTier.HIGH,
        MessageType.MESSAGE: RiskTier.LOW,
    }),
    "slack": MappingProxyType({
        MessageType.CHANNEL: RiskTier.MEDIUM,
        MessageType.DM: RiskTier.LOW,
        MessageType.THREAD: RiskTier.MEDIUM,
    }),
    "gmail": MappingProxyType({
        MessageType.COMPOSE: RiskTier.LOW,
        MessageType.REPLY: RiskTier.LOW,
        MessageType.FORWARD: RiskTier.MEDIUM,   # Forwarding widens the audience
    }),
    GENERAL_PLATFORM: MappingProxyType({
        MessageType.FORM: RiskTier.MEDIUM,
        MessageType.COMMENT: RiskTier.HIGH,
        MessageType.MESSAGE: RiskTier.LOW,
    }),
})

AUDIENCE_SIZES: Mapping[str, Mapping[MessageType, AudienceSize]] = MappingProxyType({
    "linkedin": MappingProxyType({
        MessageType.POST: AudienceSize.LARGE,
        MessageType.COMMENT: AudienceSize.MEDIUM,
        MessageType.MESSAGE: AudienceSize.SMALL,
    }),
    "twitter": MappingProxyType({
        MessageType.TWEET: AudienceSize.LARGE,
        MessageType.REPLY: AudienceSize.LARGE,
        MessageType.DM: AudienceSize.SMALL,
    }),
    "reddit": MappingProxyType({
        MessageType.POST: AudienceSize.LARGE,
        MessageType.COMMENT: AudienceSize.MEDIUM,
        MessageType.MESSAGE: AudienceSize.SMALL,
    }),
    "slack": MappingProxyType({
        MessageType.CHANNEL: AudienceSize.SMALL,
        MessageType.DM: AudienceSize.SMALL,
        MessageType.THREAD: AudienceSize.SMALL,
    }),
    "gmail": MappingProxyType({
        MessageType.COMPOSE: AudienceSize.SMALL,
        MessageType.REPLY: AudienceSize.SMALL,
        MessageType.FORWARD: AudienceSize.MEDIUM,
    }),
})

# URL hints checked in order; a later match overwrites an earlier one
URL_MESSAGE_TYPE_HINTS: Tuple[Tuple[Tuple[str, ...], MessageType], ...] = (
    (("compose", "new"), MessageType.COMPOSE),
    (("reply",), MessageType.REPLY),
    (("comment",), MessageType.COMMENT),
    (("post",), MessageType.POST),
)

PUBLIC_MESSAGE_TYPES = frozenset({
    MessageType.POST,
    MessageType.COMMENT,
    MessageType.TWEET,
    MessageType.REPLY,
})


# =============================================================================
# SCENARIOS (first declared wins on equal match counts)
# =============================================================================
SCENARIO_DEFINITIONS: Tuple[ScenarioDefinition, ...] = (
    ScenarioDefinition(
        tag=ScenarioTag.CUSTOMER_COMPLAINT,
        keywords=("complaint", "dissatisfied", "refund", "problem", "issue", "broken", "not working"),
        context="customer service",
        tier=RiskTier.HIGH,
    ),
    ScenarioDefinition(
        tag=ScenarioTag.PUBLIC_REPLY,
        keywords=("@", "reply to", "responding to", "in response"),
        context="public discussion",
        tier=RiskTier.HIGH,
    ),
    ScenarioDefinition(
        tag=ScenarioTag.EXECUTIVE_COMMUNICATION,
        keywords=("ceo", "executive", "senior", "leadership", "board", "director"),
        context="leadership communication",
        tier=RiskTier.HIGH,
    ),
    ScenarioDefinition(
        tag=ScenarioTag.CONFLICT_ESCALATION,
        keywords=("disagree", "wrong", "mistake", "error", "failed", "disappointed"),
        context="conflict resolution",
        tier=RiskTier.MEDIUM,
    ),
    ScenarioDefinition(
        tag=ScenarioTag.APOLOGY_NEEDED,
        keywords=("sorry", "apologize", "my fault", "my mistake", "regret"),
        context="mistake acknowledgment",
        tier=RiskTier.MEDIUM,
    ),
)

GENERAL_SCENARIO_CONTEXT = "general communication"


# =============================================================================
# URGENCY
# =============================================================================
URGENCY_KEYWORDS: Tuple[str, ...] = (
    "urgent", "asap", "immediately", "now", "emergency", "critical",
)


# =============================================================================
# POLITENESS
# =============================================================================
# Matched on word boundaries so "fine" does not match "finesse"
BLUNTNESS_INDICATORS: Tuple[str, ...] = (
    "nope", "nah", "whatever", "fine", "k", "sure",
    "obviously", "clearly", "duh", "come on", "seriously",
    "you need to", "you should", "you have to", "just do it",
)

AWKWARDNESS_INDICATORS: Tuple[str, ...] = (
    "umm", "uh", "so yeah", "i guess", "maybe", "sorta", "kinda",
    "i dunno", "not sure", "i think maybe", "if thats ok",
    "sorry to bother", "hope this is ok", "sorry again",
)

ESL_INDICATORS: Tuple[str, ...] = (
    "very much", "so much sorry", "please to", "kindly do",
    "revert back", "do the needful", "good name", "out of station",
)

# Courtesy markers are only checked when the text makes a request
REQUEST_PHRASES: Tuple[str, ...] = (
    "can you", "could you", "would you", "need you to", "want you to",
)
PLEASE_MARKERS: Tuple[str, ...] = ("please",)
GRATITUDE_MARKERS: Tuple[str, ...] = ("thank", "appreciate")
TERMINAL_PUNCTUATION: Tuple[str, ...] = (".", "!", "?")

COMMON_SCENARIOS: Tuple[Tuple[CommonScenario, Tuple[str, ...]], ...] = (
    (CommonScenario.CANCELLATION, ("cant make it", "have to cancel", "sorry cant", "maybe later", "rain check")),
    (CommonScenario.LANDLORD_REQUEST, ("landlord", "fix", "broken", "repair", "maintenance", "heat", "water")),
    (CommonScenario.APOLOGY, ("my bad", "oops", "sorry about", "messed up", "screwed up")),
    (CommonScenario.REQUEST, ("need", "want", "can you", "help", "favor", "ask you")),
)
