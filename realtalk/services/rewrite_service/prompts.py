"""Prompt selection for rewrites and smoothing.

The risk assessment decides which rewrite mode is used; the mode decides
the system prompt and the labels the popup shows above the three rewrite
slots. When no scenario is detected the platform template is used
instead, with rules that tighten as the overall risk rises.
"""
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional, Tuple

from realtalk.shared.models import RiskAssessment, RiskTier, ScenarioTag, Tone
from .errors import RewriteValidationError


class RewriteMode(Enum):
    """Rewrite strategies, each with its own prompt and slot labels."""
    REPUTATION_SHIELD = "reputationShield"
    DE_ESCALATION = "deEscalation"
    CRISIS_RESPONSE = "crisisResponse"
    PROFESSIONAL_PUSHBACK = "professionalPushback"
    APOLOGY_FRAMEWORK = "apologyFramework"
    GENERAL = "general"         # Platform template


@dataclass(frozen=True)
class SlotLabel:
    """Display label for one of the three rewrite slots."""
    label: str
    emoji: str

    def to_dict(self) -> Dict[str, str]:
        return {"label": self.label, "emoji": self.emoji}


# Slots are always professional, direct, collaborative, in that order
REWRITE_SLOTS: Tuple[str, ...] = ("professional", "direct", "collaborative")

MODE_LABELS: Dict[RewriteMode, Tuple[SlotLabel, SlotLabel, SlotLabel]] = {
    RewriteMode.REPUTATION_SHIELD: (
        SlotLabel("Safest", "🛡️"), SlotLabel("Balanced", "⚖️"), SlotLabel("Strategic", "🎯"),
    ),
    RewriteMode.DE_ESCALATION: (
        SlotLabel("Calming", "😌"), SlotLabel("Diplomatic", "🤝"), SlotLabel("Bridge-building", "🌉"),
    ),
    RewriteMode.CRISIS_RESPONSE: (
        SlotLabel("Apologetic", "🆘"), SlotLabel("Solution-focused", "🔧"), SlotLabel("Escalation", "📞"),
    ),
    RewriteMode.PROFESSIONAL_PUSHBACK: (
        SlotLabel("Diplomatic", "🤝"), SlotLabel("Assertive", "💪"), SlotLabel("Executive", "👔"),
    ),
    RewriteMode.APOLOGY_FRAMEWORK: (
        SlotLabel("Full Responsibility", "🤲"), SlotLabel("Collaborative", "🤝"), SlotLabel("Learning-focused", "📚"),
    ),
    RewriteMode.GENERAL: (
        SlotLabel("Professional", "💼"), SlotLabel("Direct", "🎯"), SlotLabel("Collaborative", "🤝"),
    ),
}

SCENARIO_MODES: Dict[ScenarioTag, RewriteMode] = {
    ScenarioTag.CUSTOMER_COMPLAINT: RewriteMode.CRISIS_RESPONSE,
    ScenarioTag.PUBLIC_REPLY: RewriteMode.REPUTATION_SHIELD,
    ScenarioTag.EXECUTIVE_COMMUNICATION: RewriteMode.PROFESSIONAL_PUSHBACK,
    ScenarioTag.CONFLICT_ESCALATION: RewriteMode.DE_ESCALATION,
    ScenarioTag.APOLOGY_NEEDED: RewriteMode.APOLOGY_FRAMEWORK,
}

# Smoothing context chosen from the target tone
TONE_SMOOTH_MODES: Dict[Tone, RewriteMode] = {
    Tone.FRIENDLY: RewriteMode.DE_ESCALATION,
    Tone.BALANCED: RewriteMode.GENERAL,
    Tone.FIRM: RewriteMode.PROFESSIONAL_PUSHBACK,
}

# Representative slider positions for each tone
TONE_SLIDER_VALUES: Dict[Tone, int] = {
    Tone.FRIENDLY: 25,
    Tone.BALANCED: 50,
    Tone.FIRM: 75,
}


def select_rewrite_mode(assessment: RiskAssessment, panic: bool = False) -> RewriteMode:
    """Pick the rewrite mode for an assessed draft.

    Panic mode always forces the reputation shield. A detected scenario
    maps to its own mode; for general messages a high overall risk
    still gets the shield and a high emotional tier gets de-escalation.
    """
    if panic:
        return RewriteMode.REPUTATION_SHIELD

    scenario_mode = SCENARIO_MODES.get(assessment.scenario.tag)
    if scenario_mode is not None:
        return scenario_mode

    if assessment.overall_risk == RiskTier.HIGH:
        return RewriteMode.REPUTATION_SHIELD
    if assessment.emotional.tier == RiskTier.HIGH:
        return RewriteMode.DE_ESCALATION
    return RewriteMode.GENERAL


def resolve_requested_mode(scenario_type: Any) -> Optional[RewriteMode]:
    """Interpret a caller-supplied scenario override.

    Accepts either a rewrite mode name ("deEscalation") or a scenario tag
    ("customerComplaint"). None or "" means no override.

    Raises:
        RewriteValidationError: If the value is not recognised
    """
    if scenario_type is None or scenario_type == "":
        return None
    if not isinstance(scenario_type, str):
        raise RewriteValidationError("scenarioType must be a string")

    for mode in RewriteMode:
        if mode.value == scenario_type:
            return mode
    for tag, mode in SCENARIO_MODES.items():
        if tag.value == scenario_type:
            return mode

    raise RewriteValidationError(f"Unknown scenarioType: {scenario_type}")


def tone_from_slider(value: Any) -> Tone:
    """Map a 0-100 slider position to a tone (<=33 friendly, <=66 balanced)."""
    try:
        position = float(value)
    except (TypeError, ValueError):
        raise RewriteValidationError("toneValue must be a number between 0 and 100")
    if not 0 <= position <= 100:
        raise RewriteValidationError("toneValue must be a number between 0 and 100")

    if position <= 33:
        return Tone.FRIENDLY
    if position <= 66:
        return Tone.BALANCED
    return Tone.FIRM


def labels_for(mode: RewriteMode) -> Dict[str, Dict[str, str]]:
    """Slot name -> label record for the popup."""
    return {
        slot: label.to_dict()
        for slot, label in zip(REWRITE_SLOTS, MODE_LABELS[mode])
    }


# =============================================================================
# REWRITE PROMPTS
# =============================================================================
_REWRITE_HEADER = (
    "You are RealTalk Draft, a message rewriting specialist. The user has written "
    "a message they want to send. REWRITE their message into 3 improved versions "
    "they can send instead. Never reply to the message."
)

_FORMAT_RULE = (
    'Format: Return ONLY a JSON array with exactly 3 objects, each with "type" '
    'and "text" fields. Keep each text under 280 characters.'
)

_MODE_INSTRUCTIONS: Dict[RewriteMode, Tuple[str, Tuple[str, ...]]] = {
    RewriteMode.REPUTATION_SHIELD: (
        "This is a HIGH REPUTATION RISK scenario. The message may be screenshotted or shared.",
        (
            "Eliminate all inflammatory language",
            "Remove personal attacks or blame",
            "Use \"I\" statements exclusively",
            "Suggest next steps that de-escalate",
        ),
    ),
    RewriteMode.DE_ESCALATION: (
        "This is a CONFLICT ESCALATION scenario. Make the draft calmer with the same intent.",
        (
            "Remove all accusatory language",
            "Transform anger into concern",
            "Focus on shared goals and solutions",
            "Avoid \"you\" statements that blame",
        ),
    ),
    RewriteMode.CRISIS_RESPONSE: (
        "This is a CUSTOMER CRISIS scenario. Keep the complaint's purpose but make it constructive.",
        (
            "Start by stating the issue clearly",
            "Ask for specific next steps or a timeline",
            "Keep an empathetic, professional register",
            "End with a clear request for resolution",
        ),
    ),
    RewriteMode.PROFESSIONAL_PUSHBACK: (
        "This is an EXECUTIVE COMMUNICATION scenario. Make the draft assertive and professional.",
        (
            "Be firm without being hostile",
            "State disagreement as a position, not an attack",
            "Use confident leadership language",
        ),
    ),
    RewriteMode.APOLOGY_FRAMEWORK: (
        "This is an APOLOGY scenario. Turn the draft into a clear, sincere apology.",
        (
            "Take clear responsibility without excuses",
            "Acknowledge the impact on the other person",
            "Describe the corrective action",
            "End with thanks for their patience",
        ),
    ),
}

_PLATFORM_RULES: Dict[str, Tuple[str, ...]] = {
    "slack": (
        "Use a casual but professional Slack tone",
        "Keep it short enough for a channel or thread",
    ),
    "gmail": (
        "Use formal email tone and structure",
        "Include appropriate email courtesy",
    ),
    "linkedin": (
        "Consider this may be public and affect professional reputation",
        "Build bridges, don't burn them",
    ),
    "reddit": (
        "This is a PUBLIC FORUM: avoid anything that invites pile-ons",
        "Remove personal information or identifiable details",
    ),
    "general": (
        "Use a general professional tone",
    ),
}

_RISK_RULES: Dict[RiskTier, Tuple[str, ...]] = {
    RiskTier.HIGH: (
        "CRISIS MODE: maximum diplomatic protection",
        "Remove all emotional or inflammatory language",
        "Focus only on solutions and next steps",
    ),
    RiskTier.MEDIUM: (
        "CAUTION MODE: professional tone with diplomatic language",
        "Remove harsh language, keep the respectful intent",
    ),
    RiskTier.LOW: (
        "STANDARD MODE: professional improvement with clear communication",
    ),
}


def _bullets(rules: Tuple[str, ...]) -> str:
    return "\n".join(f"- {rule}" for rule in rules)


def _slot_lines(mode: RewriteMode) -> str:
    return "\n".join(
        f"{index}. {label.label}" for index, label in enumerate(MODE_LABELS[mode], start=1)
    )


def build_rewrite_prompt(
    text: str,
    platform: str,
    mode: RewriteMode,
    risk_tier: RiskTier = RiskTier.MEDIUM,
) -> str:
    """Render the system prompt for a three-way rewrite.

    Args:
        text: Original draft
        platform: Normalized platform identifier
        mode: Rewrite mode; GENERAL selects the platform template
        risk_tier: Overall risk, used by the platform template rules

    Returns:
        System prompt text
    """
    if mode == RewriteMode.GENERAL:
        situation = f"Risk Level: {risk_tier.value}"
        rules = _PLATFORM_RULES.get(platform, _PLATFORM_RULES["general"]) + _RISK_RULES[risk_tier]
    else:
        situation, rules = _MODE_INSTRUCTIONS[mode]

    return "\n\n".join([
        _REWRITE_HEADER,
        f'Their draft message: "{text}"',
        situation,
        f"Provide 3 versions of THEIR message:\n{_slot_lines(mode)}",
        "Rules:\n" + _bullets(("Keep their same goal and intent",) + rules),
        _FORMAT_RULE,
    ])


# =============================================================================
# SMOOTH PROMPTS
# =============================================================================
_TONE_INSTRUCTIONS: Dict[Tone, Tuple[str, Tuple[str, ...]]] = {
    Tone.FRIENDLY: (
        "friendly and warm",
        (
            "Use warm, approachable language",
            "Add gentle courtesy words like \"please\" and \"thank you\"",
            "Use softer language that shows empathy",
        ),
    ),
    Tone.BALANCED: (
        "balanced and professional",
        (
            "Use clear, professional language",
            "Be polite but direct",
            "Strike a balance between friendly and business-like",
        ),
    ),
    Tone.FIRM: (
        "firm and assertive",
        (
            "Use confident, assertive language",
            "Be direct but still polite",
            "Make it sound decisive while remaining respectful",
        ),
    ),
}

_SMOOTH_CONTEXTS: Dict[RewriteMode, str] = {
    RewriteMode.DE_ESCALATION: "This appears to be a potentially tense situation that needs smoothing over.",
    RewriteMode.GENERAL: "This is a general communication that needs to sound more polished.",
    RewriteMode.PROFESSIONAL_PUSHBACK: "This is a situation where the person needs to be assertive but diplomatic.",
}


def build_smooth_prompt(text: str, tone: Tone, mode: Optional[RewriteMode] = None) -> str:
    """Render the system prompt for a single smoothed message.

    Args:
        text: Original draft
        tone: Target tone
        mode: Smoothing context; defaults to the tone's own context

    Returns:
        System prompt text
    """
    if mode is None:
        mode = TONE_SMOOTH_MODES[tone]
    description, instructions = _TONE_INSTRUCTIONS[tone]
    context = _SMOOTH_CONTEXTS.get(mode, _SMOOTH_CONTEXTS[RewriteMode.GENERAL])

    return "\n\n".join([
        'You are a "Smooth It" communication specialist. Turn rough, awkward or '
        "blunt messages into polished ones with the same core meaning.",
        f'Original message: "{text}"',
        f"TASK: Transform this into a single, polished message that is {description}.",
        "TONE INSTRUCTIONS:\n" + _bullets(instructions),
        "GENERAL RULES:\n" + _bullets((
            "Keep the core message and intent",
            "Fix awkward phrasing and grammar",
            "Add appropriate politeness markers",
            "Keep it concise but complete",
        )),
        f"CONTEXT: {context}",
        "Return ONLY the smoothed message as plain text. No quotes, no JSON, no explanations.",
    ])
