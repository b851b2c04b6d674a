"""Emotional content analyzer.

Scans a draft against the tiered emotional lexicon plus two structural
signals:
- ALL-CAPS words (shouting) always push the message into the high tier
- Runs of repeated ! or ? count toward the medium tier
"""
import logging
import re
from typing import Any

from realtalk.shared.models import EmotionalAssessment, RiskTier
from .config import (
    EXCESSIVE_CAPS_TRIGGER,
    EXCESSIVE_PUNCTUATION_TRIGGER,
    HIGH_EMOTIONAL_TRIGGERS,
    LOW_EMOTIONAL_TRIGGERS,
    MEDIUM_EMOTIONAL_TRIGGERS,
)
from .inputs import coerce_text, matched_phrases

logger = logging.getLogger(__name__)

# Caps are matched on the original text, not the lower-cased copy
CAPS_WORD_PATTERN = re.compile(r"\b[A-Z]{2,}\b")
EXCESSIVE_PUNCTUATION_PATTERN = re.compile(r"[!?]{2,}")


class EmotionalAnalyzer:
    """Classifies the emotional tone of a drafted message."""

    def analyze(self, text: Any) -> EmotionalAssessment:
        """Analyze emotional content of a message.

        Args:
            text: Draft text (non-string input is treated as empty)

        Returns:
            EmotionalAssessment with the highest tier that has a trigger
        """
        text = coerce_text(text)
        lowercase_text = text.lower()

        high = matched_phrases(lowercase_text, HIGH_EMOTIONAL_TRIGGERS)
        medium = matched_phrases(lowercase_text, MEDIUM_EMOTIONAL_TRIGGERS)
        low = matched_phrases(lowercase_text, LOW_EMOTIONAL_TRIGGERS)

        caps_words = CAPS_WORD_PATTERN.findall(text)
        if caps_words:
            high.append(EXCESSIVE_CAPS_TRIGGER)

        has_excessive_punctuation = EXCESSIVE_PUNCTUATION_PATTERN.search(text) is not None
        if has_excessive_punctuation:
            medium.append(EXCESSIVE_PUNCTUATION_TRIGGER)

        # Low-tier triggers do not raise the tier above the default
        if high:
            tier = RiskTier.HIGH
        elif medium:
            tier = RiskTier.MEDIUM
        else:
            tier = RiskTier.LOW

        logger.debug(
            "EMOTIONAL_ANALYSIS_COMPLETED",
            extra={
                "tier": tier.value,
                "high_count": len(high),
                "medium_count": len(medium),
                "low_count": len(low),
                "caps_word_count": len(caps_words),
            }
        )

        return EmotionalAssessment(
            tier=tier,
            high_triggers=tuple(high),
            medium_triggers=tuple(medium),
            low_triggers=tuple(low),
            caps_words=tuple(caps_words),
            has_excessive_caps=bool(caps_words),
            has_excessive_punctuation=has_excessive_punctuation,
        )
