"""Politeness analyzer for Simple Mode ("Smooth It") suggestions.

Looks for the things that make an otherwise harmless message land badly:
blunt words, awkward filler, non-native phrasing, requests without
courtesy markers and abrupt one-liners. The number of issues drives the
severity and the suggested tone; a recognised everyday scenario can
override that tone.
"""
import logging
import re
from typing import Any, List, Optional, Sequence, Tuple

from realtalk.shared.models import (
    CommonScenario,
    PolitenessAssessment,
    PolitenessIssue,
    RiskTier,
    Tone,
)
from .config import (
    AWKWARDNESS_INDICATORS,
    BLUNTNESS_INDICATORS,
    COMMON_SCENARIOS,
    ESL_INDICATORS,
    GRATITUDE_MARKERS,
    PLEASE_MARKERS,
    REQUEST_PHRASES,
    TERMINAL_PUNCTUATION,
    RiskConfig,
)
from .inputs import coerce_text, contains_any, matched_phrases

logger = logging.getLogger(__name__)

# Scenario overrides applied after the severity-based tone
SCENARIO_TONE_OVERRIDES = {
    CommonScenario.LANDLORD_REQUEST: Tone.FIRM,
    CommonScenario.APOLOGY: Tone.FRIENDLY,
}


class PolitenessAnalyzer:
    """Scores how socially smooth a drafted message is."""

    def __init__(self, config: Optional[RiskConfig] = None):
        """Initialize analyzer.

        Args:
            config: Risk configuration (abrupt-ending length limit)
        """
        self.config = config or RiskConfig()
        self._bluntness_patterns = self._compile_patterns(BLUNTNESS_INDICATORS)

    def _compile_patterns(self, keywords: Sequence[str]) -> List[Tuple[str, re.Pattern]]:
        """Compile keywords into word-boundary patterns.

        Word boundaries prevent partial matches, e.g. "fine" won't
        match "finesse" and "k" won't match "ok".
        """
        return [
            (keyword, re.compile(rf"\b{re.escape(keyword)}\b", re.IGNORECASE))
            for keyword in keywords
        ]

    def analyze(self, text: Any) -> PolitenessAssessment:
        """Analyze politeness and social smoothness of a message.

        Args:
            text: Draft text (non-string input is treated as empty)

        Returns:
            PolitenessAssessment with issues, severity and suggested tone
        """
        text = coerce_text(text)
        lowercase_text = text.lower()
        issues: List[PolitenessIssue] = []
        issue_count = 0

        blunt_words = [keyword for keyword, pattern in self._bluntness_patterns if pattern.search(text)]
        if blunt_words:
            issues.append(PolitenessIssue.BLUNT_LANGUAGE)
            issue_count += len(blunt_words)

        awkward_phrases = matched_phrases(lowercase_text, AWKWARDNESS_INDICATORS)
        if awkward_phrases:
            issues.append(PolitenessIssue.AWKWARD_PHRASING)
            issue_count += len(awkward_phrases)

        esl_phrases = matched_phrases(lowercase_text, ESL_INDICATORS)
        if esl_phrases:
            issues.append(PolitenessIssue.ESL_PATTERNS)
            issue_count += len(esl_phrases)

        if contains_any(lowercase_text, REQUEST_PHRASES):
            if not contains_any(lowercase_text, PLEASE_MARKERS):
                issues.append(PolitenessIssue.MISSING_PLEASE)
                issue_count += 1
            if not contains_any(lowercase_text, GRATITUDE_MARKERS):
                issues.append(PolitenessIssue.MISSING_GRATITUDE)
                issue_count += 1

        if self._is_abrupt(text):
            issues.append(PolitenessIssue.ABRUPT_ENDING)
            issue_count += 1

        detected_scenario = self.detect_common_scenario(lowercase_text)
        severity, suggested_tone = self._severity_and_tone(issue_count)
        suggested_tone = SCENARIO_TONE_OVERRIDES.get(detected_scenario, suggested_tone)

        logger.debug(
            "POLITENESS_ANALYSIS_COMPLETED",
            extra={
                "issue_count": issue_count,
                "issues": [issue.value for issue in issues],
                "severity": severity.value,
                "suggested_tone": suggested_tone.value,
                "detected_scenario": detected_scenario.value if detected_scenario else None,
            }
        )

        return PolitenessAssessment(
            needs_smoothing=issue_count > 0,
            severity=severity,
            suggested_tone=suggested_tone,
            detected_scenario=detected_scenario,
            issues=tuple(issues),
            issue_count=issue_count,
        )

    @staticmethod
    def detect_common_scenario(lowercase_text: str) -> Optional[CommonScenario]:
        """Return the first everyday scenario with a keyword hit.

        Scenarios are checked in COMMON_SCENARIOS order (cancellation,
        landlordRequest, apology, request) and scanning stops at the
        first match.
        """
        for scenario, keywords in COMMON_SCENARIOS:
            if contains_any(lowercase_text, keywords):
                return scenario
        return None

    def _is_abrupt(self, text: str) -> bool:
        # Blank drafts carry no signal at all
        if not text.strip():
            return False
        if len(text) >= self.config.abrupt_ending_max_length:
            return False
        return not any(mark in text for mark in TERMINAL_PUNCTUATION)

    @staticmethod
    def _severity_and_tone(issue_count: int) -> Tuple[RiskTier, Tone]:
        if issue_count >= 3:
            return RiskTier.HIGH, Tone.FRIENDLY
        if issue_count >= 1:
            return (RiskTier.MEDIUM if issue_count >= 2 else RiskTier.LOW), Tone.BALANCED
        return RiskTier.LOW, Tone.BALANCED
