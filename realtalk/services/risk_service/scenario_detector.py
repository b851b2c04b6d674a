"""Scenario and urgency detection.

The scenario detector scores a draft against each scenario's keyword list
and keeps the best match. Scenarios are evaluated in the order declared in
SCENARIO_DEFINITIONS (customerComplaint, publicReply, executiveCommunication,
conflictEscalation, apologyNeeded); on equal match counts the earlier one
wins.
"""
import logging
from typing import Any, Optional, Tuple

from realtalk.shared.models import (
    RiskTier,
    ScenarioAssessment,
    ScenarioTag,
    UrgencyAssessment,
)
from .config import (
    GENERAL_SCENARIO_CONTEXT,
    SCENARIO_DEFINITIONS,
    URGENCY_KEYWORDS,
    ScenarioDefinition,
)
from .inputs import coerce_text, matched_phrases

logger = logging.getLogger(__name__)

GENERAL_SCENARIO = ScenarioAssessment(
    tag=ScenarioTag.GENERAL,
    context=GENERAL_SCENARIO_CONTEXT,
    tier=RiskTier.LOW,
    match_count=0,
)


class ScenarioDetector:
    """Picks the communicative scenario that best fits a draft."""

    def __init__(self, definitions: Tuple[ScenarioDefinition, ...] = SCENARIO_DEFINITIONS):
        """Initialize detector.

        Args:
            definitions: Ordered scenario table (order is the tie-break)
        """
        self.definitions = definitions

    def detect(self, text: Any, context: Any = None) -> ScenarioAssessment:
        """Detect the communication scenario.

        Args:
            text: Draft text (non-string input is treated as empty)
            context: Accepted for interface parity; not used for scoring

        Returns:
            Best matching ScenarioAssessment, or the general scenario
        """
        lowercase_text = coerce_text(text).lower()

        best: Optional[ScenarioDefinition] = None
        best_count = 0
        for definition in self.definitions:
            match_count = sum(1 for keyword in definition.keywords if keyword in lowercase_text)
            # Strictly greater keeps the earliest scenario on ties
            if match_count > best_count:
                best = definition
                best_count = match_count

        if best is None:
            return GENERAL_SCENARIO

        logger.debug(
            "SCENARIO_DETECTED",
            extra={"scenario": best.tag.value, "match_count": best_count}
        )

        return ScenarioAssessment(
            tag=best.tag,
            context=best.context,
            tier=best.tier,
            match_count=best_count,
        )


class UrgencyDetector:
    """Flags urgency keywords in a draft."""

    def detect(self, text: Any) -> UrgencyAssessment:
        lowercase_text = coerce_text(text).lower()
        found = matched_phrases(lowercase_text, URGENCY_KEYWORDS)
        return UrgencyAssessment(has_urgency=bool(found), urgency_words=tuple(found))
