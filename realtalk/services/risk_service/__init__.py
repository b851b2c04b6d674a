"""Risk Service: heuristic risk assessment and scenario detection.

Inspects a drafted message and classifies its emotional tone, platform
exposure and communicative scenario. The rewrite service uses the result
to pick a prompt template and tone; the popup uses it for badges and the
panic-mode suggestion.

Components:
- config.py: Lexicon tables and aggregation thresholds
- emotional_analyzer.py, platform_analyzer.py, scenario_detector.py,
  politeness_analyzer.py: Independent analyzers
- assessor.py: RiskAssessor aggregating the analyzers
- presentation.py: Display text for recommendation codes
- handler.py: Flask HTTP endpoints (/health, /ready, /assess)

Usage:
    from realtalk.services.risk_service import RiskAssessor
    assessment = RiskAssessor().assess(text, "slack", {"url": url})
"""

from .assessor import (
    RiskAssessor,
    assess_risk,
    analyze_emotional_content,
    analyze_platform_risk,
    detect_scenario,
    detect_urgency_factors,
    analyze_politeness,
)
from .config import RiskConfig, ScenarioDefinition, SCENARIO_DEFINITIONS
from .emotional_analyzer import EmotionalAnalyzer
from .platform_analyzer import PlatformRiskAnalyzer
from .politeness_analyzer import PolitenessAnalyzer
from .scenario_detector import ScenarioDetector, UrgencyDetector
from .presentation import RECOMMENDATION_MESSAGES, render_recommendations

__all__ = [
    "RiskAssessor",
    "assess_risk",
    "analyze_emotional_content",
    "analyze_platform_risk",
    "detect_scenario",
    "detect_urgency_factors",
    "analyze_politeness",
    "RiskConfig",
    "ScenarioDefinition",
    "SCENARIO_DEFINITIONS",
    "EmotionalAnalyzer",
    "PlatformRiskAnalyzer",
    "PolitenessAnalyzer",
    "ScenarioDetector",
    "UrgencyDetector",
    "RECOMMENDATION_MESSAGES",
    "render_recommendations",
]
