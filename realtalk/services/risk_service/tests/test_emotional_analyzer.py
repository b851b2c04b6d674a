"""Tests for EmotionalAnalyzer."""
import pytest

from realtalk.shared.models import RiskTier
from realtalk.services.risk_service.emotional_analyzer import EmotionalAnalyzer


@pytest.fixture
def analyzer():
    return EmotionalAnalyzer()


class TestLexiconTiers:
    """Tests for keyword matching against the tiered lexicon."""

    def test_high_keyword_returns_high(self, analyzer):
        """A high-tier keyword should return HIGH emotional risk."""
        result = analyzer.analyze("this is terrible")

        assert result.tier == RiskTier.HIGH
        assert "terrible" in result.high_triggers

    def test_multi_word_phrase_matches(self, analyzer):
        """Multi-word phrases should match as a whole."""
        result = analyzer.analyze("well, you never listen to me")

        assert result.tier == RiskTier.HIGH
        assert "you never" in result.high_triggers

    def test_medium_keyword_returns_medium(self, analyzer):
        """A medium-tier keyword should return MEDIUM."""
        result = analyzer.analyze("i am a bit disappointed")

        assert result.tier == RiskTier.MEDIUM
        assert result.medium_triggers == ("disappointed",)
        assert result.high_triggers == ()

    def test_low_keyword_stays_low(self, analyzer):
        """Low-tier keywords should not raise the level."""
        result = analyzer.analyze("i think maybe we could try again")

        assert result.tier == RiskTier.LOW
        assert "think" in result.low_triggers
        assert "maybe" in result.low_triggers

    def test_matching_is_case_insensitive(self, analyzer):
        """Keywords should be detected regardless of case."""
        result = analyzer.analyze("That was Ridiculous")

        assert "ridiculous" in result.high_triggers

    def test_repeated_keyword_reported_once(self, analyzer):
        """A repeated keyword should be reported once."""
        result = analyzer.analyze("terrible terrible terrible")

        assert result.high_triggers == ("terrible",)

    def test_triggers_partitioned_by_tier(self, analyzer):
        result = analyzer.analyze("i feel frustrated, this is awful")

        assert result.triggers[RiskTier.HIGH] == ("awful",)
        assert result.triggers[RiskTier.MEDIUM] == ("frustrated",)
        assert result.triggers[RiskTier.LOW] == ("feel",)


class TestStructuralSignals:
    """Tests for caps and punctuation detection."""

    def test_all_caps_escalates_to_high(self, analyzer):
        """All-caps drafts should escalate to HIGH."""
        result = analyzer.analyze("PLEASE STOP THAT")

        assert result.has_excessive_caps is True
        assert result.tier == RiskTier.HIGH
        assert "excessive caps" in result.high_triggers
        assert result.caps_words == ("PLEASE", "STOP", "THAT")

    def test_single_capital_letter_is_not_shouting(self, analyzer):
        """A single capital letter should not count as shouting."""
        result = analyzer.analyze("I will send it over")

        assert result.has_excessive_caps is False
        assert result.caps_words == ()

    def test_caps_trigger_added_once(self, analyzer):
        result = analyzer.analyze("WHY WOULD YOU DO THIS")

        assert result.high_triggers.count("excessive caps") == 1

    def test_repeated_punctuation_is_medium(self, analyzer):
        """Repeated ! or ? should raise the level to MEDIUM."""
        result = analyzer.analyze("why would you do that?!?")

        assert result.has_excessive_punctuation is True
        assert result.tier == RiskTier.MEDIUM
        assert "excessive punctuation" in result.medium_triggers

    def test_single_punctuation_is_ignored(self, analyzer):
        """A single ! should not change the level."""
        result = analyzer.analyze("see you tomorrow!")

        assert result.has_excessive_punctuation is False
        assert result.tier == RiskTier.LOW


class TestEdgeCases:
    """Tests for empty and malformed input."""

    def test_empty_text_is_low(self, analyzer):
        """Empty text should return LOW."""
        result = analyzer.analyze("")

        assert result.tier == RiskTier.LOW
        assert result.high_triggers == ()
        assert result.medium_triggers == ()
        assert result.low_triggers == ()

    @pytest.mark.parametrize("value", [None, 42, ["angry"], {"text": "angry"}])
    def test_non_string_treated_as_empty(self, analyzer, value):
        """Non-string input should be treated as empty text."""
        assert analyzer.analyze(value) == analyzer.analyze("")

    def test_analysis_is_idempotent(self, analyzer):
        text = "This is UNACCEPTABLE!! I feel ignored"
        assert analyzer.analyze(text) == analyzer.analyze(text)
        assert analyzer.analyze(text).to_dict() == analyzer.analyze(text).to_dict()
