"""Tests for model answer validation and templated fallbacks."""
import json

import pytest

from realtalk.shared.models import Tone
from realtalk.services.rewrite_service.errors import InvalidRewriteResponse
from realtalk.services.rewrite_service.fallback import (
    EMPTY_SMOOTH_FALLBACK,
    fallback_rewrites,
    fallback_smooth,
)
from realtalk.services.rewrite_service.prompts import RewriteMode
from realtalk.services.rewrite_service.rewrites import Rewrite, parse_rewrites, parse_smoothed_text


def _answer(count=3, text="Could we talk about this?"):
    return json.dumps([{"type": f"type{i}", "text": text} for i in range(count)])


class TestParseRewrites:
    """Tests for the three-rewrite answer shape."""

    def test_valid_answer(self):
        """A JSON array of three rewrites should parse."""
        rewrites = parse_rewrites(_answer())

        assert len(rewrites) == 3
        assert rewrites[0] == Rewrite(type="type0", text="Could we talk about this?")

    def test_long_text_is_cut_at_280(self):
        """Rewrite text should be cut at 280 characters."""
        rewrites = parse_rewrites(_answer(text="x" * 400))

        assert all(len(rewrite.text) == 280 for rewrite in rewrites)

    @pytest.mark.parametrize("count", [2, 4])
    def test_wrong_count(self, count):
        with pytest.raises(InvalidRewriteResponse):
            parse_rewrites(_answer(count=count))

    def test_wrapped_array_is_rejected(self):
        """The array must be the whole answer, not wrapped in an object."""
        wrapped = json.dumps({"rewrites": json.loads(_answer())})

        with pytest.raises(InvalidRewriteResponse):
            parse_rewrites(wrapped)

    def test_not_json(self):
        with pytest.raises(InvalidRewriteResponse):
            parse_rewrites("Here are three rewrites: 1. ...")

    def test_missing_fields(self):
        answer = json.dumps([{"type": "a", "text": "x"}, {"type": "b"}, {"type": "c", "text": "z"}])

        with pytest.raises(InvalidRewriteResponse):
            parse_rewrites(answer)

    def test_non_object_items(self):
        with pytest.raises(InvalidRewriteResponse):
            parse_rewrites(json.dumps(["a", "b", "c"]))


class TestParseSmoothedText:
    """Tests for single-message answers."""

    def test_plain_text(self):
        assert parse_smoothed_text("Thanks for your patience.") == "Thanks for your patience."

    def test_surrounding_quotes_removed(self):
        """Quotes around the smoothed text should be stripped."""
        assert parse_smoothed_text('"Thanks for your patience."') == "Thanks for your patience."

    def test_json_object(self):
        assert parse_smoothed_text('{"smoothedText": "Happy to help!"}') == "Happy to help!"

    def test_long_answer_truncated(self):
        smoothed = parse_smoothed_text("y" * 300)

        assert len(smoothed) == 280
        assert smoothed.endswith("...")

    def test_empty_answer(self):
        with pytest.raises(InvalidRewriteResponse):
            parse_smoothed_text("   ")


class TestFallbackRewrites:
    """Tests for deterministic templated rewrites."""

    def test_fixed_sets_do_not_echo_draft(self):
        """Fixed fallback sets should never echo the draft."""
        rewrites = fallback_rewrites("you are all idiots", RewriteMode.REPUTATION_SHIELD)

        assert [r.type for r in rewrites] == ["professional", "direct", "collaborative"]
        assert all("idiots" not in r.text for r in rewrites)

    def test_template_modes_embed_excerpt(self):
        rewrites = fallback_rewrites("the report is late", RewriteMode.GENERAL)

        assert rewrites[0].text == (
            "I wanted to bring to your attention: the report is late. "
            "I'd appreciate your guidance on how to proceed."
        )
        assert rewrites[1].text == "I need to discuss: the report is late. Can we schedule time to address this?"

    def test_long_draft_is_excerpted(self):
        """Long drafts should be excerpted in template fallbacks."""
        rewrites = fallback_rewrites("a" * 150, RewriteMode.APOLOGY_FRAMEWORK)

        assert ("a" * 100 + "...") in rewrites[2].text
        assert ("a" * 101) not in rewrites[2].text

    def test_deterministic(self):
        assert fallback_rewrites("same", RewriteMode.GENERAL) == fallback_rewrites("same", RewriteMode.GENERAL)


class TestFallbackSmooth:
    """Tests for tone-based smoothing templates."""

    def test_friendly_capitalizes(self):
        """Friendly smoothing should capitalize the first letter."""
        smoothed = fallback_smooth("  can we move lunch  ", Tone.FRIENDLY)

        assert smoothed == (
            "I hope you're doing well! Can we move lunch. "
            "Thank you so much for your time and understanding!"
        )

    def test_balanced(self):
        assert fallback_smooth("the heater is broken", Tone.BALANCED) == (
            "I wanted to reach out regarding: the heater is broken. "
            "I'd appreciate your assistance with this matter."
        )

    def test_firm(self):
        assert fallback_smooth("the heater is broken", Tone.FIRM).startswith(
            "I need to address the following: the heater is broken."
        )

    def test_empty_text(self):
        assert fallback_smooth("", Tone.FIRM) == EMPTY_SMOOTH_FALLBACK
