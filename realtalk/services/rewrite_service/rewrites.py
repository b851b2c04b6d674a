"""Validation of model answers.

A rewrite answer has exactly one accepted shape: a JSON array of three
objects with string "type" and "text" fields. Anything else, including
an object wrapping the array, is rejected and the caller falls back to
templated rewrites.
"""
import json
import re
from dataclasses import dataclass
from typing import Any, Dict, Tuple

from .config import MAX_REWRITE_LENGTH
from .errors import InvalidRewriteResponse

REWRITE_COUNT = 3

_SURROUNDING_QUOTES = re.compile(r"^[\"']|[\"']$")


@dataclass(frozen=True)
class Rewrite:
    """One rewritten version of the user's draft."""
    type: str
    text: str

    def to_dict(self) -> Dict[str, str]:
        return {"type": self.type, "text": self.text}


def parse_rewrites(raw: str) -> Tuple[Rewrite, Rewrite, Rewrite]:
    """Parse and validate a rewrite answer.

    Texts longer than 280 characters are cut at 280.

    Raises:
        InvalidRewriteResponse: If the answer is not exactly three
            {type, text} records
    """
    try:
        data = json.loads(raw)
    except (TypeError, ValueError) as e:
        raise InvalidRewriteResponse("Response is not valid JSON") from e

    if not isinstance(data, list):
        raise InvalidRewriteResponse(f"Expected a JSON array, got {type(data).__name__}")
    if len(data) != REWRITE_COUNT:
        raise InvalidRewriteResponse(f"Expected {REWRITE_COUNT} rewrites, got {len(data)}")

    rewrites = []
    for index, item in enumerate(data):
        if not isinstance(item, dict):
            raise InvalidRewriteResponse(f"Rewrite {index} is not an object")
        rewrite_type, text = item.get("type"), item.get("text")
        if not isinstance(rewrite_type, str) or not isinstance(text, str):
            raise InvalidRewriteResponse(f"Rewrite {index} needs string type and text")
        rewrites.append(Rewrite(type=rewrite_type, text=text[:MAX_REWRITE_LENGTH]))

    return tuple(rewrites)


def parse_smoothed_text(raw: Any) -> str:
    """Extract the smoothed message from a model answer.

    Accepts {"smoothedText": ...}, a JSON string, or plain text (with one
    layer of surrounding quotes removed). Answers over 280 characters are
    cut to 277 characters plus "...".

    Raises:
        InvalidRewriteResponse: If no text could be extracted
    """
    if not isinstance(raw, str):
        raise InvalidRewriteResponse("Smooth response is not text")

    smoothed = raw
    try:
        parsed = json.loads(raw)
    except ValueError:
        smoothed = _SURROUNDING_QUOTES.sub("", raw)
    else:
        if isinstance(parsed, dict) and isinstance(parsed.get("smoothedText"), str):
            smoothed = parsed["smoothedText"]
        elif isinstance(parsed, str):
            smoothed = parsed

    smoothed = smoothed.strip()
    if not smoothed:
        raise InvalidRewriteResponse("Smooth response is empty")

    return truncate_smoothed(smoothed)


def truncate_smoothed(text: str) -> str:
    if len(text) > MAX_REWRITE_LENGTH:
        return text[:MAX_REWRITE_LENGTH - 3] + "..."
    return text
