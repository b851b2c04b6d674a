"""Input coercion shared by the analyzers.

Analyzers never raise on malformed input: anything that is not a string
is assessed as empty text, and anything that is not a mapping is treated
as an empty context.
"""
from typing import Any, Mapping, Optional


def coerce_text(text: Any) -> str:
    """Return text unchanged if it is a string, otherwise ""."""
    return text if isinstance(text, str) else ""


def coerce_context(context: Any) -> Mapping[str, Any]:
    """Return context unchanged if it is a mapping, otherwise {}."""
    return context if isinstance(context, Mapping) else {}


def context_url(context: Any) -> Optional[str]:
    """Extract a usable URL hint from context, or None."""
    url = coerce_context(context).get("url")
    if isinstance(url, str) and url:
        return url
    return None


def contains_any(lowercase_text: str, phrases) -> bool:
    return any(phrase in lowercase_text for phrase in phrases)


def matched_phrases(lowercase_text: str, phrases) -> list:
    """Phrases occurring as substrings, in lexicon order, each at most once."""
    return [phrase for phrase in phrases if phrase in lowercase_text]
