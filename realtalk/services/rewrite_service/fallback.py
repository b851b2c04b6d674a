"""Deterministic fallbacks used when the model call fails.

The same input always yields the same output. The shield, de-escalation
and crisis modes have fixed rewrites that never echo the draft; the other
modes embed an excerpt of it.
"""
from typing import Dict, Tuple

from realtalk.shared.models import Tone
from .config import FALLBACK_EXCERPT_LENGTH
from .prompts import RewriteMode
from .rewrites import Rewrite, truncate_smoothed

FIXED_FALLBACKS: Dict[RewriteMode, Tuple[Rewrite, Rewrite, Rewrite]] = {
    RewriteMode.REPUTATION_SHIELD: (
        Rewrite("professional", "I'd like to discuss this matter professionally. Could we schedule time to address this thoughtfully?"),
        Rewrite("direct", "I understand there may be concerns here. I'm committed to finding a constructive resolution."),
        Rewrite("collaborative", "I value our working relationship and would appreciate the opportunity to discuss this further."),
    ),
    RewriteMode.DE_ESCALATION: (
        Rewrite("professional", "I understand this is important to you. Let's work together to find a solution that works for everyone."),
        Rewrite("direct", "I hear your concerns and want to address them properly. Can we discuss this when we both have time to focus?"),
        Rewrite("collaborative", "I appreciate you bringing this up. Let's collaborate on finding the best path forward."),
    ),
    RewriteMode.CRISIS_RESPONSE: (
        Rewrite("professional", "Thank you for bringing this to my attention. I want to address this properly and will get back to you shortly."),
        Rewrite("direct", "I understand this needs immediate attention. Let me look into this and provide you with an update soon."),
        Rewrite("collaborative", "I appreciate your patience. I'm committed to resolving this and will keep you updated on progress."),
    ),
}

EMPTY_SMOOTH_FALLBACK = "I wanted to get in touch with you about something."


def excerpt(text: str) -> str:
    """First 100 characters of the draft, with "..." when it was cut."""
    if len(text) > FALLBACK_EXCERPT_LENGTH:
        return text[:FALLBACK_EXCERPT_LENGTH] + "..."
    return text


def fallback_rewrites(text: str, mode: RewriteMode) -> Tuple[Rewrite, Rewrite, Rewrite]:
    """Three template rewrites for the given mode."""
    fixed = FIXED_FALLBACKS.get(mode)
    if fixed is not None:
        return fixed

    base = excerpt(text)
    return (
        Rewrite("professional", f"I wanted to bring to your attention: {base}. I'd appreciate your guidance on how to proceed."),
        Rewrite("direct", f"I need to discuss: {base}. Can we schedule time to address this?"),
        Rewrite("collaborative", f"I'd like to work together on: {base}. What are your thoughts on next steps?"),
    )


def fallback_smooth(text: str, tone: Tone) -> str:
    """A single smoothed message built from a tone template."""
    base = text.strip() if isinstance(text, str) else ""
    if not base:
        return EMPTY_SMOOTH_FALLBACK

    if tone == Tone.FRIENDLY:
        smoothed = (
            f"I hope you're doing well! {base[0].upper()}{base[1:]}. "
            "Thank you so much for your time and understanding!"
        )
    elif tone == Tone.BALANCED:
        smoothed = f"I wanted to reach out regarding: {base}. I'd appreciate your assistance with this matter."
    else:
        smoothed = f"I need to address the following: {base}. Please let me know how we can proceed."

    return truncate_smoothed(smoothed)
