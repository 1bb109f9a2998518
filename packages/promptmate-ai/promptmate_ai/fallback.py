"""Offline rewrite used when the generative-language provider is unavailable"""
import re
import time
from typing import Optional

from .result import RewriteResult

MOCK_MODEL_NAME = "mock"
MOCK_NOTE = "This is a mock response. Please configure a valid GEMINI_API_KEY for actual AI rewriting."

_WHITESPACE = re.compile(r"\s+")
_PRONOUN_I = re.compile(r"\bi\b")
_WORD_U = re.compile(r"\bu\b")
_TERMINAL_PUNCTUATION = re.compile(r"[.!?]$")

TONE_WRAPPERS = {
    "formal": ("I would like to formally request assistance with the following: ", ""),
    "friendly": ("Hi there! ", " Hope this helps!"),
    "casual": ("Hey, ", ""),
}

EMAIL_TEMPLATE = "Subject: Request for Assistance\n\nDear [Recipient],\n\n{body}\n\nBest regards,\n[Your Name]"


def fallback_rewrite(text: str, tone: str, prompt_type: str) -> str:
    """
    Deterministic "improved" version of text

    Collapses whitespace, capitalizes the first letter and the pronoun "i",
    expands "u" to "you", ends the text with punctuation, then applies the
    tone wrapper and, for emails, the email template.
    """
    rewritten = _WHITESPACE.sub(" ", text).strip()
    rewritten = _PRONOUN_I.sub("I", rewritten)
    rewritten = _WORD_U.sub("you", rewritten)
    if rewritten:
        rewritten = rewritten[0].upper() + rewritten[1:]

    if not _TERMINAL_PUNCTUATION.search(rewritten):
        rewritten += "."

    prefix, suffix = TONE_WRAPPERS.get(tone, ("", ""))
    rewritten = f"{prefix}{rewritten}{suffix}"

    if prompt_type == "email":
        rewritten = EMAIL_TEMPLATE.format(body=rewritten)

    return rewritten


def mock_response(
    original_prompt: str,
    tone: str,
    prompt_type: str,
    started_at: Optional[float] = None,
) -> RewriteResult:
    """Wrap the fallback rewrite as a successful result from the mock model"""
    started_at = started_at if started_at is not None else time.monotonic()
    rewritten = fallback_rewrite(original_prompt, tone, prompt_type)

    return RewriteResult(
        success=True,
        rewritten_prompt=rewritten,
        metadata={
            "processingTime": int((time.monotonic() - started_at) * 1000),
            "model": MOCK_MODEL_NAME,
            "tone": tone,
            "type": prompt_type,
            "originalLength": len(original_prompt),
            "rewrittenLength": len(rewritten),
            "apiCost": 0,
            "note": MOCK_NOTE,
        },
    )
