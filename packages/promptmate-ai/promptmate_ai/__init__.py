"""
PromptMate AI package.
Rewrites text through the Gemini API, with a deterministic offline fallback.
"""

__version__ = "0.1.0"

from .client import (  # noqa: F401
    RewriteClient,
    GeminiRewriteClient,
    MockRewriteClient,
    ProviderError,
    calculate_cost,
    get_rewrite_client,
)
from .fallback import fallback_rewrite, mock_response  # noqa: F401
from .instructions import TONE_INSTRUCTIONS, TYPE_INSTRUCTIONS, build_system_prompt  # noqa: F401
from .result import RewriteResult, classify_failure, ERROR_MESSAGES  # noqa: F401

__all__ = [
    "RewriteClient",
    "GeminiRewriteClient",
    "MockRewriteClient",
    "ProviderError",
    "calculate_cost",
    "get_rewrite_client",
    "fallback_rewrite",
    "mock_response",
    "TONE_INSTRUCTIONS",
    "TYPE_INSTRUCTIONS",
    "build_system_prompt",
    "RewriteResult",
    "classify_failure",
    "ERROR_MESSAGES",
]
