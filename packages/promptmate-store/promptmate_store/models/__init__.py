"""Database models"""
from .prompts import (
    Prompt,
    Tone,
    PromptType,
    count_words,
    MAX_ORIGINAL_LENGTH,
    MAX_REWRITTEN_LENGTH,
    DEFAULT_MODEL_NAME,
)

__all__ = [
    "Prompt",
    "Tone",
    "PromptType",
    "count_words",
    "MAX_ORIGINAL_LENGTH",
    "MAX_REWRITTEN_LENGTH",
    "DEFAULT_MODEL_NAME",
]
