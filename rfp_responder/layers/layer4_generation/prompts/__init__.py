from .answer_prompts import (
    ANSWER_PROMPT,
    CONTEXT_BLOCK,
    IMPROVE_PROMPT,
    SUMMARY_PROMPT,
    FALLBACK_ANSWERS,
    GENERIC_FALLBACK_ANSWER,
)

__all__ = [
    "ANSWER_PROMPT",
    "CONTEXT_BLOCK",
    "IMPROVE_PROMPT",
    "SUMMARY_PROMPT",
    "FALLBACK_ANSWERS",
    "GENERIC_FALLBACK_ANSWER",
]
