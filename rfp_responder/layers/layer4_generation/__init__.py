"""Layer 4: Generation - Prompting, model invocation and fallback answers."""

from .answer_generator import (
    AnswerGenerator,
    KNOWLEDGE_BASE_SOURCE,
    AI_GENERATED_SOURCE,
    build_answer_prompt,
    fallback_answer,
    analyze_complexity,
)

__all__ = [
    "AnswerGenerator",
    "KNOWLEDGE_BASE_SOURCE",
    "AI_GENERATED_SOURCE",
    "build_answer_prompt",
    "fallback_answer",
    "analyze_complexity",
]
