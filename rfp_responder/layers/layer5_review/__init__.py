"""Layer 5: Review - Question lifecycle (pending → drafted → approved | edited)."""

from .state_machine import (
    REVIEWED_STATUSES,
    can_generate,
    apply_generated_answer,
    apply_human_update,
    apply_improvement,
)

__all__ = [
    "REVIEWED_STATUSES",
    "can_generate",
    "apply_generated_answer",
    "apply_human_update",
    "apply_improvement",
]
