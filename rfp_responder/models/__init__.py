"""Data models for the proposal response pipeline."""

from .proposal import (
    Category,
    QuestionStatus,
    ProposalStatus,
    Question,
    Proposal,
)
from .knowledge import KnowledgeEntry, ScoredEntry, RetrievalResult
from .generation import (
    GeneratedAnswer,
    ComplexityLevel,
    QuestionComplexity,
    QuestionGenerationOutcome,
    BulkGenerationResult,
    IngestFileResult,
)
from .error import ErrorResponse

__all__ = [
    # Proposal models
    "Category",
    "QuestionStatus",
    "ProposalStatus",
    "Question",
    "Proposal",
    # Knowledge models
    "KnowledgeEntry",
    "ScoredEntry",
    "RetrievalResult",
    # Generation models
    "GeneratedAnswer",
    "ComplexityLevel",
    "QuestionComplexity",
    "QuestionGenerationOutcome",
    "BulkGenerationResult",
    "IngestFileResult",
    # Error models
    "ErrorResponse",
]
