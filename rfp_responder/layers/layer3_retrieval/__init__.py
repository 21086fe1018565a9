"""Layer 3: Retrieval - Keyword-weighted knowledge ranking and context rendering."""

from .retriever import (
    DEFAULT_TOP_K,
    tokenize,
    score_entry,
    highlight,
    retrieve,
    render_context,
)

__all__ = [
    "DEFAULT_TOP_K",
    "tokenize",
    "score_entry",
    "highlight",
    "retrieve",
    "render_context",
]
