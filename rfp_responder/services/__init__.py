"""Services for the proposal response pipeline."""

from .interfaces import BlobStore, KnowledgeRepository, ModelInvoker, ProposalRepository
from .claude_client import ClaudeClient
from .file_storage import FileStorage, get_file_storage
from .model_factory import get_model_invoker

__all__ = [
    "BlobStore",
    "KnowledgeRepository",
    "ModelInvoker",
    "ProposalRepository",
    "ClaudeClient",
    "FileStorage",
    "get_file_storage",
    "get_model_invoker",
]
