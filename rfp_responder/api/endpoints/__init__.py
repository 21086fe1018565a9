"""API endpoints package."""

from . import health
from . import proposals
from . import ai
from . import knowledge

__all__ = ["health", "proposals", "ai", "knowledge"]
