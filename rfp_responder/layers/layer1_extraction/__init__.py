"""Layer 1: Extraction - Media-type specific text extraction."""

from .base_parser import BaseParser
from .extractor import TextExtractor, get_text_extractor, EXTENSION_MEDIA_TYPES
from .text_normalizer import normalize

__all__ = [
    "BaseParser",
    "TextExtractor",
    "get_text_extractor",
    "EXTENSION_MEDIA_TYPES",
    "normalize",
]
