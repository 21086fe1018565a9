"""Individual parsers for supported media types."""

from .pdf_parser import PDFParser
from .docx_parser import DocxParser
from .text_parser import TextParser

__all__ = [
    "PDFParser",
    "DocxParser",
    "TextParser",
]
