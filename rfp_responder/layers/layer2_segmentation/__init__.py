"""Layer 2: Segmentation - Section headings, question candidates and categories."""

from .classifier import classify, CATEGORY_KEYWORDS
from .segmenter import segment, split_sections, is_section_header, strip_question_prefix
from .question_extractor import QuestionExtractor

__all__ = [
    "classify",
    "CATEGORY_KEYWORDS",
    "segment",
    "split_sections",
    "is_section_header",
    "strip_question_prefix",
    "QuestionExtractor",
]
