"""유틸리티 모듈."""

from .json_response import parse_json_response
from .validation import (
    validate_filename,
    validate_file_size,
    validate_file_signature,
    validate_document_count,
    validate_upload,
)

__all__ = [
    "parse_json_response",
    "validate_filename",
    "validate_file_size",
    "validate_file_signature",
    "validate_document_count",
    "validate_upload",
]
