"""
업로드된 RFP 파일 검사 유틸리티.

검사 순서 (validate_upload):
1. 파일명: 경로 구분자, 제어/예약 문자, 길이, 확장자만 있는 이름
2. 크기: 0바이트 거부, max_file_size_mb 초과 거부
3. 내용: 바이너리 형식은 매직 넘버가 확장자와 맞아야 함

모든 실패는 InputValidationError(ERR_INPUT_001)로 보고됩니다.
지원 형식 여부는 여기서 판단하지 않고 텍스트 추출기가 UnsupportedMediaTypeError로 거절합니다.
"""

import re
from pathlib import PurePosixPath

from rfp_responder.config import get_settings
from rfp_responder.exceptions import InputValidationError

# 바이너리 형식의 선두 바이트 (확장자별 허용 목록)
_OOXML = b"PK"  # zip
_OLE2 = b"\xd0\xcf\x11"
FILE_SIGNATURES = {
    ".pdf": (b"%PDF",),
    ".docx": (_OOXML,),
    # 확장자만 .doc로 바뀐 OOXML 문서도 추출기가 처리함
    ".doc": (_OLE2, _OOXML),
}

_FORBIDDEN_CHARS = re.compile(r'[<>:"|?*\x00-\x1f]')
_MEGABYTE = 1024 * 1024


def validate_filename(filename: str) -> str:
    """
    업로드 파일명을 검사하고 앞뒤 공백이 없는 이름을 돌려줍니다.

    Raises:
        InputValidationError: 비어 있거나, 경로가 섞였거나, 금지 문자/길이 위반
    """
    name = (filename or "").strip()
    if not name:
        raise InputValidationError("파일명이 비어있습니다")

    if "/" in name or "\\" in name or ".." in name:
        raise InputValidationError(
            "파일명에 경로를 포함할 수 없습니다",
            details={"filename": filename},
        )

    if _FORBIDDEN_CHARS.search(name):
        raise InputValidationError(
            "파일명에 허용되지 않는 문자가 있습니다",
            details={"filename": filename},
        )

    limit = get_settings().max_filename_length
    if len(name) > limit:
        raise InputValidationError(
            f"파일명은 {limit}자를 넘을 수 없습니다",
            details={"filename": name, "length": len(name)},
        )

    # ".pdf"처럼 이름 없이 확장자만 있는 경우
    if name.startswith("."):
        raise InputValidationError(
            "확장자만 있는 파일명은 사용할 수 없습니다",
            details={"filename": name},
        )

    return name


def validate_file_size(file_size: int) -> None:
    """빈 파일과 크기 제한을 넘는 파일을 거부합니다."""
    if file_size <= 0:
        raise InputValidationError("빈 파일은 업로드할 수 없습니다")

    limit_mb = get_settings().max_file_size_mb
    if file_size > limit_mb * _MEGABYTE:
        raise InputValidationError(
            f"파일이 너무 큽니다 (최대 {limit_mb}MB)",
            details={"file_size_bytes": file_size, "max_size_bytes": limit_mb * _MEGABYTE},
        )


def validate_file_signature(content: bytes, extension: str) -> None:
    """바이너리 형식이면 선두 바이트를 확인합니다. 텍스트 계열은 검사하지 않습니다."""
    expected = FILE_SIGNATURES.get(extension)
    if expected is not None and not content.startswith(expected):
        raise InputValidationError(
            f"파일 내용이 {extension} 형식이 아닙니다",
            details={"extension": extension},
        )


def validate_document_count(count: int) -> None:
    """한 번에 올리는 파일 수는 1 ~ max_document_count개."""
    limit = get_settings().max_document_count
    if not 1 <= count <= limit:
        raise InputValidationError(
            f"파일은 1개 이상 {limit}개 이하로 업로드해야 합니다",
            details={"count": count, "max_count": limit},
        )


def validate_upload(filename: str, content: bytes) -> tuple[str, str]:
    """
    업로드 파일 하나에 대한 검사를 순서대로 수행합니다.

    Returns:
        (정리된 파일명, 소문자 확장자. 확장자가 없으면 빈 문자열)
    """
    name = validate_filename(filename)
    validate_file_size(len(content))
    ext = PurePosixPath(name).suffix.lower()
    validate_file_signature(content, ext)
    return name, ext
