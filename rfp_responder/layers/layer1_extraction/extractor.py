"""
텍스트 추출기(Text Extractor) 모듈입니다.
미디어 타입에 맞는 파서를 찾아서 바이트 버퍼를 평문 텍스트로 변환합니다.
"""

import logging
from pathlib import Path
from typing import Dict, Optional

from rfp_responder.exceptions import UnsupportedMediaTypeError
from .base_parser import BaseParser
from .parsers.pdf_parser import PDF_MEDIA_TYPE
from .parsers.docx_parser import DOCX_MEDIA_TYPE, DOC_MEDIA_TYPE

logger = logging.getLogger(__name__)

# 파일 확장자 -> 미디어 타입
EXTENSION_MEDIA_TYPES = {
    ".pdf": PDF_MEDIA_TYPE,
    ".docx": DOCX_MEDIA_TYPE,
    ".doc": DOC_MEDIA_TYPE,
    ".txt": "text/plain",
    ".text": "text/plain",
    ".md": "text/markdown",
    ".markdown": "text/markdown",
}


class TextExtractor:
    """
    미디어 타입별 파서를 관리하는 추출기 클래스입니다.
    파서 인스턴스는 상태가 없으므로 한 번 만든 것을 재사용합니다.
    """

    def __init__(self):
        self._parsers: Dict[str, BaseParser] = {}
        self._register_parsers()

    def _register_parsers(self):
        """지원하는 파서들을 미디어 타입별로 등록하는 내부 함수"""
        from .parsers.pdf_parser import PDFParser
        from .parsers.docx_parser import DocxParser
        from .parsers.text_parser import TextParser

        for parser in (PDFParser(), DocxParser(), TextParser()):
            for media_type in parser.supported_media_types:
                self._parsers[media_type] = parser

    @property
    def supported_media_types(self) -> list[str]:
        return sorted(self._parsers)

    def get_parser(self, media_type: str) -> BaseParser:
        """
        미디어 타입에 맞는 파서를 반환합니다.
        `; charset=utf-8` 같은 파라미터는 무시합니다.
        """
        key = media_type.split(";")[0].strip().lower() if media_type else ""
        parser = self._parsers.get(key)
        if parser is None:
            raise UnsupportedMediaTypeError(
                f"지원하지 않는 파일 형식입니다: {media_type}",
                details={"media_type": media_type, "supported": self.supported_media_types},
            )
        return parser

    async def extract(self, data: bytes, media_type: str) -> str:
        """
        바이트 데이터를 텍스트로 추출합니다.

        Raises:
            UnsupportedMediaTypeError: 지원하지 않는 미디어 타입
            ExtractionError: 파서 실패 (손상된 파일, 암호화된 PDF 등)
        """
        parser = self.get_parser(media_type)
        key = media_type.split(";")[0].strip().lower()
        text = await parser.parse(data, key)
        logger.info(f"[Extractor] {key}: {len(data)} bytes -> {len(text)} chars")
        return text

    def detect_media_type(self, filename: str, content_type: Optional[str] = None) -> str:
        """
        컨텐츠 타입 힌트나 파일 확장자를 보고 미디어 타입을 추측합니다.
        알 수 없으면 힌트를 그대로 돌려주어 extract 단계에서 거절되도록 합니다.
        """
        if content_type:
            key = content_type.split(";")[0].strip().lower()
            if key in self._parsers:
                return key

        ext = Path(filename).suffix.lower() if filename else ""
        return EXTENSION_MEDIA_TYPES.get(ext, content_type or "application/octet-stream")


# 싱글톤 인스턴스 (파서는 설정만 가지고 있으므로 공유해도 안전)
_text_extractor: Optional[TextExtractor] = None


def get_text_extractor() -> TextExtractor:
    """TextExtractor 인스턴스를 반환합니다."""
    global _text_extractor
    if _text_extractor is None:
        _text_extractor = TextExtractor()
    return _text_extractor
