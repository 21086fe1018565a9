"""
PDF 파일 파서입니다.
PyPDF2를 사용하여 페이지별 텍스트를 추출합니다.
"""

import io
import logging

from PyPDF2 import PdfReader

from rfp_responder.exceptions import ExtractionError
from ..base_parser import BaseParser

logger = logging.getLogger(__name__)

PDF_MEDIA_TYPE = "application/pdf"


class PDFParser(BaseParser):
    """PDF(.pdf) 파일을 처리하는 파서입니다."""

    @property
    def supported_media_types(self) -> list[str]:
        return [PDF_MEDIA_TYPE]

    @property
    def supported_extensions(self) -> list[str]:
        return [".pdf"]

    def _extract(self, data: bytes, media_type: str) -> str:
        reader = PdfReader(io.BytesIO(data))

        # 빈 비밀번호로 열리지 않는 암호화 PDF는 추출 불가
        if reader.is_encrypted and not reader.decrypt(""):
            raise ExtractionError(
                "암호화된 PDF는 추출할 수 없습니다",
                details={"media_type": media_type, "cause": "encrypted"},
            )

        pages = []
        for page in reader.pages:
            pages.append(page.extract_text() or "")

        logger.info(f"[PDFParser] {len(pages)}페이지 추출 완료")
        # 페이지 경계는 폼피드로 표시 (정규화 단계에서 줄바꿈으로 변환됨)
        return "\f".join(pages)
