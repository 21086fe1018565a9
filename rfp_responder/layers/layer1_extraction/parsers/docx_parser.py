"""
Word 문서 파서입니다.
python-docx로 OOXML(.docx)을 읽고, 구형 .doc 파일은 가능한 범위에서만 처리합니다.
"""

import io
import logging
import re

from docx import Document

from rfp_responder.exceptions import ExtractionError
from ..base_parser import BaseParser

logger = logging.getLogger(__name__)

DOCX_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.wordprocessingml.document"
DOC_MEDIA_TYPE = "application/msword"

# 구형 .doc 바이너리에서 사람이 읽을 수 있는 텍스트 구간을 찾기 위한 패턴
_ASCII_RUN = re.compile(rb"[\x20-\x7e\t\r\n]{4,}")
_UTF16_RUN = re.compile(rb"(?:[\x20-\x7e\t\r\n]\x00){4,}")


class DocxParser(BaseParser):
    """Word(.docx, .doc) 파일을 처리하는 파서입니다."""

    @property
    def supported_media_types(self) -> list[str]:
        return [DOCX_MEDIA_TYPE, DOC_MEDIA_TYPE]

    @property
    def supported_extensions(self) -> list[str]:
        return [".docx", ".doc"]

    def _extract(self, data: bytes, media_type: str) -> str:
        if media_type == DOC_MEDIA_TYPE:
            return self._extract_legacy(data)
        return self._extract_ooxml(data)

    def _extract_ooxml(self, data: bytes) -> str:
        """python-docx를 사용하여 문단과 표 내용을 추출합니다."""
        doc = Document(io.BytesIO(data))

        # 문단 추출
        paragraphs = [para.text for para in doc.paragraphs if para.text.strip()]

        # 표 내용 추출 (행 단위로 한 줄씩)
        table_lines = []
        for table in doc.tables:
            for row in table.rows:
                cells = [cell.text.strip() for cell in row.cells]
                table_lines.append(" | ".join(cells))

        all_text = "\n".join(paragraphs)
        if table_lines:
            all_text += "\n\n" + "\n".join(table_lines)

        logger.info(f"[DocxParser] 문단 {len(paragraphs)}개, 표 행 {len(table_lines)}개 추출")
        return all_text

    def _extract_legacy(self, data: bytes) -> str:
        """
        구형 .doc 파일 처리 (best-effort).

        1. 확장자만 .doc인 OOXML 파일일 수 있으므로 먼저 python-docx로 시도
        2. 실패하면 바이너리에서 인쇄 가능한 문자 구간(ASCII/UTF-16LE)을 복구
        """
        try:
            return self._extract_ooxml(data)
        except Exception as e:
            logger.info(f"[DocxParser] OOXML이 아닌 .doc 파일, 텍스트 구간 복구 시도: {type(e).__name__}")

        ascii_text = "\n".join(
            run.decode("ascii", errors="ignore") for run in _ASCII_RUN.findall(data)
        )
        utf16_text = "\n".join(
            run.decode("utf-16-le", errors="ignore") for run in _UTF16_RUN.findall(data)
        )
        # Word 97 본문은 보통 UTF-16 구간에 있으므로 더 많이 복구된 쪽을 사용
        text = utf16_text if len(utf16_text) >= len(ascii_text) else ascii_text

        if not text.strip():
            raise ExtractionError(
                "구형 .doc 파일에서 텍스트를 찾지 못했습니다",
                details={"media_type": DOC_MEDIA_TYPE, "cause": "no printable text"},
            )
        return text
