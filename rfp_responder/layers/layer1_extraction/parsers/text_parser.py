"""
일반 텍스트 파일(.txt)과 마크다운 파일(.md) 파서입니다.
"""

from ..base_parser import BaseParser


class TextParser(BaseParser):
    """평문은 디코딩만 하고 그대로 통과시킵니다."""

    @property
    def supported_media_types(self) -> list[str]:
        return ["text/plain", "text/markdown"]

    @property
    def supported_extensions(self) -> list[str]:
        return [".txt", ".md", ".markdown", ".text"]

    def _extract(self, data: bytes, media_type: str) -> str:
        # utf-8-sig: BOM이 있으면 제거, 깨진 바이트는 대체 문자로
        return data.decode("utf-8-sig", errors="replace")
