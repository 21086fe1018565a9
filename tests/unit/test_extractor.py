"""TextExtractor and parser unit tests.

PDF/DOCX 샘플은 테스트 안에서 라이브러리로 직접 만듭니다.
"""

import io

import pytest
from docx import Document
from PyPDF2 import PdfWriter

from rfp_responder.exceptions import ExtractionError, UnsupportedMediaTypeError
from rfp_responder.layers.layer1_extraction import TextExtractor
from rfp_responder.layers.layer1_extraction.parsers.docx_parser import DOC_MEDIA_TYPE, DOCX_MEDIA_TYPE
from rfp_responder.layers.layer1_extraction.parsers.pdf_parser import PDF_MEDIA_TYPE


@pytest.fixture
def extractor():
    return TextExtractor()


def _docx_bytes() -> bytes:
    doc = Document()
    doc.add_paragraph("SECTION 1: GENERAL")
    doc.add_paragraph("1. What is your pricing model?")
    table = doc.add_table(rows=1, cols=2)
    table.rows[0].cells[0].text = "Item"
    table.rows[0].cells[1].text = "Answer"
    buffer = io.BytesIO()
    doc.save(buffer)
    return buffer.getvalue()


def _blank_pdf_bytes() -> bytes:
    writer = PdfWriter()
    writer.add_blank_page(width=200, height=200)
    writer.add_blank_page(width=200, height=200)
    buffer = io.BytesIO()
    writer.write(buffer)
    return buffer.getvalue()


class TestPlainText:
    @pytest.mark.asyncio
    async def test_utf8_text_passes_through(self, extractor):
        text = await extractor.extract("What is your price?".encode("utf-8"), "text/plain")
        assert text == "What is your price?"

    @pytest.mark.asyncio
    async def test_bom_is_removed(self, extractor):
        text = await extractor.extract(b"\xef\xbb\xbfhello", "text/plain")
        assert text == "hello"

    @pytest.mark.asyncio
    async def test_media_type_parameters_are_ignored(self, extractor):
        text = await extractor.extract(b"# Title", "Text/Markdown; charset=utf-8")
        assert text == "# Title"

    @pytest.mark.asyncio
    async def test_invalid_bytes_are_replaced(self, extractor):
        text = await extractor.extract(b"abc\xffdef", "text/plain")
        assert text.startswith("abc") and text.endswith("def")


class TestDocx:
    @pytest.mark.asyncio
    async def test_paragraphs_and_table_rows(self, extractor):
        text = await extractor.extract(_docx_bytes(), DOCX_MEDIA_TYPE)
        assert "SECTION 1: GENERAL" in text
        assert "1. What is your pricing model?" in text
        assert "Item | Answer" in text

    @pytest.mark.asyncio
    async def test_corrupt_docx_raises_extraction_error_with_cause(self, extractor):
        with pytest.raises(ExtractionError) as exc_info:
            await extractor.extract(b"PK\x03\x04not really a zip", DOCX_MEDIA_TYPE)
        assert exc_info.value.__cause__ is not None
        assert exc_info.value.error_code == "ERR_EXTRACT_001"

    @pytest.mark.asyncio
    async def test_legacy_doc_recovers_utf16_text(self, extractor):
        body = "What is your support model?".encode("utf-16-le")
        data = b"\xd0\xcf\x11\xe0\x00\x00" + body + b"\x00\x00\x01"
        text = await extractor.extract(data, DOC_MEDIA_TYPE)
        assert "What is your support model?" in text

    @pytest.mark.asyncio
    async def test_legacy_doc_without_text_fails(self, extractor):
        with pytest.raises(ExtractionError):
            await extractor.extract(b"\xd0\xcf\x11\xe0\x00\x01\x02", DOC_MEDIA_TYPE)


class TestPdf:
    @pytest.mark.asyncio
    async def test_pages_are_joined_with_form_feed(self, extractor):
        text = await extractor.extract(_blank_pdf_bytes(), PDF_MEDIA_TYPE)
        assert text.count("\f") == 1

    @pytest.mark.asyncio
    async def test_garbage_pdf_raises_extraction_error(self, extractor):
        with pytest.raises(ExtractionError):
            await extractor.extract(b"%PDF-1.4 garbage", PDF_MEDIA_TYPE)


class TestMediaTypes:
    @pytest.mark.asyncio
    async def test_unsupported_media_type(self, extractor):
        with pytest.raises(UnsupportedMediaTypeError) as exc_info:
            await extractor.extract(b"\x89PNG", "image/png")
        assert exc_info.value.error_code == "ERR_MEDIA_001"
        assert "application/pdf" in exc_info.value.details["supported"]

    def test_detect_from_extension(self, extractor):
        assert extractor.detect_media_type("rfp.PDF") == PDF_MEDIA_TYPE
        assert extractor.detect_media_type("rfp.docx", "application/octet-stream") == DOCX_MEDIA_TYPE
        assert extractor.detect_media_type("notes.md") == "text/markdown"

    def test_detect_prefers_supported_content_type(self, extractor):
        assert extractor.detect_media_type("upload.bin", "text/plain; charset=utf-8") == "text/plain"

    def test_detect_unknown_keeps_hint(self, extractor):
        assert extractor.detect_media_type("image.png", "image/png") == "image/png"
