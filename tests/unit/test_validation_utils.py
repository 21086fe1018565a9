"""Upload validation utility tests."""

import pytest

from rfp_responder.exceptions import InputValidationError
from rfp_responder.utils import (
    validate_document_count,
    validate_file_signature,
    validate_file_size,
    validate_filename,
    validate_upload,
)


class TestValidateFilename:
    def test_valid(self):
        assert validate_filename("City RFP 2024.pdf") == "City RFP 2024.pdf"

    @pytest.mark.parametrize(
        "filename",
        ["", "   ", "../etc/passwd", "dir/rfp.pdf", "..\\rfp.pdf", "rfp<1>.pdf", "rfp\x00.pdf", ".pdf"],
    )
    def test_invalid(self, filename):
        with pytest.raises(InputValidationError):
            validate_filename(filename)

    def test_too_long(self):
        with pytest.raises(InputValidationError):
            validate_filename("a" * 300 + ".pdf")


class TestValidateFileSize:
    def test_within_limit(self):
        validate_file_size(1024)

    def test_empty_file(self):
        with pytest.raises(InputValidationError):
            validate_file_size(0)

    def test_over_limit(self):
        with pytest.raises(InputValidationError) as exc_info:
            validate_file_size(11 * 1024 * 1024)
        assert exc_info.value.details["max_size_bytes"] == 10 * 1024 * 1024


class TestValidateFileSignature:
    def test_pdf_signature(self):
        validate_file_signature(b"%PDF-1.7 ...", ".pdf")

    def test_pdf_mismatch(self):
        with pytest.raises(InputValidationError):
            validate_file_signature(b"PK\x03\x04", ".pdf")

    def test_text_is_not_checked(self):
        validate_file_signature(b"anything", ".txt")

    @pytest.mark.parametrize("content", [b"\xd0\xcf\x11\xe0legacy", b"PK\x03\x04renamed docx"])
    def test_doc_accepts_ole_and_ooxml(self, content):
        validate_file_signature(content, ".doc")

    def test_doc_rejects_other_content(self):
        with pytest.raises(InputValidationError):
            validate_file_signature(b"%PDF-1.4", ".doc")


class TestValidateDocumentCount:
    def test_bounds(self):
        validate_document_count(1)
        validate_document_count(10)
        with pytest.raises(InputValidationError):
            validate_document_count(0)
        with pytest.raises(InputValidationError):
            validate_document_count(11)


class TestValidateUpload:
    def test_returns_name_and_extension(self):
        assert validate_upload(" rfp.PDF ", b"%PDF-1.4") == ("rfp.PDF", ".pdf")

    def test_signature_mismatch(self):
        with pytest.raises(InputValidationError) as exc_info:
            validate_upload("rfp.docx", b"%PDF-1.4")
        assert exc_info.value.details == {"extension": ".docx"}

    @pytest.mark.parametrize("filename, ext", [("sheet.xlsx", ".xlsx"), ("notes", "")])
    def test_format_support_is_left_to_extractor(self, filename, ext):
        assert validate_upload(filename, b"data") == (filename, ext)
