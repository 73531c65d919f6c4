import PyPDF2
import pytest

from services.errors import ExtractionFailed
from services.pdf_processor import PDFProcessor


def test_corrupt_pdf_raises_extraction_failed(tmp_path):
    path = tmp_path / "broken.pdf"
    path.write_bytes(b"%PDF-1.4\nthis is not really a pdf\n%%EOF")

    with pytest.raises(ExtractionFailed):
        PDFProcessor().extract_text(str(path))


def test_missing_file_raises_extraction_failed(tmp_path):
    with pytest.raises(ExtractionFailed):
        PDFProcessor().extract_text(str(tmp_path / "gone.pdf"))


def test_blank_pdf_yields_empty_text(tmp_path):
    writer = PyPDF2.PdfWriter()
    writer.add_blank_page(width=612, height=792)
    path = tmp_path / "blank.pdf"
    with open(path, "wb") as f:
        writer.write(f)

    assert PDFProcessor().extract_text(str(path)) == ""


def test_clean_text_keeps_punctuation_used_for_scoring():
    raw = "  Skills\x00 \t\n• CI/CD, 40% faster, 10+ years  "
    assert PDFProcessor().clean_text(raw) == "Skills\n• CI/CD, 40% faster, 10+ years"


def test_encrypted_pdf_raises_extraction_failed(tmp_path, caplog):
    writer = PyPDF2.PdfWriter()
    writer.add_blank_page(width=612, height=792)
    writer.encrypt("pw")
    path = tmp_path / "locked.pdf"
    with open(path, "wb") as f:
        writer.write(f)

    with pytest.raises(ExtractionFailed) as exc_info:
        PDFProcessor().extract_text(str(path))

    assert exc_info.value.message == ExtractionFailed.default_message
    assert "Refusing encrypted PDF" in caplog.text
