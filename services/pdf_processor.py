import PyPDF2
import re
import logging
from services.errors import ExtractionFailed

logger = logging.getLogger(__name__)

class PDFProcessor:
    def __init__(self):
        self.text_cleaning_patterns = [
            (r'\x00', ''),            # NUL bytes some generators leave behind
            (r'[ \t]+\n', '\n'),      # Trailing spaces before line breaks
        ]

    def extract_text(self, file_path: str) -> str:
        """
        Extract text from a PDF file on disk.

        The PDF is untrusted input: every parser failure, including encrypted
        documents, is raised as ExtractionFailed. The parser's own error is only logged.
        """
        try:
            with open(file_path, 'rb') as file:
                pdf_reader = PyPDF2.PdfReader(file)
                if pdf_reader.is_encrypted:
                    raise ExtractionFailed()

                pages = []
                for page in pdf_reader.pages:
                    pages.append(page.extract_text() or "")

        except ExtractionFailed:
            logger.warning(f"Refusing encrypted PDF: {file_path}")
            raise
        except Exception as e:
            logger.warning(f"Error extracting text from PDF: {type(e).__name__}: {e}")
            raise ExtractionFailed() from e

        cleaned_text = self.clean_text("\n".join(pages))
        logger.info(f"Extracted {len(cleaned_text)} characters from {len(pages)} PDF page(s)")
        return cleaned_text

    def clean_text(self, text: str) -> str:
        """
        Strip extraction noise; wording and punctuation are left for the scorer
        """
        for pattern, replacement in self.text_cleaning_patterns:
            text = re.sub(pattern, replacement, text)

        return text.strip()
