"""
Failure taxonomy for resume processing.

Every error carries the HTTP status and the short message shown to the caller.
Internal details (extractor tracebacks, file paths) never go into ``message``.
"""
from typing import Optional


class ResumeProcessingError(Exception):
    status_code = 500
    default_message = "Server error during analysis."

    def __init__(self, message: Optional[str] = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class MissingFile(ResumeProcessingError):
    status_code = 400
    default_message = "No file uploaded. Please attach a resume using form field name 'file'."


class UnsupportedType(ResumeProcessingError):
    status_code = 400
    default_message = "Unsupported file type. Please upload a PDF or TXT resume."


class PayloadTooLarge(ResumeProcessingError):
    status_code = 413
    default_message = "File too large. Please upload a smaller resume."

    @classmethod
    def for_limit(cls, max_bytes: int) -> "PayloadTooLarge":
        return cls(f"File too large. Please upload a resume up to {max_bytes // 1024} KB.")


class ContentTooLarge(ResumeProcessingError):
    status_code = 400
    default_message = "The resume contains too much text. Please use a simpler resume file."


class ExtractionFailed(ResumeProcessingError):
    status_code = 400
    default_message = (
        "Could not read PDF. Ensure it is not password-protected, corrupted, or overly complex."
    )


class InsufficientContent(ResumeProcessingError):
    status_code = 400
    default_message = "Could not extract enough text from the resume. Try a different PDF/TXT."


class ProcessingTimeout(ResumeProcessingError):
    status_code = 504
    default_message = "Processing took too long. Please try a smaller or simpler resume file."


class AnalysisFailure(ResumeProcessingError):
    status_code = 500
    default_message = "Analysis failed. The resume may be too complex or contain invalid content."


class InternalFault(ResumeProcessingError):
    status_code = 500
    default_message = "An unexpected error occurred. Please try again."


class MultipleFiles(ResumeProcessingError):
    status_code = 400
    default_message = "Please upload exactly one resume file."
