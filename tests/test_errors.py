from services.errors import MissingFile, PayloadTooLarge, ResumeProcessingError
from services.resume_service import ResumeService


def test_default_messages_are_used_when_none_given():
    assert ResumeProcessingError().message == ResumeProcessingError.default_message
    assert MissingFile(None).message == MissingFile.default_message
    assert str(MissingFile()) == MissingFile.default_message


def test_custom_message_and_status():
    error = PayloadTooLarge.for_limit(200 * 1024)
    assert error.status_code == 413
    assert error.message == "File too large. Please upload a resume up to 200 KB."


def test_explicit_zero_analysis_timeout_is_kept():
    assert ResumeService(analysis_timeout=0).analysis_timeout == 0
