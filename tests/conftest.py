import io
import pytest

from services.ats_scorer import DEFAULT_SKILLS


class FakeUpload:
    """Minimal stand-in for an UploadFile: declared metadata plus async reads."""

    def __init__(self, data: bytes, filename: str, content_type: str, size=None):
        self._buffer = io.BytesIO(data)
        self.filename = filename
        self.content_type = content_type
        self.size = len(data) if size is None else size

    async def read(self, size: int = -1) -> bytes:
        return self._buffer.read(size)


class RecordingExtractor:
    def __init__(self, text: str = ""):
        self.text = text
        self.calls = []

    def extract_text(self, file_path: str) -> str:
        self.calls.append(file_path)
        return self.text


def build_full_resume() -> str:
    lines = [
        "Jane Doe",
        "Professional Summary",
        "Backend engineer focused on reliable web platforms.",
        "Technical Skills",
        ", ".join(DEFAULT_SKILLS),
        "Work Experience",
        "- Cut deployment time by 40% across 12 services (2019 - 2023)",
        "Education",
        "B.Sc. Computer Science, 2018",
        "Projects",
    ]
    filler = "- Delivered platform features with the infrastructure team every sprint."
    while len("\n".join(lines)) < 2600:
        lines.append(filler)
    return "\n".join(lines)


@pytest.fixture
def full_resume() -> str:
    return build_full_resume()
