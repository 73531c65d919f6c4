import os
import logging
import tempfile

logger = logging.getLogger(__name__)


def _int_from_env(name: str, default: int) -> int:
    raw = os.getenv(name, "").strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        logger.warning(f"Ignoring invalid {name}={raw!r}, using {default}")
        return default


def _float_from_env(name: str, default: float) -> float:
    raw = os.getenv(name, "").strip()
    if not raw:
        return default
    try:
        return float(raw)
    except ValueError:
        logger.warning(f"Ignoring invalid {name}={raw!r}, using {default}")
        return default


# Upload limits
MAX_UPLOAD_BYTES = _int_from_env("RESUMELENS_MAX_UPLOAD_BYTES", 200 * 1024)
UPLOAD_CHUNK_BYTES = _int_from_env("RESUMELENS_UPLOAD_CHUNK_BYTES", 64 * 1024)

# Extracted text limits
MAX_TEXT_CHARS = _int_from_env("RESUMELENS_MAX_TEXT_CHARS", 50_000)
MIN_TEXT_CHARS = _int_from_env("RESUMELENS_MIN_TEXT_CHARS", 30)

# Deadlines (seconds)
EXTRACTION_TIMEOUT_SECONDS = _float_from_env("RESUMELENS_EXTRACTION_TIMEOUT", 15.0)
ANALYSIS_TIMEOUT_SECONDS = _float_from_env("RESUMELENS_ANALYSIS_TIMEOUT", 15.0)

TMP_DIR = os.getenv("RESUMELENS_TMP_DIR") or tempfile.gettempdir()

HOST = os.getenv("HOST", "0.0.0.0")
PORT = _int_from_env("PORT", 8080)
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

# Whole-request cap enforced before multipart parsing; leaves room for part
# headers and boundaries around a file of MAX_UPLOAD_BYTES
MULTIPART_OVERHEAD_BYTES = _int_from_env("RESUMELENS_MULTIPART_OVERHEAD_BYTES", 16 * 1024)
MAX_REQUEST_BYTES = MAX_UPLOAD_BYTES + MULTIPART_OVERHEAD_BYTES
