import os
import asyncio
import re
import time
import secrets
import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

import aiofiles
import aiofiles.os

from config import settings
from services.deadline import await_with_deadline
from services.errors import (
    ContentTooLarge,
    ExtractionFailed,
    InsufficientContent,
    PayloadTooLarge,
    UnsupportedType,
)
from services.pdf_processor import PDFProcessor

logger = logging.getLogger(__name__)

PDF = "pdf"
TEXT = "text"

_SAFE_EXTENSION = re.compile(r'^\.[a-z0-9]{1,10}$')


def detect_kind(content_type: Optional[str], filename: Optional[str]) -> str:
    """
    Classify an upload as PDF or plain text from its declared media type or its
    filename extension; either signal is enough. PDF wins when both apply.
    """
    mime = (content_type or "").split(";")[0].strip().lower()
    name = (filename or "").strip().lower()

    if mime == "application/pdf" or name.endswith(".pdf"):
        return PDF
    if mime == "text/plain" or name.endswith(".txt"):
        return TEXT
    raise UnsupportedType()


def temp_filename(filename: Optional[str]) -> str:
    ext = os.path.splitext(filename or "")[1].lower()
    if not _SAFE_EXTENSION.match(ext):
        ext = ""
    return f"resumelens-{time.time_ns()}-{secrets.token_hex(8)}{ext}"


class IngestionPipeline:
    """
    Turns one uploaded resume into plain text.

    The upload is spooled to a per-request file under ``tmp_dir`` and every
    size limit is enforced independently. The file is deleted when processing
    ends, whatever the outcome.
    """

    def __init__(self, extractor: PDFProcessor = None, tmp_dir: str = None,
                 max_upload_bytes: int = None, max_text_chars: int = None,
                 min_text_chars: int = None, extraction_timeout: float = None,
                 chunk_size: int = None):
        self.extractor = extractor or PDFProcessor()
        self.tmp_dir = tmp_dir or settings.TMP_DIR
        self.max_upload_bytes = max_upload_bytes if max_upload_bytes is not None else settings.MAX_UPLOAD_BYTES
        self.max_text_chars = max_text_chars if max_text_chars is not None else settings.MAX_TEXT_CHARS
        self.min_text_chars = min_text_chars if min_text_chars is not None else settings.MIN_TEXT_CHARS
        self.extraction_timeout = extraction_timeout if extraction_timeout is not None else settings.EXTRACTION_TIMEOUT_SECONDS
        self.chunk_size = chunk_size if chunk_size is not None else settings.UPLOAD_CHUNK_BYTES

    async def process_upload(self, upload) -> str:
        kind = detect_kind(upload.content_type, upload.filename)
        logger.info(f"Processing {kind} upload: {upload.filename}")

        async with self.temporary_upload(upload.filename) as tmp_path:
            await self.spool_to_disk(upload, tmp_path)
            await self.check_stored_size(tmp_path)
            self.check_declared_size(getattr(upload, "size", None))

            text = await await_with_deadline(
                self.extract(tmp_path, kind),
                self.extraction_timeout,
                label=f"Text extraction for {upload.filename}",
            )

        return self.check_content(text)

    @asynccontextmanager
    async def temporary_upload(self, filename: Optional[str]) -> AsyncIterator[str]:
        tmp_path = os.path.join(self.tmp_dir, temp_filename(filename))
        try:
            yield tmp_path
        finally:
            await self.remove_temp_file(tmp_path)

    async def remove_temp_file(self, tmp_path: str) -> None:
        try:
            await aiofiles.os.remove(tmp_path)
        except FileNotFoundError:
            pass
        except OSError as e:
            logger.warning(f"Temp file cleanup failed for {tmp_path}: {e}")

    async def spool_to_disk(self, upload, tmp_path: str) -> int:
        """Copy the upload in chunks, stopping as soon as it passes the size cap."""
        written = 0
        async with aiofiles.open(tmp_path, 'wb') as f:
            while True:
                chunk = await upload.read(self.chunk_size)
                if not chunk:
                    break
                written += len(chunk)
                if written > self.max_upload_bytes:
                    logger.warning(f"Upload {upload.filename} exceeded {self.max_upload_bytes} bytes while spooling")
                    raise PayloadTooLarge.for_limit(self.max_upload_bytes)
                await f.write(chunk)
        return written

    async def check_stored_size(self, tmp_path: str) -> None:
        stat = await aiofiles.os.stat(tmp_path)
        if stat.st_size > self.max_upload_bytes:
            logger.warning(f"Stored upload is {stat.st_size} bytes, limit {self.max_upload_bytes}")
            raise PayloadTooLarge.for_limit(self.max_upload_bytes)

    def check_declared_size(self, declared_size: Optional[int]) -> None:
        if declared_size is not None and declared_size > self.max_upload_bytes:
            logger.warning(f"Declared upload size {declared_size} bytes, limit {self.max_upload_bytes}")
            raise PayloadTooLarge.for_limit(self.max_upload_bytes)

    async def extract(self, tmp_path: str, kind: str) -> str:
        if kind == PDF:
            try:
                return await asyncio.to_thread(self.extractor.extract_text, tmp_path)
            except ExtractionFailed:
                raise
            except Exception as e:
                logger.warning(f"PDF extractor failed: {type(e).__name__}: {e}")
                raise ExtractionFailed() from e

        try:
            async with aiofiles.open(tmp_path, 'r', encoding='utf-8', errors='replace') as f:
                return await f.read()
        except OSError as e:
            logger.warning(f"Could not read text upload: {e}")
            raise ExtractionFailed("Could not read the text file. Try a different PDF/TXT.") from e

    def check_content(self, text: Optional[str]) -> str:
        text = text or ""
        if len(text) > self.max_text_chars:
            logger.warning(f"Extracted text has {len(text)} chars, limit {self.max_text_chars}")
            raise ContentTooLarge()
        if len(text.strip()) < self.min_text_chars:
            raise InsufficientContent()

        logger.info(f"Extracted {len(text)} characters")
        return text
