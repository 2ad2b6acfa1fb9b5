import logging
import mimetypes
import os
import uuid
from contextlib import asynccontextmanager
from pathlib import Path
from typing import AsyncIterator

import aiofiles
from fastapi import UploadFile

from lecture_notes.errors import FileTooLarge, InvalidUpload
from lecture_notes.models import UploadedAudio

logger = logging.getLogger(__name__)

ALLOWED_EXTENSIONS = {".mp3", ".wav", ".m4a", ".ogg", ".webm", ".mp4"}

_READ_CHUNK = 1024 * 1024


def _content_type(upload: UploadFile, ext: str) -> str:
    declared = upload.content_type or ""
    if declared and declared != "application/octet-stream":
        return declared
    return mimetypes.types_map.get(ext, "application/octet-stream")


class UploadHandler:
    """Validate an uploaded audio file and keep it on disk for one request only."""

    def __init__(self, upload_dir: str | Path, max_bytes: int) -> None:
        self.upload_dir = Path(upload_dir)
        self.max_bytes = max_bytes

    @property
    def max_mb(self) -> int:
        return self.max_bytes // (1024 * 1024)

    def _too_large(self) -> FileTooLarge:
        return FileTooLarge(f"File too large. Maximum size is {self.max_mb}MB.")

    def validate(self, upload: UploadFile) -> str:
        """Check the extension and declared size.  Returns the lowercased extension."""
        ext = Path(upload.filename or "").suffix.lower()
        if ext not in ALLOWED_EXTENSIONS:
            raise InvalidUpload(
                "Invalid file type. Please upload audio files only.",
                detail=f"rejected extension {ext or '(none)'} for {upload.filename!r}",
            )
        if upload.size is not None and upload.size > self.max_bytes:
            raise self._too_large()
        return ext

    async def save(self, upload: UploadFile) -> UploadedAudio:
        ext = self.validate(upload)
        self.upload_dir.mkdir(parents=True, exist_ok=True)
        path = self.upload_dir / f"audio-{uuid.uuid4().hex}{ext}"

        written = 0
        try:
            async with aiofiles.open(path, "wb") as f:
                while chunk := await upload.read(_READ_CHUNK):
                    written += len(chunk)
                    if written > self.max_bytes:
                        raise self._too_large()
                    await f.write(chunk)
        except BaseException:
            self.discard(path)
            raise

        logger.info("Stored upload %r as %s (%d bytes)", upload.filename, path.name, written)
        return UploadedAudio(
            path=path,
            filename=upload.filename or path.name,
            content_type=_content_type(upload, ext),
            size=written,
        )

    @staticmethod
    def discard(path: Path) -> None:
        try:
            os.remove(path)
        except FileNotFoundError:
            pass
        except OSError as e:
            logger.error("Error deleting upload %s: %s", path, e)

    @asynccontextmanager
    async def stored(self, upload: UploadFile) -> AsyncIterator[UploadedAudio]:
        """Persist *upload* for the duration of the block, then delete it
        whatever happened inside."""
        audio = await self.save(upload)
        try:
            yield audio
        finally:
            self.discard(audio.path)
            logger.debug("Removed upload %s", audio.path.name)
