"""Upload intake: stage an incoming file on disk for the length of one request."""

import logging
import secrets
import time
from contextlib import asynccontextmanager
from dataclasses import dataclass
from pathlib import Path
from typing import AsyncIterator, Optional, Union

from fastapi import UploadFile
from starlette.concurrency import run_in_threadpool

from ...core.decoder import TabularFormat, detect_format
from ...core.errors import ValidationError

logger = logging.getLogger(__name__)

CHUNK_SIZE = 1024 * 1024


@dataclass
class StagedUpload:
    """An accepted upload sitting in the upload directory."""

    path: Path
    fmt: TabularFormat
    filename: str
    size: int


class UploadIntake:
    """Accept ``.csv``/``.xlsx``/``.xls`` uploads up to a size ceiling.

    The staged file is deleted when the ``receive`` block exits, however it exits.
    """

    def __init__(self, upload_dir: Union[str, Path], max_bytes: int, chunk_size: int = CHUNK_SIZE):
        self.upload_dir = Path(upload_dir)
        self.max_bytes = max_bytes
        self.chunk_size = chunk_size

    def _staging_path(self, fmt: TabularFormat) -> Path:
        self.upload_dir.mkdir(parents=True, exist_ok=True)
        return self.upload_dir / f"{int(time.time() * 1000)}-{secrets.token_hex(6)}{fmt.value}"

    def _too_large(self) -> ValidationError:
        limit_mb = self.max_bytes / (1024 * 1024)
        return ValidationError(f"File too large. Maximum size is {limit_mb:g}MB")

    @asynccontextmanager
    async def receive(self, upload: Optional[UploadFile]) -> AsyncIterator[StagedUpload]:
        if upload is None or not upload.filename:
            raise ValidationError("No file provided")

        fmt = detect_format(upload.filename)
        path = self._staging_path(fmt)
        try:
            size = 0
            with open(path, "wb") as out:
                while True:
                    chunk = await upload.read(self.chunk_size)
                    if not chunk:
                        break
                    size += len(chunk)
                    if size > self.max_bytes:
                        raise self._too_large()
                    await run_in_threadpool(out.write, chunk)

            logger.info(f"Staged upload {upload.filename} ({size} bytes) at {path.name}")
            yield StagedUpload(path=path, fmt=fmt, filename=upload.filename, size=size)
        finally:
            path.unlink(missing_ok=True)
