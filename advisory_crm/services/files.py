"""
Document file storage.

Uploaded files are written under ``<root>/<client_id>/`` with a synthesized
name (field name, epoch milliseconds, random suffix, original extension).
The user's filename is never used as a path component.
"""
import logging
import os
import re
import secrets
import time
from dataclasses import dataclass
from pathlib import Path
from typing import BinaryIO, Optional, Union

from advisory_crm.core.config import settings
from advisory_crm.core.errors import ValidationError

logger = logging.getLogger(__name__)

CHUNK_SIZE = 1024 * 1024
_SAFE_EXTENSION = re.compile(r"^\.[A-Za-z0-9]{1,15}$")


@dataclass
class StoredFile:
    path: str
    size: int
    mime_type: Optional[str]
    original_name: Optional[str]


class FileStore:
    """Stores document files on the local filesystem."""

    def __init__(
        self,
        root: Union[str, Path],
        max_size: int = settings.MAX_UPLOAD_SIZE,
        field_name: str = settings.UPLOAD_FIELD_NAME,
    ):
        self.root = Path(root)
        self.max_size = max_size
        self.field_name = field_name

    def client_dir(self, client_id: int) -> Path:
        return self.root / str(int(client_id))

    def stored_name(self, original_name: Optional[str]) -> str:
        ext = os.path.splitext(original_name or "")[1]
        if not _SAFE_EXTENSION.match(ext):
            ext = ""
        suffix = secrets.randbelow(10**9)
        return f"{self.field_name}-{int(time.time() * 1000)}-{suffix}{ext}"

    def save(
        self,
        client_id: int,
        stream: BinaryIO,
        original_name: Optional[str] = None,
        mime_type: Optional[str] = None,
    ) -> StoredFile:
        """
        Copy ``stream`` into the client's directory.

        Raises ValidationError when the upload exceeds ``max_size``; the partial
        file is removed first.
        """
        directory = self.client_dir(client_id)
        directory.mkdir(parents=True, exist_ok=True)
        path = directory / self.stored_name(original_name)

        size = 0
        try:
            with open(path, "wb") as out:
                while True:
                    chunk = stream.read(CHUNK_SIZE)
                    if not chunk:
                        break
                    size += len(chunk)
                    if size > self.max_size:
                        raise ValidationError.single(
                            "file", f"File exceeds the {self.max_size} byte upload limit"
                        )
                    out.write(chunk)
        except Exception:
            self.remove(path)
            raise

        logger.info("Stored upload for client %s at %s (%d bytes)", client_id, path, size)
        return StoredFile(path=str(path), size=size, mime_type=mime_type, original_name=original_name)

    def remove(self, path: Union[str, Path]) -> bool:
        """Best-effort delete. Failures are logged, never raised."""
        try:
            if os.path.exists(path):
                os.remove(path)
            return True
        except OSError as e:
            logger.error("Failed to delete file %s: %s", path, e)
            return False

    def exists(self, path: Union[str, Path]) -> bool:
        return os.path.isfile(path)
