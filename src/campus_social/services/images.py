"""Profile image storage."""

import time
from dataclasses import dataclass
from pathlib import Path
from typing import Protocol
from uuid import uuid4


class ImageStorage(Protocol):
    """Storage interface for uploaded profile images."""

    def store(self, filename: str, content: bytes, content_type: str | None) -> str:
        """Store image bytes and return a stable handle."""

    def delete(self, handle: str) -> None:
        """Remove a previously stored image."""


@dataclass
class LocalImageStorage(ImageStorage):
    """Store images on the local filesystem."""

    upload_dir: Path

    def store(self, filename: str, content: bytes, content_type: str | None) -> str:
        """Write the image under the upload directory and return its path."""
        self.upload_dir.mkdir(parents=True, exist_ok=True)
        path = self.upload_dir / build_object_name(filename)
        path.write_bytes(content)
        return path.as_posix()

    def delete(self, handle: str) -> None:
        """Remove the image file if it is still present."""
        Path(handle).unlink(missing_ok=True)


def build_object_name(filename: str) -> str:
    """Return a unique object name that keeps the original extension."""
    millis = int(time.time() * 1000)
    return f"{millis}-{uuid4().hex[:8]}{Path(filename).suffix.lower()}"
