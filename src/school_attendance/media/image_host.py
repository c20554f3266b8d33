from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass
from pathlib import Path
from typing import Protocol

from ..core.exceptions import UploadError

logger = logging.getLogger(__name__)

_EXTENSIONS = {
    "image/jpeg": ".jpg",
    "image/png": ".png",
    "image/webp": ".webp",
    "image/gif": ".gif",
    "image/heic": ".heic",
}


@dataclass(frozen=True)
class ImageUpload:
    """A photo received from the client, fully read into memory."""

    filename: str
    content_type: str
    data: bytes

    @property
    def is_empty(self) -> bool:
        return not self.data or not self.filename or self.filename == "undefined"

    def object_name(self) -> str:
        ext = _EXTENSIONS.get(self.content_type) or Path(self.filename).suffix.lower() or ".jpg"
        return f"{uuid.uuid4().hex}{ext}"


class ImageHost(Protocol):
    def upload(self, image: ImageUpload) -> str:
        """Store the image and return a publicly retrievable URL.

        Raises UploadError on any failure.
        """

        raise NotImplementedError


class LocalImageHost(ImageHost):
    """Filesystem fallback for development: files are served back under `base_url`."""

    def __init__(self, directory: str | Path, *, base_url: str = "/uploads"):
        self._directory = Path(directory)
        self._base_url = base_url.rstrip("/")

    @property
    def directory(self) -> Path:
        return self._directory

    def upload(self, image: ImageUpload) -> str:
        name = image.object_name()
        try:
            self._directory.mkdir(parents=True, exist_ok=True)
            (self._directory / name).write_bytes(image.data)
        except OSError as e:
            logger.error("Local image upload failed: %s", e)
            raise UploadError("Photo upload failed") from e
        return f"{self._base_url}/{name}"
