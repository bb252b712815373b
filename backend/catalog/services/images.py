"""
Content-addressed image store.

Images live in one flat directory, each named after the SHA-256 of its bytes,
so identical uploads share a single file.
"""

import hashlib
import logging
import os
import tempfile
from contextlib import suppress
from pathlib import Path

from catalog.exceptions import ImageNotFound, ImageWriteFailed

logger = logging.getLogger(__name__)

# Temporary files are created 0600; stored images are world-readable
IMAGE_FILE_MODE = 0o644


def content_reference(data: bytes, extension: str = ".jpg") -> str:
    """Canonical reference for ``data``: hex SHA-256 plus a fixed extension."""
    return f"{hashlib.sha256(data).hexdigest()}{extension}"


class ImageStore:
    """Stores and retrieves image bytes by content hash."""

    def __init__(self, root: str | Path, extension: str = ".jpg"):
        self.root = Path(root)
        self.extension = extension
        self.root.mkdir(parents=True, exist_ok=True)

    def path_for(self, reference: str) -> Path:
        """
        Resolve ``reference`` to a file inside the store directory.

        Raises:
            ValueError: the reference is not a bare filename.
        """
        if not reference or reference in (".", "..") or Path(reference).name != reference:
            raise ValueError(f"Invalid image reference: {reference!r}")
        if os.sep in reference or (os.altsep and os.altsep in reference) or "\x00" in reference:
            raise ValueError(f"Invalid image reference: {reference!r}")
        return self.root / reference

    def exists(self, reference: str) -> bool:
        try:
            return self.path_for(reference).is_file()
        except ValueError:
            return False

    def store(self, data: bytes) -> str:
        """
        Persist ``data`` and return its reference.

        Storing content that is already present is a no-op returning the existing
        reference. New content goes to a temporary file first and is renamed into
        place, so a reference never points at a partially written file.

        Raises:
            ImageWriteFailed: the bytes could not be written.
        """
        reference = content_reference(data, self.extension)
        final_path = self.root / reference

        if final_path.is_file():
            logger.debug(f"Image {reference} already stored, skipping write")
            return reference

        tmp_path = None
        try:
            with tempfile.NamedTemporaryFile(
                dir=self.root, prefix=".upload-", suffix=".tmp", delete=False
            ) as tmp:
                tmp_path = tmp.name
                tmp.write(data)
                tmp.flush()
                os.fsync(tmp.fileno())
            os.chmod(tmp_path, IMAGE_FILE_MODE)
            os.replace(tmp_path, final_path)
            tmp_path = None
        except OSError as e:
            raise ImageWriteFailed(reference, str(e)) from e
        finally:
            if tmp_path is not None:
                with suppress(OSError):
                    os.remove(tmp_path)

        logger.debug(f"Stored new image {reference} ({len(data)} bytes)")
        return reference

    def retrieve(self, reference: str) -> bytes:
        """
        Return the bytes stored under ``reference``.

        Raises:
            ImageNotFound: nothing is stored under that reference.
        """
        try:
            path = self.path_for(reference)
        except ValueError as e:
            raise ImageNotFound(reference) from e

        try:
            return path.read_bytes()
        except (FileNotFoundError, IsADirectoryError) as e:
            raise ImageNotFound(reference) from e
