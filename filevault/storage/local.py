"""
Local filesystem storage implementation.

This module provides a local filesystem implementation of the storage
backend with async file operations. Storage keys map onto relative paths
below the configured base directory, mirroring an object-store layout.
"""
import os
import re
import uuid
from pathlib import Path
from typing import AsyncIterator

import aiofiles
import aiofiles.os

from filevault.config import settings
from filevault.storage.base import StorageBackend
from filevault.storage.exceptions import (
    BlobNotFoundError,
    FileSizeExceededError,
    InvalidStorageKeyError,
    StorageError,
)

# One path segment: letters, digits, dot, dash and underscore, not "." or ".."
_SEGMENT_RE = re.compile(r"^(?!\.{1,2}$)[A-Za-z0-9._-]+$")


class LocalStorageBackend(StorageBackend):
    """
    Local filesystem storage with async operations.

    Layout: <base_path>/blobs/<storage_key>

    Writes go to a temporary ``.part`` file that is renamed into place once
    the stream is complete, so readers never observe a partial blob.
    """

    def __init__(self, base_path: str | None = None, max_size_mb: int | None = None):
        """
        Initialize local storage backend.

        Args:
            base_path: Base directory for file storage (default from config)
            max_size_mb: Maximum file size in MB (default from config)
        """
        self.base_path = Path(base_path or settings.STORAGE_BASE_PATH)
        if max_size_mb is None:
            max_size_mb = settings.MAX_UPLOAD_SIZE_MB
        self.max_size_bytes = max_size_mb * 1024 * 1024

    async def save_file(
        self,
        storage_key: str,
        file_stream: AsyncIterator[bytes],
        content_type: str,
    ) -> int:
        """
        Stream a blob to disk in chunks.

        Args:
            storage_key: Opaque key to store the blob under
            file_stream: Async iterator yielding file chunks
            content_type: MIME type of the file (not persisted locally)

        Returns:
            Number of bytes written

        Raises:
            FileSizeExceededError: If the stream exceeds the maximum size
            StorageError: If the write fails
        """
        file_path = self._get_file_path(storage_key)
        self._ensure_directory_exists(file_path)
        temp_path = file_path.with_name(f"{file_path.name}.{uuid.uuid4().hex}.part")

        total_size = 0
        try:
            async with aiofiles.open(temp_path, "wb") as f:
                async for chunk in file_stream:
                    total_size += len(chunk)
                    if total_size > self.max_size_bytes:
                        raise FileSizeExceededError(total_size, self.max_size_bytes)
                    await f.write(chunk)
            os.replace(temp_path, file_path)
        except OSError as e:
            raise StorageError(f"Failed to save blob {storage_key}: {e}") from e
        finally:
            # No-op after a successful rename; otherwise drops the partial
            # write, including when the save is cancelled by a timeout
            self._remove_quietly(temp_path)

        return total_size

    async def read_file(self, storage_key: str) -> bytes:
        file_path = self._get_file_path(storage_key)

        try:
            async with aiofiles.open(file_path, "rb") as f:
                return await f.read()
        except FileNotFoundError as e:
            raise BlobNotFoundError(storage_key) from e
        except OSError as e:
            raise StorageError(f"Failed to read blob {storage_key}: {e}") from e

    async def delete_file(self, storage_key: str) -> None:
        file_path = self._get_file_path(storage_key)

        try:
            await aiofiles.os.remove(file_path)
        except FileNotFoundError as e:
            raise BlobNotFoundError(storage_key) from e
        except OSError as e:
            raise StorageError(f"Failed to delete blob {storage_key}: {e}") from e

        # Drop the owner directory once it is empty
        try:
            file_path.parent.rmdir()
        except OSError:
            pass

    def file_exists(self, storage_key: str) -> bool:
        return self._get_file_path(storage_key).is_file()

    def _get_file_path(self, storage_key: str) -> Path:
        """
        Map a storage key onto a path below ``<base_path>/blobs``.

        Args:
            storage_key: Slash-separated storage key

        Returns:
            Full file path as Path object

        Raises:
            InvalidStorageKeyError: If any key segment is empty, "." / ".."
                or contains characters outside [A-Za-z0-9._-]
        """
        segments = storage_key.split("/")
        if not all(_SEGMENT_RE.match(segment) for segment in segments):
            raise InvalidStorageKeyError(storage_key)
        return self.base_path.joinpath("blobs", *segments)

    def _ensure_directory_exists(self, file_path: Path) -> None:
        file_path.parent.mkdir(parents=True, exist_ok=True)

    @staticmethod
    def _remove_quietly(path: Path) -> None:
        try:
            path.unlink()
        except FileNotFoundError:
            pass
