"""
Abstract base class for storage backends.

This module defines the interface that all blob storage backends must
implement. Blobs are addressed by an opaque storage key chosen by the
caller; the backend never interprets file metadata.
"""
from abc import ABC, abstractmethod
from typing import AsyncIterator


class StorageBackend(ABC):
    """
    Abstract base class for storage backends.

    All storage implementations (local filesystem, S3, etc.) must implement
    these methods so the file service can switch backends through
    configuration alone.
    """

    @abstractmethod
    async def save_file(
        self,
        storage_key: str,
        file_stream: AsyncIterator[bytes],
        content_type: str,
    ) -> int:
        """
        Save a blob under ``storage_key``.

        The blob must only become visible once it is completely written.

        Args:
            storage_key: Opaque key to store the blob under
            file_stream: Async iterator yielding file chunks
            content_type: MIME type of the file

        Returns:
            Number of bytes written

        Raises:
            FileSizeExceededError: If the stream exceeds the maximum size
            StorageError: If the write fails
        """
        pass

    @abstractmethod
    async def read_file(self, storage_key: str) -> bytes:
        """
        Read a complete blob.

        Args:
            storage_key: Key the blob was saved under

        Returns:
            The blob content

        Raises:
            BlobNotFoundError: If no blob exists under the key
            StorageError: If the read fails
        """
        pass

    @abstractmethod
    async def delete_file(self, storage_key: str) -> None:
        """
        Delete a blob.

        Args:
            storage_key: Key the blob was saved under

        Raises:
            BlobNotFoundError: If no blob exists under the key
            StorageError: If the delete fails
        """
        pass

    @abstractmethod
    def file_exists(self, storage_key: str) -> bool:
        """
        Check if a blob exists.

        Args:
            storage_key: Key the blob was saved under

        Returns:
            True if the blob exists, False otherwise
        """
        pass
