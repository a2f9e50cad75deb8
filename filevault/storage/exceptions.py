"""
Storage-specific exceptions.

These exceptions describe failures of the blob store itself; the file
service translates them into client-facing errors.
"""


class StorageError(Exception):
    """Base exception for storage operations."""

    pass


class FileSizeExceededError(StorageError):
    """Raised when an uploaded stream exceeds the maximum size limit."""

    def __init__(self, file_size: int, max_size: int):
        self.file_size = file_size
        self.max_size = max_size
        super().__init__(
            f"File size ({file_size} bytes) exceeds maximum allowed size ({max_size} bytes)"
        )


class BlobNotFoundError(StorageError):
    """Raised when no blob exists under the requested storage key."""

    def __init__(self, storage_key: str):
        self.storage_key = storage_key
        super().__init__(f"Blob not found: {storage_key}")


class InvalidStorageKeyError(StorageError):
    """Raised when a storage key would escape the storage root."""

    def __init__(self, storage_key: str):
        self.storage_key = storage_key
        super().__init__(f"Invalid storage key: {storage_key!r}")
