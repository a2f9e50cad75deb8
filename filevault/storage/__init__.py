"""
Storage abstraction layer for blob operations.

This package provides an object-store style interface for raw file bytes,
allowing easy migration between local filesystem and cloud storage.
"""

from filevault.storage.base import StorageBackend
from filevault.storage.local import LocalStorageBackend
from filevault.storage.exceptions import (
    BlobNotFoundError,
    FileSizeExceededError,
    InvalidStorageKeyError,
    StorageError,
)

__all__ = [
    "StorageBackend",
    "LocalStorageBackend",
    "BlobNotFoundError",
    "FileSizeExceededError",
    "InvalidStorageKeyError",
    "StorageError",
]
