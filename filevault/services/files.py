"""
File management service.

This module orchestrates the file lifecycle for a single owner: upload
(blob first, then metadata), listing, download (metadata, then blob, then
access counter) and deletion (blob first, then metadata). Every function
takes the owner id resolved from the caller's session token and never
touches records owned by anyone else.
"""
import asyncio
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import AsyncIterator

from sqlalchemy import func, select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from filevault.config import settings
from filevault.logging_config import setup_logging
from filevault.models.stored_file import FileTag, FileTombstone, StoredFile
from filevault.models.user import User
from filevault.services.exceptions import (
    FileTooLargeError,
    InvalidInputError,
    NotFoundError,
    StorageReadFailedError,
    StorageWriteFailedError,
)
from filevault.storage.base import StorageBackend
from filevault.storage.exceptions import BlobNotFoundError, FileSizeExceededError, StorageError
from filevault.utils.ids import generate_short_id, generate_storage_key
from filevault.utils.validators import FileInputValidationError, normalize_display_name

logger = setup_logging()

DEFAULT_CONTENT_TYPE = "application/octet-stream"

SORT_COLUMNS = {
    "uploaded_at": StoredFile.uploaded_at,
    "name": StoredFile.display_name,
    "size": StoredFile.size_bytes,
    "access_count": StoredFile.access_count,
}


@dataclass
class DownloadedFile:
    """Blob content paired with the metadata needed to present it."""
    file_id: str
    display_name: str
    content_type: str
    content: bytes


@dataclass
class StorageUsage:
    """Informational storage statistics for one owner. Never enforced."""
    total_files: int
    total_bytes: int
    recent_files: int
    storage_limit_bytes: int
    used_percent: float


@dataclass
class AdvisoryFileView:
    """Read-only projection handed to external advisory collaborators."""
    id: str
    display_name: str
    content_type: str
    size_bytes: int
    access_count: int
    last_accessed_at: datetime | None
    uploaded_at: datetime


def _utcnow_naive() -> datetime:
    # Timestamps are stored as naive UTC (server_default=now())
    return datetime.now(timezone.utc).replace(tzinfo=None)


def get_owned_file(db: Session, owner_id: int, file_id: str) -> StoredFile:
    """
    Return the owner's file record.

    Raises:
        NotFoundError: If the record does not exist or belongs to another
            user. Both cases raise the same error so callers cannot probe
            for other users' file ids.
    """
    record = db.execute(
        select(StoredFile).where(
            StoredFile.file_id == file_id,
            StoredFile.user_id == owner_id,
        )
    ).scalar_one_or_none()

    if not record:
        raise NotFoundError(f"File '{file_id}' not found for user {owner_id}")

    return record


async def upload_file(
    db: Session,
    storage: StorageBackend,
    owner_id: int,
    display_name: str | None,
    file_stream: AsyncIterator[bytes],
    content_type: str | None,
    tags: list[str] | None = None,
) -> StoredFile:
    """
    Store a new file for ``owner_id``.

    The blob is written first; the metadata record is only created once the
    blob write succeeded. If the metadata write fails, the blob is removed
    again so no unreachable bytes are left behind.

    Args:
        db: Database session
        storage: Blob storage backend
        owner_id: Authenticated owner
        display_name: Original file name
        file_stream: Async iterator yielding file chunks
        content_type: Declared MIME type (defaults to application/octet-stream)
        tags: Optional, already-validated tag names

    Returns:
        The persisted StoredFile

    Raises:
        InvalidInputError: If the display name is invalid
        FileTooLargeError: If the content exceeds MAX_UPLOAD_SIZE_MB
        StorageWriteFailedError: If the blob or metadata write fails
    """
    try:
        name = normalize_display_name(display_name)
    except FileInputValidationError as e:
        raise InvalidInputError(str(e))

    content_type = (content_type or "").strip() or DEFAULT_CONTENT_TYPE
    storage_key = generate_storage_key(owner_id)

    # 1. Write blob
    try:
        size_bytes = await asyncio.wait_for(
            storage.save_file(storage_key, file_stream, content_type),
            timeout=settings.STORAGE_TIMEOUT_SECONDS,
        )
    except FileSizeExceededError as e:
        logger.warning(
            f"Upload rejected (too large): user_id={owner_id}, name={name!r}, "
            f"size>{e.max_size}"
        )
        raise FileTooLargeError(e.max_size)
    except (StorageError, asyncio.TimeoutError) as e:
        logger.error(
            f"Blob write failed: operation=upload, user_id={owner_id}, "
            f"storage_key={storage_key}, error={e.__class__.__name__}: {e}"
        )
        raise StorageWriteFailedError("Failed to store file")

    # 2. Write metadata
    record = StoredFile(
        file_id=generate_short_id(),
        display_name=name,
        storage_key=storage_key,
        size_bytes=size_bytes,
        content_type=content_type,
        access_count=0,
        user_id=owner_id,
        tags=[FileTag(name=tag) for tag in (tags or [])],
    )

    try:
        db.add(record)
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(
            f"Metadata write failed: operation=upload, user_id={owner_id}, "
            f"storage_key={storage_key}, error={e.__class__.__name__}: {e}"
        )
        await _discard_blob(storage, storage_key, owner_id)
        raise StorageWriteFailedError("Failed to store file")

    db.refresh(record)
    logger.info(
        f"File uploaded: user_id={owner_id}, file_id={record.file_id}, "
        f"size={size_bytes}"
    )
    return record


async def _discard_blob(storage: StorageBackend, storage_key: str, owner_id: int) -> None:
    """Remove a blob whose metadata could not be written."""
    try:
        await asyncio.wait_for(
            storage.delete_file(storage_key),
            timeout=settings.STORAGE_TIMEOUT_SECONDS,
        )
    except BlobNotFoundError:
        pass
    except (StorageError, asyncio.TimeoutError) as e:
        logger.error(
            f"Orphaned blob could not be removed: user_id={owner_id}, "
            f"storage_key={storage_key}, error={e.__class__.__name__}: {e}"
        )


def list_files(
    db: Session,
    owner_id: int,
    sort: str = "uploaded_at",
    order: str = "desc",
) -> list[StoredFile]:
    """
    List every file owned by ``owner_id``.

    Args:
        sort: One of uploaded_at, name, size, access_count
        order: asc or desc

    Raises:
        InvalidInputError: If sort or order is not recognised
    """
    column = SORT_COLUMNS.get(sort)
    if column is None:
        raise InvalidInputError(f"Unsupported sort field: {sort}")
    if order not in ("asc", "desc"):
        raise InvalidInputError(f"Unsupported sort order: {order}")

    direction = column.asc() if order == "asc" else column.desc()
    # id breaks ties between rows with the same timestamp/name/size
    tie_breaker = StoredFile.id.asc() if order == "asc" else StoredFile.id.desc()

    stmt = (
        select(StoredFile)
        .where(StoredFile.user_id == owner_id)
        .order_by(direction, tie_breaker)
    )
    return list(db.execute(stmt).scalars().all())


async def download_file(
    db: Session,
    storage: StorageBackend,
    owner_id: int,
    file_id: str,
) -> DownloadedFile:
    """
    Read an owned file and count the access.

    The whole blob is read before anything is returned, so a blob that
    disappears mid-read surfaces as StorageReadFailedError instead of a
    truncated download.

    Raises:
        NotFoundError: If the record is absent or owned by another user
        StorageReadFailedError: If the blob is missing or unreadable
    """
    record = get_owned_file(db, owner_id, file_id)
    result = DownloadedFile(
        file_id=record.file_id,
        display_name=record.display_name,
        content_type=record.content_type,
        content=b"",
    )

    try:
        result.content = await asyncio.wait_for(
            storage.read_file(record.storage_key),
            timeout=settings.STORAGE_TIMEOUT_SECONDS,
        )
    except BlobNotFoundError:
        logger.error(
            f"Metadata references missing blob: operation=download, "
            f"user_id={owner_id}, file_id={file_id}, storage_key={record.storage_key}"
        )
        raise StorageReadFailedError("File content unavailable")
    except (StorageError, asyncio.TimeoutError) as e:
        logger.error(
            f"Blob read failed: operation=download, user_id={owner_id}, "
            f"file_id={file_id}, error={e.__class__.__name__}: {e}"
        )
        raise StorageReadFailedError("File content unavailable")

    _record_access(db, record.id, owner_id, file_id)
    return result


def _record_access(db: Session, record_pk: int, owner_id: int, file_id: str) -> None:
    """
    Increment the access counter.

    Best effort: a failure is logged and swallowed so the download still
    succeeds. The increment is a single UPDATE so concurrent downloads do
    not overwrite each other's count.
    """
    try:
        db.execute(
            update(StoredFile)
            .where(StoredFile.id == record_pk)
            .values(
                access_count=StoredFile.access_count + 1,
                last_accessed_at=_utcnow_naive(),
            )
        )
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        logger.warning(
            f"Access counter not updated: user_id={owner_id}, file_id={file_id}, "
            f"error={e.__class__.__name__}: {e}"
        )


async def delete_file(
    db: Session,
    storage: StorageBackend,
    owner_id: int,
    file_id: str,
) -> None:
    """
    Delete an owned file: blob first, then metadata.

    A blob that is already gone or cannot be removed is logged as a warning
    and the metadata is removed anyway, so the caller always ends up with no
    record. Deleting an id the caller already deleted succeeds again.

    Raises:
        NotFoundError: If the id was never owned by the caller
    """
    record = db.execute(
        select(StoredFile).where(
            StoredFile.file_id == file_id,
            StoredFile.user_id == owner_id,
        )
    ).scalar_one_or_none()

    if not record:
        if _was_deleted_by(db, owner_id, file_id):
            logger.info(f"Repeated delete: user_id={owner_id}, file_id={file_id}")
            return
        raise NotFoundError(f"File '{file_id}' not found for user {owner_id}")

    storage_key = record.storage_key

    # 1. Remove blob
    try:
        await asyncio.wait_for(
            storage.delete_file(storage_key),
            timeout=settings.STORAGE_TIMEOUT_SECONDS,
        )
    except BlobNotFoundError:
        logger.warning(
            f"Blob already missing: operation=delete, user_id={owner_id}, "
            f"file_id={file_id}, storage_key={storage_key}"
        )
    except (StorageError, asyncio.TimeoutError) as e:
        logger.warning(
            f"Blob removal failed, removing metadata anyway: operation=delete, "
            f"user_id={owner_id}, file_id={file_id}, storage_key={storage_key}, "
            f"error={e.__class__.__name__}: {e}"
        )

    # 2. Remove metadata and remember the id for repeated deletes
    try:
        db.delete(record)
        db.add(FileTombstone(file_id=file_id, user_id=owner_id))
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        # A concurrent delete of the same id may have won the race
        if _was_deleted_by(db, owner_id, file_id):
            return
        logger.error(
            f"Metadata delete failed: operation=delete, user_id={owner_id}, "
            f"file_id={file_id}, error={e.__class__.__name__}: {e}"
        )
        raise

    logger.info(f"File deleted: user_id={owner_id}, file_id={file_id}")


def _was_deleted_by(db: Session, owner_id: int, file_id: str) -> bool:
    tombstone = db.execute(
        select(FileTombstone.id).where(
            FileTombstone.file_id == file_id,
            FileTombstone.user_id == owner_id,
        )
    ).scalar_one_or_none()
    return tombstone is not None


def get_storage_usage(db: Session, owner_id: int) -> StorageUsage:
    """
    Compute storage statistics for display.

    The storage limit is informational; uploads are never rejected because
    of it.

    Raises:
        NotFoundError: If the user no longer exists
    """
    user = db.get(User, owner_id)
    if not user:
        raise NotFoundError(f"User {owner_id} not found")

    total_files, total_bytes = db.execute(
        select(
            func.count(StoredFile.id),
            func.coalesce(func.sum(StoredFile.size_bytes), 0),
        ).where(StoredFile.user_id == owner_id)
    ).one()

    cutoff = _utcnow_naive() - timedelta(days=settings.RECENT_UPLOAD_DAYS)
    recent_files = db.execute(
        select(func.count(StoredFile.id)).where(
            StoredFile.user_id == owner_id,
            StoredFile.uploaded_at >= cutoff,
        )
    ).scalar_one()

    limit = user.storage_limit_bytes
    used_percent = round(total_bytes / limit * 100, 2) if limit > 0 else 0.0

    return StorageUsage(
        total_files=total_files,
        total_bytes=int(total_bytes),
        recent_files=recent_files,
        storage_limit_bytes=limit,
        used_percent=used_percent,
    )


def get_advisory_view(db: Session, owner_id: int) -> list[AdvisoryFileView]:
    """
    Build the metadata projection consumed by recommendation and
    duplicate-detection collaborators.

    The service only exposes this view; it never calls those collaborators
    and never stores what they return.
    """
    return [
        AdvisoryFileView(
            id=record.file_id,
            display_name=record.display_name,
            content_type=record.content_type,
            size_bytes=record.size_bytes,
            access_count=record.access_count,
            last_accessed_at=record.last_accessed_at,
            uploaded_at=record.uploaded_at,
        )
        for record in list_files(db, owner_id)
    ]
