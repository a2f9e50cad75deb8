"""
File API endpoints.

This module provides the owner-scoped file endpoints: upload, list,
download, delete, storage usage and the advisory metadata view. Every
endpoint resolves the caller from the bearer token first.
"""
from typing import AsyncIterator
from urllib.parse import quote

from fastapi import APIRouter, Depends, File, Form, HTTPException, Query, UploadFile, status
from fastapi.responses import Response
from sqlalchemy.orm import Session

from filevault.database import get_db
from filevault.dependencies.auth import get_current_user_id
from filevault.dependencies.storage import get_storage
from filevault.logging_config import setup_logging
from filevault.schemas.common import APIResponse
from filevault.schemas.files import (
    AdvisoryFileResponse,
    DeleteFileResponse,
    FileRecordResponse,
    StorageUsageResponse,
)
from filevault.services.exceptions import (
    FileTooLargeError,
    InvalidInputError,
    NotFoundError,
    StorageReadFailedError,
    StorageWriteFailedError,
)
from filevault.services.files import (
    delete_file,
    download_file,
    get_advisory_view,
    get_storage_usage,
    list_files,
    upload_file,
)
from filevault.storage.base import StorageBackend
from filevault.utils.validators import FileInputValidationError, parse_tags

router = APIRouter(prefix="/files", tags=["files"])

logger = setup_logging()

UPLOAD_CHUNK_SIZE = 64 * 1024  # 64KB


def _not_found() -> HTTPException:
    # Same answer for "absent" and "owned by someone else"
    return HTTPException(
        status_code=status.HTTP_404_NOT_FOUND,
        detail={"success": False, "error": "Not Found", "message": "File not found"},
    )


def _bad_request(message: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_400_BAD_REQUEST,
        detail={"success": False, "error": "Bad Request", "message": message},
    )


async def _iter_upload(upload: UploadFile) -> AsyncIterator[bytes]:
    while True:
        chunk = await upload.read(UPLOAD_CHUNK_SIZE)
        if not chunk:
            break
        yield chunk


def _content_disposition(filename: str) -> str:
    """
    Build an attachment header that survives non-ASCII file names.

    ``filename`` carries an ASCII fallback, ``filename*`` the exact name
    (RFC 6266 / RFC 5987).
    """
    fallback = filename.encode("ascii", "replace").decode("ascii").replace('"', "'")
    return f"attachment; filename=\"{fallback}\"; filename*=UTF-8''{quote(filename, safe='')}"


@router.post(
    "/upload",
    response_model=APIResponse[FileRecordResponse],
    status_code=status.HTTP_200_OK,
)
async def upload(
    file: UploadFile = File(...),
    tags: str | None = Form(None, description="Optional comma-separated tags"),
    user_id: int = Depends(get_current_user_id),
    db: Session = Depends(get_db),
    storage: StorageBackend = Depends(get_storage),
):
    """
    Upload a file (multipart/form-data).

    The bytes are stored first and the metadata record is created only
    after the blob write succeeded.

    **Example:**
    ```bash
    curl -X POST http://localhost:8000/api/files/upload \\
      -H "Authorization: Bearer <token>" \\
      -F "file=@notes.txt" \\
      -F "tags=work,draft"
    ```
    """
    try:
        tag_names = parse_tags(tags)
    except FileInputValidationError as e:
        raise _bad_request(str(e))

    try:
        record = await upload_file(
            db,
            storage,
            owner_id=user_id,
            display_name=file.filename,
            file_stream=_iter_upload(file),
            content_type=file.content_type,
            tags=tag_names,
        )
    except InvalidInputError as e:
        raise _bad_request(str(e))
    except FileTooLargeError as e:
        raise HTTPException(
            status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
            detail={
                "success": False,
                "error": "Payload Too Large",
                "message": f"File exceeds maximum allowed size ({e.max_size} bytes)",
            },
        )
    except StorageWriteFailedError:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail={
                "success": False,
                "error": "Internal Server Error",
                "message": "Failed to store file",
            },
        )
    finally:
        await file.close()

    return APIResponse(success=True, data=FileRecordResponse.model_validate(record))


@router.get("", response_model=APIResponse[list[FileRecordResponse]])
def list_user_files(
    sort: str = Query(
        "uploaded_at",
        description="Sort field: uploaded_at, name, size or access_count",
    ),
    order: str = Query("desc", description="Sort order: asc or desc"),
    user_id: int = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    try:
        records = list_files(db, user_id, sort=sort, order=order)
    except InvalidInputError as e:
        raise _bad_request(str(e))

    return APIResponse(
        success=True,
        data=[FileRecordResponse.model_validate(record) for record in records],
    )


@router.get("/usage", response_model=APIResponse[StorageUsageResponse])
def storage_usage(
    user_id: int = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    """
    Storage statistics for the dashboard.

    The storage limit is informational only; uploads are not rejected when
    it is exceeded.
    """
    try:
        usage = get_storage_usage(db, user_id)
    except NotFoundError:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail={"success": False, "error": "Not Found", "message": "User not found"},
        )

    return APIResponse(success=True, data=StorageUsageResponse.model_validate(usage))


@router.get("/advisory-view", response_model=APIResponse[list[AdvisoryFileResponse]])
def advisory_view(
    user_id: int = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    """
    Metadata projection for recommendation and duplicate-detection clients.

    Results computed from this view are advisory; this service neither
    calls those collaborators nor stores their output.
    """
    return APIResponse(
        success=True,
        data=[AdvisoryFileResponse.model_validate(item) for item in get_advisory_view(db, user_id)],
    )


@router.get("/{file_id}/download")
async def download(
    file_id: str,
    user_id: int = Depends(get_current_user_id),
    db: Session = Depends(get_db),
    storage: StorageBackend = Depends(get_storage),
):
    """
    Download a file owned by the caller.

    The response is only sent once the complete blob has been read, so a
    storage failure never produces a truncated download.
    """
    try:
        downloaded = await download_file(db, storage, user_id, file_id)
    except NotFoundError as e:
        logger.warning(f"File lookup failed: {e}")
        raise _not_found()
    except StorageReadFailedError:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail={
                "success": False,
                "error": "Internal Server Error",
                "message": "File content unavailable",
            },
        )

    return Response(
        content=downloaded.content,
        media_type=downloaded.content_type,
        headers={"Content-Disposition": _content_disposition(downloaded.display_name)},
    )


@router.delete("/{file_id}", response_model=APIResponse[DeleteFileResponse])
async def delete(
    file_id: str,
    user_id: int = Depends(get_current_user_id),
    db: Session = Depends(get_db),
    storage: StorageBackend = Depends(get_storage),
):
    try:
        await delete_file(db, storage, user_id, file_id)
    except NotFoundError as e:
        logger.warning(f"File lookup failed: {e}")
        raise _not_found()

    return APIResponse(success=True, data=DeleteFileResponse(file_id=file_id))
