"""
File API schemas.

This module defines Pydantic schemas for file records, storage usage,
the advisory view and search results.
"""
from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator


class FileRecordResponse(BaseModel):
    """A file record as returned to its owner."""

    file_id: str
    """Public identifier used in download/delete URLs."""

    display_name: str
    """Original file name."""

    size_bytes: int
    content_type: str
    uploaded_at: datetime
    access_count: int
    last_accessed_at: datetime | None = None

    tags: list[str] = Field(default_factory=list)
    """Optional tags attached at upload."""

    schema_version: int

    @field_validator("tags", mode="before")
    @classmethod
    def tag_rows_to_names(cls, v):
        # ORM records carry FileTag rows; serialized payloads carry names
        return [getattr(tag, "name", tag) for tag in (v or [])]

    model_config = ConfigDict(
        from_attributes=True,
        json_schema_extra={
            "examples": [
                {
                    "file_id": "a3b8f2d4e1c9",
                    "display_name": "notes.txt",
                    "size_bytes": 10,
                    "content_type": "text/plain",
                    "uploaded_at": "2026-01-01T12:00:00",
                    "access_count": 0,
                    "last_accessed_at": None,
                    "tags": ["work"],
                    "schema_version": 1,
                }
            ]
        },
    )


class DeleteFileResponse(BaseModel):
    file_id: str
    deleted: bool = True


class StorageUsageResponse(BaseModel):
    """Storage statistics. The limit is informational and not enforced."""

    total_files: int
    total_bytes: int
    recent_files: int
    """Files uploaded within the last RECENT_UPLOAD_DAYS days."""

    storage_limit_bytes: int
    used_percent: float

    model_config = ConfigDict(from_attributes=True)


class AdvisoryFileResponse(BaseModel):
    """Metadata projection for recommendation / duplicate-detection services."""

    id: str
    display_name: str
    content_type: str
    size_bytes: int
    access_count: int
    last_accessed_at: datetime | None
    uploaded_at: datetime

    model_config = ConfigDict(from_attributes=True)


class SearchRequest(BaseModel):
    query: str | None = None


class SearchResultResponse(BaseModel):
    file: FileRecordResponse
    matched_on: str
    """Which record field matched the query (currently always "name")."""

    model_config = ConfigDict(from_attributes=True)
