"""
File metadata database models.

This module defines the StoredFile model (one row per uploaded file), the
FileTag model holding its optional tags, and FileTombstone, which remembers
ids removed by their owner so a repeated delete can be answered as success.
"""
from datetime import datetime
from typing import TYPE_CHECKING

from sqlalchemy import BigInteger, ForeignKey, Integer, String, UniqueConstraint, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from filevault.database import Base

if TYPE_CHECKING:
    from filevault.models.user import User

# Bump when the File Record shape changes; rows keep the version they were
# written with.
FILE_RECORD_SCHEMA_VERSION = 1


class StoredFile(Base):
    """
    Metadata for one uploaded file.

    Attributes:
        id: Primary key
        file_id: Public short identifier used in URLs
        display_name: Original file name shown to the owner
        storage_key: Opaque key locating the bytes in the blob store
        size_bytes: Size of the stored blob in bytes
        content_type: MIME type declared at upload
        access_count: Number of successful downloads
        last_accessed_at: Time of the latest successful download
        schema_version: Version of the record layout
        uploaded_at: Upload timestamp
        user_id: Owner of the file
    """

    __tablename__ = "files"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    file_id: Mapped[str] = mapped_column(String(20), unique=True, index=True)
    display_name: Mapped[str] = mapped_column(String(255))
    storage_key: Mapped[str] = mapped_column(String(255), unique=True)
    size_bytes: Mapped[int] = mapped_column(BigInteger)
    content_type: Mapped[str] = mapped_column(String(255))
    access_count: Mapped[int] = mapped_column(Integer, default=0)
    last_accessed_at: Mapped[datetime | None] = mapped_column(nullable=True)
    schema_version: Mapped[int] = mapped_column(
        Integer, default=FILE_RECORD_SCHEMA_VERSION
    )
    uploaded_at: Mapped[datetime] = mapped_column(server_default=func.now())
    user_id: Mapped[int] = mapped_column(ForeignKey("users.id"), index=True)

    user: Mapped["User"] = relationship("User", back_populates="files")
    tags: Mapped[list["FileTag"]] = relationship(
        "FileTag",
        back_populates="file",
        cascade="all, delete-orphan",
        order_by="FileTag.id",
        lazy="selectin",
    )

    def __repr__(self) -> str:
        return f"<StoredFile(id={self.id}, file_id={self.file_id}, display_name={self.display_name})>"


class FileTag(Base):
    __tablename__ = "file_tags"
    __table_args__ = (UniqueConstraint("file_pk", "name", name="uq_file_tags_file_name"),)

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    file_pk: Mapped[int] = mapped_column(ForeignKey("files.id", ondelete="CASCADE"))
    name: Mapped[str] = mapped_column(String(50))

    file: Mapped["StoredFile"] = relationship("StoredFile", back_populates="tags")


class FileTombstone(Base):
    __tablename__ = "file_tombstones"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    file_id: Mapped[str] = mapped_column(String(20), unique=True, index=True)
    user_id: Mapped[int] = mapped_column(ForeignKey("users.id"), index=True)
    deleted_at: Mapped[datetime] = mapped_column(server_default=func.now())
