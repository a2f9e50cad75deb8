"""
Metadata search service.

Case-insensitive substring search over the display names of the caller's
own files. Results carry the field that matched; relevance scoring is left
to external advisory collaborators.
"""
from dataclasses import dataclass
from enum import Enum

from sqlalchemy import select
from sqlalchemy.orm import Session

from filevault.models.stored_file import StoredFile
from filevault.services.exceptions import InvalidInputError
from filevault.utils.validators import MAX_SEARCH_QUERY_LENGTH


class MatchedField(str, Enum):
    NAME = "name"


@dataclass
class SearchMatch:
    file: StoredFile
    matched_on: MatchedField


def search_files(db: Session, owner_id: int, query: str | None) -> list[SearchMatch]:
    """
    Find the owner's files whose display name contains ``query``.

    A blank query returns an empty list rather than every file. ``%`` and
    ``_`` in the query are matched literally.

    Raises:
        InvalidInputError: If the query is longer than 255 characters
    """
    if query is None or not query.strip():
        return []
    if len(query) > MAX_SEARCH_QUERY_LENGTH:
        raise InvalidInputError(
            f"Search query must be at most {MAX_SEARCH_QUERY_LENGTH} characters long"
        )

    stmt = (
        select(StoredFile)
        .where(
            StoredFile.user_id == owner_id,
            StoredFile.display_name.icontains(query, autoescape=True),
        )
        .order_by(StoredFile.uploaded_at.desc(), StoredFile.id.desc())
    )
    return [
        SearchMatch(file=record, matched_on=MatchedField.NAME)
        for record in db.execute(stmt).scalars().all()
    ]
