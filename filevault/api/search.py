from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from filevault.database import get_db
from filevault.dependencies.auth import get_current_user_id
from filevault.schemas.common import APIResponse
from filevault.schemas.files import FileRecordResponse, SearchRequest, SearchResultResponse
from filevault.services.exceptions import InvalidInputError
from filevault.services.search import search_files

router = APIRouter(prefix="/search", tags=["search"])


@router.post("", response_model=APIResponse[list[SearchResultResponse]])
def search(
    request: SearchRequest,
    user_id: int = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    """
    Search the caller's files by name.

    Matching is a case-insensitive substring test against the display name.
    An empty query returns an empty list.
    """
    try:
        matches = search_files(db, user_id, request.query)
    except InvalidInputError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail={"success": False, "error": "Bad Request", "message": str(e)},
        )

    return APIResponse(
        success=True,
        data=[
            SearchResultResponse(
                file=FileRecordResponse.model_validate(match.file),
                matched_on=match.matched_on.value,
            )
            for match in matches
        ],
    )
