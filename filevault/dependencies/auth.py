from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from filevault.services.exceptions import InvalidTokenError
from filevault.services.jwt import validate_access_token

# auto_error=False: a missing or non-Bearer Authorization header is answered
# with the same 401 as an invalid token instead of FastAPI's default
security = HTTPBearer(auto_error=False)


def get_current_user_id(
    credentials: HTTPAuthorizationCredentials | None = Depends(security),
) -> int:
    """
    Validate the bearer token and return the caller's user id.

    The token is self-contained, so no database lookup happens here; the id
    scopes every file operation of the request.
    """
    if credentials is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail={
                "success": False,
                "error": "Unauthorized",
                "message": "Invalid token",
            },
            headers={"WWW-Authenticate": "Bearer"},
        )

    try:
        return validate_access_token(credentials.credentials)
    except InvalidTokenError:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail={
                "success": False,
                "error": "Unauthorized",
                "message": "Invalid token",
            },
            headers={"WWW-Authenticate": "Bearer"},
        )
