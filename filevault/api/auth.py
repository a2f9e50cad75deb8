from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from filevault.database import get_db
from filevault.dependencies.auth import get_current_user_id
from filevault.schemas.auth import AuthResponse, LoginRequest, SignupRequest, UserResponse
from filevault.schemas.common import APIResponse
from filevault.services.auth import authenticate_user, get_user_profile, register_user
from filevault.services.exceptions import (
    DuplicateIdentityError,
    InvalidCredentialError,
    InvalidInputError,
    NotFoundError,
)

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post(
    "/signup",
    response_model=APIResponse[AuthResponse],
    status_code=status.HTTP_201_CREATED,
)
def signup(request: SignupRequest, db: Session = Depends(get_db)):
    try:
        user, token = register_user(db, request.username, request.email, request.password)
    except DuplicateIdentityError:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail={"success": False, "error": "Bad Request", "message": "Email already exists"},
        )
    except InvalidInputError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail={"success": False, "error": "Bad Request", "message": str(e)},
        )

    return APIResponse(
        success=True,
        data=AuthResponse(token=token, user=UserResponse.model_validate(user)),
    )


@router.post("/login", response_model=APIResponse[AuthResponse])
def login(request: LoginRequest, db: Session = Depends(get_db)):
    try:
        user, token = authenticate_user(db, request.email, request.password)
    except (NotFoundError, InvalidCredentialError):
        # Unknown email and wrong password share one answer so accounts
        # cannot be enumerated
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail={
                "success": False,
                "error": "Bad Request",
                "message": "Invalid credentials",
            },
        )

    return APIResponse(
        success=True,
        data=AuthResponse(token=token, user=UserResponse.model_validate(user)),
    )


@router.get("/me", response_model=APIResponse[UserResponse])
def me(
    user_id: int = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    try:
        user = get_user_profile(db, user_id)
    except NotFoundError:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail={"success": False, "error": "Not Found", "message": "User not found"},
        )

    return APIResponse(success=True, data=UserResponse.model_validate(user))
