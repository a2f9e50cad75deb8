from datetime import datetime

from pydantic import BaseModel, ConfigDict, EmailStr, Field


class SignupRequest(BaseModel):
    username: str | None = Field(default=None, max_length=100)
    email: EmailStr
    password: str = Field(min_length=1)


class LoginRequest(BaseModel):
    email: EmailStr
    password: str = Field(min_length=1)


class UserResponse(BaseModel):
    """Public user fields. The password hash is never part of a response."""

    id: int
    username: str | None
    email: str
    storage_limit_bytes: int
    created_at: datetime

    # Allows UserResponse.model_validate(orm_user)
    model_config = ConfigDict(from_attributes=True)


class AuthResponse(BaseModel):
    token: str
    token_type: str = "bearer"
    user: UserResponse
