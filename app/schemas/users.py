"""Request/response schemas for user account endpoints."""

from pydantic import BaseModel, ConfigDict, EmailStr, Field


class UserCreate(BaseModel):
    """Signup payload. The password is hashed before it reaches the store."""

    name: str = Field(..., min_length=1, max_length=255, description="Display name")
    email: EmailStr = Field(..., description="Account email (unique)")
    password: str = Field(..., min_length=1, max_length=128, description="Password")


class UserRead(BaseModel):
    """Public view of a user (no password hash)."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    email: str
    role: str


class UsersListResponse(BaseModel):
    """Response for GET /users."""

    users: list[UserRead]


class PasswordUpdate(BaseModel):
    """New password for an existing user."""

    password: str = Field(..., min_length=1, max_length=128, description="New password")


class PasswordCheck(BaseModel):
    """Password to compare against the stored hash."""

    password: str = Field(..., max_length=128, description="Password to check")


class DeleteUserResponse(BaseModel):
    message: str
