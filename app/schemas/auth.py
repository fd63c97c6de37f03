"""Request/response schemas for auth endpoints and decoded token claims."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, EmailStr, Field


class LoginRequest(BaseModel):
    """Credentials for login."""

    email: EmailStr = Field(..., description="Account email")
    password: str = Field(..., min_length=1, max_length=128, description="Password")


class RefreshRequest(BaseModel):
    """Refresh token exchanged for a new token pair."""

    refresh_token: str = Field(..., min_length=1, description="JWT refresh token")


class TokenResponse(BaseModel):
    """Token pair returned after login or refresh."""

    access_token: str = Field(..., description="JWT access token (15 minutes)")
    refresh_token: str = Field(..., description="JWT refresh token (7 days)")
    expires_in: int = Field(..., description="Access token expiry as Unix seconds")
    user_id: int | None = Field(default=None, description="Authenticated user id")
    role: str | None = Field(default=None, description="Authenticated user role")
    token_type: str = Field(default="bearer", description="Token type")


class TokenClaims(BaseModel):
    """Decoded payload of a verified token."""

    model_config = ConfigDict(frozen=True)

    user_id: int
    expires_at: datetime
    issued_at: datetime | None = None
    key_id: str | None = None


class LogoutResponse(BaseModel):
    """Acknowledgement for logout; tokens are stateless and stay valid until expiry."""

    details: str
