"""Pydantic request/response schemas."""

from app.schemas.auth import (
    LoginRequest,
    LogoutResponse,
    RefreshRequest,
    TokenClaims,
    TokenResponse,
)
from app.schemas.health import HealthResponse
from app.schemas.rpc import (
    RpcRequest,
    RpcResponse,
    UserIdResult,
    ValidateTokenResult,
)
from app.schemas.users import (
    DeleteUserResponse,
    PasswordCheck,
    PasswordUpdate,
    UserCreate,
    UserRead,
    UsersListResponse,
)

__all__ = [
    "DeleteUserResponse",
    "HealthResponse",
    "LoginRequest",
    "LogoutResponse",
    "PasswordCheck",
    "PasswordUpdate",
    "RefreshRequest",
    "RpcRequest",
    "RpcResponse",
    "TokenClaims",
    "TokenResponse",
    "UserCreate",
    "UserIdResult",
    "UserRead",
    "UsersListResponse",
    "ValidateTokenResult",
]
