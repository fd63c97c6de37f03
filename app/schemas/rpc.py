"""JSON-RPC 2.0 envelope and result schemas for the token validation endpoint."""

from typing import Any, Literal

from pydantic import BaseModel, Field

# Standard JSON-RPC 2.0 error codes.
PARSE_ERROR = -32700
INVALID_REQUEST = -32600
METHOD_NOT_FOUND = -32601
INVALID_PARAMS = -32602


class RpcRequest(BaseModel):
    """Incoming JSON-RPC call."""

    jsonrpc: Literal["2.0"]
    method: str
    params: dict[str, Any] = Field(default_factory=dict)
    id: int | str | None = None


class RpcError(BaseModel):
    code: int
    message: str


class RpcResponse(BaseModel):
    """JSON-RPC reply; exactly one of result/error is set."""

    jsonrpc: Literal["2.0"] = "2.0"
    id: int | str | None = None
    result: dict[str, Any] | None = None
    error: RpcError | None = None

    def to_wire(self) -> dict[str, Any]:
        """Serialize with only one of result/error present, as JSON-RPC requires."""
        return self.model_dump(exclude={"result"} if self.error is not None else {"error"})


class TokenParams(BaseModel):
    """Params for both AuthService methods."""

    token: str


class ValidateTokenResult(BaseModel):
    valid: bool
    error: str | None = None


class UserIdResult(BaseModel):
    user_id: int = 0
    error: str | None = None
