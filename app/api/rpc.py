"""
JSON-RPC 2.0 endpoint for other services to verify tokens issued here.

Methods (params: {"token": str}):
  AuthService.ValidateToken -> {"valid": bool, "error": str | null}
  AuthService.GetUserID     -> {"user_id": int, "error": str | null}

An invalid token is a normal result, not a JSON-RPC error. Both methods are
read-only and never touch the user store.
"""

import json
import logging
from collections.abc import Callable
from typing import Annotated, Any

from fastapi import APIRouter, Depends, Request
from pydantic import ValidationError

from app.api.deps import get_token_issuer
from app.core.tokens import InvalidTokenError, TokenIssuer
from app.schemas.rpc import (
    INVALID_PARAMS,
    INVALID_REQUEST,
    METHOD_NOT_FOUND,
    PARSE_ERROR,
    RpcError,
    RpcRequest,
    RpcResponse,
    TokenParams,
    UserIdResult,
    ValidateTokenResult,
)

logger = logging.getLogger(__name__)
router = APIRouter()


def validate_token(issuer: TokenIssuer, params: TokenParams) -> ValidateTokenResult:
    try:
        issuer.validate(params.token)
    except InvalidTokenError as e:
        return ValidateTokenResult(valid=False, error=e.message)
    return ValidateTokenResult(valid=True)


def get_user_id(issuer: TokenIssuer, params: TokenParams) -> UserIdResult:
    try:
        claims = issuer.validate(params.token)
    except InvalidTokenError as e:
        return UserIdResult(error=e.message)
    return UserIdResult(user_id=claims.user_id)


METHODS: dict[str, Callable[[TokenIssuer, TokenParams], Any]] = {
    "AuthService.ValidateToken": validate_token,
    "AuthService.GetUserID": get_user_id,
}


def _error(request_id: int | str | None, code: int, message: str) -> RpcResponse:
    return RpcResponse(id=request_id, error=RpcError(code=code, message=message))


def dispatch(issuer: TokenIssuer, payload: Any) -> RpcResponse:
    """Route one decoded JSON-RPC payload to its handler."""
    try:
        call = RpcRequest.model_validate(payload)
    except ValidationError:
        request_id = payload.get("id") if isinstance(payload, dict) else None
        if not isinstance(request_id, (int, str)):
            request_id = None
        return _error(request_id, INVALID_REQUEST, "Invalid Request")

    handler = METHODS.get(call.method)
    if handler is None:
        return _error(call.id, METHOD_NOT_FOUND, f"Method not found: {call.method}")
    try:
        params = TokenParams.model_validate(call.params)
    except ValidationError:
        return _error(call.id, INVALID_PARAMS, "Invalid params: expected {\"token\": string}")

    result = handler(issuer, params)
    logger.debug("RPC call handled", extra={"method": call.method})
    return RpcResponse(id=call.id, result=result.model_dump())


@router.post("/rpc")
async def rpc_endpoint(
    request: Request,
    issuer: Annotated[TokenIssuer, Depends(get_token_issuer)],
) -> dict[str, Any]:
    """JSON-RPC 2.0 entrypoint for AuthService.ValidateToken and AuthService.GetUserID."""
    try:
        payload = json.loads(await request.body())
    except (json.JSONDecodeError, UnicodeDecodeError):
        return _error(None, PARSE_ERROR, "Parse error").to_wire()
    return dispatch(issuer, payload).to_wire()
