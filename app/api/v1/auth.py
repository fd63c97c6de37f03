"""Login, token refresh and logout endpoints."""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, status

from app.api.deps import get_authenticator, get_current_user
from app.core.tokens import InvalidTokenError, TokenGenerationError
from app.schemas.auth import (
    LoginRequest,
    LogoutResponse,
    RefreshRequest,
    TokenClaims,
    TokenResponse,
)
from app.services.auth import Authenticator, TokenPair, WrongCredentialsError
from app.services.user_store import UserNotFoundError, UserStoreError

logger = logging.getLogger(__name__)
router = APIRouter()


def _token_response(pair: TokenPair) -> TokenResponse:
    return TokenResponse(
        access_token=pair.access_token,
        refresh_token=pair.refresh_token,
        expires_in=pair.expires_at,
        user_id=pair.user_id,
        role=pair.role,
    )


def _internal_error(e: Exception) -> HTTPException:
    logger.error("Auth request failed", extra={"error_type": type(e).__name__})
    return HTTPException(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        detail="Internal server error",
    )


@router.post("/login", response_model=TokenResponse)
def login(
    body: LoginRequest,
    authenticator: Annotated[Authenticator, Depends(get_authenticator)],
) -> TokenResponse:
    """
    Authenticate with email and password; returns access and refresh tokens.
    Include the access token in the Authorization header as: Bearer <access_token>
    """
    try:
        pair = authenticator.login(body.email, body.password)
    except WrongCredentialsError as e:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=e.message,
        ) from e
    except (TokenGenerationError, UserStoreError) as e:
        raise _internal_error(e) from e
    return _token_response(pair)


@router.post("/refresh", response_model=TokenResponse)
def refresh(
    body: RefreshRequest,
    authenticator: Annotated[Authenticator, Depends(get_authenticator)],
) -> TokenResponse:
    """Exchange a refresh token for a new access token (and a new refresh token)."""
    try:
        pair = authenticator.refresh(body.refresh_token)
    except InvalidTokenError as e:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid refresh token",
        ) from e
    except UserNotFoundError as e:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=e.message,
        ) from e
    except (TokenGenerationError, UserStoreError) as e:
        raise _internal_error(e) from e
    return _token_response(pair)


@router.get("/logout", response_model=LogoutResponse)
def logout(
    current_user: Annotated[TokenClaims, Depends(get_current_user)],
) -> LogoutResponse:
    """Acknowledge logout. Tokens are not revoked; clients should discard them."""
    logger.info("User logged out", extra={"user_id": current_user.user_id})
    return LogoutResponse(details="Logged out")
